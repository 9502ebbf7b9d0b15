# src/rowflow/engine/pipeline.py
"""Pipeline construction and execution.

Building and running are separate phases:

    builder = PipelineBuilder()
    builder.add_step(MappingStep({...}))          # priority 0
    builder.add_step(ValidatorStep(...))          # priority 128 (its own)
    builder.add_sink(CSVSink("out.csv"))
    pipeline = builder.build()                     # construction
    pipeline.process(record)                       # execution, once per record

build() sorts the registered steps once (higher priority first, registration
order within a priority) and appends, after every user step, a TypeGuardStep
and one SinkStep per sink. Sinks therefore always see the fully processed
record and never interleave with user steps.

Each step is linked to the rest of the chain through a continuation object.
The continuation after the last step returns True.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any, Self

from rowflow.contracts.errors import UnexpectedTypeError
from rowflow.contracts.types import NextStep
from rowflow.plugins.base import BaseSink, BaseStep, PriorityStep
from rowflow.plugins.steps.sink_step import SinkStep
from rowflow.plugins.steps.type_guard import TypeGuardStep


@dataclass(frozen=True, slots=True)
class StepRegistration:
    """A step with its effective priority and registration sequence number."""

    step: BaseStep
    priority: int
    sequence: int


def _end_of_chain(record: Any) -> bool:
    return True


class _Link:
    """Continuation that runs ``step`` with the rest of the chain."""

    __slots__ = ("next_step", "step")

    def __init__(self, step: BaseStep, next_step: NextStep) -> None:
        self.step = step
        self.next_step = next_step

    def __call__(self, record: Any) -> bool:
        return self.step.process(record, self.next_step)


class Pipeline:
    """Immutable, linked chain of steps.

    Rebuild with PipelineBuilder.build() after changing registrations; an
    existing Pipeline never sees later changes.
    """

    def __init__(self, steps: Sequence[BaseStep]) -> None:
        self._steps = tuple(steps)

        entry: NextStep = _end_of_chain
        for step in reversed(self._steps):
            entry = _Link(step, entry)
        self._entry = entry

    @property
    def steps(self) -> tuple[BaseStep, ...]:
        """Steps in execution order, including the type guard and sink steps."""
        return self._steps

    def process(self, record: Any) -> bool:
        """Run one record through the chain.

        Returns:
            True if the record reached the end of the chain, False if a step
            dropped it.
        """
        return self._entry(record)

    def __len__(self) -> int:
        return len(self._steps)


class PipelineBuilder:
    """Collects step and sink registrations and builds Pipelines from them."""

    def __init__(self) -> None:
        self._registrations: list[StepRegistration] = []
        self._sinks: list[BaseSink] = []

    def add_step(self, step: BaseStep, priority: int | None = None) -> Self:
        """Register a step.

        Args:
            step: The step to run.
            priority: Higher runs first. Defaults to the step's own priority
                for PriorityStep instances, else 0.

        Raises:
            UnexpectedTypeError: If ``step`` is not a BaseStep.
        """
        if not isinstance(step, BaseStep):
            raise UnexpectedTypeError(step, "BaseStep")
        if priority is None:
            priority = step.priority if isinstance(step, PriorityStep) else 0
        self._registrations.append(StepRegistration(step, priority, len(self._registrations)))
        return self

    def add_sink(self, sink: BaseSink) -> Self:
        if not isinstance(sink, BaseSink):
            raise UnexpectedTypeError(sink, "BaseSink")
        self._sinks.append(sink)
        return self

    @property
    def registrations(self) -> tuple[StepRegistration, ...]:
        return tuple(self._registrations)

    @property
    def sinks(self) -> tuple[BaseSink, ...]:
        return tuple(self._sinks)

    def build(self) -> Pipeline:
        ordered = sorted(self._registrations, key=lambda r: (-r.priority, r.sequence))
        steps: list[BaseStep] = [registration.step for registration in ordered]
        steps.append(TypeGuardStep())
        steps.extend(SinkStep(sink) for sink in self._sinks)
        return Pipeline(steps)
