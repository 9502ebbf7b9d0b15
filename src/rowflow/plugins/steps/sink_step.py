# src/rowflow/plugins/steps/sink_step.py
"""Step that hands the record to one sink."""

from typing import Any

from rowflow.contracts.types import NextStep
from rowflow.plugins.base import BaseSink, BaseStep


class SinkStep(BaseStep):
    """Write the record to ``sink`` and continue down the chain.

    One SinkStep per registered sink is appended by the pipeline builder, so
    every sink sees each surviving record in registration order.
    """

    name = "sink"

    def __init__(self, sink: BaseSink) -> None:
        self.sink = sink

    def process(self, record: Any, next_step: NextStep) -> bool:
        self.sink.write_item(record)
        return next_step(record)

    def __repr__(self) -> str:
        return f"SinkStep({self.sink!r})"
