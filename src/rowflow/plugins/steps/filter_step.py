# src/rowflow/plugins/steps/filter_step.py
"""Filter step: drop records rejected by any of a set of predicates."""

from collections.abc import Callable
from typing import Any, Self

from rowflow.contracts.types import NextStep
from rowflow.plugins.base import BaseStep, PriorityFilter
from rowflow.plugins.filters.offset import OffsetFilter, OffsetFilterConfig

Filter = Callable[[Any], bool]


class FilterStep(BaseStep):
    """Run filters in priority order; the first that returns False drops the record.

    A filter's priority is the one passed to add(), else the one a
    PriorityFilter declares, else 0. Higher runs first; equal priorities keep
    the order they were added in.

    Example:
        step = FilterStep()
        step.add(lambda r: r["status"] != "deleted")
        step.add(DateTimeThresholdFilter(DateTimeValueConverter(), since))  # priority 512
    """

    name = "filter"

    def __init__(self) -> None:
        self._filters: list[tuple[int, int, Filter]] = []

    def add(self, predicate: Filter, priority: int | None = None) -> Self:
        if priority is None:
            priority = predicate.priority if isinstance(predicate, PriorityFilter) else 0
        self._filters.append((priority, len(self._filters), predicate))
        self._filters.sort(key=lambda entry: (-entry[0], entry[1]))
        return self

    @property
    def filters(self) -> tuple[Filter, ...]:
        return tuple(predicate for _, _, predicate in self._filters)

    def __len__(self) -> int:
        return len(self._filters)

    def process(self, record: Any, next_step: NextStep) -> bool:
        for _, _, predicate in self._filters:
            if not predicate(record):
                return False
        return next_step(record)


class OffsetStep(FilterStep):
    """Filter step preconfigured with an OffsetFilter.

    Registered as ``offset`` so settings files can slice a run:

        steps:
          - plugin: offset
            options: {offset: 100, limit: 50}
    """

    name = "offset"
    plugin_version = "1.0.0"

    def __init__(self, offset: int = 0, limit: int | None = None) -> None:
        super().__init__()
        self.add(OffsetFilter(offset, limit))

    @classmethod
    def from_config(cls, config: dict[str, Any]) -> Self:
        cfg = OffsetFilterConfig.from_dict(config)
        return cls(cfg.offset, cfg.limit)
