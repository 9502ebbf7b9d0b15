# src/rowflow/plugins/filters/datetime_threshold.py
"""Filter records older than a point in time."""

from datetime import datetime
from typing import Any

from rowflow.plugins.base import PriorityFilter
from rowflow.plugins.converters.dates import DateTimeValueConverter


class DateTimeThresholdFilter(PriorityFilter):
    """Pass records whose timestamp column is at or after ``threshold``.

    The column value is parsed with ``converter``. Typical use is incremental
    imports: set the threshold to the time of the previous import.

    Args:
        converter: Parses the raw column value into a datetime.
        threshold: Earliest accepted timestamp. Must be set before the filter
            runs, either here or with set_threshold().
        column: Name of the timestamp column.
        priority: Order within a FilterStep (higher runs first). Defaults
            high so cheap date checks run before other filters.
    """

    def __init__(
        self,
        converter: DateTimeValueConverter,
        threshold: datetime | None = None,
        column: str = "updated_at",
        priority: int = 512,
    ) -> None:
        self.converter = converter
        self.threshold = threshold
        self.column = column
        self._priority = priority

    @property
    def priority(self) -> int:
        return self._priority

    def set_threshold(self, threshold: datetime) -> None:
        self.threshold = threshold

    def __call__(self, record: dict[str, Any]) -> bool:
        if self.threshold is None:
            raise RuntimeError("DateTimeThresholdFilter needs a threshold before it can filter records")

        value = self.converter(record[self.column])
        return value is not None and value >= self.threshold
