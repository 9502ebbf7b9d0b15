# src/rowflow/plugins/filters/offset.py
"""Offset/limit filter: let through a slice of the record stream."""

from typing import Any

from pydantic import Field

from rowflow.plugins.config_base import PluginConfig


class OffsetFilterConfig(PluginConfig):
    """Options for OffsetFilter (and the ``offset`` step)."""

    offset: int = Field(default=0, ge=0)
    limit: int | None = Field(default=None, ge=0)


class OffsetFilter:
    """Skip the first ``offset`` records, then pass at most ``limit`` records.

    The filter is stateful: it counts every record it sees. Use one instance
    per run.
    """

    def __init__(self, offset: int = 0, limit: int | None = None) -> None:
        self.offset = offset
        self.limit = limit
        self._seen = 0
        self._passed = 0

    def __call__(self, record: Any) -> bool:
        if self.limit is not None and self._passed >= self.limit:
            return False

        self._seen += 1
        if self._seen <= self.offset:
            return False

        self._passed += 1
        return True

    @property
    def limit_reached(self) -> bool:
        return self.limit is not None and self._passed >= self.limit
