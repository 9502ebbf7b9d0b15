# src/rowflow/plugins/sinks/list_sink.py
"""In-memory sinks."""

from collections.abc import Callable
from typing import Any

from rowflow.plugins.base import BaseSink


class ListSink(BaseSink):
    """Append records to a list.

    The list may be supplied by the caller and is cleared in place on
    prepare(), so a reference held outside the sink sees the records of the
    latest run only.
    """

    name = "list"

    def __init__(self, items: list[Any] | None = None) -> None:
        self.items: list[Any] = items if items is not None else []

    def prepare(self) -> None:
        self.items.clear()

    def write_item(self, record: Any) -> None:
        self.items.append(record)


class CallbackSink(BaseSink):
    """Call ``callback(record)`` for every record."""

    name = "callback"

    def __init__(self, callback: Callable[[Any], object]) -> None:
        self.callback = callback

    def write_item(self, record: Any) -> None:
        self.callback(record)
