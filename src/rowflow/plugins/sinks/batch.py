# src/rowflow/plugins/sinks/batch.py
"""Batch buffer: a sink decorator that writes to its delegate in groups."""

from collections import deque
from typing import Any

import structlog
from pydantic import Field

from rowflow.plugins.base import BaseSink, FlushableSink
from rowflow.plugins.config_base import PluginConfig

logger = structlog.get_logger(__name__)


class BatchSinkConfig(PluginConfig):
    size: int = Field(default=20, gt=0)


class BatchSink(BaseSink):
    """Queue records and pass them to ``delegate`` every ``size`` records.

    Each flush drains the queue in arrival order into the delegate, then
    calls the delegate's flush() if it is a FlushableSink. finish() flushes
    whatever is left before finishing the delegate. Flushing an empty queue
    does nothing.

    Example:
        sink = BatchSink(DatabaseSink(...), size=500)
    """

    name = "batch"

    def __init__(self, delegate: BaseSink, size: int = 20) -> None:
        if size < 1:
            raise ValueError(f"Batch size must be positive, got {size}")
        self.delegate = delegate
        self.size = size
        self._queue: deque[Any] = deque()

    def prepare(self) -> None:
        self.delegate.prepare()
        self._queue = deque()

    def write_item(self, record: Any) -> None:
        self._queue.append(record)
        if len(self._queue) >= self.size:
            self.flush()

    def flush(self) -> None:
        if not self._queue:
            return

        written = 0
        while self._queue:
            self.delegate.write_item(self._queue.popleft())
            written += 1

        if isinstance(self.delegate, FlushableSink):
            self.delegate.flush()
        logger.debug("batch_flushed", sink=type(self.delegate).__name__, records=written)

    def finish(self) -> None:
        self.flush()
        self.delegate.finish()

    def __len__(self) -> int:
        """Number of records waiting in the queue."""
        return len(self._queue)
