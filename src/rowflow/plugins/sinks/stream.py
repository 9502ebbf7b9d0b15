# src/rowflow/plugins/sinks/stream.py
"""Sinks writing text to a stream, plus the stream-merge router."""

import io
import os
from collections.abc import Mapping
from typing import Any, Self, TextIO

from rowflow.plugins.base import FlushableSink


class StreamSink(FlushableSink):
    """Base class for sinks that serialize records to a text stream.

    The target is a path, an open text stream or None. A path is opened for
    writing on first use and closed in finish(). A borrowed stream is left
    open. With no target an in-memory buffer is used, readable afterwards
    through ``stream``.
    """

    def __init__(self, target: str | os.PathLike[str] | TextIO | None = None, *, encoding: str = "utf-8") -> None:
        self._path: str | os.PathLike[str] | None = None
        self._stream: TextIO | None = None
        self.encoding = encoding

        if target is None:
            self._stream = io.StringIO()
            self.close_on_finish = False
        elif isinstance(target, (str, os.PathLike)):
            self._path = target
            self.close_on_finish = True
        else:
            self._stream = target
            self.close_on_finish = False

    @property
    def stream(self) -> TextIO:
        if self._path is not None and (self._stream is None or self._stream.closed):
            # Handle kept open for streaming writes, closed in finish()
            self._stream = open(self._path, "w", encoding=self.encoding, newline="")  # noqa: SIM115
        if self._stream is None:
            raise RuntimeError(f"{type(self).__name__} has neither a stream nor a path to write to")
        return self._stream

    def set_stream(self, stream: TextIO) -> Self:
        """Write to ``stream`` from now on. The sink does not take ownership."""
        self._stream = stream
        self._path = None
        self.close_on_finish = False
        return self

    def flush(self) -> None:
        if self._stream is not None and not self._stream.closed:
            self._stream.flush()

    def finish(self) -> None:
        self.flush()
        if self.close_on_finish and self._stream is not None and not self._stream.closed:
            self._stream.close()


class StreamMergeSink(StreamSink):
    """Route records to per-value stream sinks sharing one stream.

    The value of ``discriminant_field`` picks the sink. Records without the
    field, or with a value no sink is registered for, are dropped.

    Example:
        merge = StreamMergeSink(path)
        merge.set_stream_sinks({"order": CSVSink(), "refund": CSVSink()})
    """

    name = "stream_merge"

    def __init__(
        self,
        target: str | os.PathLike[str] | TextIO | None = None,
        *,
        discriminant_field: str = "discr",
        encoding: str = "utf-8",
    ) -> None:
        super().__init__(target, encoding=encoding)
        self.discriminant_field = discriminant_field
        self._sinks: dict[Any, StreamSink] = {}

    def set_stream_sink(self, key: Any, sink: StreamSink) -> Self:
        sink.set_stream(self.stream)
        self._sinks[key] = sink
        return self

    def set_stream_sinks(self, sinks: Mapping[Any, StreamSink]) -> Self:
        for key, sink in sinks.items():
            self.set_stream_sink(key, sink)
        return self

    def get_stream_sinks(self) -> dict[Any, StreamSink]:
        return dict(self._sinks)

    def has_stream_sink(self, key: Any) -> bool:
        return key in self._sinks

    def set_stream(self, stream: TextIO) -> Self:
        super().set_stream(stream)
        for sink in self._sinks.values():
            sink.set_stream(stream)
        return self

    def prepare(self) -> None:
        for sink in self._sinks.values():
            sink.prepare()

    def write_item(self, record: Any) -> None:
        if not isinstance(record, Mapping) or self.discriminant_field not in record:
            return
        sink = self._sinks.get(record[self.discriminant_field])
        if sink is not None:
            sink.write_item(record)

    def finish(self) -> None:
        for sink in self._sinks.values():
            sink.finish()
        super().finish()
