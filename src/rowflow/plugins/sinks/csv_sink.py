# src/rowflow/plugins/sinks/csv_sink.py
"""CSV sink plugin for rowflow.

Writes records as delimited text. The header (when enabled) is taken from
the keys of the first record written; later records must not carry keys
outside that header.
"""

import csv
import os
from typing import Any, Self, TextIO

from rowflow.plugins.config_base import DialectConfig
from rowflow.plugins.sinks.stream import StreamSink


class CSVSinkConfig(DialectConfig):
    """Configuration for the CSV sink plugin."""

    write_header: bool = True


class CSVSink(StreamSink):
    """Write records to a CSV file or stream.

    Config options:
        path: Output file path (required)
        encoding: File encoding (default: "utf-8")
        delimiter / quotechar / escapechar: Dialect (defaults: , " and no escape)
        write_header: Emit a header row before the first record (default: True)
    """

    name = "csv"
    plugin_version = "1.0.0"

    def __init__(
        self,
        target: str | os.PathLike[str] | TextIO | None = None,
        *,
        delimiter: str = ",",
        quotechar: str = '"',
        escapechar: str | None = None,
        encoding: str = "utf-8",
        write_header: bool = True,
    ) -> None:
        super().__init__(target, encoding=encoding)
        self._dialect: dict[str, Any] = {
            "delimiter": delimiter,
            "quotechar": quotechar,
            "escapechar": escapechar,
        }
        self.write_header = write_header
        self._writer: csv.DictWriter[str] | None = None
        self._writer_stream: TextIO | None = None

    @classmethod
    def from_config(cls, config: dict[str, Any]) -> Self:
        cfg = CSVSinkConfig.from_dict(config)
        return cls(
            cfg.resolved_path(),
            delimiter=cfg.delimiter,
            quotechar=cfg.quotechar,
            escapechar=cfg.escapechar,
            encoding=cfg.encoding,
            write_header=cfg.write_header,
        )

    def prepare(self) -> None:
        self._writer = None
        self._writer_stream = None

    def write_item(self, record: Any) -> None:
        stream = self.stream
        if self._writer is None or self._writer_stream is not stream:
            self._writer = csv.DictWriter(stream, fieldnames=list(record), **self._dialect)
            self._writer_stream = stream
            if self.write_header:
                self._writer.writeheader()
        self._writer.writerow(record)
