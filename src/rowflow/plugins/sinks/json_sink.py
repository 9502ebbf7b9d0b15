# src/rowflow/plugins/sinks/json_sink.py
"""JSON Lines sink plugin for rowflow."""

import json
import os
from typing import Any, Self, TextIO

from rowflow.plugins.config_base import PathConfig
from rowflow.plugins.sinks.stream import StreamSink


class JSONLSinkConfig(PathConfig):
    """Configuration for the JSONL sink plugin."""

    ensure_ascii: bool = False


class JSONLSink(StreamSink):
    """Write one JSON object per line.

    Values json cannot encode natively (dates, decimals) are written as their
    str() form.
    """

    name = "jsonl"
    plugin_version = "1.0.0"

    def __init__(
        self,
        target: str | os.PathLike[str] | TextIO | None = None,
        *,
        encoding: str = "utf-8",
        ensure_ascii: bool = False,
    ) -> None:
        super().__init__(target, encoding=encoding)
        self.ensure_ascii = ensure_ascii

    @classmethod
    def from_config(cls, config: dict[str, Any]) -> Self:
        cfg = JSONLSinkConfig.from_dict(config)
        return cls(cfg.resolved_path(), encoding=cfg.encoding, ensure_ascii=cfg.ensure_ascii)

    def write_item(self, record: Any) -> None:
        self.stream.write(json.dumps(record, default=str, ensure_ascii=self.ensure_ascii))
        self.stream.write("\n")
