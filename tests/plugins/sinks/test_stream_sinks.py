"""Tests for the stream-based sinks: CSV, JSON Lines and stream merge."""

import io
import json
from datetime import date
from decimal import Decimal
from pathlib import Path

import pytest

from rowflow.plugins.base import FlushableSink
from rowflow.plugins.config_base import PluginConfigError
from rowflow.plugins.sinks.csv_sink import CSVSink
from rowflow.plugins.sinks.json_sink import JSONLSink
from rowflow.plugins.sinks.stream import StreamMergeSink


def _write_all(sink, records) -> None:
    sink.prepare()
    for record in records:
        sink.write_item(record)
    sink.finish()


class TestCSVSink:
    def test_is_flushable(self) -> None:
        assert isinstance(CSVSink(), FlushableSink)

    def test_writes_header_and_rows(self, tmp_path: Path) -> None:
        path = tmp_path / "out.csv"

        _write_all(CSVSink(path), [{"id": "1", "name": "ada"}, {"id": "2", "name": "bob"}])

        assert path.read_bytes() == b"id,name\r\n1,ada\r\n2,bob\r\n"

    def test_without_header(self) -> None:
        sink = CSVSink(write_header=False)

        _write_all(sink, [{"id": "1"}])

        assert sink.stream.getvalue() == "1\r\n"

    def test_custom_delimiter(self) -> None:
        sink = CSVSink(delimiter=";")

        _write_all(sink, [{"a": "x;y", "b": "2"}])

        assert sink.stream.getvalue() == 'a;b\r\n"x;y";2\r\n'

    def test_backslashes_and_quotes_written_verbatim(self) -> None:
        """Without an escape character quotes are doubled and backslashes kept."""
        sink = CSVSink(write_header=False)

        _write_all(sink, [{"path": "C:\\new\\dir", "note": 'say "hi"'}])

        assert sink.stream.getvalue() == 'C:\\new\\dir,"say ""hi"""\r\n'

    def test_stream_without_target_raises(self) -> None:
        sink = CSVSink()
        sink._stream = None

        with pytest.raises(RuntimeError, match="neither a stream nor a path"):
            sink.stream

    def test_file_closed_after_finish(self, tmp_path: Path) -> None:
        sink = CSVSink(tmp_path / "out.csv")

        _write_all(sink, [{"a": "1"}])

        assert sink._stream.closed

    def test_rerun_rewrites_file(self, tmp_path: Path) -> None:
        """A second run truncates the file and writes the header again."""
        path = tmp_path / "out.csv"
        sink = CSVSink(path)

        _write_all(sink, [{"a": "1"}])
        _write_all(sink, [{"a": "2"}])

        assert path.read_bytes() == b"a\r\n2\r\n"

    def test_borrowed_stream_left_open(self) -> None:
        stream = io.StringIO()

        _write_all(CSVSink(stream), [{"a": "1"}])

        assert not stream.closed
        assert stream.getvalue() == "a\r\n1\r\n"

    def test_from_config(self, tmp_path: Path) -> None:
        path = tmp_path / "out.csv"
        sink = CSVSink.from_config({"path": str(path), "delimiter": "\t"})

        _write_all(sink, [{"a": "1", "b": "2"}])

        assert path.read_bytes() == b"a\tb\r\n1\t2\r\n"

    def test_from_config_requires_path(self) -> None:
        with pytest.raises(PluginConfigError):
            CSVSink.from_config({})


class TestJSONLSink:
    def test_writes_one_object_per_line(self, tmp_path: Path) -> None:
        path = tmp_path / "out.jsonl"

        _write_all(JSONLSink(path), [{"a": 1}, {"a": 2, "b": [1, 2]}])

        lines = path.read_text().splitlines()
        assert [json.loads(line) for line in lines] == [{"a": 1}, {"a": 2, "b": [1, 2]}]

    def test_non_json_values_written_as_strings(self) -> None:
        sink = JSONLSink()

        _write_all(sink, [{"day": date(2024, 1, 2), "price": Decimal("1.50")}])

        assert json.loads(sink.stream.getvalue()) == {"day": "2024-01-02", "price": "1.50"}

    def test_non_ascii_kept(self) -> None:
        sink = JSONLSink()

        _write_all(sink, [{"name": "José"}])

        assert sink.stream.getvalue() == '{"name": "José"}\n'

    def test_from_config(self, tmp_path: Path) -> None:
        path = tmp_path / "out.jsonl"

        _write_all(JSONLSink.from_config({"path": str(path), "ensure_ascii": True}), [{"name": "José"}])

        assert path.read_text() == '{"name": "Jos\\u00e9"}\n'


class TestStreamMergeSink:
    def test_routes_by_discriminant(self) -> None:
        merge = StreamMergeSink()
        merge.set_stream_sinks({"order": CSVSink(write_header=False), "refund": JSONLSink()})

        _write_all(
            merge,
            [
                {"discr": "order", "id": "1"},
                {"discr": "refund", "id": "2"},
                {"discr": "order", "id": "3"},
            ],
        )

        assert merge.stream.getvalue() == 'order,1\r\n{"discr": "refund", "id": "2"}\norder,3\r\n'

    def test_unknown_or_missing_discriminant_dropped(self) -> None:
        merge = StreamMergeSink(discriminant_field="kind")
        merge.set_stream_sink("a", JSONLSink())

        _write_all(merge, [{"kind": "b"}, {"other": 1}, ["not", "a", "mapping"], {"kind": "a"}])

        assert merge.stream.getvalue() == '{"kind": "a"}\n'

    def test_children_share_the_merge_stream(self) -> None:
        merge = StreamMergeSink()
        child = JSONLSink()
        merge.set_stream_sink("x", child)

        assert child.stream is merge.stream
        assert merge.has_stream_sink("x")
        assert not merge.has_stream_sink("y")
        assert merge.get_stream_sinks() == {"x": child}

    def test_set_stream_propagates(self) -> None:
        merge = StreamMergeSink()
        child = JSONLSink()
        merge.set_stream_sink("x", child)
        target = io.StringIO()

        merge.set_stream(target)

        assert child.stream is target

    def test_writes_to_file(self, tmp_path: Path) -> None:
        path = tmp_path / "merged.txt"
        merge = StreamMergeSink(path)
        merge.set_stream_sinks({"a": JSONLSink(), "b": JSONLSink()})

        _write_all(merge, [{"discr": "b"}, {"discr": "a"}])

        assert path.read_text() == '{"discr": "b"}\n{"discr": "a"}\n'
