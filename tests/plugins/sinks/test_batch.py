"""Tests for BatchSink."""

import pytest

from rowflow.plugins.sinks.batch import BatchSink


class TestBatchSink:
    def test_flushes_every_size_records(self) -> None:
        """7 records at size 3 reach the delegate in batches of 3, 3 and 1."""
        from tests.conftest import RecordingFlushableSink

        delegate = RecordingFlushableSink()
        sink = BatchSink(delegate, size=3)

        sink.prepare()
        for i in range(7):
            sink.write_item({"n": i})
        assert delegate.flushed_batches == [3, 3]
        assert len(sink) == 1

        sink.finish()

        assert delegate.flushed_batches == [3, 3, 1]
        assert [item["n"] for item in delegate.items] == list(range(7))

    def test_nothing_written_before_threshold(self) -> None:
        from tests.conftest import RecordingSink

        delegate = RecordingSink()
        sink = BatchSink(delegate, size=5)
        sink.prepare()

        for i in range(4):
            sink.write_item(i)

        assert delegate.items == []
        assert len(sink) == 4

    def test_exact_multiple_has_no_empty_flush(self) -> None:
        """finish() after a full batch does not flush the delegate again."""
        from tests.conftest import RecordingFlushableSink

        delegate = RecordingFlushableSink()
        sink = BatchSink(delegate, size=2)
        sink.prepare()
        for i in range(4):
            sink.write_item(i)

        sink.finish()

        assert delegate.flushed_batches == [2, 2]
        assert delegate.calls[-1] == "finish"

    def test_lifecycle_delegated(self) -> None:
        from tests.conftest import RecordingSink

        delegate = RecordingSink()
        sink = BatchSink(delegate, size=10)

        sink.prepare()
        sink.write_item("a")
        sink.finish()

        assert delegate.calls == ["prepare", "write", "finish"]

    def test_prepare_discards_stale_queue(self) -> None:
        from tests.conftest import RecordingSink

        delegate = RecordingSink()
        sink = BatchSink(delegate, size=10)
        sink.prepare()
        sink.write_item("stale")

        sink.prepare()
        sink.finish()

        assert delegate.items == []

    def test_non_flushable_delegate(self) -> None:
        """A plain sink just receives the writes."""
        from tests.conftest import RecordingSink

        delegate = RecordingSink()
        sink = BatchSink(delegate, size=2)
        sink.prepare()
        for i in range(3):
            sink.write_item(i)
        sink.finish()

        assert delegate.items == [0, 1, 2]

    @pytest.mark.parametrize("size", [0, -1])
    def test_invalid_size(self, size: int) -> None:
        from tests.conftest import RecordingSink

        with pytest.raises(ValueError, match="positive"):
            BatchSink(RecordingSink(), size=size)
