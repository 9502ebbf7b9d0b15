"""Tests for IteratorReader."""

import pytest

from rowflow.contracts.errors import UnexpectedTypeError
from rowflow.plugins.base import iter_indexed
from rowflow.plugins.readers.iterator_reader import IteratorReader


class TestIteratorReader:
    def test_reads_list(self) -> None:
        reader = IteratorReader([{"a": 1}, {"a": 2}])

        assert list(iter_indexed(reader)) == [(0, {"a": 1}), (1, {"a": 2})]

    def test_list_is_restartable(self) -> None:
        """Re-iterable sources start over on rewind()."""
        reader = IteratorReader([1, 2, 3])

        assert list(reader) == [1, 2, 3]
        assert list(reader) == [1, 2, 3]

    def test_generator_first_item_not_lost(self) -> None:
        """Wrapping a generator fetches lazily, so every item is yielded once."""
        reader = IteratorReader(x for x in range(3))

        assert list(reader) == [0, 1, 2]

    def test_generator_is_one_shot(self) -> None:
        """A consumed generator yields nothing on the second pass."""
        reader = IteratorReader(x for x in range(3))
        list(reader)

        assert list(reader) == []

    def test_empty_source(self) -> None:
        reader = IteratorReader([])

        reader.rewind()
        assert reader.valid() is False
        assert reader.current() is None

    def test_advance_past_end_is_noop(self) -> None:
        reader = IteratorReader([1])
        reader.rewind()
        reader.advance()
        reader.advance()

        assert reader.valid() is False
        assert reader.position() == 1

    def test_count_sized(self) -> None:
        assert IteratorReader([1, 2, 3]).count() == 3

    def test_count_unsized_raises(self) -> None:
        """Generators have no length to report."""
        reader = IteratorReader(x for x in range(3))

        with pytest.raises(UnexpectedTypeError, match="Sized"):
            reader.count()
