# src/rowflow/plugins/readers/iterator_reader.py
"""Reader over any Python iterable."""

from collections.abc import Iterable, Iterator, Sized
from typing import Any

from rowflow.contracts.errors import UnexpectedTypeError
from rowflow.plugins.base import BaseReader

_UNSET = object()
_EXHAUSTED = object()


class IteratorReader(BaseReader):
    """Expose an iterable through the reader cursor contract.

    Re-iterable sources (lists, tuples, dict views) restart on rewind().
    One-shot iterators such as generators cannot be restarted: rewinding
    them continues from wherever they currently are.

    The first element is fetched lazily, so wrapping a generator and then
    iterating it does not lose a record.
    """

    name = "iterator"
    plugin_version = "1.0.0"

    def __init__(self, iterable: Iterable[Any]) -> None:
        self._iterable = iterable
        self._iterator: Iterator[Any] = iter(())
        self._current: Any = _EXHAUSTED
        self._position = 0
        self.rewind()

    def _fill(self) -> None:
        if self._current is _UNSET:
            self._current = next(self._iterator, _EXHAUSTED)

    def rewind(self) -> None:
        self._iterator = iter(self._iterable)
        self._current = _UNSET
        self._position = 0

    def valid(self) -> bool:
        self._fill()
        return self._current is not _EXHAUSTED

    def advance(self) -> None:
        if self.valid():
            self._current = _UNSET
            self._position += 1

    def current(self) -> Any:
        if not self.valid():
            return None
        return self._current

    def position(self) -> int:
        return self._position

    def count(self) -> int:
        """Return the length of a sized source.

        Raises:
            UnexpectedTypeError: If the wrapped iterable has no length.
        """
        if not isinstance(self._iterable, Sized):
            raise UnexpectedTypeError(self._iterable, "Sized")
        return len(self._iterable)
