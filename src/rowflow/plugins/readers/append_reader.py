# src/rowflow/plugins/readers/append_reader.py
"""Reader that concatenates several readers into one sequence."""

from collections.abc import Iterable
from typing import Any

from rowflow.contracts.errors import UnexpectedTypeError
from rowflow.plugins.base import BaseReader
from rowflow.plugins.protocols import CountableReader, RowReader


class AppendReader(BaseReader):
    """Read every record of each wrapped reader in turn.

    position() is a running index across all readers, not the position
    within the reader currently being consumed. Inner readers are rewound
    when iteration reaches them.
    """

    name = "append"
    plugin_version = "1.0.0"

    def __init__(self, readers: Iterable[RowReader] = ()) -> None:
        self._readers: list[RowReader] = []
        for reader in readers:
            self.add_reader(reader)
        self._index = 0
        self._position = 0

    def add_reader(self, reader: RowReader) -> None:
        """Append a reader to the sequence.

        Raises:
            UnexpectedTypeError: If ``reader`` does not implement the reader contract.
        """
        if not isinstance(reader, RowReader):
            raise UnexpectedTypeError(reader, "RowReader")
        self._readers.append(reader)

    def _skip_exhausted(self) -> None:
        while self._index < len(self._readers) and not self._readers[self._index].valid():
            self._index += 1
            if self._index < len(self._readers):
                self._readers[self._index].rewind()

    def rewind(self) -> None:
        self._index = 0
        self._position = 0
        if self._readers:
            self._readers[0].rewind()
            self._skip_exhausted()

    def valid(self) -> bool:
        return self._index < len(self._readers) and self._readers[self._index].valid()

    def current(self) -> Any:
        while self.valid():
            reader = self._readers[self._index]
            record = reader.current()
            if record is not None or reader.valid():
                return record
            # inner reader ran out while resolving current(), e.g. trailing faulty rows
            self._skip_exhausted()
        return None

    def advance(self) -> None:
        if self.valid():
            self._readers[self._index].advance()
            self._position += 1
            self._skip_exhausted()

    def position(self) -> int:
        return self._position

    def count(self) -> int:
        """Return the summed count of all wrapped readers.

        Raises:
            UnexpectedTypeError: If any wrapped reader cannot count.
        """
        total = 0
        for reader in self._readers:
            if not isinstance(reader, CountableReader):
                raise UnexpectedTypeError(reader, "CountableReader")
            total += reader.count()
        return total
