# src/rowflow/plugins/protocols.py
"""Reader protocols.

These define the cursor contract every row reader honours. They are used for
type checking and for isinstance() checks on readers that do not inherit
from BaseReader (any object with the right methods is a reader).

Cursor contract:
    rewind()   -> position the cursor on the first record
    valid()    -> True while the cursor points at a record
    current()  -> the record under the cursor (None if nothing is left)
    advance()  -> move the cursor one record forward
    position() -> 0-based position of the cursor in the source
"""

from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class RowReader(Protocol):
    """Lazy, restartable, position-aware source of records."""

    def rewind(self) -> None: ...

    def valid(self) -> bool: ...

    def advance(self) -> None: ...

    def current(self) -> Any: ...

    def position(self) -> int: ...


@runtime_checkable
class CountableReader(RowReader, Protocol):
    """Reader that can report how many records it will yield.

    count() must leave the cursor where it was and return the same value on
    every call until the source is reset.
    """

    def count(self) -> int: ...


@runtime_checkable
class SeekableReader(RowReader, Protocol):
    """Reader supporting random access by position."""

    def seek(self, position: int) -> None: ...


@runtime_checkable
class PluginProtocol(Protocol):
    """Metadata every registrable plugin class carries.

    Used by PluginManager for name-based lookup and duplicate detection.
    """

    name: str
    plugin_version: str
