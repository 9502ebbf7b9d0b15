# src/rowflow/plugins/readers/merge_join_reader.py
"""Merge-join reader: nest records of a secondary stream into a primary stream.

Both readers must be sorted ascending on their join fields. For each primary
record, every consecutive secondary record whose join value equals the
primary's is collected under ``nest_key``. The secondary reader is consumed
while the joined record is being resolved, so resolution is cached: calling
current() again before advance() returns the same record and does not touch
the secondary reader.

State machine (per primary record):

    NEED_SECONDARY_ADVANCE --current()--> MATCHED    (secondary still has records)
                           --current()--> EXHAUSTED  (secondary ran out)
    MATCHED                --advance()--> NEED_SECONDARY_ADVANCE
    EXHAUSTED              --advance()--> EXHAUSTED  (reader becomes invalid)

Example:
    primary:   {"id": 1, "val": "A"}, {"id": 2, "val": "B"}
    secondary: {"id": 1, "c": "x"}, {"id": 1, "c": "y"}, {"id": 2, "c": "z"}

    MergeJoinReader(primary, secondary, "children", "id") yields
    {"id": 1, "val": "A", "children": [{"id": 1, "c": "x"}, {"id": 1, "c": "y"}]}
    {"id": 2, "val": "B", "children": [{"id": 2, "c": "z"}]}
"""

from collections.abc import Mapping
from typing import Any

from rowflow.contracts.enums import JoinState
from rowflow.contracts.errors import FieldNotFoundError, NestKeyCollisionError, UnexpectedTypeError
from rowflow.plugins.base import BaseReader
from rowflow.plugins.protocols import CountableReader, RowReader


class MergeJoinReader(BaseReader):
    """Streaming one-to-many join of two key-sorted readers.

    The reader is valid while both underlying readers are valid, except that
    a record already resolved for the current primary position stays valid
    until advance(). Primary records after the secondary reader is exhausted
    are therefore not produced.

    Args:
        primary: Reader of the outer records.
        secondary: Reader of the records to nest.
        nest_key: Field name under which matched secondary records are listed.
        primary_join_field: Join field of primary records.
        secondary_join_field: Join field of secondary records. Defaults to
            ``primary_join_field``.
    """

    name = "merge_join"
    plugin_version = "1.0.0"

    def __init__(
        self,
        primary: RowReader,
        secondary: RowReader,
        nest_key: str,
        primary_join_field: str,
        secondary_join_field: str | None = None,
    ) -> None:
        self._primary = primary
        self._secondary = secondary
        self.nest_key = nest_key
        self.primary_join_field = primary_join_field
        self.secondary_join_field = secondary_join_field if secondary_join_field is not None else primary_join_field

        self._state = JoinState.NEED_SECONDARY_ADVANCE
        self._joined: dict[str, Any] | None = None

    @property
    def state(self) -> JoinState:
        return self._state

    def _join_value(self, record: Any, field: str) -> Any:
        if not isinstance(record, Mapping) or field not in record:
            raise FieldNotFoundError(field, self.position())
        return record[field]

    def rewind(self) -> None:
        self._primary.rewind()
        self._secondary.rewind()
        self._joined = None
        self._state = JoinState.NEED_SECONDARY_ADVANCE if self._secondary.valid() else JoinState.EXHAUSTED

    def valid(self) -> bool:
        if not self._primary.valid():
            return False
        if self._joined is not None:
            return True
        return self._state is JoinState.NEED_SECONDARY_ADVANCE and self._secondary.valid()

    def current(self) -> dict[str, Any] | None:
        """Return the primary record with its matching secondary records nested.

        Raises:
            NestKeyCollisionError: If the primary record already has ``nest_key``.
            FieldNotFoundError: If either record lacks its join field.
        """
        if self._joined is not None:
            return self._joined

        primary = self._primary.current()
        if primary is None and not self._primary.valid():
            return None
        if isinstance(primary, Mapping) and self.nest_key in primary:
            raise NestKeyCollisionError(self.nest_key, self.position())

        key = self._join_value(primary, self.primary_join_field)
        joined = dict(primary)
        nested: list[Any] = []
        joined[self.nest_key] = nested

        while True:
            if not self._secondary.valid():
                self._state = JoinState.EXHAUSTED
                break
            secondary = self._secondary.current()
            if secondary is None and not self._secondary.valid():
                self._state = JoinState.EXHAUSTED
                break
            if self._join_value(secondary, self.secondary_join_field) != key:
                self._state = JoinState.MATCHED
                break
            nested.append(secondary)
            self._secondary.advance()

        self._joined = joined
        return joined

    def advance(self) -> None:
        self._primary.advance()
        self._joined = None
        if self._state is JoinState.MATCHED:
            self._state = JoinState.NEED_SECONDARY_ADVANCE

    def position(self) -> int:
        return self._primary.position()

    def count(self) -> int:
        """Return the primary reader's count."""
        if not isinstance(self._primary, CountableReader):
            raise UnexpectedTypeError(self._primary, "CountableReader")
        return self._primary.count()
