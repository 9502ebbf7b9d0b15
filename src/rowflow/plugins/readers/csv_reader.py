# src/rowflow/plugins/readers/csv_reader.py
"""CSV reader for rowflow.

Reads delimited text lazily with csv.reader, one record per cursor step.

Positions are 0-based indexes of the parsed rows in the file, counting the
header row (and anything above it) but not blank lines. Records span several
physical lines when a quoted field contains newlines.

The reader remembers the stream offset of every row it has parsed, so seeking
back to a visited row is a direct stream seek rather than a re-parse.

Faulty rows never abort iteration. A row whose field count does not match the
header (strict mode), or that csv itself cannot parse, is recorded in the
error map and skipped.
"""

import csv
import os
from collections import Counter
from collections.abc import Iterator, Sequence
from typing import Any, TextIO, cast

import structlog

from rowflow.contracts.enums import DuplicateHeaderMode
from rowflow.contracts.errors import DuplicateHeadersError, ReaderError
from rowflow.plugins.base import BaseReader, iter_indexed
from rowflow.plugins.config_base import DialectConfig

logger = structlog.get_logger(__name__)


class CSVReaderConfig(DialectConfig):
    """Configuration for the CSV reader plugin.

    Inherits path, encoding and dialect options from DialectConfig.
    """

    header_row_number: int | None = None
    duplicate_headers: DuplicateHeaderMode | None = None
    strict: bool = True
    column_headers: list[str] | None = None


class _UnparseableRow:
    """A row csv.reader rejected, kept with its raw text."""

    __slots__ = ("error", "text")

    def __init__(self, text: str, error: csv.Error) -> None:
        self.text = text
        self.error = error


def _find_duplicates(headers: Sequence[str]) -> list[str]:
    seen: set[str] = set()
    duplicates: list[str] = []
    for name in headers:
        if name in seen and name not in duplicates:
            duplicates.append(name)
        seen.add(name)
    return duplicates


def _increment_headers(headers: Sequence[str]) -> list[str]:
    """Suffix the 2nd..nth occurrence of each repeated name, keeping column order.

    ["dup", "x", "dup", "dup"] -> ["dup", "x", "dup1", "dup2"]
    """
    taken = set(headers)
    next_suffix: Counter[str] = Counter()
    result: list[str] = []
    for name in headers:
        if next_suffix[name] == 0:
            result.append(name)
            next_suffix[name] = 1
            continue
        suffix = next_suffix[name]
        candidate = f"{name}{suffix}"
        while candidate in taken:
            suffix += 1
            candidate = f"{name}{suffix}"
        next_suffix[name] = suffix + 1
        taken.add(candidate)
        result.append(candidate)
    return result


class CSVReader(BaseReader):
    """Read records from a delimited text file or stream.

    Args:
        source: Path to the file, or an open seekable text stream. A reader
            opened from a path owns the file and closes it in close().
        delimiter: Field delimiter.
        quotechar: Quote character.
        escapechar: Escape character. None (the default) keeps backslashes
            as data; quotes inside quoted fields are doubled.
        encoding: File encoding when opening from a path.
        header_row_number: Position of the row holding column names. When
            None, records are raw lists of values.
        duplicate_headers: How to resolve repeated column names. None means
            repeated names raise DuplicateHeadersError.
        strict: In strict mode rows with the wrong field count are recorded
            as errors and skipped. Otherwise they are padded with None or
            truncated to the header count.

    Example:
        with CSVReader("orders.csv", header_row_number=0) as reader:
            for record in reader:
                ...
            faulty = reader.get_errors()
    """

    name = "csv"
    plugin_version = "1.0.0"

    def __init__(
        self,
        source: str | os.PathLike[str] | TextIO,
        *,
        delimiter: str = ",",
        quotechar: str = '"',
        escapechar: str | None = None,
        encoding: str = "utf-8",
        header_row_number: int | None = None,
        duplicate_headers: DuplicateHeaderMode | None = None,
        strict: bool = True,
    ) -> None:
        if isinstance(source, (str, os.PathLike)):
            # newline="" lets csv see \r\n and \r line endings as-is
            self._stream: TextIO = open(source, encoding=encoding, newline="")  # noqa: SIM115 - closed in close()
            self._owns_stream = True
        else:
            self._stream = source
            self._owns_stream = False

        self._dialect: dict[str, Any] = {
            "delimiter": delimiter,
            "quotechar": quotechar,
            "escapechar": escapechar,
        }
        self.strict = strict

        self._header_row_number: int | None = None
        self._duplicate_mode: DuplicateHeaderMode | None = None
        # Logical column name -> indexes of the physical columns it covers
        self._columns: dict[str, list[int]] = {}
        self._headers_count = 0

        self._count: int | None = None
        self._errors: dict[int, list[Any]] = {}
        self._scanned = False

        self._offsets: list[int] = []
        self._raw_lines: list[str] = []
        self._position = -1
        self._row: list[str] | _UnparseableRow | None = None
        self._reader: Iterator[list[str]] = iter(())

        if header_row_number is not None:
            self.set_header_row_number(header_row_number, duplicate_headers)
        else:
            self.rewind()

    @classmethod
    def from_config(cls, config: dict[str, Any]) -> "CSVReader":
        cfg = CSVReaderConfig.from_dict(config)
        reader = cls(
            cfg.resolved_path(),
            delimiter=cfg.delimiter,
            quotechar=cfg.quotechar,
            escapechar=cfg.escapechar,
            encoding=cfg.encoding,
            header_row_number=cfg.header_row_number,
            duplicate_headers=cfg.duplicate_headers,
            strict=cfg.strict,
        )
        if cfg.column_headers is not None:
            reader.set_column_headers(cfg.column_headers, cfg.duplicate_headers)
        return reader

    # === Low-level row access ===

    def _lines(self) -> Iterator[str]:
        while True:
            line = self._stream.readline()
            if not line:
                return
            self._raw_lines.append(line)
            yield line

    def _restart(self, offset: int, position: int) -> None:
        """Reposition the stream so the next parsed row has position ``position + 1``."""
        self._stream.seek(offset)
        self._reader = csv.reader(self._lines(), **self._dialect)
        self._position = position
        self._row = None

    def _read_next(self) -> None:
        """Parse the next non-blank row and make it the cursor row."""
        while True:
            offset = self._stream.tell()
            self._raw_lines.clear()
            try:
                row: list[str] | _UnparseableRow = next(self._reader)
            except StopIteration:
                self._row = None
                self._position += 1
                return
            except csv.Error as e:
                row = _UnparseableRow("".join(self._raw_lines), e)
            if row != []:
                break

        self._position += 1
        if self._position == len(self._offsets):
            self._offsets.append(offset)
        self._row = row

    # === Cursor contract ===

    def rewind(self) -> None:
        """Position the cursor on the first data row.

        When a header row is set, the cursor lands just below it.
        """
        self._restart(0, -1)
        self._read_next()
        if self._header_row_number is not None:
            self.seek(self._header_row_number + 1)

    def valid(self) -> bool:
        return self._row is not None

    def advance(self) -> None:
        if self.valid():
            self._read_next()

    def position(self) -> int:
        return self._position

    def seek(self, position: int) -> None:
        """Move the cursor to ``position``.

        Seeking past the last row leaves the reader invalid.
        """
        if position < 0:
            raise ValueError(f"Cannot seek to negative position {position}")

        known = len(self._offsets)
        start = min(position, known - 1)
        if not (self.valid() and start <= self._position <= position):
            if start < 0:
                self._restart(0, -1)
            else:
                self._restart(self._offsets[start], start - 1)
            self._read_next()

        while self.valid() and self._position < position:
            self._read_next()

    def current(self) -> dict[str, Any] | list[str] | None:
        """Return the record under the cursor.

        With headers, returns a dict keyed by column name. Faulty rows at the
        cursor are recorded and skipped, so the cursor may move forward; None
        is returned when no valid row remains. Without headers, returns the
        raw list of values.
        """
        while self.valid():
            row = self._row
            if isinstance(row, _UnparseableRow):
                self._record_error([row.text], reason=str(row.error))
                self._read_next()
                continue

            # valid() guarantees a parsed row here
            fields = cast(list[str], row)
            if not self._columns:
                return list(fields)

            line: list[Any] = list(fields)
            if not self.strict:
                if len(line) < self._headers_count:
                    line.extend([None] * (self._headers_count - len(line)))
                else:
                    del line[self._headers_count :]

            if len(line) == self._headers_count:
                return self._build_record(line)

            self._record_error(list(fields), reason=f"expected {self._headers_count} fields, got {len(fields)}")
            self._read_next()

        return None

    def count(self) -> int:
        """Return the number of records iteration would yield.

        Scans the whole source on first call, then restores the cursor and
        caches the result.
        """
        if self._count is None:
            position = self._position
            self._count = sum(1 for _ in iter_indexed(self))
            self._scanned = True
            self.seek(max(position, 0))
        return self._count

    def __len__(self) -> int:
        return self.count()

    def __iter__(self) -> Iterator[Any]:
        yield from super().__iter__()
        self._scanned = True

    # === Headers ===

    def get_column_headers(self) -> list[str]:
        return list(self._columns)

    def set_column_headers(self, headers: Sequence[str], duplicates: DuplicateHeaderMode | None = None) -> None:
        """Set column names explicitly (e.g. for headerless files).

        Raises:
            DuplicateHeadersError: If names repeat and no strategy is given.
        """
        self._duplicate_mode = DuplicateHeaderMode(duplicates) if duplicates is not None else None
        names = list(headers)

        duplicated = _find_duplicates(names)
        if duplicated:
            if self._duplicate_mode is DuplicateHeaderMode.INCREMENT:
                names = _increment_headers(names)
            elif self._duplicate_mode is None:
                raise DuplicateHeadersError(duplicated)

        columns: dict[str, list[int]] = {}
        for index, name in enumerate(names):
            columns.setdefault(name, []).append(index)
        self._columns = columns
        self._headers_count = len(names)

        self._count = None
        self._errors = {}
        self._scanned = False

    def set_header_row_number(self, row_number: int, duplicates: DuplicateHeaderMode | None = None) -> None:
        """Read column names from the row at ``row_number``.

        Raises:
            ReaderError: If the row does not exist or cannot be parsed.
            DuplicateHeadersError: If names repeat and no strategy is given.
        """
        self._header_row_number = None
        self.seek(row_number)
        row = self._row
        if row is None or isinstance(row, _UnparseableRow):
            raise ReaderError(f"Header row {row_number} could not be read")

        self.set_column_headers(row, duplicates)
        self._header_row_number = row_number
        self.rewind()

    def _build_record(self, line: list[Any]) -> dict[str, Any]:
        return {name: line[indexes[0]] if len(indexes) == 1 else [line[i] for i in indexes] for name, indexes in self._columns.items()}

    # === Error inspection ===

    def _record_error(self, raw: list[Any], *, reason: str) -> None:
        self._errors[self._position] = raw
        logger.debug("csv_row_skipped", position=self._position, reason=reason)

    def get_errors(self) -> dict[int, list[Any]]:
        """Return faulty rows keyed by position.

        If the reader has not been iterated to the end yet, this forces a full
        scan of the source (valid records are read and discarded) to populate
        the map. Call it after you are done consuming the reader as a stream.
        """
        if not self._scanned:
            for _ in iter_indexed(self):
                pass
            self._scanned = True
        return dict(self._errors)

    def has_errors(self) -> bool:
        return len(self.get_errors()) > 0

    def get_row(self, position: int) -> dict[str, Any] | list[str] | None:
        """Seek to ``position`` and return the record there."""
        self.seek(position)
        return self.current()

    def close(self) -> None:
        if self._owns_stream and not self._stream.closed:
            self._stream.close()
