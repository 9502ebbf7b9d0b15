"""Property-based tests for readers.

Properties:
- CSV: whatever csv.writer produces is read back row for row
- CSV: count() is stable, matches iteration and leaves the cursor in place
- CSV: incremented duplicate headers are unique and keep their column count
- Merge join: with unique primary keys covering every secondary key, all
  secondary records are nested exactly once, in order
"""

from __future__ import annotations

import csv
import io

import pytest
from hypothesis import given
from hypothesis import strategies as st

from rowflow.contracts.enums import DuplicateHeaderMode
from rowflow.plugins.readers.csv_reader import CSVReader
from rowflow.plugins.readers.iterator_reader import IteratorReader
from rowflow.plugins.readers.merge_join_reader import MergeJoinReader
from tests.property.settings import SLOW_SETTINGS, STANDARD_SETTINGS

pytestmark = pytest.mark.property

# Backslash is the reader's escape character and csv.writer does not escape it
field_text = st.text(alphabet="ab xyz019,\"'\n\r;", max_size=8)
csv_rows = st.lists(st.lists(field_text, min_size=1, max_size=5), max_size=20)
header_names = st.lists(st.sampled_from(["a", "b", "a1", "a2", "id"]), min_size=1, max_size=8)


def _csv_stream(rows: list[list[str]]) -> io.StringIO:
    buffer = io.StringIO(newline="")
    csv.writer(buffer).writerows(rows)
    return io.StringIO(buffer.getvalue(), newline="")


class TestCSVReaderProperties:
    @given(rows=csv_rows)
    @SLOW_SETTINGS
    def test_reads_back_written_rows(self, rows: list[list[str]]) -> None:
        """Property: headerless reading returns exactly the rows written."""
        reader = CSVReader(_csv_stream(rows))

        assert list(reader) == rows
        assert reader.get_errors() == {}

    @given(rows=csv_rows, steps=st.integers(min_value=0, max_value=25))
    @SLOW_SETTINGS
    def test_count_is_stable_and_restores_cursor(self, rows: list[list[str]], steps: int) -> None:
        """Property: count() equals the number of rows and does not move the cursor."""
        reader = CSVReader(_csv_stream(rows))
        reader.rewind()
        for _ in range(steps):
            reader.advance()
        position, valid, record = reader.position(), reader.valid(), reader.current()

        assert reader.count() == len(rows)
        assert reader.count() == len(rows)
        assert reader.valid() == valid
        if valid:
            assert reader.position() == position
            assert reader.current() == record

    @given(headers=header_names)
    @STANDARD_SETTINGS
    def test_incremented_headers_unique(self, headers: list[str]) -> None:
        """Property: increment keeps one name per column, all distinct, first occurrences unchanged."""
        reader = CSVReader(io.StringIO(""))
        reader.set_column_headers(headers, DuplicateHeaderMode.INCREMENT)

        resolved = reader.get_column_headers()

        assert len(resolved) == len(headers)
        assert len(set(resolved)) == len(resolved)
        for name in set(headers):
            assert resolved[headers.index(name)] == name


class TestMergeJoinProperties:
    @given(
        primary_keys=st.lists(st.integers(min_value=0, max_value=30), unique=True, max_size=15).map(sorted),
        data=st.data(),
    )
    @STANDARD_SETTINGS
    def test_every_secondary_nested_once(self, primary_keys: list[int], data: st.DataObject) -> None:
        """Property: concatenated children equal the secondary stream."""
        secondary_keys = sorted(data.draw(st.lists(st.sampled_from(primary_keys), max_size=30))) if primary_keys else []
        secondary = [{"id": key, "seq": i} for i, key in enumerate(secondary_keys)]
        reader = MergeJoinReader(IteratorReader([{"id": k} for k in primary_keys]), IteratorReader(secondary), "children", "id")

        records = list(reader)

        assert [child for record in records for child in record["children"]] == secondary
        for record in records:
            assert all(child["id"] == record["id"] for child in record["children"])
        expected_records = primary_keys.index(secondary_keys[-1]) + 1 if secondary_keys else 0
        assert len(records) == expected_records
