"""Tests for field path access."""

from types import SimpleNamespace

import pytest

from rowflow.contracts.errors import FieldNotFoundError
from rowflow.core.field_path import delete_value, get_value, has_value, parse_path, set_value


class TestParsePath:
    @pytest.mark.parametrize(
        ("path", "segments"),
        [
            ("name", ("name",)),
            ("[name]", ("name",)),
            ("[address][city]", ("address", "city")),
            ("address.city", ("address", "city")),
            ("[items][0]", ("items", "0")),
            ("[Order No]", ("Order No",)),
        ],
    )
    def test_segments(self, path: str, segments: tuple) -> None:
        assert parse_path(path) == segments

    @pytest.mark.parametrize("path", ["", "[a", "[a]b", "[a][b"])
    def test_invalid(self, path: str) -> None:
        with pytest.raises(ValueError):
            parse_path(path)


class TestGetValue:
    def test_nested_mapping(self) -> None:
        assert get_value({"a": {"b": 1}}, "[a][b]") == 1

    def test_sequence_index(self) -> None:
        assert get_value({"items": [{"sku": "x"}, {"sku": "y"}]}, "[items][1][sku]") == "y"

    def test_attribute(self) -> None:
        assert get_value(SimpleNamespace(user=SimpleNamespace(name="ada")), "user.name") == "ada"

    def test_missing_key(self) -> None:
        with pytest.raises(FieldNotFoundError) as exc_info:
            get_value({"a": {}}, "[a][b]")

        assert exc_info.value.field == "[a][b]"

    def test_index_out_of_range(self) -> None:
        with pytest.raises(FieldNotFoundError):
            get_value({"items": []}, "[items][0]")

    def test_has_value(self) -> None:
        assert has_value({"a": None}, "[a]")
        assert not has_value({"a": None}, "[b]")


class TestSetValue:
    def test_creates_intermediate_dicts(self) -> None:
        record: dict = {}

        set_value(record, "[a][b][c]", 1)

        assert record == {"a": {"b": {"c": 1}}}

    def test_overwrites(self) -> None:
        record = {"a": 1}

        set_value(record, "a", 2)

        assert record == {"a": 2}

    def test_sequence_index(self) -> None:
        record = {"items": ["x", "y"]}

        set_value(record, "[items][0]", "z")

        assert record == {"items": ["z", "y"]}

    def test_attribute(self) -> None:
        obj = SimpleNamespace(name="a")

        set_value(obj, "name", "b")

        assert obj.name == "b"

    def test_through_scalar_fails(self) -> None:
        with pytest.raises(FieldNotFoundError):
            set_value({"a": "text"}, "[a][b]", 1)


class TestDeleteValue:
    def test_deletes_nested(self) -> None:
        record = {"a": {"b": 1, "c": 2}}

        delete_value(record, "[a][b]")

        assert record == {"a": {"c": 2}}

    def test_missing_is_ignored(self) -> None:
        record = {"a": 1}

        delete_value(record, "[x][y]")
        delete_value(record, "[b]")

        assert record == {"a": 1}
