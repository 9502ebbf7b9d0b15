"""Tests for date/time converters."""

from datetime import date, datetime

import pytest

from rowflow.contracts.errors import UnexpectedValueError
from rowflow.plugins.converters.dates import DateTimeToStringValueConverter, DateTimeValueConverter


class TestDateTimeValueConverter:
    def test_iso_input(self) -> None:
        assert DateTimeValueConverter()("2024-01-02T03:04:05") == datetime(2024, 1, 2, 3, 4, 5)

    def test_input_format(self) -> None:
        assert DateTimeValueConverter("%d/%m/%Y")("02/01/2024") == datetime(2024, 1, 2)

    def test_output_format(self) -> None:
        converter = DateTimeValueConverter("%d/%m/%Y", "%Y-%m-%d")

        assert converter("02/01/2024") == "2024-01-02"

    @pytest.mark.parametrize("value", ["", None])
    def test_empty_is_none(self, value) -> None:
        assert DateTimeValueConverter()(value) is None

    def test_invalid_value(self) -> None:
        with pytest.raises(UnexpectedValueError, match="not a valid date/time according to format %Y"):
            DateTimeValueConverter("%Y-%m-%d")("yesterday")

    def test_non_string_rejected(self) -> None:
        with pytest.raises(UnexpectedValueError):
            DateTimeValueConverter()(20240102)


class TestDateTimeToStringValueConverter:
    def test_default_format(self) -> None:
        assert DateTimeToStringValueConverter()(datetime(2024, 1, 2, 3, 4, 5)) == "2024-01-02 03:04:05"

    def test_date_input(self) -> None:
        assert DateTimeToStringValueConverter("%d.%m.%Y")(date(2024, 1, 2)) == "02.01.2024"

    def test_empty_is_none(self) -> None:
        assert DateTimeToStringValueConverter()(None) is None

    def test_string_rejected(self) -> None:
        with pytest.raises(UnexpectedValueError):
            DateTimeToStringValueConverter()("2024-01-02")
