# src/rowflow/plugins/converters/dates.py
"""Date/time value converters.

Formats use strftime/strptime directives (``%Y-%m-%d %H:%M:%S``).
"""

from datetime import date, datetime
from typing import Any

from rowflow.contracts.errors import UnexpectedValueError


class DateTimeValueConverter:
    """Parse a string into a datetime, optionally re-formatting it.

    Empty input converts to None.

    Args:
        input_format: strptime format of the input. When None the input
            must be ISO 8601.
        output_format: When set, the parsed value is formatted back to a
            string with this format instead of being returned as datetime.
    """

    def __init__(self, input_format: str | None = None, output_format: str | None = None) -> None:
        self.input_format = input_format
        self.output_format = output_format

    def __call__(self, value: Any) -> datetime | str | None:
        if not value:
            return None

        try:
            if self.input_format:
                parsed = datetime.strptime(value, self.input_format)
            else:
                parsed = datetime.fromisoformat(value)
        except (TypeError, ValueError) as e:
            expected = self.input_format or "ISO 8601"
            raise UnexpectedValueError(f"{value} is not a valid date/time according to format {expected}") from e

        if self.output_format:
            return parsed.strftime(self.output_format)
        return parsed


class DateTimeToStringValueConverter:
    """Format a date or datetime as a string. Empty input converts to None."""

    def __init__(self, output_format: str = "%Y-%m-%d %H:%M:%S") -> None:
        self.output_format = output_format

    def __call__(self, value: Any) -> str | None:
        if not value:
            return None
        if not isinstance(value, date):
            raise UnexpectedValueError("Input must be a date or datetime object.")
        return value.strftime(self.output_format)
