# src/rowflow/plugins/converters/charset.py
"""Character set conversion."""

from typing import Any

from rowflow.contracts.errors import UnexpectedValueError


class CharsetValueConverter:
    """Re-encode text into ``charset``.

    String input is encoded to ``charset`` bytes. Byte input is first decoded
    from ``in_charset``. Returns bytes, since Python text has no charset of
    its own.
    """

    def __init__(self, charset: str, in_charset: str = "utf-8") -> None:
        self.charset = charset
        self.in_charset = in_charset

    def __call__(self, value: Any) -> bytes | None:
        if value is None:
            return None

        try:
            text = value.decode(self.in_charset) if isinstance(value, bytes) else str(value)
            return text.encode(self.charset)
        except (LookupError, UnicodeError) as e:
            raise UnexpectedValueError(f"Could not convert value from {self.in_charset} to {self.charset}: {e}") from e
