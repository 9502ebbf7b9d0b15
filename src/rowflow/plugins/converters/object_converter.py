# src/rowflow/plugins/converters/object_converter.py
"""Reduce an object to a scalar value."""

from typing import Any

from rowflow.contracts.errors import UnexpectedTypeError
from rowflow.core.field_path import get_value


class ObjectConverter:
    """Convert an object to its string form or to one of its attributes.

    With no ``property_path`` the object is converted with str(); objects
    without a custom ``__str__`` are rejected since their default form is not
    data. With a path, the value at that path is returned.
    """

    def __init__(self, property_path: str | None = None) -> None:
        self.property_path = property_path

    def __call__(self, value: Any) -> Any:
        if value is None or isinstance(value, (str, int, float, bool, bytes)):
            raise UnexpectedTypeError(value, "object")

        if self.property_path is None:
            if type(value).__str__ is object.__str__:
                raise UnexpectedTypeError(value, "object with __str__")
            return str(value)

        return get_value(value, self.property_path)
