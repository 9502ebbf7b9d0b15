# src/rowflow/plugins/converters/array_map.py
"""Apply value converters to fields of every record in a nested list."""

from collections.abc import Callable, Mapping, MutableMapping, Sequence
from typing import Any

from rowflow.contracts.errors import UnexpectedTypeError


class ArrayValueConverterMap:
    """Convert fields of each item in a list of records.

    Useful on the nested list produced by a merge-join:

        ArrayValueConverterMap({"price": [Decimal], "sold_at": [DateTimeValueConverter()]})

    Fields without converters are left alone; missing fields are skipped.
    """

    def __init__(self, converters: Mapping[str, Sequence[Callable[[Any], Any]]]) -> None:
        self.converters = {field: list(funcs) for field, funcs in converters.items()}

    def __call__(self, items: Any) -> list[Any]:
        if not isinstance(items, list):
            raise UnexpectedTypeError(items, "list")
        return [self._convert_item(item) for item in items]

    def _convert_item(self, item: Any) -> Any:
        if not isinstance(item, MutableMapping):
            raise UnexpectedTypeError(item, "MutableMapping")

        converted = dict(item)
        for field, funcs in self.converters.items():
            if field not in converted:
                continue
            for func in funcs:
                converted[field] = func(converted[field])
        return converted
