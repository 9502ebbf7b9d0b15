# src/rowflow/plugins/steps/value_converter_step.py
"""Per-field value conversion step."""

import copy
from collections.abc import Callable, MutableMapping
from typing import Any, Self

from rowflow.contracts.errors import ValueConversionError
from rowflow.contracts.types import NextStep
from rowflow.core.field_path import get_value, set_value
from rowflow.plugins.base import BaseStep


class ValueConverterStep(BaseStep):
    """Apply converters to the values at given field paths.

    Several converters on one path run in the order they were added, each
    receiving the previous one's output. Mapping records are copied before
    conversion so the reader's data is never modified in place.

    Example:
        step = ValueConverterStep()
        step.add("[price]", Decimal)
        step.add("[sold_at]", DateTimeValueConverter("%d/%m/%Y"))
    """

    name = "value_converter"

    def __init__(self) -> None:
        self._converters: dict[str, list[Callable[[Any], Any]]] = {}

    def add(self, path: str, converter: Callable[[Any], Any]) -> Self:
        self._converters.setdefault(path, []).append(converter)
        return self

    def __len__(self) -> int:
        return len(self._converters)

    def process(self, record: Any, next_step: NextStep) -> bool:
        """Convert the configured fields, then continue.

        Raises:
            ValueConversionError: Naming the field whose value could not be
                read or converted.
        """
        if isinstance(record, MutableMapping):
            record = copy.deepcopy(record)

        for path, converters in self._converters.items():
            for converter in converters:
                try:
                    set_value(record, path, converter(get_value(record, path)))
                except Exception as e:
                    raise ValueConversionError(path, e) from e

        return next_step(record)
