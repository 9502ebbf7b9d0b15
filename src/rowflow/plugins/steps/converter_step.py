# src/rowflow/plugins/steps/converter_step.py
"""Whole-record conversion step."""

from collections.abc import Callable, Iterable
from typing import Any, Self

from rowflow.contracts.types import NextStep
from rowflow.plugins.base import BaseStep

Converter = Callable[[Any], Any]


class ConverterStep(BaseStep):
    """Pass the record through each converter in the order they were added."""

    name = "converter"

    def __init__(self, converters: Iterable[Converter] = ()) -> None:
        self._converters: list[Converter] = []
        for converter in converters:
            self.add(converter)

    def add(self, converter: Converter) -> Self:
        self._converters.append(converter)
        return self

    def __len__(self) -> int:
        return len(self._converters)

    def process(self, record: Any, next_step: NextStep) -> bool:
        for converter in self._converters:
            record = converter(record)
        return next_step(record)
