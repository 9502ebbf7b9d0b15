# src/rowflow/plugins/steps/type_guard.py
"""Step appended by the pipeline builder after every user step."""

from collections.abc import Mapping
from typing import Any

from rowflow.contracts.errors import UnexpectedTypeError
from rowflow.contracts.types import NextStep
from rowflow.plugins.base import BaseStep


class TypeGuardStep(BaseStep):
    """Reject anything that is not a mapping before it reaches the sinks."""

    name = "type_guard"

    def process(self, record: Any, next_step: NextStep) -> bool:
        if not isinstance(record, Mapping):
            raise UnexpectedTypeError(record, "Mapping")
        return next_step(record)
