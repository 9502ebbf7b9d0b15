# src/rowflow/plugins/steps/mapping_step.py
"""Field mapping step: move values between field paths."""

import copy
from collections.abc import Mapping, MutableMapping
from typing import Any, Self

from rowflow.contracts.errors import FieldNotFoundError, MappingError
from rowflow.contracts.types import NextStep
from rowflow.core.field_path import delete_value, get_value, parse_path, set_value
from rowflow.plugins.base import BaseStep
from rowflow.plugins.config_base import PluginConfig


class MappingStepConfig(PluginConfig):
    """Options for the ``mapping`` step: ``{from_path: to_path}``."""

    mappings: dict[str, str]


class MappingStep(BaseStep):
    """Rename or relocate record fields.

    Each mapping reads the value at ``from_path``, writes it at ``to_path``
    and removes the source entry from mapping records. Mappings apply in the
    order they were added.

    Example:
        MappingStep({"[first]": "[name][first]", "[last]": "[name][last]"})
        # {"first": "Ada", "last": "Lovelace"} -> {"name": {"first": "Ada", "last": "Lovelace"}}
    """

    name = "mapping"
    plugin_version = "1.0.0"

    def __init__(self, mappings: Mapping[str, str] | None = None) -> None:
        self._mappings: dict[str, str] = dict(mappings or {})

    @classmethod
    def from_config(cls, config: dict[str, Any]) -> Self:
        cfg = MappingStepConfig.from_dict(config)
        return cls(cfg.mappings)

    def map(self, from_path: str, to_path: str) -> Self:
        self._mappings[from_path] = to_path
        return self

    def __len__(self) -> int:
        return len(self._mappings)

    def process(self, record: Any, next_step: NextStep) -> bool:
        """Apply all mappings, then continue.

        Raises:
            MappingError: If a source path does not resolve or a target path
                cannot be written.
        """
        if isinstance(record, MutableMapping):
            record = copy.deepcopy(record)

        try:
            for from_path, to_path in self._mappings.items():
                value = get_value(record, from_path)
                set_value(record, to_path, value)
                if isinstance(record, MutableMapping) and parse_path(from_path) != parse_path(to_path):
                    delete_value(record, from_path)
        except (FieldNotFoundError, ValueError) as e:
            raise MappingError(f"Unable to map item: {e}") from e

        return next_step(record)
