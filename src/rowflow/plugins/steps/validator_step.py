# src/rowflow/plugins/steps/validator_step.py
"""Validation step backed by pydantic models."""

from typing import Any, Self

from pydantic import BaseModel

from rowflow.contracts.errors import ValidationFailedError
from rowflow.contracts.types import NextStep
from rowflow.plugins.base import PriorityStep
from rowflow.plugins.config_base import PluginConfig
from rowflow.plugins.schema_factory import collect_violations, create_record_model, fields_from_specs


class ValidatorStepConfig(PluginConfig):
    """Options for the ``validator`` step.

    Fields use the compact spec form, e.g. ``["id: int", "email: str?"]``.
    """

    fields: list[str]
    allow_extra_fields: bool = False
    throw_exceptions: bool = False


class ValidatorStep(PriorityStep):
    """Drop records that fail validation, remembering why.

    Records are validated either against an explicit pydantic model or
    against the fields declared with add(). The record itself is passed on
    unchanged; validation does not coerce it.

    Runs at priority 128 by default, ahead of ordinary steps, so later steps
    only see valid records.

    Attributes:
        throw_exceptions: Raise ValidationFailedError on the first invalid
            record instead of dropping it.
    """

    name = "validator"
    plugin_version = "1.0.0"

    def __init__(
        self,
        model: type[BaseModel] | None = None,
        *,
        allow_extra_fields: bool = False,
        throw_exceptions: bool = False,
    ) -> None:
        self._model = model
        self._explicit_model = model is not None
        self.allow_extra_fields = allow_extra_fields
        self.throw_exceptions = throw_exceptions
        self._fields: dict[str, tuple[Any, bool]] = {}
        self._line = 0
        self._violations: dict[int, list[dict[str, Any]]] = {}

    @classmethod
    def from_config(cls, config: dict[str, Any]) -> Self:
        cfg = ValidatorStepConfig.from_dict(config)
        step = cls(allow_extra_fields=cfg.allow_extra_fields, throw_exceptions=cfg.throw_exceptions)
        for field, (annotation, required) in fields_from_specs(cfg.fields).items():
            step.add(field, annotation, required=required)
        return step

    @property
    def priority(self) -> int:
        return 128

    def add(self, field: str, annotation: Any, *, required: bool = True) -> Self:
        if self._explicit_model:
            raise ValueError("Cannot add fields to a ValidatorStep built from an explicit model")
        self._fields[field] = (annotation, required)
        self._model = None
        return self

    def get_violations(self) -> dict[int, list[dict[str, Any]]]:
        """Return violations keyed by the 1-based line of the invalid record."""
        return dict(self._violations)

    def __len__(self) -> int:
        return len(self._fields)

    def _get_model(self) -> type[BaseModel]:
        if self._model is None:
            extra = "allow" if self.allow_extra_fields else "forbid"
            self._model = create_record_model(self._fields, "ValidatedRecord", extra=extra)
        return self._model

    def process(self, record: Any, next_step: NextStep) -> bool:
        self._line += 1

        violations = collect_violations(self._get_model(), record)
        if violations:
            self._violations[self._line] = violations
            if self.throw_exceptions:
                raise ValidationFailedError(violations, self._line)
            return False

        return next_step(record)
