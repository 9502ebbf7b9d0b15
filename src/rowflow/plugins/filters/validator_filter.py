# src/rowflow/plugins/filters/validator_filter.py
"""Filter that drops records failing validation."""

from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel

from rowflow.contracts.errors import ValidationFailedError
from rowflow.plugins.schema_factory import collect_violations, create_record_model


class ValidatorFilter:
    """Drop records that violate the declared field constraints.

    In strict mode (the default) a record must not carry fields beyond the
    declared ones. In non-strict mode undeclared fields are ignored. Declared
    fields are required either way unless added as optional.

    Violations are kept per 1-based line (the ordinal of the record within
    this filter). With throw_exceptions enabled the first invalid record
    raises ValidationFailedError instead.

    Example:
        validator = ValidatorFilter()
        validator.add("email", str)
        validator.add("age", int)
        step = FilterStep().add(validator)
    """

    def __init__(self, *, strict: bool = True, throw_exceptions: bool = False) -> None:
        self.strict = strict
        self.throw_exceptions = throw_exceptions
        self._fields: dict[str, tuple[Any, bool]] = {}
        self._model: type[BaseModel] | None = None
        self._line = 1
        self._violations: dict[int, list[dict[str, Any]]] = {}

    def add(self, field: str, annotation: Any, *, required: bool = True) -> "ValidatorFilter":
        self._fields[field] = (annotation, required)
        self._model = None
        return self

    def set_strict(self, strict: bool) -> None:
        self.strict = strict
        self._model = None

    def get_violations(self) -> dict[int, list[dict[str, Any]]]:
        return dict(self._violations)

    def _get_model(self) -> type[BaseModel]:
        if self._model is None:
            self._model = create_record_model(self._fields, "ValidatorFilterRecord", extra="forbid" if self.strict else "ignore")
        return self._model

    def __call__(self, record: Mapping[str, Any]) -> bool:
        violations = collect_violations(self._get_model(), record)
        line = self._line
        self._line += 1

        if violations:
            self._violations[line] = violations
            if self.throw_exceptions:
                raise ValidationFailedError(violations, line)
            return False
        return True
