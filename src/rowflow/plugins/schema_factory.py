# src/rowflow/plugins/schema_factory.py
"""Factory for pydantic record models used by the validation plugins.

Fields are declared either as annotations or as compact spec strings:

    "id: int"         required int
    "email: str?"     optional str (None allowed, defaults to None)
    "sold_at: datetime"

Validation coerces where pydantic's lax mode does ("42" -> 42), since
records read from text sources are all strings.
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Mapping
from datetime import date, datetime
from decimal import Decimal
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, ValidationError, create_model

ExtraMode = Literal["allow", "ignore", "forbid"]

TYPE_MAP: dict[str, Any] = {
    "str": str,
    "int": int,
    "float": float,
    "decimal": Decimal,
    "bool": bool,
    "date": date,
    "datetime": datetime,
    "any": Any,
}

_FIELD_SPEC = re.compile(r"^\s*(?P<name>[^:\s]+)\s*:\s*(?P<type>\w+)\s*(?P<optional>\?)?\s*$")


def parse_field_spec(spec: str) -> tuple[str, Any, bool]:
    """Parse ``"name: type"`` (``?`` suffix for optional) into (name, type, required).

    Raises:
        ValueError: If the spec is malformed or names an unknown type.
    """
    match = _FIELD_SPEC.match(spec)
    if match is None:
        raise ValueError(f"Invalid field spec {spec!r}, expected 'name: type'")
    type_name = match.group("type")
    if type_name not in TYPE_MAP:
        raise ValueError(f"Unknown field type {type_name!r} in {spec!r}. Known types: {', '.join(TYPE_MAP)}")
    return match.group("name"), TYPE_MAP[type_name], match.group("optional") is None


def create_record_model(
    fields: Mapping[str, tuple[Any, bool]],
    name: str = "Record",
    extra: ExtraMode = "allow",
) -> type[BaseModel]:
    """Create a pydantic model from ``{field: (annotation, required)}``."""
    field_definitions: dict[str, Any] = {}
    for field_name, (annotation, required) in fields.items():
        if required:
            field_definitions[field_name] = (annotation, ...)
        else:
            field_definitions[field_name] = (annotation | None if annotation is not Any else Any, None)

    return create_model(
        name,
        __module__=__name__,
        __config__=ConfigDict(extra=extra),
        **field_definitions,
    )


def fields_from_specs(specs: Iterable[str]) -> dict[str, tuple[Any, bool]]:
    fields: dict[str, tuple[Any, bool]] = {}
    for spec in specs:
        field_name, annotation, required = parse_field_spec(spec)
        fields[field_name] = (annotation, required)
    return fields


def collect_violations(model: type[BaseModel], record: Any) -> list[dict[str, Any]]:
    """Validate ``record`` and return its violations (empty when valid)."""
    try:
        model.model_validate(record)
    except ValidationError as e:
        return [dict(error) for error in e.errors(include_url=False)]
    return []
