# src/rowflow/core/field_path.py
"""Field path access for nested records.

Paths address values inside records, nested records and objects:

    "name"              -> record["name"]
    "[address][city]"   -> record["address"]["city"]
    "address.city"      -> record["address"]["city"] (or attribute access)
    "[items][0]"        -> record["items"][0]

Mapping keys and sequence indexes use the bracket form; the dotted form
also resolves attributes on plain objects.
"""

import re
from collections.abc import MutableMapping, MutableSequence
from typing import Any

from rowflow.contracts.errors import FieldNotFoundError

_BRACKET_SEGMENT = re.compile(r"\[([^\[\]]*)\]")


def parse_path(path: str) -> tuple[str, ...]:
    """Split a field path into its segments.

    Raises:
        ValueError: If the path is empty or has unbalanced brackets.
    """
    if not path:
        raise ValueError("Field path cannot be empty")

    if path.startswith("["):
        segments = _BRACKET_SEGMENT.findall(path)
        if "".join(f"[{s}]" for s in segments) != path:
            raise ValueError(f"Malformed field path: {path!r}")
        return tuple(segments)

    return tuple(path.split("."))


def _step_into(container: Any, segment: str, path: str) -> Any:
    if isinstance(container, MutableMapping):
        if segment not in container:
            raise FieldNotFoundError(path)
        return container[segment]
    if isinstance(container, MutableSequence) and segment.lstrip("-").isdigit():
        try:
            return container[int(segment)]
        except IndexError as e:
            raise FieldNotFoundError(path) from e
    if hasattr(container, segment):
        return getattr(container, segment)
    raise FieldNotFoundError(path)


def get_value(record: Any, path: str) -> Any:
    """Read the value at ``path``.

    Raises:
        FieldNotFoundError: If any segment of the path does not resolve.
    """
    value = record
    for segment in parse_path(path):
        value = _step_into(value, segment, path)
    return value


def has_value(record: Any, path: str) -> bool:
    try:
        get_value(record, path)
    except FieldNotFoundError:
        return False
    return True


def set_value(record: Any, path: str, value: Any) -> None:
    """Write ``value`` at ``path``, creating intermediate dicts as needed.

    Raises:
        FieldNotFoundError: If an intermediate segment exists but cannot hold
            children (e.g. a string).
    """
    segments = parse_path(path)
    container = record
    for segment in segments[:-1]:
        if isinstance(container, MutableMapping) and segment not in container:
            container[segment] = {}
        container = _step_into(container, segment, path)

    last = segments[-1]
    if isinstance(container, MutableMapping):
        container[last] = value
    elif isinstance(container, MutableSequence) and last.lstrip("-").isdigit():
        try:
            container[int(last)] = value
        except IndexError as e:
            raise FieldNotFoundError(path) from e
    elif hasattr(container, "__dict__"):
        setattr(container, last, value)
    else:
        raise FieldNotFoundError(path)


def delete_value(record: Any, path: str) -> None:
    """Remove the mapping entry at ``path``. Missing entries are ignored."""
    segments = parse_path(path)
    try:
        container = record
        for segment in segments[:-1]:
            container = _step_into(container, segment, path)
    except FieldNotFoundError:
        return
    if isinstance(container, MutableMapping):
        container.pop(segments[-1], None)
