"""Exception hierarchy for readers, steps and the workflow engine.

Propagation policy:
- Reader parse defects (field-count mismatches, unparseable rows) are
  recorded by the reader and never raised to the iterating caller.
- Step errors abort the run unless the run is configured to skip failing
  items, in which case the workflow captures them per record.
- Sink lifecycle errors (prepare/finish) always propagate.
"""

from collections.abc import Iterable, Sequence
from typing import Any


class RowflowError(Exception):
    """Base class for all rowflow errors."""


# =============================================================================
# Reader errors
# =============================================================================


class ReaderError(RowflowError):
    """Raised when a reader cannot produce a record."""


class DuplicateHeadersError(ReaderError):
    """Raised when a header row repeats column names and no strategy was chosen.

    Attributes:
        duplicates: The repeated column names, in first-repeat order.
    """

    def __init__(self, duplicates: Iterable[str]) -> None:
        self.duplicates = list(duplicates)
        super().__init__(f"File contains duplicate headers: {', '.join(self.duplicates)}")


class FieldNotFoundError(RowflowError):
    """Raised when a join or lookup field is absent from a record."""

    def __init__(self, field: str, position: int | None = None) -> None:
        self.field = field
        self.position = position
        where = f'Row "{position}"' if position is not None else "Row"
        super().__init__(f'{where} has no field named "{field}"')


class NestKeyCollisionError(ReaderError):
    """Raised when the merge-join nest key already exists on the primary record."""

    def __init__(self, nest_key: str, position: int | None = None) -> None:
        self.nest_key = nest_key
        self.position = position
        super().__init__(
            f'Primary row "{position}" already contains a field named "{nest_key}". Please choose a different nest key'
        )


# =============================================================================
# Step errors
# =============================================================================


class UnexpectedValueError(RowflowError):
    """Raised when a value cannot be handled by a step or converter."""


class UnexpectedTypeError(UnexpectedValueError):
    """Raised when a step receives a value of the wrong shape."""

    def __init__(self, value: Any, expected_type: str) -> None:
        self.value = value
        self.expected_type = expected_type
        super().__init__(f'Expected argument of type "{expected_type}", "{type(value).__name__}" given')


class ValidationFailedError(RowflowError):
    """Raised when a record violates one or more validation constraints.

    Attributes:
        violations: Violation dicts as produced by pydantic
            (``loc``, ``msg``, ``type``, ...).
        line: 1-based ordinal of the validated record within the step.
    """

    def __init__(self, violations: Sequence[dict[str, Any]], line: int) -> None:
        self.violations = list(violations)
        self.line = line
        messages = ", ".join(_format_violation(v) for v in self.violations)
        super().__init__(f"Line {line}: {messages}")


class MappingError(RowflowError):
    """Raised when a mapping step cannot read or write a field path."""


class ValueConversionError(RowflowError):
    """Raised when a value converter fails on a specific field."""

    def __init__(self, field: str, cause: Exception) -> None:
        self.field = field
        super().__init__(f"{field} {cause}")


def _format_violation(violation: dict[str, Any]) -> str:
    loc = ".".join(str(part) for part in violation.get("loc", ()))
    msg = violation["msg"]
    return f"{loc}: {msg}" if loc else msg
