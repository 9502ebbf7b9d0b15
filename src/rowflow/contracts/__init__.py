"""Shared contracts: enums, errors and result types.

This package is a leaf module with no outbound dependencies to
core, engine or plugins.
"""

from rowflow.contracts.enums import DuplicateHeaderMode, JoinState, RunStatus
from rowflow.contracts.errors import (
    DuplicateHeadersError,
    FieldNotFoundError,
    MappingError,
    NestKeyCollisionError,
    ReaderError,
    RowflowError,
    UnexpectedTypeError,
    UnexpectedValueError,
    ValidationFailedError,
    ValueConversionError,
)
from rowflow.contracts.results import RunResult
from rowflow.contracts.types import NextStep, Record

__all__ = [
    "DuplicateHeaderMode",
    "DuplicateHeadersError",
    "FieldNotFoundError",
    "JoinState",
    "MappingError",
    "NestKeyCollisionError",
    "NextStep",
    "ReaderError",
    "Record",
    "RowflowError",
    "RunResult",
    "RunStatus",
    "UnexpectedTypeError",
    "UnexpectedValueError",
    "ValidationFailedError",
    "ValueConversionError",
]
