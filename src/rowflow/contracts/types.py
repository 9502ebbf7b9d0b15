"""Type aliases shared by readers, steps and sinks."""

from collections.abc import Callable
from typing import Any, TypeAlias

Record: TypeAlias = dict[str, Any]
"""One named-field data unit flowing through the pipeline."""

NextStep: TypeAlias = Callable[[Any], bool]
"""Continuation handed to a step: call it to pass the record downstream."""
