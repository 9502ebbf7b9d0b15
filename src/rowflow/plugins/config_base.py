# src/rowflow/plugins/config_base.py
"""Base classes for typed plugin configurations.

Example usage:
    class CSVReaderConfig(PathConfig):
        delimiter: str = ","
        encoding: str = "utf-8"

    cfg = CSVReaderConfig.from_dict(config)
    path = cfg.resolved_path()
"""

from pathlib import Path
from typing import Any, Self

from pydantic import BaseModel, ValidationError, field_validator

from rowflow.contracts.errors import RowflowError


class PluginConfigError(RowflowError):
    """Raised when plugin configuration is invalid."""


class PluginConfig(BaseModel):
    """Base class for typed plugin configurations.

    Unknown keys are rejected so that typos in settings files fail loudly.
    """

    model_config = {"extra": "forbid", "frozen": True}

    @classmethod
    def from_dict(cls, config: dict[str, Any]) -> Self:
        """Create config from dict with clear error on validation failure.

        Raises:
            PluginConfigError: If configuration is invalid.
        """
        if not isinstance(config, dict):
            raise PluginConfigError(f"Invalid configuration for {cls.__name__}: config must be a dict, got {type(config).__name__}.")

        try:
            return cls.model_validate(config)
        except ValidationError as e:
            raise PluginConfigError(f"Invalid configuration for {cls.__name__}: {e}") from e


class PathConfig(PluginConfig):
    """Base for configs of file-backed plugins."""

    path: str
    encoding: str = "utf-8"

    @field_validator("path")
    @classmethod
    def validate_path_not_empty(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("path cannot be empty")
        return v

    def resolved_path(self, base_dir: Path | None = None) -> Path:
        """Resolve path relative to base directory if provided."""
        p = Path(self.path)
        if base_dir and not p.is_absolute():
            return base_dir / p
        return p


class DialectConfig(PathConfig):
    """Delimited-text dialect options shared by the CSV reader and sink."""

    delimiter: str = ","
    quotechar: str = '"'
    escapechar: str | None = None

    @field_validator("delimiter", "quotechar")
    @classmethod
    def validate_single_character(cls, v: str) -> str:
        if len(v) != 1:
            raise ValueError(f"must be a single character, got {v!r}")
        return v

    @field_validator("escapechar")
    @classmethod
    def validate_escapechar(cls, v: str | None) -> str | None:
        if v is not None and len(v) != 1:
            raise ValueError(f"must be a single character or null, got {v!r}")
        return v
