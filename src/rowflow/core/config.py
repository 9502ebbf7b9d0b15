# src/rowflow/core/config.py
"""Configuration schema and loading for rowflow workflows.

Settings files describe one workflow: a reader, an ordered list of steps and
one or more sinks, each selected by plugin name with plugin-specific options.

Example settings.yaml:

    reader:
      plugin: csv
      options:
        path: ${IMPORT_DIR:-data}/orders.csv
        header_row_number: 0
        duplicate_headers: increment

    steps:
      - plugin: mapping
        options_file: mappings/orders.yaml
      - plugin: validator
        options:
          fields: ["order_id: int", "email: str"]
          allow_extra_fields: true

    sinks:
      - plugin: jsonl
        batch_size: 100
        options:
          path: out/orders.jsonl

    run:
      name: orders
      skip_item_on_failure: true
"""

import os
import re
from pathlib import Path
from typing import Any, Literal

import yaml
from pydantic import BaseModel, ConfigDict, Field, field_validator

from rowflow.contracts.errors import RowflowError


class OptionsFileError(RowflowError):
    """Error loading a plugin options file referenced from settings."""


class RunConfig(BaseModel):
    """Per-workflow run options.

    Attributes:
        name: Identifier reported in the RunResult and in log events.
        skip_item_on_failure: Record step exceptions per record and keep
            going instead of aborting the run.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    name: str | None = None
    skip_item_on_failure: bool = False


class ReaderSettings(BaseModel):
    """Reader plugin configuration."""

    model_config = {"frozen": True}

    plugin: str = Field(description="Plugin name (csv, ...)")
    options: dict[str, Any] = Field(default_factory=dict, description="Plugin-specific configuration options")


class StepSettings(BaseModel):
    """Step plugin configuration."""

    model_config = {"frozen": True}

    plugin: str = Field(description="Plugin name (mapping, validator, offset, ...)")
    options: dict[str, Any] = Field(default_factory=dict, description="Plugin-specific configuration options")
    priority: int | None = Field(default=None, description="Overrides the step's own priority (higher runs first)")


class SinkSettings(BaseModel):
    """Sink plugin configuration."""

    model_config = {"frozen": True}

    plugin: str = Field(description="Plugin name (csv, jsonl, ...)")
    options: dict[str, Any] = Field(default_factory=dict, description="Plugin-specific configuration options")
    batch_size: int | None = Field(default=None, gt=0, description="Wrap the sink in a BatchSink of this size")


class LoggingSettings(BaseModel):
    """Logging output configuration."""

    model_config = {"frozen": True}

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    json_output: bool = False

    @field_validator("level", mode="before")
    @classmethod
    def normalize_level(cls, v: Any) -> Any:
        return v.upper() if isinstance(v, str) else v


class RowflowSettings(BaseModel):
    """Top-level settings for one workflow."""

    model_config = {"frozen": True, "extra": "forbid"}

    reader: ReaderSettings
    steps: list[StepSettings] = Field(default_factory=list)
    sinks: list[SinkSettings]
    run: RunConfig = Field(default_factory=RunConfig)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)

    @field_validator("sinks")
    @classmethod
    def validate_sinks_not_empty(cls, v: list[SinkSettings]) -> list[SinkSettings]:
        """At least one sink is required."""
        if not v:
            raise ValueError("At least one sink is required")
        return v


# Regex pattern for ${VAR} or ${VAR:-default} syntax
_ENV_VAR_PATTERN = re.compile(r"\$\{([A-Z_][A-Z0-9_]*)(?::-([^}]*))?\}")


def _expand_env_vars(config: dict[str, Any]) -> dict[str, Any]:
    """Recursively expand ${VAR} and ${VAR:-default} patterns in config values.

    Unset variables without a default are left as written.
    """

    def _expand_string(value: str) -> str:
        def replacer(match: re.Match[str]) -> str:
            env_value = os.environ.get(match.group(1))
            if env_value is not None:
                return env_value
            default = match.group(2)
            if default is not None:
                return default
            return match.group(0)

        return _ENV_VAR_PATTERN.sub(replacer, value)

    def _expand_value(value: Any) -> Any:
        if isinstance(value, str):
            return _expand_string(value)
        elif isinstance(value, dict):
            return {k: _expand_value(v) for k, v in value.items()}
        elif isinstance(value, list):
            return [_expand_value(item) for item in value]
        else:
            return value

    return {k: _expand_value(v) for k, v in config.items()}


def _load_options_file(options_file: str, settings_path: Path) -> dict[str, Any]:
    path = Path(options_file)
    if not path.is_absolute():
        path = (settings_path.parent / path).resolve()
    if not path.exists():
        raise OptionsFileError(f"Options file not found: {path}")

    try:
        loaded = yaml.safe_load(path.read_text(encoding="utf-8"))
    except yaml.YAMLError as e:
        raise OptionsFileError(f"Invalid YAML in options file {path}: {e}") from e

    if loaded is None:
        return {}
    if not isinstance(loaded, dict):
        raise OptionsFileError(f"Options file {path} must contain a mapping, got {type(loaded).__name__}")
    return loaded


def _expand_options_files(plugin: dict[str, Any], settings_path: Path) -> dict[str, Any]:
    """Merge ``options_file`` content under a plugin's inline ``options``.

    Inline options win over keys from the file.
    """
    if "options_file" not in plugin:
        return plugin
    result = dict(plugin)
    loaded = _load_options_file(result.pop("options_file"), settings_path)
    result["options"] = {**loaded, **result.get("options", {})}
    return result


def load_settings(config_path: Path) -> RowflowSettings:
    """Load settings from YAML file with environment variable overrides.

    Uses Dynaconf for multi-source loading with precedence:
    1. Environment variables (ROWFLOW_*) - highest priority
    2. Config file
    3. Defaults from the pydantic models - lowest priority

    Environment variable format: ROWFLOW_RUN__SKIP_ITEM_ON_FAILURE=true for
    nested keys.

    Raises:
        ValidationError: If configuration fails pydantic validation
        FileNotFoundError: If config file doesn't exist
        OptionsFileError: If a referenced options file is missing or invalid
    """
    from dynaconf import Dynaconf

    # Dynaconf silently accepts missing files
    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    dynaconf_settings = Dynaconf(
        envvar_prefix="ROWFLOW",
        settings_files=[str(config_path)],
        environments=False,
        load_dotenv=False,
        merge_enabled=True,
    )

    # Dynaconf returns uppercase keys; convert to lowercase for pydantic
    internal_keys = {"LOAD_DOTENV", "ENVIRONMENTS", "SETTINGS_FILES"}
    raw_config = {k.lower(): v for k, v in dynaconf_settings.as_dict().items() if k not in internal_keys}

    # Nested env overrides (ROWFLOW_RUN__NAME) keep their uppercase keys.
    # Plugin options are left alone since their keys may be case-sensitive.
    for section in ("run", "logging"):
        if isinstance(raw_config.get(section), dict):
            raw_config[section] = {k.lower(): v for k, v in raw_config[section].items()}

    raw_config = _expand_env_vars(raw_config)

    if isinstance(raw_config.get("reader"), dict):
        raw_config["reader"] = _expand_options_files(raw_config["reader"], config_path)
    for section in ("steps", "sinks"):
        if isinstance(raw_config.get(section), list):
            raw_config[section] = [
                _expand_options_files(entry, config_path) if isinstance(entry, dict) else entry for entry in raw_config[section]
            ]

    return RowflowSettings(**raw_config)
