# src/rowflow/plugins/__init__.py
"""Plugin system: readers, steps and sinks via pluggy.

This package provides:

- Protocols: the reader cursor contract
- Base classes: readers, steps and sinks with their capability subclasses
- Config base: pydantic option models for registrable plugins
- Manager / hookspecs: name-based plugin registration

Concrete plugins live in the readers, steps, sinks, filters and converters
subpackages.
"""

from rowflow.plugins.base import (
    BaseReader,
    BaseSink,
    BaseStep,
    FlushableSink,
    IndexableSink,
    PriorityFilter,
    PriorityStep,
    iter_indexed,
)
from rowflow.plugins.config_base import PluginConfig, PluginConfigError
from rowflow.plugins.hookspecs import hookimpl
from rowflow.plugins.manager import PluginManager
from rowflow.plugins.protocols import CountableReader, RowReader, SeekableReader

__all__ = [
    "BaseReader",
    "BaseSink",
    "BaseStep",
    "CountableReader",
    "FlushableSink",
    "IndexableSink",
    "PluginConfig",
    "PluginConfigError",
    "PluginManager",
    "PriorityFilter",
    "PriorityStep",
    "RowReader",
    "SeekableReader",
    "hookimpl",
    "iter_indexed",
]
