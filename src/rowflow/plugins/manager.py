# src/rowflow/plugins/manager.py
"""Plugin manager for discovery, registration and lookup.

Uses pluggy for hook-based plugin registration.
"""

from typing import Any

import pluggy
import structlog

from rowflow.plugins.base import BaseReader, BaseSink, BaseStep
from rowflow.plugins.hookspecs import (
    PROJECT_NAME,
    RowflowReaderSpec,
    RowflowSinkSpec,
    RowflowStepSpec,
)

logger = structlog.get_logger(__name__)


def _collect(results: list[list[type[Any]]], kind: str) -> dict[str, type[Any]]:
    collected: dict[str, type[Any]] = {}
    for plugin_classes in results:
        for cls in plugin_classes:
            name = cls.name
            if name in collected:
                raise ValueError(f"Duplicate {kind} plugin name: '{name}'. Already registered by {collected[name].__name__}")
            collected[name] = cls
    return collected


class PluginManager:
    """Manages plugin discovery, registration and lookup.

    Usage:
        manager = PluginManager()
        manager.register_builtin_plugins()

        reader_cls = manager.get_reader_by_name("csv")
        reader = reader_cls.from_config({"path": "orders.csv", "header_row_number": 0})
    """

    def __init__(self) -> None:
        self._pm = pluggy.PluginManager(PROJECT_NAME)

        self._pm.add_hookspecs(RowflowReaderSpec)
        self._pm.add_hookspecs(RowflowStepSpec)
        self._pm.add_hookspecs(RowflowSinkSpec)

        # Caches - map name to plugin class for duplicate detection
        self._readers: dict[str, type[BaseReader]] = {}
        self._steps: dict[str, type[BaseStep]] = {}
        self._sinks: dict[str, type[BaseSink]] = {}

    def register_builtin_plugins(self) -> None:
        """Register the plugins shipped with rowflow."""
        from rowflow.plugins.builtin import BuiltinPlugins

        self.register(BuiltinPlugins())

    def load_entry_points(self) -> int:
        """Register third-party plugins advertised under the ``rowflow`` entry point group.

        Returns:
            Number of plugins loaded.
        """
        loaded = self._pm.load_setuptools_entrypoints(PROJECT_NAME)
        self._refresh_caches()
        logger.debug("plugin_entry_points_loaded", count=loaded)
        return loaded

    def register(self, plugin: Any) -> None:
        """Register a plugin.

        Args:
            plugin: Plugin instance implementing hook methods

        Raises:
            ValueError: If a plugin name clashes with one already registered
        """
        self._pm.register(plugin)
        try:
            self._refresh_caches()
        except ValueError:
            self._pm.unregister(plugin)
            raise

    def _refresh_caches(self) -> None:
        # Collect everything first so a duplicate leaves the caches untouched
        readers = _collect(self._pm.hook.rowflow_get_readers(), "reader")
        steps = _collect(self._pm.hook.rowflow_get_steps(), "step")
        sinks = _collect(self._pm.hook.rowflow_get_sinks(), "sink")

        self._readers = readers
        self._steps = steps
        self._sinks = sinks

    # === Getters ===

    def get_readers(self) -> list[type[BaseReader]]:
        """Get all registered reader plugins."""
        return list(self._readers.values())

    def get_steps(self) -> list[type[BaseStep]]:
        """Get all registered step plugins."""
        return list(self._steps.values())

    def get_sinks(self) -> list[type[BaseSink]]:
        """Get all registered sink plugins."""
        return list(self._sinks.values())

    # === Lookup by name ===

    def get_reader_by_name(self, name: str) -> type[BaseReader] | None:
        return self._readers.get(name)

    def get_step_by_name(self, name: str) -> type[BaseStep] | None:
        return self._steps.get(name)

    def get_sink_by_name(self, name: str) -> type[BaseSink] | None:
        return self._sinks.get(name)
