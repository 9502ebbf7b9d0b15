"""Tests for plugin registration and lookup."""

import pytest

from rowflow.plugins.base import BaseSink
from rowflow.plugins.hookspecs import hookimpl
from rowflow.plugins.manager import PluginManager


class _NullSink(BaseSink):
    name = "null"
    plugin_version = "1.0.0"

    def write_item(self, record) -> None:
        pass


class _ClashingSink(BaseSink):
    name = "csv"

    def write_item(self, record) -> None:
        pass


class _NullSinkPlugin:
    @hookimpl
    def rowflow_get_sinks(self):
        return [_NullSink]


class _ClashingPlugin:
    @hookimpl
    def rowflow_get_sinks(self):
        return [_ClashingSink]


class TestBuiltinPlugins:
    def test_builtin_names(self, plugin_manager: PluginManager) -> None:
        assert {cls.name for cls in plugin_manager.get_readers()} == {"csv"}
        assert {cls.name for cls in plugin_manager.get_steps()} == {"mapping", "validator", "offset"}
        assert {cls.name for cls in plugin_manager.get_sinks()} == {"csv", "jsonl"}

    def test_lookup_by_name(self, plugin_manager: PluginManager) -> None:
        from rowflow.plugins.readers.csv_reader import CSVReader
        from rowflow.plugins.sinks.json_sink import JSONLSink
        from rowflow.plugins.steps.mapping_step import MappingStep

        assert plugin_manager.get_reader_by_name("csv") is CSVReader
        assert plugin_manager.get_step_by_name("mapping") is MappingStep
        assert plugin_manager.get_sink_by_name("jsonl") is JSONLSink

    def test_unknown_name_is_none(self, plugin_manager: PluginManager) -> None:
        assert plugin_manager.get_reader_by_name("xml") is None
        assert plugin_manager.get_step_by_name("xml") is None
        assert plugin_manager.get_sink_by_name("xml") is None

    def test_empty_manager(self) -> None:
        manager = PluginManager()

        assert manager.get_readers() == []
        assert manager.get_steps() == []
        assert manager.get_sinks() == []


class TestThirdPartyPlugins:
    def test_register_extra_plugin(self, plugin_manager: PluginManager) -> None:
        plugin_manager.register(_NullSinkPlugin())

        assert plugin_manager.get_sink_by_name("null") is _NullSink
        assert plugin_manager.get_sink_by_name("csv") is not None

    def test_duplicate_name_rejected(self, plugin_manager: PluginManager) -> None:
        """A clashing name fails and leaves the existing registrations intact."""
        from rowflow.plugins.sinks.csv_sink import CSVSink

        with pytest.raises(ValueError, match="Duplicate sink plugin name: 'csv'"):
            plugin_manager.register(_ClashingPlugin())

        assert plugin_manager.get_sink_by_name("csv") is CSVSink

    def test_rejected_plugin_can_be_replaced(self, plugin_manager: PluginManager) -> None:
        with pytest.raises(ValueError):
            plugin_manager.register(_ClashingPlugin())

        plugin_manager.register(_NullSinkPlugin())

        assert plugin_manager.get_sink_by_name("null") is _NullSink

    def test_load_entry_points_without_plugins(self) -> None:
        assert PluginManager().load_entry_points() == 0
