# src/rowflow/engine/factory.py
"""Build workflows from validated settings."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, Any

from rowflow.core.config import load_settings
from rowflow.core.logging import configure_logging
from rowflow.engine.workflow import Workflow
from rowflow.plugins.base import BaseReader
from rowflow.plugins.config_base import PluginConfigError
from rowflow.plugins.manager import PluginManager
from rowflow.plugins.sinks.batch import BatchSink

if TYPE_CHECKING:
    from rowflow.contracts.results import RunResult
    from rowflow.core.config import RowflowSettings
    from rowflow.engine.clock import Clock


def _require(plugin_cls: type[Any] | None, kind: str, name: str, available: list[type[Any]]) -> type[Any]:
    if plugin_cls is None:
        known = ", ".join(sorted(cls.name for cls in available)) or "none"
        raise PluginConfigError(f"Unknown {kind} plugin: '{name}'. Available: {known}")
    return plugin_cls


def instantiate_plugins_from_config(settings: RowflowSettings, manager: PluginManager) -> dict[str, Any]:
    """Instantiate the reader, steps and sinks named in settings.

    Returns:
        Dict with keys:
            - reader: reader instance
            - steps: list of (step, priority override or None)
            - sinks: list of sinks, batch-wrapped where batch_size is set

    Raises:
        PluginConfigError: If settings reference an unknown plugin or carry
            invalid plugin options
    """
    reader_cls = _require(manager.get_reader_by_name(settings.reader.plugin), "reader", settings.reader.plugin, manager.get_readers())
    reader = reader_cls.from_config(dict(settings.reader.options))

    steps = []
    for step_config in settings.steps:
        step_cls = _require(manager.get_step_by_name(step_config.plugin), "step", step_config.plugin, manager.get_steps())
        steps.append((step_cls.from_config(dict(step_config.options)), step_config.priority))

    sinks = []
    for sink_config in settings.sinks:
        sink_cls = _require(manager.get_sink_by_name(sink_config.plugin), "sink", sink_config.plugin, manager.get_sinks())
        sink = sink_cls.from_config(dict(sink_config.options))
        if sink_config.batch_size is not None:
            sink = BatchSink(sink, sink_config.batch_size)
        sinks.append(sink)

    return {"reader": reader, "steps": steps, "sinks": sinks}


def build_workflow(
    settings: RowflowSettings,
    manager: PluginManager | None = None,
    clock: Clock | None = None,
) -> Workflow:
    """Create a ready-to-run Workflow from settings.

    Args:
        settings: Validated settings (see load_settings)
        manager: Plugin manager to resolve names with. Defaults to one with
            the built-in plugins registered.
        clock: Clock for run timestamps
    """
    if manager is None:
        manager = PluginManager()
        manager.register_builtin_plugins()

    plugins = instantiate_plugins_from_config(settings, manager)

    workflow = Workflow(plugins["reader"], config=settings.run, clock=clock)
    for step, priority in plugins["steps"]:
        workflow.add_step(step, priority)
    for sink in plugins["sinks"]:
        workflow.add_sink(sink)
    return workflow


def run_from_settings(config_path: Path, manager: PluginManager | None = None) -> RunResult:
    """Load a settings file, configure logging from it and run the workflow.

    The reader is closed when the run ends, whether it completed or raised.
    """
    settings = load_settings(config_path)
    configure_logging(json_output=settings.logging.json_output, level=settings.logging.level)

    workflow = build_workflow(settings, manager)
    try:
        return workflow.process()
    finally:
        if isinstance(workflow.reader, BaseReader):
            workflow.reader.close()
