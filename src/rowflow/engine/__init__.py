# src/rowflow/engine/__init__.py
"""Execution engine for rowflow workflows.

This module provides:
- Workflow: run lifecycle (sink prepare/finish, per-record loop, results)
- PipelineBuilder / Pipeline: priority-ordered step chains
- build_workflow: settings-driven workflow construction

Example:
    from rowflow.engine import Workflow
    from rowflow.plugins.readers.csv_reader import CSVReader
    from rowflow.plugins.sinks.json_sink import JSONLSink

    workflow = Workflow(CSVReader("orders.csv", header_row_number=0), name="orders")
    workflow.add_sink(JSONLSink("orders.jsonl"))
    result = workflow.process()
"""

from rowflow.core.config import RunConfig
from rowflow.engine.clock import Clock, MockClock, SystemClock
from rowflow.engine.factory import build_workflow, instantiate_plugins_from_config, run_from_settings
from rowflow.engine.pipeline import Pipeline, PipelineBuilder, StepRegistration
from rowflow.engine.workflow import Workflow

__all__ = [
    "Clock",
    "MockClock",
    "Pipeline",
    "PipelineBuilder",
    "RunConfig",
    "StepRegistration",
    "SystemClock",
    "Workflow",
    "build_workflow",
    "instantiate_plugins_from_config",
    "run_from_settings",
]
