# src/rowflow/plugins/builtin.py
"""Hook implementations registering the built-in plugins."""

from rowflow.plugins.base import BaseReader, BaseSink, BaseStep
from rowflow.plugins.hookspecs import hookimpl
from rowflow.plugins.readers.csv_reader import CSVReader
from rowflow.plugins.sinks.csv_sink import CSVSink
from rowflow.plugins.sinks.json_sink import JSONLSink
from rowflow.plugins.steps.filter_step import OffsetStep
from rowflow.plugins.steps.mapping_step import MappingStep
from rowflow.plugins.steps.validator_step import ValidatorStep


class BuiltinPlugins:
    """Plugins that can be built from settings files.

    Readers, steps and sinks that need Python objects to construct them
    (callables, other readers) are used directly from code instead.
    """

    @hookimpl
    def rowflow_get_readers(self) -> list[type[BaseReader]]:
        return [CSVReader]

    @hookimpl
    def rowflow_get_steps(self) -> list[type[BaseStep]]:
        return [MappingStep, ValidatorStep, OffsetStep]

    @hookimpl
    def rowflow_get_sinks(self) -> list[type[BaseSink]]:
        return [CSVSink, JSONLSink]
