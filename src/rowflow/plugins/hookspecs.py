# src/rowflow/plugins/hookspecs.py
"""pluggy hook specifications for rowflow plugins.

Plugins implement these hooks to make readers, steps and sinks available by
name to settings-driven workflows.

Usage (implementing a plugin):
    from rowflow.plugins.hookspecs import hookimpl

    class MyPlugin:
        @hookimpl  # NOT @hookspec - that's for defining specs
        def rowflow_get_steps(self):
            return [MyStep]

Note: @hookspec defines the hook interface (done here).
      @hookimpl marks plugin implementations of those hooks.
"""

from typing import TYPE_CHECKING

import pluggy

if TYPE_CHECKING:
    from rowflow.plugins.base import BaseReader, BaseSink, BaseStep

# Project name for pluggy, also the setuptools entry point group
PROJECT_NAME = "rowflow"

hookspec = pluggy.HookspecMarker(PROJECT_NAME)

hookimpl = pluggy.HookimplMarker(PROJECT_NAME)


class RowflowReaderSpec:
    """Hook specifications for reader plugins."""

    @hookspec
    def rowflow_get_readers(self) -> list[type["BaseReader"]]:  # type: ignore[empty-body]
        """Return reader plugin classes (not instances)."""


class RowflowStepSpec:
    """Hook specifications for step plugins."""

    @hookspec
    def rowflow_get_steps(self) -> list[type["BaseStep"]]:  # type: ignore[empty-body]
        """Return step plugin classes."""


class RowflowSinkSpec:
    """Hook specifications for sink plugins."""

    @hookspec
    def rowflow_get_sinks(self) -> list[type["BaseSink"]]:  # type: ignore[empty-body]
        """Return sink plugin classes."""
