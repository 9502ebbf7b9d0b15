# tests/conftest.py
"""Shared test fixtures and helpers.

Test helpers:
- RecordingSink: sink that records lifecycle calls and written records
- RecordingFlushableSink / RecordingIndexableSink: same, with capabilities
- write_csv: fixture writing CSV text to a temp file

Hypothesis Configuration:
- "ci" profile: Fast tests for CI (100 examples) - default
- "nightly" profile: Thorough tests (1000 examples)
- "debug" profile: Minimal tests with verbose output (10 examples)

Set profile via environment variable:
    HYPOTHESIS_PROFILE=nightly pytest tests/property/
"""

import os
from collections.abc import Callable
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

import pytest
from hypothesis import Phase, Verbosity, settings

from rowflow.engine.clock import MockClock
from rowflow.plugins.base import BaseSink, FlushableSink, IndexableSink
from rowflow.plugins.manager import PluginManager


class RecordingSink(BaseSink):
    """Sink that records everything that happens to it.

    ``calls`` holds lifecycle events in order ("prepare", "write", "finish").
    """

    name = "recording"

    def __init__(self) -> None:
        self.items: list[Any] = []
        self.calls: list[str] = []

    def prepare(self) -> None:
        self.calls.append("prepare")

    def write_item(self, record: Any) -> None:
        self.calls.append("write")
        self.items.append(record)

    def finish(self) -> None:
        self.calls.append("finish")


class RecordingFlushableSink(RecordingSink, FlushableSink):
    """RecordingSink that also records flush() calls."""

    def __init__(self) -> None:
        super().__init__()
        self.flushed_batches: list[int] = []
        self._since_flush = 0

    def write_item(self, record: Any) -> None:
        super().write_item(record)
        self._since_flush += 1

    def flush(self) -> None:
        self.calls.append("flush")
        self.flushed_batches.append(self._since_flush)
        self._since_flush = 0


class RecordingIndexableSink(RecordingSink, IndexableSink):
    """RecordingSink that records the index announced before each write."""

    def __init__(self) -> None:
        super().__init__()
        self.indexes: list[int] = []

    def set_index(self, index: int) -> None:
        self.indexes.append(index)


@pytest.fixture
def write_csv(tmp_path: Path) -> Callable[..., Path]:
    """Return a helper writing CSV text to a file under tmp_path."""

    def _write(content: str, name: str = "data.csv", encoding: str = "utf-8") -> Path:
        path = tmp_path / name
        # newline="" keeps the line endings exactly as written
        with open(path, "w", encoding=encoding, newline="") as f:
            f.write(content)
        return path

    return _write


@pytest.fixture
def mock_clock() -> MockClock:
    return MockClock(datetime(2024, 1, 1, 12, 0, tzinfo=UTC))


@pytest.fixture
def plugin_manager() -> PluginManager:
    """Standard plugin manager with builtin plugins registered."""
    manager = PluginManager()
    manager.register_builtin_plugins()
    return manager


# =============================================================================
# Hypothesis Configuration
# =============================================================================

# CI profile: Fast tests for continuous integration
settings.register_profile(
    "ci",
    max_examples=100,
    phases=[Phase.explicit, Phase.reuse, Phase.generate, Phase.shrink],
    deadline=None,  # Disable deadline for CI (timing varies)
)

# Nightly profile: Thorough testing for scheduled runs
settings.register_profile(
    "nightly",
    max_examples=1000,
    phases=[Phase.explicit, Phase.reuse, Phase.generate, Phase.shrink],
    deadline=None,
)

# Debug profile: Minimal examples with verbose output for debugging
settings.register_profile(
    "debug",
    max_examples=10,
    verbosity=Verbosity.verbose,
    phases=[Phase.explicit, Phase.reuse, Phase.generate, Phase.shrink],
    deadline=None,
)

# Load profile from environment, default to "ci"
settings.load_profile(os.getenv("HYPOTHESIS_PROFILE", "ci"))
