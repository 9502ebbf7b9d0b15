# src/rowflow/engine/clock.py
"""Clock abstraction for run timestamps.

Production code uses SystemClock (the default).
Tests inject MockClock to get deterministic start/end times.
"""

from __future__ import annotations

from datetime import UTC, datetime, timedelta
from typing import Protocol


class Clock(Protocol):
    """Source of wall-clock time for run results."""

    def now(self) -> datetime:
        """Return the current time as a timezone-aware datetime."""
        ...


class SystemClock:
    """Production clock using the system time in UTC."""

    def now(self) -> datetime:
        return datetime.now(UTC)


class MockClock:
    """Controllable clock for deterministic testing.

    Example:
        clock = MockClock(datetime(2024, 1, 1, tzinfo=UTC))
        workflow = Workflow(reader, clock=clock)
        clock.advance(2.5)
    """

    def __init__(self, start: datetime | None = None) -> None:
        self._current = start if start is not None else datetime(2000, 1, 1, tzinfo=UTC)

    def now(self) -> datetime:
        return self._current

    def advance(self, seconds: float) -> None:
        """Advance mock time by ``seconds``.

        Raises:
            ValueError: If seconds is negative.
        """
        if seconds < 0:
            raise ValueError(f"Cannot advance time by negative amount: {seconds}")
        self._current += timedelta(seconds=seconds)


# Default clock for production use
DEFAULT_CLOCK: Clock = SystemClock()
