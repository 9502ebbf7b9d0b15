"""Run result returned by the workflow executor."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from types import MappingProxyType

from rowflow.contracts.enums import RunStatus


@dataclass(frozen=True, slots=True)
class RunResult:
    """Summary of one workflow run.

    Created once when the run ends and immutable thereafter. Counts are
    reported for cancelled runs too; callers should check has_errors()
    before trusting success_count.

    Attributes:
        name: Optional identifier of the workflow.
        start_time: Wall-clock time the run started.
        end_time: Wall-clock time the run ended.
        total_processed_count: Records iterated from the reader, whether
            they were accepted, filtered out or failed.
        exceptions: Captured exception -> position of the record that raised it.
        status: COMPLETED, or INTERRUPTED when cancellation stopped the loop.
    """

    name: str | None
    start_time: datetime
    end_time: datetime
    total_processed_count: int
    exceptions: Mapping[Exception, int] = field(default_factory=lambda: MappingProxyType({}))
    status: RunStatus = RunStatus.COMPLETED

    def __post_init__(self) -> None:
        if len(self.exceptions) > self.total_processed_count:
            raise ValueError(
                f"RunResult has {len(self.exceptions)} exceptions but only {self.total_processed_count} processed records"
            )
        if not isinstance(self.exceptions, MappingProxyType):
            object.__setattr__(self, "exceptions", MappingProxyType(dict(self.exceptions)))

    @property
    def elapsed(self) -> timedelta:
        return self.end_time - self.start_time

    @property
    def error_count(self) -> int:
        return len(self.exceptions)

    @property
    def success_count(self) -> int:
        return self.total_processed_count - self.error_count

    def has_errors(self) -> bool:
        return self.error_count > 0
