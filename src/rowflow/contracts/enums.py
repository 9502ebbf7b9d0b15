"""Status codes and modes used across subsystem boundaries."""

from enum import StrEnum


class RunStatus(StrEnum):
    """How a workflow run ended.

    A run that raised never produces a RunResult, so there is no FAILED member.
    """

    COMPLETED = "completed"
    INTERRUPTED = "interrupted"


class DuplicateHeaderMode(StrEnum):
    """Resolution strategy for repeated column names in a CSV header row.

    INCREMENT: second and later occurrences get a numeric suffix
        (``dup``, ``dup1``, ``dup2``).
    MERGE: all occurrences collapse into one column whose value is the
        list of every occurrence's value, in column order.
    """

    INCREMENT = "increment"
    MERGE = "merge"


class JoinState(StrEnum):
    """Cursor state of the merge-join reader for the current primary row."""

    NEED_SECONDARY_ADVANCE = "need_secondary_advance"
    MATCHED = "matched"
    EXHAUSTED = "exhausted"
