# src/rowflow/plugins/base.py
"""Base classes for readers, steps and sinks.

Optional capabilities are expressed as explicit subclasses rather than probed
attributes:

- PriorityStep: a step that declares its own default priority.
- FlushableSink: a sink with an explicit buffer drain.
- IndexableSink: a sink told the position of the record about to be written
  (used for commit boundaries in backing stores).

The engine checks these with isinstance().

Lifecycle of a sink within one run (called by the workflow, single thread):

    prepare() -> write_item(record) * N -> finish()

If prepare() raises, the run aborts. If a step raises and the run is not
skipping failed items, finish() is NOT called; sinks that hold external
resources must release them on their own in that case.

Instances are owned by a single run at a time. Sharing a reader, step or sink
between concurrently executing workflows is unsupported.
"""

from abc import ABC, abstractmethod
from collections.abc import Iterator
from typing import Any, Self

from rowflow.contracts.types import NextStep
from rowflow.plugins.protocols import RowReader


def iter_indexed(reader: RowReader) -> Iterator[tuple[int, Any]]:
    """Iterate a reader from the start, yielding ``(position, record)`` pairs.

    The position is read after current(), since some readers skip faulty
    rows while resolving the current record.
    """
    reader.rewind()
    while reader.valid():
        record = reader.current()
        if record is None and not reader.valid():
            break
        yield reader.position(), record
        reader.advance()


class _Configurable:
    name: str
    plugin_version: str = "0.0.0"

    @classmethod
    def from_config(cls, config: dict[str, Any]) -> Self:
        """Build an instance from a plugin options dict.

        Only plugins registered with the PluginManager need to implement
        this; it is how settings files instantiate them by name.
        """
        raise NotImplementedError(f"{cls.__name__} cannot be built from configuration.")


class BaseReader(_Configurable, ABC):
    """Base class for row readers.

    Subclasses implement the cursor contract; iteration and context
    management come for free. A reader is restartable: every iteration
    starts with rewind().
    """

    @abstractmethod
    def rewind(self) -> None:
        """Position the cursor on the first record."""

    @abstractmethod
    def valid(self) -> bool:
        """Return True while the cursor points at a record."""

    @abstractmethod
    def advance(self) -> None:
        """Move the cursor one record forward."""

    @abstractmethod
    def current(self) -> Any:
        """Return the record under the cursor."""

    @abstractmethod
    def position(self) -> int:
        """Return the 0-based position of the cursor."""

    def __iter__(self) -> Iterator[Any]:
        for _, record in iter_indexed(self):
            yield record

    def close(self) -> None:  # noqa: B027 - optional override
        """Release resources held by the reader."""

    def __enter__(self) -> Self:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()


class BaseStep(_Configurable, ABC):
    """Base class for pipeline steps.

    A step receives the current record and the continuation for the rest of
    the chain. It must do exactly one of:

    - call ``next_step(record)`` (optionally with a transformed record) and
      return its result unchanged,
    - return False without calling ``next_step``: the record is dropped and
      no later step or sink sees it,
    - raise.

    Example:
        class UppercaseNames(BaseStep):
            def process(self, record, next_step):
                record["name"] = record["name"].upper()
                return next_step(record)
    """

    @abstractmethod
    def process(self, record: Any, next_step: NextStep) -> bool:
        """Process one record and decide whether it continues downstream."""


class PriorityStep(BaseStep):
    """A step that declares the priority it should run at.

    Used when the step is registered without an explicit priority.
    Higher priorities run first.
    """

    @property
    @abstractmethod
    def priority(self) -> int: ...


class PriorityFilter(ABC):
    """A filter predicate that declares its order within a FilterStep.

    Used when the filter is added without an explicit priority. Plain
    callables run at priority 0.
    """

    @property
    @abstractmethod
    def priority(self) -> int: ...

    @abstractmethod
    def __call__(self, record: Any) -> bool:
        """Return False to drop the record."""


class BaseSink(_Configurable, ABC):
    """Base class for sinks, the terminal consumers of records.

    prepare() and finish() default to no-ops.
    """

    def prepare(self) -> None:  # noqa: B027 - optional hook
        """Called once before the first record of a run."""

    @abstractmethod
    def write_item(self, record: Any) -> None:
        """Consume one fully processed record."""

    def finish(self) -> None:  # noqa: B027 - optional hook
        """Called once after the last record of a run."""


class FlushableSink(BaseSink):
    """Sink with an explicit output buffer drain."""

    @abstractmethod
    def flush(self) -> None:
        """Push buffered output to the underlying target."""


class IndexableSink(BaseSink):
    """Sink that wants to know the position of the record it is about to receive."""

    @abstractmethod
    def set_index(self, index: int) -> None:
        """Receive the reader position of the next record to be written."""
