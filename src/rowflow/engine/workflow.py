# src/rowflow/engine/workflow.py
"""Workflow executor: drives a reader through a pipeline into sinks.

A run goes through these phases:
1. Record the start time
2. prepare() every sink
3. Build the pipeline from the current registrations
4. For each record: check for cancellation, tell indexable sinks the
   record's position, run the pipeline
5. finish() every sink
6. Return a RunResult

A record dropped by a step still counts toward the total. A step exception
aborts the run (sinks are not finished) unless skip_item_on_failure is set,
in which case it is recorded against the record's position and the run goes
on. Errors from sink prepare()/finish() always propagate.
"""

from __future__ import annotations

import signal
import threading
from collections.abc import Iterator
from contextlib import contextmanager, nullcontext
from typing import Any, Self

import structlog

from rowflow.contracts.enums import RunStatus
from rowflow.contracts.errors import UnexpectedTypeError
from rowflow.contracts.results import RunResult
from rowflow.core.config import RunConfig
from rowflow.engine.clock import DEFAULT_CLOCK, Clock
from rowflow.engine.pipeline import PipelineBuilder
from rowflow.plugins.base import BaseSink, BaseStep, IndexableSink, iter_indexed
from rowflow.plugins.protocols import RowReader

logger = structlog.get_logger(__name__)


@contextmanager
def _shutdown_handler_context() -> Iterator[threading.Event]:
    """Install SIGINT/SIGTERM handlers that set a shutdown event.

    On first signal: sets the event, restores default SIGINT handler
    (so a second Ctrl-C interrupts immediately).

    Outside the main thread signal registration is skipped, since
    signal.signal() only works there. The returned Event still works; it
    just won't be triggered by OS signals.
    """
    shutdown_event = threading.Event()

    if threading.current_thread() is not threading.main_thread():
        yield shutdown_event
        return

    original_sigint = signal.getsignal(signal.SIGINT)
    original_sigterm = signal.getsignal(signal.SIGTERM)

    def _handler(signum: int, frame: Any) -> None:
        shutdown_event.set()
        signal.signal(signal.SIGINT, signal.default_int_handler)

    signal.signal(signal.SIGINT, _handler)
    signal.signal(signal.SIGTERM, _handler)
    try:
        yield shutdown_event
    finally:
        signal.signal(signal.SIGINT, original_sigint)
        signal.signal(signal.SIGTERM, original_sigterm)


class Workflow:
    """Reads records, runs them through the registered steps and sinks.

    Example:
        workflow = Workflow(CSVReader("orders.csv", header_row_number=0), name="orders")
        workflow.add_step(MappingStep({"[Order No]": "[order_id]"}))
        workflow.add_sink(JSONLSink("orders.jsonl"))
        result = workflow.process()

    Reader, step and sink instances belong to one run at a time; running
    workflows that share them concurrently is unsupported.
    """

    def __init__(
        self,
        reader: RowReader,
        name: str | None = None,
        config: RunConfig | None = None,
        clock: Clock | None = None,
    ) -> None:
        if not isinstance(reader, RowReader):
            raise UnexpectedTypeError(reader, "RowReader")

        config = config if config is not None else RunConfig()
        if name is not None:
            config = config.model_copy(update={"name": name})

        self.reader = reader
        self.config = config
        self._clock = clock if clock is not None else DEFAULT_CLOCK
        self._builder = PipelineBuilder()

    @property
    def name(self) -> str | None:
        return self.config.name

    def add_step(self, step: BaseStep, priority: int | None = None) -> Self:
        self._builder.add_step(step, priority)
        return self

    def add_sink(self, sink: BaseSink) -> Self:
        self._builder.add_sink(sink)
        return self

    def process(self, shutdown_event: threading.Event | None = None) -> RunResult:
        """Run the workflow over every record of the reader.

        Args:
            shutdown_event: Set it to stop the run before the next record.
                When omitted, SIGINT/SIGTERM handlers are installed for the
                duration of the run.

        Returns:
            RunResult with counts, captured exceptions and timing.
        """
        log = logger.bind(workflow=self.name)
        start_time = self._clock.now()
        total = 0
        exceptions: dict[Exception, int] = {}
        status = RunStatus.COMPLETED

        sinks = self._builder.sinks
        for sink in sinks:
            sink.prepare()

        pipeline = self._builder.build()
        indexable = [sink for sink in sinks if isinstance(sink, IndexableSink)]
        log.info("workflow_started", steps=len(pipeline), sinks=len(sinks))

        # When shutdown_event is provided, use the caller's event directly
        shutdown_ctx = nullcontext(shutdown_event) if shutdown_event is not None else _shutdown_handler_context()
        with shutdown_ctx as active_event:
            for position, record in iter_indexed(self.reader):
                if active_event.is_set():
                    status = RunStatus.INTERRUPTED
                    log.warning("workflow_interrupted", processed=total)
                    break

                for sink in indexable:
                    sink.set_index(position)

                total += 1
                try:
                    pipeline.process(record)
                except Exception as e:
                    if not self.config.skip_item_on_failure:
                        raise
                    exceptions[e] = position
                    log.warning("item_failed", index=position, error=str(e), error_type=type(e).__name__)

        for sink in sinks:
            sink.finish()

        result = RunResult(
            name=self.name,
            start_time=start_time,
            end_time=self._clock.now(),
            total_processed_count=total,
            exceptions=exceptions,
            status=status,
        )
        log.info(
            "workflow_finished",
            status=str(status),
            total=result.total_processed_count,
            success=result.success_count,
            errors=result.error_count,
        )
        return result
