"""The observability bundle passed to components that emit telemetry."""

import logging
from dataclasses import dataclass
from pathlib import Path

from iterative_workflow.config import ObservabilityConfig
from iterative_workflow.gateway.time.abc import Time
from iterative_workflow.observability.logging import (
    PACKAGE_LOGGER_NAME,
    WorkflowLogger,
    configure_logging,
)
from iterative_workflow.observability.metrics import MetricsCollector
from iterative_workflow.observability.trace_store import TraceStore
from iterative_workflow.observability.tracer import ExecutionTrace, FinalResult, Tracer


@dataclass(frozen=True)
class Observability:
    """Logger, tracer, metrics and trace store for one workflow invocation."""

    logger: WorkflowLogger
    tracer: Tracer
    metrics: MetricsCollector
    trace_store: TraceStore

    def finish_trace(self, final_result: FinalResult | None) -> ExecutionTrace | None:
        """End the active trace and persist it if trace persistence is on."""
        trace = self.tracer.end_trace(final_result)
        if trace is not None:
            self.trace_store.save(trace)
        return trace


def create_observability(
    project_dir: Path,
    config: ObservabilityConfig,
    *,
    time: Time,
    install_handlers: bool,
    logger_name: str = PACKAGE_LOGGER_NAME,
) -> Observability:
    """Build an isolated observability bundle.

    With ``install_handlers`` the package logger gets the handler for
    ``config.log_output``; tests leave it off so nothing global changes.
    """
    tracer = Tracer(time)
    base_logger = logging.getLogger(logger_name)
    if install_handlers:
        configure_logging(
            base_logger, level=config.log_level, output=config.log_output, tracer=tracer
        )
    return Observability(
        logger=WorkflowLogger(base_logger),
        tracer=tracer,
        metrics=MetricsCollector(time),
        trace_store=TraceStore(
            project_dir / config.trace_dir,
            enabled=config.persist_traces,
            max_trace_files=config.max_trace_files,
        ),
    )
