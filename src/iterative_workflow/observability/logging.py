"""Workflow logging on top of the standard ``logging`` module.

Log records emitted while a trace is active carry ``trace_id`` and
``iteration`` attributes stamped by ``TraceContextFilter``. ``WorkflowLogger``
adds the workflow-specific convenience methods (agent and iteration
lifecycle, validation failures, stalls, checkpoint saves) and passes
structured context through the record's ``context`` attribute.
"""

import json
import logging
import sys
from collections.abc import Mapping, MutableMapping
from typing import TYPE_CHECKING, Any, Literal

if TYPE_CHECKING:
    from iterative_workflow.observability.tracer import Tracer

LogOutput = Literal["console", "json", "silent"]
LOG_OUTPUTS: tuple[LogOutput, ...] = ("console", "json", "silent")
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")

PACKAGE_LOGGER_NAME = "iterative_workflow"

# Marks handlers installed by configure_logging so reconfiguring replaces them
_HANDLER_MARKER = "_iterative_workflow_handler"


class TraceContextFilter(logging.Filter):
    """Stamp the active trace id and iteration onto every record."""

    def __init__(self, tracer: "Tracer") -> None:
        super().__init__()
        self._tracer = tracer

    def filter(self, record: logging.LogRecord) -> bool:
        if not hasattr(record, "trace_id"):
            record.trace_id = self._tracer.trace_id
        if not hasattr(record, "iteration"):
            record.iteration = self._tracer.current_iteration
        return True


def _record_context(record: logging.LogRecord) -> Mapping[str, Any]:
    context = getattr(record, "context", None)
    return context if isinstance(context, Mapping) else {}


class ConsoleLogFormatter(logging.Formatter):
    """``LEVEL [trace] [iter:N] [agent] message {context}`` lines."""

    def format(self, record: logging.LogRecord) -> str:
        parts = [f"{record.levelname:<7}"]
        trace_id = getattr(record, "trace_id", None)
        if trace_id:
            parts.append(f"[{trace_id[:8]}]")
        iteration = getattr(record, "iteration", None)
        if iteration is not None:
            parts.append(f"[iter:{iteration}]")
        context = _record_context(record)
        agent = context.get("agent")
        if agent:
            parts.append(f"[{agent}]")
        parts.append(record.getMessage())
        if context:
            parts.append(json.dumps(dict(context), default=str, sort_keys=True))
        line = " ".join(parts)
        if record.exc_info:
            line = f"{line}\n{self.formatException(record.exc_info)}"
        return line


class JsonLogFormatter(logging.Formatter):
    """One JSON object per record."""

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, Any] = {
            "timestamp": self.formatTime(record, "%Y-%m-%dT%H:%M:%S%z"),
            "level": record.levelname,
            "logger": record.name,
            "traceId": getattr(record, "trace_id", None),
            "message": record.getMessage(),
        }
        iteration = getattr(record, "iteration", None)
        if iteration is not None:
            entry["iteration"] = iteration
        context = _record_context(record)
        if "agent" in context:
            entry["agent"] = context["agent"]
        if context:
            entry["context"] = dict(context)
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry, default=str)


class WorkflowLogger(logging.LoggerAdapter):
    """Logger adapter with workflow lifecycle helpers.

    Keyword ``context`` mappings are attached to the record as
    ``record.context`` for the formatters above.
    """

    def __init__(self, logger: logging.Logger) -> None:
        super().__init__(logger, {})

    def process(
        self, msg: Any, kwargs: MutableMapping[str, Any]
    ) -> tuple[Any, MutableMapping[str, Any]]:
        context = kwargs.pop("context", None)
        if context is not None:
            extra = dict(kwargs.get("extra") or {})
            extra["context"] = dict(context)
            kwargs["extra"] = extra
        return msg, kwargs

    def agent_start(self, agent: str, inputs: Mapping[str, Any] | None = None) -> None:
        self.info(
            "Agent started: %s",
            agent,
            context={"agent": agent, "input_keys": sorted(inputs) if inputs else []},
        )

    def agent_end(
        self,
        agent: str,
        *,
        passed: bool | None = None,
        score: float | None = None,
        duration_ms: float | None = None,
    ) -> None:
        context: dict[str, Any] = {"agent": agent}
        if passed is not None:
            context["passed"] = passed
        if score is not None:
            context["score"] = score
        if duration_ms is not None:
            context["duration_ms"] = duration_ms
        self.info("Agent completed: %s", agent, context=context)

    def agent_error(self, agent: str, error: BaseException | str) -> None:
        self.error("Agent failed: %s", agent, context={"agent": agent, "error": str(error)})

    def iteration_start(self, iteration: int, context: Mapping[str, Any] | None = None) -> None:
        self.info(
            "Iteration %d started", iteration, context={"iteration": iteration, **(context or {})}
        )

    def iteration_end(
        self, iteration: int, *, passed: bool, score: float, recommendation: str
    ) -> None:
        self.info(
            "Iteration %d completed",
            iteration,
            context={
                "iteration": iteration,
                "passed": passed,
                "score": score,
                "recommendation": recommendation,
            },
        )

    def validation_error(self, schema_name: str, errors: list[Any] | tuple[Any, ...]) -> None:
        self.error(
            "Validation failed for %s",
            schema_name,
            context={
                "schema_name": schema_name,
                "error_count": len(errors),
                "errors": [str(e) for e in errors],
            },
        )

    def stall_detected(self, stall_type: str, details: Mapping[str, Any]) -> None:
        self.warning(
            "Stall detected: %s", stall_type, context={"stall_type": stall_type, **details}
        )

    def checkpoint_saved(self, trace_id: str, iteration: int) -> None:
        self.debug(
            "Checkpoint saved", context={"trace_id": trace_id, "iteration": iteration}
        )


def get_workflow_logger(name: str) -> WorkflowLogger:
    return WorkflowLogger(logging.getLogger(name))


def configure_logging(
    logger: logging.Logger,
    *,
    level: str,
    output: LogOutput,
    tracer: "Tracer",
) -> logging.Handler:
    """Install a single stderr handler for ``output`` on ``logger``.

    Handlers from an earlier call are replaced. ``silent`` installs a
    NullHandler. The logger stops propagating so records are not printed
    twice by a root handler.
    """
    for existing in list(logger.handlers):
        if getattr(existing, _HANDLER_MARKER, False):
            logger.removeHandler(existing)

    handler: logging.Handler
    if output == "silent":
        handler = logging.NullHandler()
    else:
        handler = logging.StreamHandler(sys.stderr)
        handler.addFilter(TraceContextFilter(tracer))
        if output == "json":
            handler.setFormatter(JsonLogFormatter())
        else:
            handler.setFormatter(ConsoleLogFormatter())
    setattr(handler, _HANDLER_MARKER, True)

    logger.addHandler(handler)
    logger.setLevel(level)
    logger.propagate = False
    return handler
