"""Execution tracing for iterative workflow runs.

A trace covers one requirement from start to final result. It holds one
``IterationTrace`` per completed iteration, and each iteration holds the
spans (agent calls, validations) that ended while it was open. Spans nest:
a span started while another is open records it as its parent.
"""

import copy
import uuid
from dataclasses import dataclass, field
from typing import Any, Literal

from iterative_workflow.gateway.time.abc import Time

SpanStatus = Literal["running", "success", "error"]
FinalResult = Literal["PASS", "FAIL_MAX_ITERATIONS", "STALLED"]


@dataclass
class SpanEvent:
    timestamp_ms: float
    name: str
    attributes: dict[str, Any] | None = None


@dataclass
class Span:
    span_id: str
    trace_id: str
    parent_span_id: str | None
    operation_name: str
    start_ms: float
    end_ms: float | None = None
    status: SpanStatus = "running"
    attributes: dict[str, Any] = field(default_factory=dict)
    events: list[SpanEvent] = field(default_factory=list)


@dataclass
class IterationTrace:
    iteration: int
    start_ms: float
    end_ms: float | None = None
    duration_ms: float | None = None
    spans: list[Span] = field(default_factory=list)
    scores: dict[str, float] = field(
        default_factory=lambda: {"security": 0, "quality": 0, "performance": 0, "overall": 0}
    )
    issue_count: dict[str, int] = field(
        default_factory=lambda: {"critical": 0, "high": 0, "medium": 0, "low": 0}
    )
    recommendation: str = ""


@dataclass
class ExecutionTrace:
    trace_id: str
    session_id: str
    requirement: str
    start_ms: float
    end_ms: float | None = None
    iterations: list[IterationTrace] = field(default_factory=list)
    final_result: FinalResult | None = None
    total_duration_ms: float | None = None


def _span_to_dict(span: Span) -> dict[str, Any]:
    return {
        "spanId": span.span_id,
        "traceId": span.trace_id,
        "parentSpanId": span.parent_span_id,
        "operationName": span.operation_name,
        "startTime": span.start_ms,
        "endTime": span.end_ms,
        "status": span.status,
        "attributes": span.attributes,
        "events": [
            {"timestamp": e.timestamp_ms, "name": e.name, "attributes": e.attributes}
            for e in span.events
        ],
    }


def trace_to_dict(trace: ExecutionTrace) -> dict[str, Any]:
    """JSON-ready form of a trace, as written by the trace store."""
    return {
        "traceId": trace.trace_id,
        "sessionId": trace.session_id,
        "requirement": trace.requirement,
        "startTime": trace.start_ms,
        "endTime": trace.end_ms,
        "finalResult": trace.final_result,
        "totalDurationMs": trace.total_duration_ms,
        "iterations": [
            {
                "iteration": it.iteration,
                "startTime": it.start_ms,
                "endTime": it.end_ms,
                "durationMs": it.duration_ms,
                "spans": [_span_to_dict(s) for s in it.spans],
                "scores": it.scores,
                "issueCount": it.issue_count,
                "recommendation": it.recommendation,
            }
            for it in trace.iterations
        ],
    }


class Tracer:
    """Records a single active trace at a time.

    Times are milliseconds on the injected clock's monotonic timeline.
    """

    def __init__(self, time: Time) -> None:
        self._time = time
        self._trace: ExecutionTrace | None = None
        self._iteration: IterationTrace | None = None
        self._span_stack: list[Span] = []

    def _now_ms(self) -> float:
        return self._time.monotonic() * 1000

    def start_trace(self, requirement: str) -> str:
        """Begin a new trace, discarding any unfinished one. Returns its id."""
        trace_id = str(uuid.uuid4())
        self._trace = ExecutionTrace(
            trace_id=trace_id,
            session_id=str(uuid.uuid4()),
            requirement=requirement,
            start_ms=self._now_ms(),
        )
        self._iteration = None
        self._span_stack = []
        return trace_id

    def start_iteration(self, iteration: int) -> None:
        if self._trace is None:
            raise RuntimeError("No active trace. Call start_trace first.")
        self._iteration = IterationTrace(iteration=iteration, start_ms=self._now_ms())

    def start_span(self, operation_name: str, attributes: dict[str, Any] | None = None) -> Span:
        span = Span(
            span_id=str(uuid.uuid4()),
            trace_id=self._trace.trace_id if self._trace is not None else "unknown",
            parent_span_id=self._span_stack[-1].span_id if self._span_stack else None,
            operation_name=operation_name,
            start_ms=self._now_ms(),
            attributes=dict(attributes or {}),
        )
        self._span_stack.append(span)
        return span

    def add_span_event(self, name: str, attributes: dict[str, Any] | None = None) -> None:
        """Attach an event to the innermost open span; no-op without one."""
        if not self._span_stack:
            return
        self._span_stack[-1].events.append(
            SpanEvent(timestamp_ms=self._now_ms(), name=name, attributes=attributes)
        )

    def end_span(
        self, status: SpanStatus = "success", attributes: dict[str, Any] | None = None
    ) -> Span | None:
        """Close the innermost open span, or return None if none is open."""
        if not self._span_stack:
            return None
        span = self._span_stack.pop()
        span.end_ms = self._now_ms()
        span.status = status
        span.attributes.update(attributes or {})
        if self._iteration is not None:
            self._iteration.spans.append(span)
        return span

    def record_iteration_result(
        self,
        *,
        scores: dict[str, float],
        issue_count: dict[str, int],
        recommendation: str,
    ) -> None:
        """Close the open iteration with its result; no-op without one."""
        iteration = self._iteration
        if iteration is None:
            return
        iteration.scores = dict(scores)
        iteration.issue_count = dict(issue_count)
        iteration.recommendation = recommendation
        iteration.end_ms = self._now_ms()
        iteration.duration_ms = iteration.end_ms - iteration.start_ms
        if self._trace is not None:
            self._trace.iterations.append(iteration)
        self._iteration = None

    def end_trace(self, final_result: FinalResult | None) -> ExecutionTrace | None:
        trace = self._trace
        if trace is None:
            return None
        trace.end_ms = self._now_ms()
        trace.final_result = final_result
        trace.total_duration_ms = trace.end_ms - trace.start_ms
        self._trace = None
        self._iteration = None
        self._span_stack = []
        return trace

    @property
    def trace_id(self) -> str | None:
        return self._trace.trace_id if self._trace is not None else None

    @property
    def current_iteration(self) -> int | None:
        return self._iteration.iteration if self._iteration is not None else None

    @property
    def has_active_trace(self) -> bool:
        return self._trace is not None

    def snapshot(self) -> ExecutionTrace | None:
        """Deep copy of the active trace, for debugging."""
        if self._trace is None:
            return None
        return copy.deepcopy(self._trace)
