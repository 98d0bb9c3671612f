"""In-memory execution metrics for finished workflow runs."""

from collections import Counter
from collections.abc import Iterable
from dataclasses import dataclass

from iterative_workflow.gateway.time.abc import Time
from iterative_workflow.observability.tracer import FinalResult

DEFAULT_MAX_RECORDS = 1000
TOP_ISSUE_TYPES = 10


@dataclass(frozen=True)
class FinalScores:
    security: float
    quality: float
    performance: float


@dataclass(frozen=True)
class ExecutionRecord:
    """Outcome of one finished run. ``timestamp`` is epoch seconds."""

    trace_id: str
    timestamp: float
    iterations: int
    duration_ms: float
    final_result: FinalResult
    final_scores: FinalScores
    issue_types: tuple[str, ...]


@dataclass(frozen=True)
class ScoreDistribution:
    min: float
    max: float
    avg: float


EMPTY_DISTRIBUTION = ScoreDistribution(min=0, max=0, avg=0)


@dataclass(frozen=True)
class IssueTypeCount:
    type: str
    count: int


@dataclass(frozen=True)
class MetricsSummary:
    total_executions: int
    success_rate: float
    avg_iterations_to_pass: float
    avg_duration_ms: float
    security: ScoreDistribution
    quality: ScoreDistribution
    performance: ScoreDistribution
    common_issue_types: tuple[IssueTypeCount, ...]
    stall_rate: float
    max_iterations_rate: float


EMPTY_SUMMARY = MetricsSummary(
    total_executions=0,
    success_rate=0,
    avg_iterations_to_pass=0,
    avg_duration_ms=0,
    security=EMPTY_DISTRIBUTION,
    quality=EMPTY_DISTRIBUTION,
    performance=EMPTY_DISTRIBUTION,
    common_issue_types=(),
    stall_rate=0,
    max_iterations_rate=0,
)


def _distribution(values: list[float]) -> ScoreDistribution:
    if not values:
        return EMPTY_DISTRIBUTION
    return ScoreDistribution(min=min(values), max=max(values), avg=sum(values) / len(values))


class MetricsCollector:
    """Keeps the most recent ``max_records`` execution records."""

    def __init__(self, time: Time, *, max_records: int = DEFAULT_MAX_RECORDS) -> None:
        self._time = time
        self._max_records = max_records
        self._records: list[ExecutionRecord] = []

    def record(self, execution: ExecutionRecord) -> None:
        self._records.append(execution)
        self._trim()

    def _trim(self) -> None:
        if len(self._records) > self._max_records:
            self._records = self._records[-self._max_records :]

    def summary(self, time_window: float | None = None) -> MetricsSummary:
        """Summarize all records, or only those newer than ``time_window`` seconds."""
        records = self._records
        if time_window:
            cutoff = self._time.now().timestamp() - time_window
            records = [r for r in records if r.timestamp >= cutoff]
        if not records:
            return EMPTY_SUMMARY

        total = len(records)
        passed = [r for r in records if r.final_result == "PASS"]
        stalled = sum(1 for r in records if r.final_result == "STALLED")
        maxed = sum(1 for r in records if r.final_result == "FAIL_MAX_ITERATIONS")

        issue_counts: Counter[str] = Counter()
        for r in records:
            issue_counts.update(r.issue_types)

        return MetricsSummary(
            total_executions=total,
            success_rate=len(passed) / total,
            avg_iterations_to_pass=(
                sum(r.iterations for r in passed) / len(passed) if passed else 0
            ),
            avg_duration_ms=sum(r.duration_ms for r in records) / total,
            security=_distribution([r.final_scores.security for r in records]),
            quality=_distribution([r.final_scores.quality for r in records]),
            performance=_distribution([r.final_scores.performance for r in records]),
            common_issue_types=tuple(
                IssueTypeCount(type=name, count=count)
                for name, count in issue_counts.most_common(TOP_ISSUE_TYPES)
            ),
            stall_rate=stalled / total,
            max_iterations_rate=maxed / total,
        )

    @property
    def record_count(self) -> int:
        return len(self._records)

    def clear(self) -> None:
        self._records = []

    def export_records(self) -> list[ExecutionRecord]:
        return list(self._records)

    def import_records(self, records: Iterable[ExecutionRecord]) -> None:
        """Replace the current records, keeping only the newest ``max_records``."""
        self._records = list(records)
        self._trim()

    def set_max_records(self, max_records: int) -> None:
        self._max_records = max_records
        self._trim()
