"""Schemas for the JSON exchanged between workflow agents.

Agents (code writer, reviewers, result aggregator) hand each other JSON
documents. These pydantic models validate them at the boundary; defaults
come from ``iterative_workflow.quality.constants``.
"""

from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field, Strict, model_validator

from iterative_workflow.quality.constants import (
    DEFAULT_QUALITY_THRESHOLDS,
    DEFAULT_WEIGHTS,
    validate_weights_sum,
)

Severity = Literal["Critical", "High", "Medium", "Low"]
ReviewerName = Literal["security-reviewer", "quality-checker", "performance-analyzer"]
Recommendation = Literal["PASS", "ITERATE", "FAIL_MAX_ITERATIONS", "STALLED"]
StallType = Literal[
    "STALLED_SCORE", "STALLED_CRITICAL", "STALLED_OSCILLATING", "STALLED_REGRESSION"
]
Trend = Literal["improving", "slow_improvement", "stalled", "regressing"]
ProjectType = Literal["single", "multi-language", "monorepo"]

# JSON booleans and numbers only; strings such as "yes" or "90" are rejected
Flag = Annotated[bool, Strict()]
Number = Annotated[float, Strict()]
Count = Annotated[int, Strict()]

RECOMMENDATIONS: tuple[Recommendation, ...] = ("PASS", "ITERATE", "FAIL_MAX_ITERATIONS", "STALLED")

_T = DEFAULT_QUALITY_THRESHOLDS
_W = DEFAULT_WEIGHTS


class _Schema(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)


class Issue(_Schema):
    """A single finding reported by a reviewer agent."""

    id: str
    source: ReviewerName
    severity: Severity
    type: str
    file: str
    line: Count | None = None
    description: str
    suggestion: str
    tech_stack_hint: str | None = Field(default=None, alias="techStackHint")


class QualityThresholds(_Schema):
    """Pass/fail bounds for a review round."""

    security_min: Number = Field(default=_T["security_min"], ge=0, le=100)
    quality_min: Number = Field(default=_T["quality_min"], ge=0, le=100)
    performance_min: Number = Field(default=_T["performance_min"], ge=0, le=100)
    overall_min: Number = Field(default=_T["overall_min"], ge=0, le=100)
    max_critical_issues: Count = Field(default=_T["max_critical_issues"], ge=0)
    max_high_issues: Count = Field(default=_T["max_high_issues"], ge=0)
    max_iterations: Count = Field(default=_T["max_iterations"], ge=1, le=10)
    stall_threshold: Number = Field(default=_T["stall_threshold"], ge=1)
    stall_rounds: Count = Field(default=_T["stall_rounds"], ge=1)


class Weights(_Schema):
    """Dimension weights for the overall score. Must sum to 1.0."""

    security: Number = Field(default=_W["security"], ge=0, le=1)
    quality: Number = Field(default=_W["quality"], ge=0, le=1)
    performance: Number = Field(default=_W["performance"], ge=0, le=1)

    @model_validator(mode="after")
    def check_sum(self) -> "Weights":
        if not validate_weights_sum(self.model_dump()):
            raise ValueError("Weights must sum to 1.0")
        return self


class TechStack(_Schema):
    """Detected technology stack of the target project.

    Unknown keys are kept (``extra="allow"``) so newer agents can add fields
    without breaking validation.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="allow")

    language: str
    language_version: str | None = None
    framework: str | None = None
    framework_version: str | None = None
    build_tool: str | None = None
    test_framework: str | None = None
    code_style: str | None = None
    constraints: tuple[str, ...] | None = None
    project_type: ProjectType | None = None
    quality_thresholds: QualityThresholds | None = None
    weights: Weights | None = None


class ReviewResult(_Schema):
    passed: Flag
    score: Number = Field(ge=0, le=100)
    issues: tuple[Issue, ...]
    summary: str | None = None


class AggregatorInput(_Schema):
    iteration: Count = Field(ge=1)
    tech_stack: TechStack
    security_result: ReviewResult
    quality_result: ReviewResult
    performance_result: ReviewResult
    previous_scores: tuple[Number, ...] | None = None


class Progress(_Schema):
    """Score movement between iterations, used for stall detection."""

    previous_score: Number
    current_score: Number
    improvement: Number
    trend: Trend
    stall_warning: Flag
    stall_type: StallType | None = None
    persistent_issues: tuple[str, ...] | None = None
    oscillation_detected: Flag | None = None


class IterationBudget(_Schema):
    current: Count
    max: Count
    remaining: Count


class ScoreGap(_Schema):
    security: Number
    quality: Number
    performance: Number
    overall: Number


class FeedbackForCodeWriter(_Schema):
    summary: str
    priority_order: tuple[str, ...]
    must_fix: tuple[Issue, ...]
    should_fix: tuple[Issue, ...]
    optional_fix: tuple[Issue, ...]
    iteration_budget: IterationBudget | None = None
    score_gap: ScoreGap | None = None


class DimensionScores(_Schema):
    # Not range-checked here; the sanity check reports out-of-range scores
    security: Number
    quality: Number
    performance: Number


class IssueCounts(_Schema):
    critical: Count
    high: Count
    medium: Count
    low: Count


class IssuesBySeverity(_Schema):
    critical: tuple[Issue, ...]
    high: tuple[Issue, ...]
    medium: tuple[Issue, ...]
    low: tuple[Issue, ...]


class AggregatorOutput(_Schema):
    """Decision document produced by the result-aggregator agent."""

    iteration: Count
    passed: Flag
    overall_score: Number
    scores: DimensionScores
    thresholds_used: QualityThresholds | None = None
    weights_used: Weights | None = None
    issue_counts: IssueCounts
    issues: IssuesBySeverity | None = None
    feedback_for_code_writer: FeedbackForCodeWriter
    recommendation: Recommendation
    progress: Progress | None = None
    next_action: str


class CodeWriterInput(_Schema):
    requirement: str
    tech_stack: TechStack
    target_files: tuple[str, ...] | None = None
    project_context: str | None = None
    spec: str | None = None
    design: str | None = None
    # Set on iteration calls
    previous_code: str | None = None
    feedback: str | None = None
    issues: tuple[Issue, ...] | None = None


class CodeWriterOutput(_Schema):
    code: str
    files_modified: tuple[str, ...]
    changes_made: tuple[str, ...]
    confidence: Number = Field(ge=0, le=1)
    notes: str | None = None
    tech_stacks_used: dict[str, str] | None = None
    cross_language_notes: str | None = None
