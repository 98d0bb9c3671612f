"""Second-opinion scoring for result-aggregator output.

The result-aggregator agent decides whether an iteration passes. This module
recomputes that decision independently so a wrong or self-contradictory
aggregator answer can be caught:

- ``second_opinion_score`` applies the issue-count vetoes and the weighted
  thresholds to raw scores.
- ``sanity_check_aggregator_output`` validates an aggregator document and checks
  it for internal contradictions, offering a corrected copy when it finds
  hard errors.
- ``compare_with_second_opinion`` audits an aggregator decision against
  ``second_opinion_score``.
"""

import logging
from dataclasses import dataclass
from typing import Any

from iterative_workflow.quality.constants import SCORE_TOLERANCE
from iterative_workflow.quality.schemas import AggregatorOutput, QualityThresholds, Weights
from iterative_workflow.quality.validation import safe_validate

logger = logging.getLogger(__name__)

# Decimal places kept in the weighted composite
COMPOSITE_DIGITS = 9


def _fmt(value: float) -> str:
    """Render a number without a trailing ``.0`` for whole values."""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def _weighted_overall(
    security: float, quality: float, performance: float, weights: Weights
) -> float:
    composite = (
        security * weights.security
        + quality * weights.quality
        + performance * weights.performance
    )
    return round(composite, COMPOSITE_DIGITS)


@dataclass(frozen=True)
class ScoreChecks:
    security: bool
    quality: bool
    performance: bool
    overall: bool
    critical: bool
    high: bool


@dataclass(frozen=True)
class SecondOpinion:
    should_pass: bool
    calculated_score: float
    reason: str
    details: ScoreChecks


def second_opinion_score(
    security: float,
    quality: float,
    performance: float,
    critical: int,
    high: int,
    thresholds: QualityThresholds | None = None,
    weights: Weights | None = None,
) -> SecondOpinion:
    """Decide pass/fail from dimension scores and issue counts.

    Issue-count vetoes are checked first and independently of the weighted
    composite: too many critical (then high) issues fail the round no matter
    how high the scores are, and the reported score is the lowest dimension.
    Otherwise every dimension minimum and the weighted overall minimum must
    hold.
    """
    t = thresholds if thresholds is not None else QualityThresholds()
    w = weights if weights is not None else Weights()

    security_ok = security >= t.security_min
    quality_ok = quality >= t.quality_min
    performance_ok = performance >= t.performance_min
    high_ok = high <= t.max_high_issues

    if critical > t.max_critical_issues:
        return SecondOpinion(
            should_pass=False,
            calculated_score=min(security, quality, performance),
            reason=f"Vetoed: {critical} critical issue(s), max allowed: {t.max_critical_issues}",
            details=ScoreChecks(
                security=security_ok,
                quality=quality_ok,
                performance=performance_ok,
                overall=False,
                critical=False,
                high=high_ok,
            ),
        )

    if not high_ok:
        return SecondOpinion(
            should_pass=False,
            calculated_score=min(security, quality, performance),
            reason=f"Vetoed: {high} high issues, max allowed: {t.max_high_issues}",
            details=ScoreChecks(
                security=security_ok,
                quality=quality_ok,
                performance=performance_ok,
                overall=False,
                critical=True,
                high=False,
            ),
        )

    overall = _weighted_overall(security, quality, performance, w)
    overall_ok = overall >= t.overall_min
    details = ScoreChecks(
        security=security_ok,
        quality=quality_ok,
        performance=performance_ok,
        overall=overall_ok,
        critical=True,
        high=True,
    )

    if security_ok and quality_ok and performance_ok and overall_ok:
        return SecondOpinion(
            should_pass=True,
            calculated_score=overall,
            reason="All thresholds met",
            details=details,
        )

    failures: list[str] = []
    if not security_ok:
        failures.append(f"security {_fmt(security)} < {_fmt(t.security_min)}")
    if not quality_ok:
        failures.append(f"quality {_fmt(quality)} < {_fmt(t.quality_min)}")
    if not performance_ok:
        failures.append(f"performance {_fmt(performance)} < {_fmt(t.performance_min)}")
    if not overall_ok:
        failures.append(f"overall {overall:.1f} < {_fmt(t.overall_min)}")

    return SecondOpinion(
        should_pass=False,
        calculated_score=overall,
        reason=f"Threshold not met: {', '.join(failures)}",
        details=details,
    )


@dataclass(frozen=True)
class SanityCheckResult:
    """Outcome of checking an aggregator document.

    ``corrected_output`` is only set when ``errors`` is non-empty. It is a
    suggestion; nothing is changed in the checked document.
    """

    valid: bool
    warnings: tuple[str, ...]
    errors: tuple[str, ...]
    corrected_output: AggregatorOutput | None


def _suggest_correction(output: AggregatorOutput) -> AggregatorOutput:
    recommendation = output.recommendation
    if output.issue_counts.critical > 0 and recommendation == "PASS":
        recommendation = "ITERATE"
    return output.model_copy(
        update={"recommendation": recommendation, "passed": recommendation == "PASS"}
    )


def sanity_check_aggregator_output(output: Any) -> SanityCheckResult:
    """Validate an aggregator document and check it for contradictions.

    Schema failures are returned immediately as errors. Otherwise the
    document is checked for a mismatched overall score (warning), passed vs
    recommendation disagreement (error), PASS with critical issues (error),
    PASS with a non-empty must-fix list (warning), scores outside 0-100
    (error) and issue counts that disagree with the issue lists (warning).
    """
    validation = safe_validate(AggregatorOutput, output)
    if not validation.success or validation.data is None:
        return SanityCheckResult(
            valid=False,
            warnings=(),
            errors=tuple(f"{issue.path}: {issue.message}" for issue in validation.errors),
            corrected_output=None,
        )

    data = validation.data
    warnings: list[str] = []
    errors: list[str] = []

    weights = data.weights_used if data.weights_used is not None else Weights()
    calculated = _weighted_overall(
        data.scores.security, data.scores.quality, data.scores.performance, weights
    )
    if abs(calculated - data.overall_score) > SCORE_TOLERANCE:
        warnings.append(
            f"Overall score mismatch: reported {_fmt(data.overall_score)}, "
            f"calculated {calculated:.1f}"
        )

    if data.passed and data.recommendation != "PASS":
        errors.append(f"Inconsistent: passed=true but recommendation={data.recommendation}")
    if not data.passed and data.recommendation == "PASS":
        errors.append("Inconsistent: passed=false but recommendation=PASS")

    if data.issue_counts.critical > 0 and data.recommendation == "PASS":
        errors.append(f"Cannot PASS with {data.issue_counts.critical} critical issues")

    if data.feedback_for_code_writer.must_fix and data.recommendation == "PASS":
        warnings.append("PASS recommended but must_fix is not empty")

    for key, value in data.scores.model_dump().items():
        if value < 0 or value > 100:
            errors.append(f"{key} score out of range: {_fmt(value)}")

    if data.issues is not None:
        for severity, reported in data.issue_counts.model_dump().items():
            actual = len(getattr(data.issues, severity))
            if reported != actual:
                warnings.append(
                    f"Issue count mismatch for {severity}: reported {reported}, actual {actual}"
                )

    corrected = _suggest_correction(data) if errors else None
    if errors:
        logger.debug("Aggregator output failed sanity check: %s", "; ".join(errors))

    return SanityCheckResult(
        valid=not errors,
        warnings=tuple(warnings),
        errors=tuple(errors),
        corrected_output=corrected,
    )


@dataclass(frozen=True)
class SecondOpinionComparison:
    match: bool
    aggregator_decision: str
    second_opinion_decision: str
    discrepancies: tuple[str, ...]


def compare_with_second_opinion(
    output: AggregatorOutput,
    thresholds: QualityThresholds | None = None,
    weights: Weights | None = None,
) -> SecondOpinionComparison:
    """Audit an aggregator decision against an independent recomputation.

    Only PASS vs non-PASS is compared; the second opinion never produces
    STALLED or FAIL_MAX_ITERATIONS. Used for auditing, not as a gate.
    """
    opinion = second_opinion_score(
        output.scores.security,
        output.scores.quality,
        output.scores.performance,
        output.issue_counts.critical,
        output.issue_counts.high,
        thresholds,
        weights,
    )
    second_decision = "PASS" if opinion.should_pass else "ITERATE"

    discrepancies: list[str] = []
    if (output.recommendation == "PASS") != opinion.should_pass:
        discrepancies.append(
            f"Decision mismatch: aggregator={output.recommendation}, "
            f"second_opinion={second_decision}"
        )
        discrepancies.append(f"Second opinion reason: {opinion.reason}")

    if abs(output.overall_score - opinion.calculated_score) > SCORE_TOLERANCE:
        discrepancies.append(
            f"Score mismatch: aggregator={_fmt(output.overall_score)}, "
            f"second_opinion={opinion.calculated_score:.1f}"
        )

    return SecondOpinionComparison(
        match=not discrepancies,
        aggregator_decision=output.recommendation,
        second_opinion_decision=second_decision,
        discrepancies=tuple(discrepancies),
    )
