"""Default quality thresholds and dimension weights.

These values are the single source of truth for the scoring engine, the
pydantic schema defaults and the ``result-aggregator.md`` agent template. A
test keeps the template's documented defaults in sync with this module.

Bump CONSTANTS_VERSION when changing any default; the aggregator template
references it.
"""

from collections.abc import Mapping
from types import MappingProxyType
from typing import Final

CONSTANTS_VERSION: Final = "1.0.0"

DEFAULT_QUALITY_THRESHOLDS: Final[Mapping[str, int]] = MappingProxyType(
    {
        # Minimum dimension scores (0-100)
        "security_min": 85,
        "quality_min": 80,
        "performance_min": 80,
        "overall_min": 80,
        # Critical issues are a hard veto
        "max_critical_issues": 0,
        "max_high_issues": 2,
        # Iterations before FAIL_MAX_ITERATIONS
        "max_iterations": 5,
        # Improvement below stall_threshold for stall_rounds rounds means STALLED
        "stall_threshold": 5,
        "stall_rounds": 2,
    }
)

# overall = security * w.security + quality * w.quality + performance * w.performance
DEFAULT_WEIGHTS: Final[Mapping[str, float]] = MappingProxyType(
    {
        "security": 0.4,
        "quality": 0.35,
        "performance": 0.25,
    }
)

STALL_DETECTION: Final[Mapping[str, int]] = MappingProxyType(
    {
        # Score band that counts as oscillating (STALLED_OSCILLATING)
        "oscillation_range": 6,
        "oscillation_rounds": 3,
        # Score drop that counts as regression (STALLED_REGRESSION)
        "regression_threshold": 10,
        # Rounds a Critical issue may persist before STALLED_CRITICAL
        "critical_persist_rounds": 3,
    }
)

WEIGHT_SUM_TOLERANCE: Final = 0.001

# Allowed difference between a reported and a recomputed overall score
SCORE_TOLERANCE: Final = 1.0


def validate_weights_sum(weights: Mapping[str, float]) -> bool:
    """Return True if the three dimension weights sum to 1.0."""
    total = weights["security"] + weights["quality"] + weights["performance"]
    return abs(total - 1.0) < WEIGHT_SUM_TOLERANCE


def generate_thresholds_markdown_table() -> str:
    """Render the defaults as the markdown table used in agent templates."""
    t = DEFAULT_QUALITY_THRESHOLDS
    w = DEFAULT_WEIGHTS
    rows = [
        "| Dimension | Setting | Default |",
        "|-----------|---------|---------|",
        f"| Critical issue limit | `max_critical_issues` | {t['max_critical_issues']} |",
        f"| High issue limit | `max_high_issues` | {t['max_high_issues']} |",
        f"| Minimum security score | `security_min` | {t['security_min']} |",
        f"| Minimum quality score | `quality_min` | {t['quality_min']} |",
        f"| Minimum performance score | `performance_min` | {t['performance_min']} |",
        f"| Minimum overall score | `overall_min` | {t['overall_min']} |",
        f"| Security weight | `weights.security` | {w['security']} |",
        f"| Quality weight | `weights.quality` | {w['quality']} |",
        f"| Performance weight | `weights.performance` | {w['performance']} |",
    ]
    return "\n".join(rows)


def generate_python_style_defaults() -> str:
    """Render the defaults as Python dict literals for template documentation."""
    threshold_lines = ",\n".join(
        f'    "{key}": {value}' for key, value in DEFAULT_QUALITY_THRESHOLDS.items()
    )
    weight_lines = ",\n".join(f'    "{key}": {value}' for key, value in DEFAULT_WEIGHTS.items())
    return (
        f"DEFAULT_THRESHOLDS = {{\n{threshold_lines}\n}}\n\n"
        f"DEFAULT_WEIGHTS = {{\n{weight_lines}\n}}"
    )
