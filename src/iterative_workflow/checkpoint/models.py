"""Checkpoint records and their on-disk JSON shape.

Checkpoint files keep the camelCase keys (``traceId``, ``currentIteration``,
...) they have always used, so files written by earlier releases load
unchanged.
"""

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any


class CheckpointFormatError(ValueError):
    """Raised when decoded checkpoint JSON does not have the expected shape."""


@dataclass(frozen=True)
class FileSnapshot:
    """Content hash of one generated file. ``hash`` is ``""`` if unreadable."""

    path: str
    hash: str
    size: int


@dataclass(frozen=True)
class IterationScores:
    security: float
    quality: float
    performance: float
    overall: float


@dataclass(frozen=True)
class IssueCount:
    critical: int
    high: int
    medium: int
    low: int


@dataclass(frozen=True)
class IterationSnapshot:
    """Scores and decision recorded at the end of one iteration."""

    iteration: int
    scores: IterationScores
    issue_count: IssueCount
    recommendation: str
    timestamp: str


@dataclass(frozen=True)
class IterationCheckpoint:
    """Persisted progress of one iterative workflow run, keyed by trace id."""

    version: int
    trace_id: str
    requirement: str
    current_iteration: int
    last_successful_iteration: int
    tech_stack: Mapping[str, Any]
    files: tuple[FileSnapshot, ...]
    iterations: tuple[IterationSnapshot, ...]
    created_at: str
    updated_at: str


@dataclass(frozen=True)
class CheckpointSummary:
    """Lightweight listing entry for a stored checkpoint."""

    trace_id: str
    requirement: str
    iteration: int
    updated_at: str


def _snapshot_to_dict(snapshot: IterationSnapshot) -> dict[str, Any]:
    return {
        "iteration": snapshot.iteration,
        "scores": {
            "security": snapshot.scores.security,
            "quality": snapshot.scores.quality,
            "performance": snapshot.scores.performance,
            "overall": snapshot.scores.overall,
        },
        "issueCount": {
            "critical": snapshot.issue_count.critical,
            "high": snapshot.issue_count.high,
            "medium": snapshot.issue_count.medium,
            "low": snapshot.issue_count.low,
        },
        "recommendation": snapshot.recommendation,
        "timestamp": snapshot.timestamp,
    }


def _snapshot_from_dict(data: Mapping[str, Any]) -> IterationSnapshot:
    scores = data["scores"]
    counts = data["issueCount"]
    return IterationSnapshot(
        iteration=int(data["iteration"]),
        scores=IterationScores(
            security=scores["security"],
            quality=scores["quality"],
            performance=scores["performance"],
            overall=scores["overall"],
        ),
        issue_count=IssueCount(
            critical=counts["critical"],
            high=counts["high"],
            medium=counts["medium"],
            low=counts["low"],
        ),
        recommendation=str(data["recommendation"]),
        timestamp=str(data["timestamp"]),
    )


def checkpoint_to_dict(checkpoint: IterationCheckpoint) -> dict[str, Any]:
    return {
        "version": checkpoint.version,
        "traceId": checkpoint.trace_id,
        "requirement": checkpoint.requirement,
        "currentIteration": checkpoint.current_iteration,
        "lastSuccessfulIteration": checkpoint.last_successful_iteration,
        "techStack": dict(checkpoint.tech_stack),
        "codeSnapshot": {
            "files": [
                {"path": f.path, "hash": f.hash, "size": f.size} for f in checkpoint.files
            ],
        },
        "iterations": [_snapshot_to_dict(s) for s in checkpoint.iterations],
        "createdAt": checkpoint.created_at,
        "updatedAt": checkpoint.updated_at,
    }


def checkpoint_from_dict(data: Mapping[str, Any]) -> IterationCheckpoint:
    """Build a checkpoint from migrated checkpoint JSON.

    Raises:
        CheckpointFormatError: If a required key is missing or has the wrong type.
    """
    try:
        return IterationCheckpoint(
            version=int(data["version"]),
            trace_id=str(data["traceId"]),
            requirement=str(data["requirement"]),
            current_iteration=int(data["currentIteration"]),
            last_successful_iteration=int(data["lastSuccessfulIteration"]),
            tech_stack=dict(data.get("techStack") or {}),
            files=tuple(
                FileSnapshot(path=str(f["path"]), hash=str(f["hash"]), size=int(f["size"]))
                for f in data["codeSnapshot"]["files"]
            ),
            iterations=tuple(_snapshot_from_dict(s) for s in data["iterations"]),
            created_at=str(data["createdAt"]),
            updated_at=str(data["updatedAt"]),
        )
    except (KeyError, TypeError, ValueError) as e:
        raise CheckpointFormatError(f"Malformed checkpoint: {e!r}") from e
