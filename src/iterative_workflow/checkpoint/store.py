"""Checkpoint persistence under ``<project>/.claude/checkpoints``.

One JSON file per trace, named ``<trace_id>.json``. Loading migrates older
formats forward and rewrites the file. Unreadable files never raise from
``load``/``load_latest``; they are logged and treated as absent.

There is no locking: a trace is assumed to have a single writer. Saves go
through an atomic rename so readers never see a partial file.
"""

import dataclasses
import hashlib
import json
from collections.abc import Iterable, Mapping
from datetime import datetime
from pathlib import Path
from typing import Any

from iterative_workflow.checkpoint.migration import (
    CHECKPOINT_VERSION,
    CheckpointMigrationError,
    migrate_checkpoint,
    needs_migration,
)
from iterative_workflow.checkpoint.models import (
    CheckpointFormatError,
    CheckpointSummary,
    FileSnapshot,
    IterationCheckpoint,
    IterationSnapshot,
    checkpoint_from_dict,
    checkpoint_to_dict,
)
from iterative_workflow.core.json_io import files_by_mtime, read_json, write_json_atomic
from iterative_workflow.gateway.time.abc import Time
from iterative_workflow.observability.logging import get_workflow_logger

logger = get_workflow_logger(__name__)

CHECKPOINT_DIR = Path(".claude") / "checkpoints"
CHECKPOINT_SUFFIX = ".json"
DEFAULT_KEEP_COUNT = 5
REQUIREMENT_PREVIEW_LENGTH = 100


def create_checkpoint(
    trace_id: str, requirement: str, tech_stack: Mapping[str, Any], *, now: datetime
) -> IterationCheckpoint:
    """Build a fresh checkpoint with no iterations and no file snapshot."""
    timestamp = now.isoformat()
    return IterationCheckpoint(
        version=CHECKPOINT_VERSION,
        trace_id=trace_id,
        requirement=requirement,
        current_iteration=0,
        last_successful_iteration=0,
        tech_stack=dict(tech_stack),
        files=(),
        iterations=(),
        created_at=timestamp,
        updated_at=timestamp,
    )


def update_checkpoint_with_iteration(
    checkpoint: IterationCheckpoint, snapshot: IterationSnapshot, *, now: datetime
) -> IterationCheckpoint:
    """Return a copy of ``checkpoint`` with ``snapshot`` appended.

    ``last_successful_iteration`` only advances when the snapshot passed.
    """
    return dataclasses.replace(
        checkpoint,
        current_iteration=snapshot.iteration,
        last_successful_iteration=(
            snapshot.iteration
            if snapshot.recommendation == "PASS"
            else checkpoint.last_successful_iteration
        ),
        iterations=(*checkpoint.iterations, snapshot),
        updated_at=now.isoformat(),
    )


def calculate_file_hash(path: Path) -> str:
    """MD5 hex digest of the file, or ``""`` if it cannot be read."""
    try:
        return hashlib.md5(path.read_bytes(), usedforsecurity=False).hexdigest()
    except OSError:
        return ""


def create_file_snapshot(paths: Iterable[str | Path]) -> tuple[FileSnapshot, ...]:
    """Hash each path. Missing or unreadable files get an empty hash and size 0."""
    snapshots: list[FileSnapshot] = []
    for raw in paths:
        path = Path(raw)
        try:
            size = path.stat().st_size
        except OSError:
            # Not written yet
            snapshots.append(FileSnapshot(path=str(raw), hash="", size=0))
            continue
        snapshots.append(FileSnapshot(path=str(raw), hash=calculate_file_hash(path), size=size))
    return tuple(snapshots)


def has_files_changed(checkpoint: IterationCheckpoint) -> bool:
    """True if any snapshotted file now hashes differently."""
    return any(calculate_file_hash(Path(f.path)) != f.hash for f in checkpoint.files)


class CheckpointStore:
    """Reads and writes checkpoints for one project directory."""

    def __init__(self, project_dir: Path, *, time: Time) -> None:
        self.project_dir = project_dir
        self._time = time

    @property
    def checkpoint_dir(self) -> Path:
        return self.project_dir / CHECKPOINT_DIR

    def path_for(self, trace_id: str) -> Path:
        if not trace_id or "/" in trace_id or "\\" in trace_id or trace_id in (".", ".."):
            raise ValueError(f"Invalid trace id: {trace_id!r}")
        return self.checkpoint_dir / f"{trace_id}{CHECKPOINT_SUFFIX}"

    def create(
        self, trace_id: str, requirement: str, tech_stack: Mapping[str, Any]
    ) -> IterationCheckpoint:
        return create_checkpoint(trace_id, requirement, tech_stack, now=self._time.now())

    def update_with_iteration(
        self, checkpoint: IterationCheckpoint, snapshot: IterationSnapshot
    ) -> IterationCheckpoint:
        return update_checkpoint_with_iteration(checkpoint, snapshot, now=self._time.now())

    def save(self, checkpoint: IterationCheckpoint) -> Path:
        """Write ``checkpoint`` with a fresh ``updatedAt``. Returns the file path."""
        path = self.path_for(checkpoint.trace_id)
        stamped = dataclasses.replace(checkpoint, updated_at=self._time.now().isoformat())
        write_json_atomic(path, checkpoint_to_dict(stamped))
        logger.checkpoint_saved(checkpoint.trace_id, checkpoint.current_iteration)
        return path

    def _load_path(self, path: Path) -> IterationCheckpoint | None:
        try:
            data = read_json(path)
            migrated = migrate_checkpoint(data)
            if isinstance(data, dict) and needs_migration(data):
                write_json_atomic(path, migrated)
                logger.debug(
                    "Saved migrated checkpoint %s as version %d", path.name, CHECKPOINT_VERSION
                )
            return checkpoint_from_dict(migrated)
        except (
            OSError,
            UnicodeDecodeError,
            json.JSONDecodeError,
            CheckpointMigrationError,
            CheckpointFormatError,
        ) as e:
            logger.warning("Failed to load checkpoint %s: %s", path, e)
            return None

    def load(self, trace_id: str) -> IterationCheckpoint | None:
        """Load and migrate a checkpoint; None if missing or unreadable."""
        path = self.path_for(trace_id)
        if not path.exists():
            return None
        return self._load_path(path)

    def load_latest(self) -> IterationCheckpoint | None:
        """Load the most recently modified checkpoint, if any."""
        files = files_by_mtime(self.checkpoint_dir, CHECKPOINT_SUFFIX)
        if not files:
            return None
        return self._load_path(files[0])

    def list_checkpoints(self) -> list[CheckpointSummary]:
        """Summaries of stored checkpoints, newest first. Unparseable files are skipped."""
        summaries: list[CheckpointSummary] = []
        for path in files_by_mtime(self.checkpoint_dir, CHECKPOINT_SUFFIX):
            try:
                data = read_json(path)
                if not isinstance(data, dict):
                    continue
                summary = CheckpointSummary(
                    trace_id=str(data.get("traceId", path.stem)),
                    requirement=str(data.get("requirement") or "")[:REQUIREMENT_PREVIEW_LENGTH],
                    iteration=int(data.get("currentIteration") or 0),
                    updated_at=str(data.get("updatedAt", "")),
                )
            except (OSError, json.JSONDecodeError, TypeError, ValueError):
                continue
            summaries.append(summary)
        return summaries

    def delete(self, trace_id: str) -> bool:
        """Remove a checkpoint. Returns False if it did not exist."""
        path = self.path_for(trace_id)
        if not path.exists():
            return False
        path.unlink()
        return True

    def clean_old_checkpoints(self, keep_count: int = DEFAULT_KEEP_COUNT) -> int:
        """Delete all but the ``keep_count`` newest checkpoints. Returns count deleted."""
        if keep_count < 0:
            raise ValueError(f"keep_count must be non-negative, got {keep_count}")
        stale = files_by_mtime(self.checkpoint_dir, CHECKPOINT_SUFFIX)[keep_count:]
        for path in stale:
            path.unlink()
        if stale:
            logger.info("Deleted %d old checkpoints", len(stale))
        return len(stale)
