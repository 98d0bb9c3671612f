"""Optional on-disk persistence of finished execution traces."""

import logging
from pathlib import Path

from iterative_workflow.core.json_io import files_by_mtime, write_json_atomic
from iterative_workflow.observability.tracer import ExecutionTrace, trace_to_dict

logger = logging.getLogger(__name__)

TRACE_SUFFIX = ".json"


class TraceStore:
    """Writes ``<trace_dir>/<trace_id>.json`` and keeps the newest ``max_trace_files``.

    When ``enabled`` is False, ``save`` does nothing; traces are only kept
    when persistence is switched on in the workflow configuration.
    """

    def __init__(self, trace_dir: Path, *, enabled: bool, max_trace_files: int) -> None:
        self.trace_dir = trace_dir
        self.enabled = enabled
        self.max_trace_files = max_trace_files

    def save(self, trace: ExecutionTrace) -> Path | None:
        """Persist ``trace`` and prune old files. Returns the written path."""
        if not self.enabled:
            return None
        path = self.trace_dir / f"{trace.trace_id}{TRACE_SUFFIX}"
        write_json_atomic(path, trace_to_dict(trace))
        logger.debug("Saved trace %s to %s", trace.trace_id, path)
        self.prune()
        return path

    def list_trace_files(self) -> list[Path]:
        """Stored trace files, newest first."""
        return files_by_mtime(self.trace_dir, TRACE_SUFFIX)

    def prune(self) -> int:
        """Delete all but the newest ``max_trace_files`` traces. Returns count deleted."""
        stale = self.list_trace_files()[self.max_trace_files :]
        for path in stale:
            path.unlink(missing_ok=True)
        if stale:
            logger.debug("Pruned %d old trace files from %s", len(stale), self.trace_dir)
        return len(stale)
