"""JSON file helpers shared by the manifest, checkpoint and trace stores."""

import json
import os
import tempfile
from pathlib import Path


def write_json_atomic(path: Path, data: object) -> None:
    """Write ``data`` as indented JSON, replacing ``path`` in one rename.

    The parent directory is created if needed. Readers never observe a
    half-written file.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2)
            f.write("\n")
        os.replace(tmp_name, path)
    except BaseException:
        Path(tmp_name).unlink(missing_ok=True)
        raise


def read_json(path: Path) -> object:
    """Read and decode a JSON file. Raises OSError or json.JSONDecodeError."""
    return json.loads(path.read_text(encoding="utf-8"))


def files_by_mtime(directory: Path, suffix: str) -> list[Path]:
    """Return files in ``directory`` ending in ``suffix``, newest first."""
    if not directory.is_dir():
        return []
    files = [p for p in directory.iterdir() if p.is_file() and p.name.endswith(suffix)]
    return sorted(files, key=lambda p: p.stat().st_mtime, reverse=True)
