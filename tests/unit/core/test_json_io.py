"""Tests for shared JSON file helpers."""

import os
from pathlib import Path

from iterative_workflow.core.json_io import files_by_mtime, read_json, write_json_atomic


def test_write_creates_parent_directories(tmp_path: Path) -> None:
    path = tmp_path / "nested" / "dir" / "data.json"

    write_json_atomic(path, {"key": "value"})

    assert read_json(path) == {"key": "value"}
    assert path.read_text(encoding="utf-8").endswith("\n")


def test_write_replaces_existing_file_without_leftovers(tmp_path: Path) -> None:
    path = tmp_path / "data.json"
    write_json_atomic(path, {"version": 1})

    write_json_atomic(path, {"version": 2})

    assert read_json(path) == {"version": 2}
    assert [p.name for p in tmp_path.iterdir()] == ["data.json"]


def test_files_by_mtime_orders_newest_first(tmp_path: Path) -> None:
    for index, name in enumerate(["old.json", "mid.json", "new.json"]):
        path = tmp_path / name
        path.write_text("{}", encoding="utf-8")
        os.utime(path, (1_000_000 + index, 1_000_000 + index))
    (tmp_path / "ignored.txt").write_text("", encoding="utf-8")

    result = files_by_mtime(tmp_path, ".json")

    assert [p.name for p in result] == ["new.json", "mid.json", "old.json"]


def test_files_by_mtime_missing_directory(tmp_path: Path) -> None:
    assert files_by_mtime(tmp_path / "missing", ".json") == []
