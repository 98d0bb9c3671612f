"""Tests for skill discovery."""

from pathlib import Path

from iterative_workflow.templates.skills import (
    discover_skills,
    format_skill_names,
    parse_skill_frontmatter,
)


def _write(path: Path, content: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")


def test_version_is_optional() -> None:
    metadata, error = parse_skill_frontmatter(
        "---\nname: helper\ndescription: Helps\n---", "helper/SKILL.md"
    )

    assert error is None
    assert metadata is not None
    assert metadata.version is None
    assert metadata.file_path == "helper/SKILL.md"


def test_missing_fields() -> None:
    _, error = parse_skill_frontmatter("---\nversion: 1.0.0\n---", "SKILL.md")

    assert error == "Missing required fields: name, description"


def test_discovers_nested_skills(tmp_path: Path) -> None:
    _write(
        tmp_path / "workflow" / "SKILL.md",
        "---\nname: workflow\ndescription: Loop\nversion: 1.0.0\n---",
    )
    _write(tmp_path / "deep" / "nested" / "SKILL.md", "---\nname: alpha\ndescription: A\n---")
    _write(tmp_path / "top.md", "---\nname: top\ndescription: Top level\n---")
    _write(tmp_path / "workflow" / "reference.txt", "not markdown")
    _write(tmp_path / "bad" / "SKILL.md", "no frontmatter")

    result = discover_skills(tmp_path)

    assert result.names == ["alpha", "top", "workflow"]
    paths = {skill.name: skill.file_path for skill in result.items}
    assert paths == {
        "alpha": "deep/nested/SKILL.md",
        "top": "top.md",
        "workflow": "workflow/SKILL.md",
    }
    assert [(e.file, e.error) for e in result.errors] == [
        ("bad/SKILL.md", "No frontmatter found")
    ]


def test_discover_skills_missing_directory(tmp_path: Path) -> None:
    result = discover_skills(tmp_path / "skills")

    assert result.items == ()
    assert result.errors[0].error == "Skills directory not found"


def test_unreadable_file_becomes_error(tmp_path: Path) -> None:
    _write(tmp_path / "ok" / "SKILL.md", "---\nname: ok\ndescription: fine\n---")
    (tmp_path / "binary").mkdir()
    (tmp_path / "binary" / "SKILL.md").write_bytes(b"\xff\xfe\x00bad")

    result = discover_skills(tmp_path)

    assert result.names == ["ok"]
    assert len(result.errors) == 1
    assert result.errors[0].file == "binary/SKILL.md"


def test_format_skill_names(tmp_path: Path) -> None:
    _write(tmp_path / "b" / "SKILL.md", "---\nname: b\ndescription: B\n---")
    _write(tmp_path / "a" / "SKILL.md", "---\nname: a\ndescription: A\n---")

    assert format_skill_names(discover_skills(tmp_path).items) == "a, b"
