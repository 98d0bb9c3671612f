"""Tests for agent template validation and discovery."""

from pathlib import Path

import pytest

from iterative_workflow.templates.agents import (
    discover_agents,
    filter_agents_by_category,
    filter_agents_by_source,
    format_agent_names,
    get_agent_stats,
    group_agents_by_category,
    infer_category,
    parse_agent_frontmatter,
)


def _agent(name: str, **overrides: str) -> str:
    fields = {
        "name": name,
        "description": f"{name} agent",
        "version": "1.0.0",
        "tools": "Read",
        "model": "opus",
        **overrides,
    }
    lines = "\n".join(f"{key}: {value}" for key, value in fields.items())
    return f"---\n{lines}\n---\n\n# {name}\n"


def test_parses_minimal_agent() -> None:
    content = (
        "---\nname: agent-a\ndescription: Agent A\nversion: 1.0.0\ntools: Read\nmodel: opus\n---"
    )

    metadata, error = parse_agent_frontmatter(content, "agent-a.md")

    assert error is None
    assert metadata is not None
    assert metadata.name == "agent-a"
    assert metadata.description == "Agent A"
    assert metadata.tools == ("Read",)
    assert metadata.model == "opus"
    assert metadata.file_name == "agent-a.md"
    assert metadata.category == "specialized"
    assert metadata.source == "helix"


def test_splits_tool_lists() -> None:
    metadata, error = parse_agent_frontmatter(
        _agent("code-writer", tools="[Read, Write, Bash]"), "code-writer.md"
    )

    assert error is None
    assert metadata is not None
    assert metadata.tools == ("Read", "Write", "Bash")


def test_name_mismatch_is_an_error() -> None:
    metadata, error = parse_agent_frontmatter(_agent("other-name"), "agent-a.md")

    assert metadata is None
    assert error is not None
    assert "mismatch" in error
    assert "'other-name'" in error
    assert "'agent-a'" in error


def test_no_frontmatter() -> None:
    assert parse_agent_frontmatter("# Just a heading", "a.md") == (None, "No frontmatter found")


def test_lists_every_missing_field() -> None:
    content = "---\nname: agent-a\nmodel: opus\n---"

    metadata, error = parse_agent_frontmatter(content, "agent-a.md")

    assert metadata is None
    assert error == "Missing required fields: description, version, tools"


def test_empty_field_counts_as_missing() -> None:
    content = '---\nname: agent-a\ndescription: ""\nversion: 1.0.0\ntools: Read\nmodel: opus\n---'

    _, error = parse_agent_frontmatter(content, "agent-a.md")

    assert error == "Missing required fields: description"


def test_invalid_version_format() -> None:
    _, error = parse_agent_frontmatter(_agent("agent-a", version="v1"), "agent-a.md")

    assert error == "Invalid version format: v1"


def test_tools_with_only_separators() -> None:
    _, error = parse_agent_frontmatter(_agent("agent-a", tools="[ , ]"), "agent-a.md")

    assert error == "No tools specified"


def test_invalid_model() -> None:
    _, error = parse_agent_frontmatter(_agent("agent-a", model="gpt"), "agent-a.md")

    assert error is not None
    assert error.startswith("Invalid model 'gpt'")


def test_version_is_checked_before_name() -> None:
    """Checks run in a fixed order; the first failure is reported."""
    _, error = parse_agent_frontmatter(_agent("wrong", version="x"), "agent-a.md")

    assert error == "Invalid version format: x"


def test_explicit_category_and_source() -> None:
    metadata, error = parse_agent_frontmatter(
        _agent("helper", category="research", source="superclaude"), "helper.md"
    )

    assert error is None
    assert metadata is not None
    assert metadata.category == "research"
    assert metadata.source == "superclaude"


def test_invalid_category() -> None:
    _, error = parse_agent_frontmatter(_agent("helper", category="misc"), "helper.md")

    assert error is not None
    assert error.startswith("Invalid category 'misc'")


def test_invalid_source() -> None:
    _, error = parse_agent_frontmatter(_agent("helper", source="other"), "helper.md")

    assert error is not None
    assert error.startswith("Invalid source 'other'")


@pytest.mark.parametrize(
    ("name", "expected"),
    [
        ("code-writer", "core"),
        ("result-aggregator", "core"),
        ("deep-researcher", "research"),
        ("system-architect", "design"),
        ("ui-design-lead", "design"),
        ("pm-agent", "management"),
        ("project-manager", "management"),
        ("frontend-expert", "domain"),
        ("testing-specialist", "domain"),
        ("refactoring-helper", "specialized"),
    ],
)
def test_infer_category(name: str, expected: str) -> None:
    assert infer_category(name) == expected


def test_infer_category_first_rule_wins() -> None:
    """'research' is checked before 'design'."""
    assert infer_category("design-research") == "research"


def test_discover_agents_sorted_with_errors(tmp_path: Path) -> None:
    (tmp_path / "zeta.md").write_text(_agent("zeta"), encoding="utf-8")
    (tmp_path / "alpha.md").write_text(_agent("alpha"), encoding="utf-8")
    (tmp_path / "broken.md").write_text("no frontmatter", encoding="utf-8")
    (tmp_path / "notes.txt").write_text("ignored", encoding="utf-8")

    result = discover_agents(tmp_path)

    assert result.names == ["alpha", "zeta"]
    assert len(result.errors) == 1
    assert result.errors[0].file == "broken.md"
    assert result.errors[0].error == "No frontmatter found"


def test_discover_agents_uses_ordinal_order(tmp_path: Path) -> None:
    for name in ["beta", "Zulu", "alpha"]:
        (tmp_path / f"{name}.md").write_text(_agent(name), encoding="utf-8")

    result = discover_agents(tmp_path)

    assert result.names == ["Zulu", "alpha", "beta"]


def test_discover_agents_missing_directory(tmp_path: Path) -> None:
    missing = tmp_path / "agents"

    result = discover_agents(missing)

    assert result.items == ()
    assert len(result.errors) == 1
    assert result.errors[0].file == str(missing)
    assert result.errors[0].error == "Agents directory not found"


def test_grouping_and_stats(tmp_path: Path) -> None:
    for name, extra in [
        ("security-reviewer", {}),
        ("code-writer", {}),
        ("deep-researcher", {"source": "superclaude"}),
    ]:
        (tmp_path / f"{name}.md").write_text(_agent(name, **extra), encoding="utf-8")
    agents = discover_agents(tmp_path).items

    grouped = group_agents_by_category(agents)
    stats = get_agent_stats(agents)

    assert [a.name for a in grouped["core"]] == ["code-writer", "security-reviewer"]
    assert [a.name for a in grouped["research"]] == ["deep-researcher"]
    assert grouped["design"] == []
    assert stats["total"] == 3
    assert stats["by_category"] == {
        "core": 2,
        "research": 1,
        "design": 0,
        "management": 0,
        "domain": 0,
        "specialized": 0,
    }
    assert stats["by_source"] == {"helix": 2, "superclaude": 1}
    assert format_agent_names(grouped["core"]) == "code-writer, security-reviewer"
    assert [a.name for a in filter_agents_by_source(agents, "superclaude")] == ["deep-researcher"]
    assert [a.name for a in filter_agents_by_category(agents, ["research"])] == [
        "deep-researcher"
    ]
