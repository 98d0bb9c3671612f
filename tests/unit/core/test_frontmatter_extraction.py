"""Tests for markdown frontmatter extraction."""

from iterative_workflow.core.frontmatter import extract_frontmatter, parse_markdown_frontmatter


def test_extracts_block_between_delimiters() -> None:
    content = "---\nname: test\nmodel: opus\n---\n\n# Body\n"

    assert extract_frontmatter(content) == "name: test\nmodel: opus"


def test_accepts_crlf_line_endings() -> None:
    content = "---\r\nname: test\r\n---\r\nBody"

    assert extract_frontmatter(content) == "name: test"


def test_returns_none_without_leading_delimiter() -> None:
    assert extract_frontmatter("# Title\n\n---\nname: late\n---\n") is None


def test_returns_none_for_unclosed_block() -> None:
    assert extract_frontmatter("---\nname: test\nno closing delimiter") is None


def test_returns_none_for_empty_content() -> None:
    assert extract_frontmatter("") is None


def test_stops_at_first_closing_delimiter() -> None:
    content = "---\nname: a\n---\nbody\n---\nname: b\n---\n"

    assert extract_frontmatter(content) == "name: a"


def test_parse_valid_frontmatter() -> None:
    """Parse content with frontmatter into metadata and body."""
    content = """\
---
name: security-reviewer
tools: [Read, Grep]
---

Body content here.
"""
    result = parse_markdown_frontmatter(content)

    assert result.is_valid
    assert result.error is None
    assert result.metadata == {"name": "security-reviewer", "tools": "Read, Grep"}
    assert result.body == "Body content here.\n"
    assert result.anomalies == ()


def test_parse_no_frontmatter() -> None:
    """Return error when content has no frontmatter."""
    content = "Just plain markdown content."

    result = parse_markdown_frontmatter(content)

    assert not result.is_valid
    assert result.error == "No frontmatter found"
    assert result.metadata is None
    assert result.body == content


def test_parse_reports_anomalies() -> None:
    content = "---\nname: a\nname: b\n---\nBody"

    result = parse_markdown_frontmatter(content)

    assert result.metadata == {"name": "b"}
    assert [a.kind for a in result.anomalies] == ["duplicate-key"]
