"""Tests for the restricted frontmatter YAML parser."""

from iterative_workflow.core.frontmatter import extract_frontmatter, parse_markdown_frontmatter
from iterative_workflow.core.simple_yaml import (
    parse_simple_yaml,
    parse_simple_yaml_with_anomalies,
)


def test_parses_plain_scalars() -> None:
    result = parse_simple_yaml("name: my-agent\nversion: 1.0.0\nmodel: sonnet")

    assert result == {"name": "my-agent", "version": "1.0.0", "model": "sonnet"}


def test_strips_matching_quotes() -> None:
    result = parse_simple_yaml("single: 'one'\ndouble: \"two\"\nmixed: \"three'")

    assert result["single"] == "one"
    assert result["double"] == "two"
    assert result["mixed"] == "\"three'"


def test_unescapes_quotes_inside_quoted_value() -> None:
    result = parse_simple_yaml('note: "say \\"hi\\""')

    assert result["note"] == 'say "hi"'


def test_colon_inside_quotes_does_not_split_key() -> None:
    result = parse_simple_yaml('note: "Contains: colon"\n"odd: key": value')

    assert result["note"] == "Contains: colon"
    assert result['"odd: key"'] == "value"


def test_value_may_contain_unquoted_colons() -> None:
    """Only the first colon separates key from value."""
    result = parse_simple_yaml("url: https://example.com:8080/path")

    assert result["url"] == "https://example.com:8080/path"


def test_inline_array_is_flattened() -> None:
    result = parse_simple_yaml("tools: [Read, Write, Bash]")

    assert result["tools"] == "Read, Write, Bash"


def test_single_bracketed_value_stays_literal() -> None:
    """A lone [placeholder] is an argument hint, not an array."""
    result = parse_simple_yaml("argument-hint: [change-id]")

    assert result["argument-hint"] == "[change-id]"


def test_literal_block_scalar() -> None:
    text = """\
description: |
  First line
  Second line
model: opus"""

    result = parse_simple_yaml(text)

    assert result["description"] == "First line\nSecond line"
    assert result["model"] == "opus"


def test_folded_block_scalar_keeps_line_breaks() -> None:
    text = "description: >-\n  Folded text\n  continues here\ntools: Read"

    result = parse_simple_yaml(text)

    assert result["description"] == "Folded text\ncontinues here"
    assert result["tools"] == "Read"


def test_block_scalar_keeps_inner_blank_lines() -> None:
    text = "description: |\n  Paragraph one\n\n  Paragraph two\nname: x"

    result = parse_simple_yaml(text)

    assert result["description"] == "Paragraph one\n\nParagraph two"


def test_block_scalar_strips_key_indent_plus_two() -> None:
    text = "description: |\n  Intro\n    nested\nname: x"

    result = parse_simple_yaml(text)

    assert result["description"] == "Intro\n  nested"


def test_indented_block_key_with_whitespace_only_line() -> None:
    text = "  description: |\n    body\n   \n    more\n  name: x"

    result = parse_simple_yaml_with_anomalies(text)

    assert result.values == {"description": "body\n\nmore", "name": "x"}
    assert result.anomalies == ()


def test_block_at_end_of_input_is_committed() -> None:
    result = parse_simple_yaml_with_anomalies("name: x\ndescription: |\n  Last block")

    assert result.values["description"] == "Last block"
    assert [a.kind for a in result.anomalies] == ["unterminated-block"]
    assert result.anomalies[0].line_number == 2


def test_comments_and_blank_lines_are_skipped() -> None:
    result = parse_simple_yaml_with_anomalies("# heading\n\nname: x\n  # indented comment")

    assert result.values == {"name": "x"}
    assert result.anomalies == ()


def test_line_without_colon_is_skipped_and_reported() -> None:
    result = parse_simple_yaml_with_anomalies("name: x\njust some text\nmodel: opus")

    assert result.values == {"name": "x", "model": "opus"}
    assert len(result.anomalies) == 1
    assert result.anomalies[0].kind == "no-colon"
    assert result.anomalies[0].line_number == 2


def test_empty_key_is_skipped_and_reported() -> None:
    result = parse_simple_yaml_with_anomalies(": orphan value\nname: x")

    assert result.values == {"name": "x"}
    assert result.anomalies[0].kind == "empty-key"


def test_duplicate_key_last_wins() -> None:
    result = parse_simple_yaml_with_anomalies("name: first\nname: second")

    assert result.values == {"name": "second"}
    assert result.anomalies[0].kind == "duplicate-key"
    assert result.anomalies[0].line_number == 2
    assert "'name'" in result.anomalies[0].detail


def test_anomalies_do_not_change_mapping() -> None:
    text = "name: x\nnot a pair\n: empty\ntools: [A, B]"

    assert parse_simple_yaml(text) == parse_simple_yaml_with_anomalies(text).values


def test_empty_text_yields_empty_mapping() -> None:
    result = parse_simple_yaml_with_anomalies("")

    assert result.values == {}
    assert result.anomalies == ()


def test_extracted_block_parses_like_embedded_document() -> None:
    """Parsing the extracted block alone matches parsing it inside the document."""
    document = """\
---
name: code-writer
description: |
  Writes code
  in small steps
tools: [Read, Write]
argument-hint: [path]
---

Body
"""
    block = extract_frontmatter(document)
    assert block is not None
    embedded = parse_markdown_frontmatter(document).metadata

    assert parse_simple_yaml(block) == embedded
    assert extract_frontmatter(f"---\n{block}\n---\n") == block
    assert embedded == {
        "name": "code-writer",
        "description": "Writes code\nin small steps",
        "tools": "Read, Write",
        "argument-hint": "[path]",
    }
