"""Restricted YAML parser for template frontmatter.

Covers the subset of YAML the bundled templates actually use:

- ``key: value`` scalars, optionally single or double quoted
- values containing colons (``note: "Contains: colon"``)
- block scalars introduced by ``|``, ``|-``, ``|+``, ``>``, ``>-`` or ``>+``
- inline arrays ``[Read, Write, Bash]``, flattened to ``"Read, Write, Bash"``

Every value comes back as a string. Callers re-split list-like values on
commas. The parser never fails: malformed lines are skipped and reported as
anomalies so validators can tell a missing field from a line the parser
could not make sense of.

Example:
    >>> parse_simple_yaml('name: my-agent\\ntools: [Read, Write]\\nhint: [file]')
    {'name': 'my-agent', 'tools': 'Read, Write', 'hint': '[file]'}
"""

from dataclasses import dataclass
from typing import Literal

BLOCK_SCALAR_INDICATORS = frozenset({"|", "|-", "|+", ">", ">-", ">+"})


AnomalyKind = Literal["duplicate-key", "empty-key", "no-colon", "unterminated-block"]


@dataclass(frozen=True)
class YamlAnomaly:
    """A recoverable oddity found while parsing.

    Attributes:
        kind: Category of the anomaly.
        line_number: 1-based line in the parsed text.
        detail: Human-readable description.
    """

    kind: AnomalyKind
    line_number: int
    detail: str


@dataclass(frozen=True)
class SimpleYamlResult:
    """Parsed mapping plus the anomalies encountered while building it."""

    values: dict[str, str]
    anomalies: tuple[YamlAnomaly, ...]


def parse_simple_yaml(yaml_text: str) -> dict[str, str]:
    """Parse a frontmatter block into a flat string mapping."""
    return parse_simple_yaml_with_anomalies(yaml_text).values


def parse_simple_yaml_with_anomalies(yaml_text: str) -> SimpleYamlResult:
    """Parse a frontmatter block, keeping track of recoverable anomalies.

    Duplicate keys resolve to the last occurrence.
    """
    values: dict[str, str] = {}
    anomalies: list[YamlAnomaly] = []
    lines = yaml_text.split("\n")

    block_key: str | None = None
    block_key_line = 0
    block_indent = 0
    block_lines: list[str] = []

    def commit(key: str, value: str, line_number: int) -> None:
        if key in values:
            anomalies.append(
                YamlAnomaly("duplicate-key", line_number, f"'{key}' overrides an earlier value")
            )
        values[key] = value

    for index, line in enumerate(lines):
        line_number = index + 1
        trimmed = line.strip()

        if block_key is not None:
            indent = _indent_of(line)
            is_inner_blank = trimmed == "" and index < len(lines) - 1
            if indent > block_indent or is_inner_blank:
                block_lines.append(line[block_indent + 2 :])
                continue
            commit(block_key, "\n".join(block_lines).rstrip(), block_key_line)
            block_key = None
            block_lines = []

        if not trimmed or trimmed.startswith("#"):
            continue

        colon_index = _find_unquoted_colon(trimmed)
        if colon_index == -1:
            anomalies.append(YamlAnomaly("no-colon", line_number, f"skipped line: {trimmed}"))
            continue

        key = trimmed[:colon_index].strip()
        value = trimmed[colon_index + 1 :].strip()
        if not key:
            anomalies.append(YamlAnomaly("empty-key", line_number, f"skipped line: {trimmed}"))
            continue

        if value in BLOCK_SCALAR_INDICATORS:
            block_key = key
            block_key_line = line_number
            block_indent = _indent_of(line)
            block_lines = []
            continue

        # [a, b] is an array; a lone [placeholder] is a literal hint
        if value.startswith("[") and value.endswith("]"):
            inner = value[1:-1].strip()
            if "," in inner:
                value = inner

        commit(key, _remove_quotes(value), line_number)

    if block_key is not None:
        anomalies.append(
            YamlAnomaly(
                "unterminated-block",
                block_key_line,
                f"block scalar '{block_key}' ran to end of input",
            )
        )
        commit(block_key, "\n".join(block_lines).rstrip(), block_key_line)

    return SimpleYamlResult(values=values, anomalies=tuple(anomalies))


def _indent_of(line: str) -> int:
    return len(line) - len(line.lstrip())


def _find_unquoted_colon(text: str) -> int:
    """Return the index of the first colon outside quotes, or -1."""
    in_single = False
    in_double = False
    previous = ""
    for index, char in enumerate(text):
        if char == "'" and not in_double and previous != "\\":
            in_single = not in_single
        elif char == '"' and not in_single and previous != "\\":
            in_double = not in_double
        elif char == ":" and not in_single and not in_double:
            return index
        previous = char
    return -1


def _remove_quotes(value: str) -> str:
    if (value.startswith('"') and value.endswith('"')) or (
        value.startswith("'") and value.endswith("'")
    ):
        return value[1:-1].replace('\\"', '"').replace("\\'", "'")
    return value
