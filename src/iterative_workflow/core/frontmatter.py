"""Frontmatter extraction for markdown template files.

Templates start with a metadata block delimited by ``---`` lines. This module
only locates that block; turning it into key/value pairs is the job of
``iterative_workflow.core.simple_yaml``.
"""

import re
from dataclasses import dataclass

from iterative_workflow.core.simple_yaml import (
    SimpleYamlResult,
    YamlAnomaly,
    parse_simple_yaml_with_anomalies,
)

# Anchored at the start of the document: a block further down is not frontmatter.
FRONTMATTER_PATTERN = re.compile(r"^---\r?\n(.*?)\r?\n---", re.DOTALL)


@dataclass(frozen=True)
class FrontmatterParseResult:
    """Result of parsing frontmatter from markdown content.

    Attributes:
        metadata: Parsed key/value mapping, or None if no frontmatter was found.
        anomalies: Recoverable oddities reported by the parser.
        body: Content after the frontmatter (the whole document if none).
        error: Error message if no frontmatter was found, None otherwise.
    """

    metadata: dict[str, str] | None
    anomalies: tuple[YamlAnomaly, ...]
    body: str
    error: str | None

    @property
    def is_valid(self) -> bool:
        """Return True if frontmatter was found."""
        return self.metadata is not None


def extract_frontmatter(content: str) -> str | None:
    """Return the text between the leading ``---`` delimiters.

    Args:
        content: Full markdown content.

    Returns:
        The raw frontmatter block, or None if the document does not start with one.
    """
    match = FRONTMATTER_PATTERN.match(content)
    if match is None:
        return None
    return match.group(1)


def parse_markdown_frontmatter(content: str) -> FrontmatterParseResult:
    """Extract and parse the frontmatter of a markdown document.

    Never raises: a document without frontmatter yields a result with
    ``metadata=None`` and ``error="No frontmatter found"``.
    """
    match = FRONTMATTER_PATTERN.match(content)
    if match is None:
        return FrontmatterParseResult(
            metadata=None,
            anomalies=(),
            body=content,
            error="No frontmatter found",
        )

    parsed: SimpleYamlResult = parse_simple_yaml_with_anomalies(match.group(1))
    body = content[match.end() :].lstrip("\r\n")
    return FrontmatterParseResult(
        metadata=parsed.values,
        anomalies=parsed.anomalies,
        body=body,
        error=None,
    )
