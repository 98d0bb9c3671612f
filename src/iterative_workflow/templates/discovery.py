"""Shared directory scanning for template discovery.

Each template kind (agents, commands, skills) supplies its own parser; this
module walks the directory, feeds every markdown file through the parser and
buckets the outcome into items or errors.
"""

import logging
from collections.abc import Callable
from pathlib import Path

from iterative_workflow.templates.models import DiscoveryError, DiscoveryResult, T

logger = logging.getLogger(__name__)

MARKDOWN_SUFFIX = ".md"

# (content, file label) -> (metadata, error)
TemplateParser = Callable[[str, str], tuple[T | None, str | None]]


def _iter_markdown_files(directory: Path, *, recursive: bool) -> list[Path]:
    if recursive:
        candidates = directory.rglob(f"*{MARKDOWN_SUFFIX}")
    else:
        candidates = directory.glob(f"*{MARKDOWN_SUFFIX}")
    return sorted(path for path in candidates if path.is_file())


def scan_templates(
    directory: Path,
    parser: TemplateParser[T],
    *,
    recursive: bool,
    missing_message: str,
) -> DiscoveryResult[T]:
    """Run ``parser`` over every markdown file in ``directory``.

    Files are labelled by name (non-recursive) or by POSIX path relative to
    ``directory`` (recursive). Items keep enumeration order; callers sort.

    Args:
        directory: Directory to scan.
        parser: Turns file content into metadata or an error message.
        recursive: Descend into subdirectories.
        missing_message: Error reported when ``directory`` does not exist.
    """
    if not directory.is_dir():
        logger.debug("Template directory missing: %s", directory)
        return DiscoveryResult(
            items=(),
            errors=(DiscoveryError(file=str(directory), error=missing_message),),
        )

    items: list[T] = []
    errors: list[DiscoveryError] = []
    for path in _iter_markdown_files(directory, recursive=recursive):
        label = path.relative_to(directory).as_posix() if recursive else path.name
        try:
            content = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            errors.append(DiscoveryError(file=label, error=str(e)))
            continue

        metadata, error = parser(content, label)
        if metadata is not None:
            items.append(metadata)
        else:
            errors.append(DiscoveryError(file=label, error=error or "Unknown parse failure"))

    if errors:
        logger.debug("Discovery in %s produced %d error(s)", directory, len(errors))
    return DiscoveryResult(items=tuple(items), errors=tuple(errors))


def missing_fields(parsed: dict[str, str], required: tuple[str, ...]) -> list[str]:
    """Return required fields that are absent or empty, in declaration order."""
    return [field for field in required if not parsed.get(field)]


def split_list_value(value: str) -> tuple[str, ...]:
    """Split a flattened ``a, b, c`` value into trimmed, non-empty tokens."""
    return tuple(token.strip() for token in value.split(",") if token.strip())
