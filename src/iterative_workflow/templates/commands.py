"""Slash command template discovery.

Commands live in ``commands/<name>.md``. Only ``description`` is required.
A command marked ``optional: true`` belongs to an integration set and is only
installed on request.
"""

from pathlib import Path

from iterative_workflow.core.frontmatter import extract_frontmatter
from iterative_workflow.core.simple_yaml import parse_simple_yaml
from iterative_workflow.templates.discovery import missing_fields, scan_templates
from iterative_workflow.templates.models import CommandMetadata, DiscoveryResult

REQUIRED_FIELDS = ("description",)


def parse_command_frontmatter(
    content: str, file_name: str
) -> tuple[CommandMetadata | None, str | None]:
    """Parse command frontmatter. The command name is the file stem."""
    yaml_text = extract_frontmatter(content)
    if yaml_text is None:
        return None, "No frontmatter found"

    parsed = parse_simple_yaml(yaml_text)

    missing = missing_fields(parsed, REQUIRED_FIELDS)
    if missing:
        return None, f"Missing required fields: {', '.join(missing)}"

    return (
        CommandMetadata(
            name=Path(file_name).stem,
            description=parsed["description"],
            argument_hint=parsed.get("argument-hint", ""),
            file_name=file_name,
            is_optional=parsed.get("optional") == "true",
        ),
        None,
    )


def filter_commands(
    commands: tuple[CommandMetadata, ...] | list[CommandMetadata], *, include_optional: bool
) -> list[CommandMetadata]:
    """Keep required commands, plus optional ones when ``include_optional`` is set."""
    return [command for command in commands if not command.is_optional or include_optional]


def sort_commands(
    commands: tuple[CommandMetadata, ...] | list[CommandMetadata],
) -> list[CommandMetadata]:
    """Required commands first, then optional ones; each group by name."""
    return sorted(commands, key=lambda command: (command.is_optional, command.name))


def discover_commands(
    commands_dir: Path, *, include_optional: bool
) -> DiscoveryResult[CommandMetadata]:
    """Discover commands in ``commands_dir`` (non-recursive).

    Optional commands are dropped unless ``include_optional`` is set. Errors
    are reported for every file regardless of the filter.
    """
    result = scan_templates(
        commands_dir,
        parse_command_frontmatter,
        recursive=False,
        missing_message="Commands directory not found",
    )
    kept = filter_commands(result.items, include_optional=include_optional)
    return DiscoveryResult(items=tuple(sort_commands(kept)), errors=result.errors)


def format_command_names(commands: tuple[CommandMetadata, ...] | list[CommandMetadata]) -> str:
    """Format command names for display, e.g. ``/iterative-code, /tech-stack``."""
    return ", ".join(f"/{command.name}" for command in commands)
