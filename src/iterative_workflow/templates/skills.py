"""Skill template discovery.

Skills may be nested (``skills/iterative-workflow/SKILL.md``), so discovery
walks the skills directory recursively. Only ``name`` and ``description``
are required.
"""

from pathlib import Path

from iterative_workflow.core.frontmatter import extract_frontmatter
from iterative_workflow.core.simple_yaml import parse_simple_yaml
from iterative_workflow.templates.discovery import missing_fields, scan_templates
from iterative_workflow.templates.models import DiscoveryResult, SkillMetadata

REQUIRED_FIELDS = ("name", "description")


def parse_skill_frontmatter(
    content: str, file_path: str
) -> tuple[SkillMetadata | None, str | None]:
    """Parse skill frontmatter.

    Args:
        content: Full markdown file content.
        file_path: Path relative to the skills directory.
    """
    yaml_text = extract_frontmatter(content)
    if yaml_text is None:
        return None, "No frontmatter found"

    parsed = parse_simple_yaml(yaml_text)

    missing = missing_fields(parsed, REQUIRED_FIELDS)
    if missing:
        return None, f"Missing required fields: {', '.join(missing)}"

    return (
        SkillMetadata(
            name=parsed["name"],
            description=parsed["description"],
            version=parsed.get("version") or None,
            file_path=file_path,
        ),
        None,
    )


def discover_skills(skills_dir: Path) -> DiscoveryResult[SkillMetadata]:
    """Recursively discover skills in ``skills_dir``, sorted by name."""
    result = scan_templates(
        skills_dir,
        parse_skill_frontmatter,
        recursive=True,
        missing_message="Skills directory not found",
    )
    return DiscoveryResult(
        items=tuple(sorted(result.items, key=lambda skill: skill.name)),
        errors=result.errors,
    )


def format_skill_names(skills: tuple[SkillMetadata, ...] | list[SkillMetadata]) -> str:
    return ", ".join(skill.name for skill in skills)
