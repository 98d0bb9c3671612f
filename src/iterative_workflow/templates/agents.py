"""Agent template discovery and validation.

Agent templates live in ``agents/<name>.md``. Their frontmatter must declare
``name``, ``description``, ``version``, ``tools`` and ``model``; ``category``
and ``source`` are optional.
"""

import re
from collections import Counter
from pathlib import Path
from typing import cast

from iterative_workflow.core.frontmatter import extract_frontmatter
from iterative_workflow.core.simple_yaml import parse_simple_yaml
from iterative_workflow.templates.discovery import missing_fields, scan_templates, split_list_value
from iterative_workflow.templates.models import (
    AGENT_CATEGORIES,
    AGENT_SOURCES,
    ALLOWED_MODELS,
    DEFAULT_AGENT_SOURCE,
    AgentCategory,
    AgentMetadata,
    AgentSource,
    DiscoveryResult,
)

REQUIRED_FIELDS = ("name", "description", "version", "tools", "model")

VERSION_PATTERN = re.compile(r"^\d+\.\d+\.\d+")

CORE_AGENTS = frozenset(
    {
        "code-writer",
        "security-reviewer",
        "quality-checker",
        "performance-analyzer",
        "result-aggregator",
    }
)
DOMAIN_AGENTS = frozenset({"frontend-expert", "backend-expert", "testing-specialist"})


def infer_category(name: str) -> AgentCategory:
    """Infer an agent's category from its name.

    Rules are checked in order; the first match wins.
    """
    if name in CORE_AGENTS:
        return "core"
    if "research" in name or "researcher" in name:
        return "research"
    if "architect" in name or "design" in name:
        return "design"
    if "pm" in name or "manager" in name:
        return "management"
    if name in DOMAIN_AGENTS:
        return "domain"
    return "specialized"


def parse_agent_frontmatter(
    content: str, file_name: str
) -> tuple[AgentMetadata | None, str | None]:
    """Parse and validate agent frontmatter.

    Args:
        content: Full markdown file content.
        file_name: File name used for the name check and error reporting.

    Returns:
        Tuple of (metadata, error). Exactly one of them is None.
    """
    yaml_text = extract_frontmatter(content)
    if yaml_text is None:
        return None, "No frontmatter found"

    parsed = parse_simple_yaml(yaml_text)

    missing = missing_fields(parsed, REQUIRED_FIELDS)
    if missing:
        return None, f"Missing required fields: {', '.join(missing)}"

    version = parsed["version"]
    if not VERSION_PATTERN.match(version):
        return None, f"Invalid version format: {version}"

    tools = split_list_value(parsed["tools"])
    if not tools:
        return None, "No tools specified"

    model = parsed["model"]
    if model not in ALLOWED_MODELS:
        allowed = ", ".join(sorted(ALLOWED_MODELS))
        return None, f"Invalid model '{model}': expected one of {allowed}"

    expected_name = Path(file_name).stem
    name = parsed["name"]
    if name != expected_name:
        return (
            None,
            f"Name mismatch: frontmatter name '{name}' does not match filename '{expected_name}'",
        )

    category = parsed.get("category") or infer_category(name)
    if category not in AGENT_CATEGORIES:
        allowed = ", ".join(AGENT_CATEGORIES)
        return None, f"Invalid category '{category}': expected one of {allowed}"

    source = parsed.get("source") or DEFAULT_AGENT_SOURCE
    if source not in AGENT_SOURCES:
        allowed = ", ".join(AGENT_SOURCES)
        return None, f"Invalid source '{source}': expected one of {allowed}"

    return (
        AgentMetadata(
            name=name,
            description=parsed["description"],
            version=version,
            tools=tools,
            model=model,
            file_name=file_name,
            category=cast(AgentCategory, category),
            source=cast(AgentSource, source),
        ),
        None,
    )


def discover_agents(agents_dir: Path) -> DiscoveryResult[AgentMetadata]:
    """Discover all agents in ``agents_dir`` (non-recursive), sorted by name."""
    result = scan_templates(
        agents_dir,
        parse_agent_frontmatter,
        recursive=False,
        missing_message="Agents directory not found",
    )
    return DiscoveryResult(
        items=tuple(sorted(result.items, key=lambda agent: agent.name)),
        errors=result.errors,
    )


def format_agent_names(agents: tuple[AgentMetadata, ...] | list[AgentMetadata]) -> str:
    return ", ".join(agent.name for agent in agents)


def group_agents_by_category(
    agents: tuple[AgentMetadata, ...] | list[AgentMetadata],
) -> dict[AgentCategory, list[AgentMetadata]]:
    """Group agents by category; every category is present, each group sorted by name."""
    grouped: dict[AgentCategory, list[AgentMetadata]] = {
        category: [] for category in AGENT_CATEGORIES
    }
    for agent in agents:
        grouped[agent.category].append(agent)
    for members in grouped.values():
        members.sort(key=lambda agent: agent.name)
    return grouped


def filter_agents_by_source(
    agents: tuple[AgentMetadata, ...] | list[AgentMetadata], source: AgentSource
) -> list[AgentMetadata]:
    return [agent for agent in agents if agent.source == source]


def filter_agents_by_category(
    agents: tuple[AgentMetadata, ...] | list[AgentMetadata],
    categories: tuple[AgentCategory, ...] | list[AgentCategory],
) -> list[AgentMetadata]:
    return [agent for agent in agents if agent.category in categories]


def get_agent_stats(
    agents: tuple[AgentMetadata, ...] | list[AgentMetadata],
) -> dict[str, object]:
    """Summarize agents as ``{"total", "by_category", "by_source"}``.

    Every known category and source is present in the counts, zero or not.
    """
    by_category = Counter({category: 0 for category in AGENT_CATEGORIES})
    by_source = Counter({source: 0 for source in AGENT_SOURCES})
    for agent in agents:
        by_category[agent.category] += 1
        by_source[agent.source] += 1
    return {
        "total": len(agents),
        "by_category": dict(by_category),
        "by_source": dict(by_source),
    }
