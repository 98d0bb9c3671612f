"""Data models for template discovery and installation."""

from dataclasses import dataclass
from pathlib import Path
from typing import Generic, Literal, TypeVar

# Categories used to group agents in listings
AgentCategory = Literal["core", "research", "design", "management", "domain", "specialized"]

# Framework an agent template originates from
AgentSource = Literal["helix", "superclaude"]

# Where the bundled templates were found
TemplatesSource = Literal["development", "production"]

AGENT_CATEGORIES: tuple[AgentCategory, ...] = (
    "core",
    "research",
    "design",
    "management",
    "domain",
    "specialized",
)
AGENT_SOURCES: tuple[AgentSource, ...] = ("helix", "superclaude")
DEFAULT_AGENT_SOURCE: AgentSource = "helix"

# Models an agent template may request
ALLOWED_MODELS = frozenset({"opus", "sonnet", "haiku", "inherit"})


@dataclass(frozen=True)
class AgentMetadata:
    """Agent metadata extracted from frontmatter."""

    name: str
    description: str
    version: str
    tools: tuple[str, ...]
    model: str
    file_name: str
    category: AgentCategory
    source: AgentSource


@dataclass(frozen=True)
class CommandMetadata:
    """Slash command metadata. The name comes from the file name."""

    name: str
    description: str
    argument_hint: str
    file_name: str
    is_optional: bool


@dataclass(frozen=True)
class SkillMetadata:
    """Skill metadata. Only name and description are required."""

    name: str
    description: str
    version: str | None
    # Relative to the skills directory, POSIX separators
    file_path: str


@dataclass(frozen=True)
class DiscoveryError:
    """A file (or directory) that could not be turned into metadata."""

    file: str
    error: str


T = TypeVar("T", AgentMetadata, CommandMetadata, SkillMetadata)


@dataclass(frozen=True)
class DiscoveryResult(Generic[T]):
    """Outcome of scanning a template directory.

    Every scanned markdown file contributes exactly one entry, either to
    items or to errors.
    """

    items: tuple[T, ...]
    errors: tuple[DiscoveryError, ...]

    @property
    def names(self) -> list[str]:
        return [item.name for item in self.items]


@dataclass(frozen=True)
class TemplatesInfo:
    """Location of the bundled templates directory."""

    path: Path
    source: TemplatesSource


@dataclass(frozen=True)
class InstalledComponents:
    """Files copied into .claude/ by the last install."""

    agents: tuple[str, ...]
    commands: tuple[str, ...]
    skills: tuple[str, ...]


@dataclass(frozen=True)
class VersionInfo:
    """Manifest stored in .claude/iterative-workflow.json."""

    version: str
    installed_at: str
    source: TemplatesSource
    components: InstalledComponents


@dataclass(frozen=True)
class UpgradeCheck:
    """Result of comparing the installed manifest with the running version."""

    needs_upgrade: bool
    current_version: str | None
    available_version: str
