"""Install bundled templates into a project's .claude/ directory."""

import logging
import shutil
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path

from iterative_workflow.core.version import get_current_version, is_version_mismatch
from iterative_workflow.templates.agents import discover_agents
from iterative_workflow.templates.commands import discover_commands
from iterative_workflow.templates.models import (
    DiscoveryError,
    InstalledComponents,
    TemplatesInfo,
    UpgradeCheck,
    VersionInfo,
)
from iterative_workflow.templates.paths import get_templates_dir_info
from iterative_workflow.templates.skills import discover_skills
from iterative_workflow.templates.state import load_version_info, save_version_info

logger = logging.getLogger(__name__)

TEMPLATE_SUBDIRS = ("agents", "commands", "skills")


class InvalidTemplatesError(Exception):
    """Raised when bundled templates fail validation and cannot be installed."""

    def __init__(self, errors: list[DiscoveryError]) -> None:
        self.errors = errors
        details = "\n".join(f"  - {error.file}: {error.error}" for error in errors)
        super().__init__(f"Bundled templates are invalid:\n{details}")


@dataclass(frozen=True)
class InstallResult:
    """Result of copying templates into a project."""

    version_info: VersionInfo
    files_copied: int


def _copy_file(source: Path, target: Path) -> None:
    target.parent.mkdir(parents=True, exist_ok=True)
    shutil.copy2(source, target)


def _copy_directory_contents(source_dir: Path, target_dir: Path) -> int:
    """Copy directory contents recursively, returning count of files copied."""
    if not source_dir.exists():
        return 0

    count = 0
    for source_path in sorted(source_dir.rglob("*")):
        if source_path.is_file():
            _copy_file(source_path, target_dir / source_path.relative_to(source_dir))
            count += 1
    return count


def copy_templates(
    project_dir: Path,
    *,
    with_openspec: bool,
    now: datetime,
    templates: TemplatesInfo | None = None,
    version: str | None = None,
) -> InstallResult:
    """Copy agents, commands and skills into ``project_dir/.claude``.

    Every valid agent is copied, along with the required commands (plus the
    optional OpenSpec integration commands when ``with_openspec`` is set) and
    the whole skills tree. The manifest records what was installed.

    Raises:
        TemplatesNotFoundError: If no bundled templates directory exists.
        InvalidTemplatesError: If any bundled template fails validation.
        OSError: On filesystem failures while copying.
    """
    info = templates if templates is not None else get_templates_dir_info()
    templates_dir = info.path
    logger.debug("Installing templates from %s (%s)", templates_dir, info.source)

    agents = discover_agents(templates_dir / "agents")
    commands = discover_commands(templates_dir / "commands", include_optional=with_openspec)
    skills = discover_skills(templates_dir / "skills")

    errors = [*agents.errors, *commands.errors, *skills.errors]
    if errors:
        raise InvalidTemplatesError(errors)

    claude_dir = project_dir / ".claude"
    for subdir in TEMPLATE_SUBDIRS:
        (claude_dir / subdir).mkdir(parents=True, exist_ok=True)

    copied = 0
    for agent in agents.items:
        _copy_file(
            templates_dir / "agents" / agent.file_name,
            claude_dir / "agents" / agent.file_name,
        )
        copied += 1
    for command in commands.items:
        _copy_file(
            templates_dir / "commands" / command.file_name,
            claude_dir / "commands" / command.file_name,
        )
        copied += 1
    copied += _copy_directory_contents(templates_dir / "skills", claude_dir / "skills")

    version_info = VersionInfo(
        version=version if version is not None else get_current_version(),
        installed_at=now.isoformat(),
        source=info.source,
        components=InstalledComponents(
            agents=tuple(agent.file_name for agent in agents.items),
            commands=tuple(command.file_name for command in commands.items),
            skills=tuple(skill.file_path for skill in skills.items),
        ),
    )
    save_version_info(project_dir, version_info)
    logger.info("Installed %d template files into %s", copied, claude_dir)

    return InstallResult(version_info=version_info, files_copied=copied)


def get_installed_version(project_dir: Path) -> VersionInfo | None:
    """Read the install manifest, or None if the project has no (readable) install."""
    return load_version_info(project_dir)


def check_upgrade(project_dir: Path, *, available_version: str | None = None) -> UpgradeCheck:
    """Compare the installed manifest version against the running framework version."""
    available = available_version if available_version is not None else get_current_version()
    installed = load_version_info(project_dir)
    if installed is None:
        return UpgradeCheck(needs_upgrade=True, current_version=None, available_version=available)
    return UpgradeCheck(
        needs_upgrade=is_version_mismatch(installed.version, available),
        current_version=installed.version,
        available_version=available,
    )
