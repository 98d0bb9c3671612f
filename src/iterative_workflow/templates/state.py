"""Manifest file I/O for .claude/iterative-workflow.json."""

import json
import logging
from pathlib import Path

from iterative_workflow.core.json_io import read_json, write_json_atomic
from iterative_workflow.templates.models import InstalledComponents, VersionInfo

logger = logging.getLogger(__name__)

MANIFEST_FILENAME = "iterative-workflow.json"


def get_manifest_path(project_dir: Path) -> Path:
    """Get path to the install manifest."""
    return project_dir / ".claude" / MANIFEST_FILENAME


def version_info_to_dict(info: VersionInfo) -> dict[str, object]:
    return {
        "version": info.version,
        "installedAt": info.installed_at,
        "source": info.source,
        "components": {
            "agents": list(info.components.agents),
            "commands": list(info.components.commands),
            "skills": list(info.components.skills),
        },
    }


def version_info_from_dict(data: dict[str, object]) -> VersionInfo:
    """Build a VersionInfo from decoded manifest JSON.

    Raises:
        KeyError, TypeError, ValueError: If the manifest is malformed.
    """
    components = data["components"]
    if not isinstance(components, dict):
        raise TypeError("components must be an object")
    source = data["source"]
    if source not in ("development", "production"):
        raise ValueError(f"unknown source: {source}")
    return VersionInfo(
        version=str(data["version"]),
        installed_at=str(data["installedAt"]),
        source=source,
        components=InstalledComponents(
            agents=tuple(str(name) for name in components.get("agents", [])),
            commands=tuple(str(name) for name in components.get("commands", [])),
            skills=tuple(str(name) for name in components.get("skills", [])),
        ),
    )


def load_version_info(project_dir: Path) -> VersionInfo | None:
    """Load the install manifest.

    Returns None if the file does not exist or cannot be parsed.
    """
    path = get_manifest_path(project_dir)
    if not path.exists():
        return None
    try:
        data = read_json(path)
        if not isinstance(data, dict):
            raise TypeError("manifest must be a JSON object")
        return version_info_from_dict(data)
    except (OSError, json.JSONDecodeError, KeyError, TypeError, ValueError) as e:
        logger.warning("Ignoring unreadable manifest %s: %s", path, e)
        return None


def save_version_info(project_dir: Path, info: VersionInfo) -> None:
    """Write the install manifest."""
    write_json_atomic(get_manifest_path(project_dir), version_info_to_dict(info))
