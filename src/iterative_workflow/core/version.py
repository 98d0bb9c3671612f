"""Version helpers for the installed framework.

The framework version is the version of the installed ``iterative-workflow``
distribution; template manifests record it so ``status`` and ``upgrade`` can
tell when a project is behind.
"""

import importlib.metadata

from packaging.version import InvalidVersion, Version

DISTRIBUTION_NAME = "iterative-workflow"


def get_current_version() -> str:
    """Get the currently installed version of iterative-workflow.

    Returns:
        Version string (e.g., "1.0.0")
    """
    return importlib.metadata.version(DISTRIBUTION_NAME)


def is_version_mismatch(installed: str, available: str) -> bool:
    """Check if the installed template version differs from the available one.

    Unparseable versions fall back to plain string comparison.
    """
    try:
        return Version(installed) != Version(available)
    except InvalidVersion:
        return installed != available


def format_version_change(installed: str | None, available: str) -> str:
    """Describe a version change for display, e.g. ``0.9.0 → 1.0.0 (upgrade)``."""
    if installed is None:
        return f"none → {available}"
    try:
        direction = "upgrade" if Version(installed) < Version(available) else "downgrade"
    except InvalidVersion:
        direction = "change"
    return f"{installed} → {available} ({direction})"
