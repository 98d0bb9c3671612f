"""Bundled template path utilities.

Templates ship as package data at ``iterative_workflow/data/templates``. In an
editable checkout a top-level ``templates/`` directory, when present, takes
precedence so template edits are picked up without reinstalling.
"""

from functools import cache
from pathlib import Path

from iterative_workflow.templates.models import TemplatesInfo


class TemplatesNotFoundError(Exception):
    """Raised when no bundled templates directory can be located."""

    def __init__(self, searched: list[TemplatesInfo]) -> None:
        self.searched = searched
        tried = "\n".join(f"  - {info.path} ({info.source})" for info in searched)
        super().__init__(
            f"Templates directory not found. Searched locations:\n{tried}\n\n"
            "Please ensure iterative-workflow is properly installed."
        )


@cache
def _get_package_dir() -> Path:
    """Get the package directory (where iterative_workflow/__init__.py lives)."""
    # __file__ is .../iterative_workflow/templates/paths.py
    return Path(__file__).parent.parent


def _is_editable_install() -> bool:
    """Editable installs use the src/ layout; wheels land in site-packages."""
    return "site-packages" not in str(_get_package_dir().resolve())


def template_candidates() -> list[TemplatesInfo]:
    """Candidate template locations in search order."""
    package_dir = _get_package_dir()
    candidates: list[TemplatesInfo] = []
    if _is_editable_install():
        # src/iterative_workflow -> repo root
        repo_root = package_dir.parent.parent
        candidates.append(TemplatesInfo(path=repo_root / "templates", source="development"))
    candidates.append(
        TemplatesInfo(path=package_dir / "data" / "templates", source="production")
    )
    return candidates


def get_templates_dir_info() -> TemplatesInfo:
    """Return the first candidate templates directory that exists.

    Raises:
        TemplatesNotFoundError: If no candidate exists.
    """
    candidates = template_candidates()
    for candidate in candidates:
        if candidate.path.is_dir():
            return candidate
    raise TemplatesNotFoundError(candidates)


def get_templates_dir() -> Path:
    return get_templates_dir_info().path
