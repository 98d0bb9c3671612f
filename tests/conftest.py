"""Shared fixtures for iterative-workflow tests."""

from pathlib import Path

import pytest

import iterative_workflow
from iterative_workflow.templates.models import TemplatesInfo


@pytest.fixture
def tmp_project(tmp_path: Path) -> Path:
    """Alias for tmp_path with semantic meaning as a project directory."""
    return tmp_path


@pytest.fixture
def bundled_templates() -> TemplatesInfo:
    """The templates shipped as package data."""
    return TemplatesInfo(
        path=Path(iterative_workflow.__file__).parent / "data" / "templates",
        source="production",
    )
