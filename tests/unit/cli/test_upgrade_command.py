"""Tests for the upgrade command."""

from pathlib import Path

from click.testing import CliRunner

from iterative_workflow.cli.cli import cli
from iterative_workflow.context import AppContext
from iterative_workflow.gateway.time.fake import FakeTime
from iterative_workflow.templates.install import copy_templates, get_installed_version
from iterative_workflow.templates.models import TemplatesInfo


def _install(project: Path, templates: TemplatesInfo, version: str) -> None:
    copy_templates(
        project, with_openspec=False, now=FakeTime().now(), templates=templates, version=version
    )


def test_upgrade_without_install_performs_fresh_install(
    tmp_project: Path, bundled_templates: TemplatesInfo
) -> None:
    ctx = AppContext.for_test(tmp_project, templates=bundled_templates)

    result = CliRunner().invoke(cli, ["upgrade"], obj=ctx)

    assert result.exit_code == 0, result.output
    assert "No version info found. Performing fresh install." in result.output
    assert "Upgrade complete!" in result.output
    assert get_installed_version(tmp_project) is not None


def test_upgrade_when_current(tmp_project: Path, bundled_templates: TemplatesInfo) -> None:
    _install(tmp_project, bundled_templates, "1.0.0")
    ctx = AppContext.for_test(tmp_project, templates=bundled_templates)

    result = CliRunner().invoke(cli, ["upgrade"], obj=ctx)

    assert result.exit_code == 0, result.output
    assert "Already up to date!" in result.output
    assert "Use --force to reinstall anyway." in result.output
    assert "Upgrade complete!" not in result.output


def test_upgrade_force_reinstalls(tmp_project: Path, bundled_templates: TemplatesInfo) -> None:
    _install(tmp_project, bundled_templates, "1.0.0")
    agent = tmp_project / ".claude" / "agents" / "code-writer.md"
    agent.write_text("edited locally", encoding="utf-8")
    ctx = AppContext.for_test(tmp_project, templates=bundled_templates)

    result = CliRunner().invoke(cli, ["upgrade", "--force"], obj=ctx)

    assert result.exit_code == 0, result.output
    assert "Upgrade complete!" in result.output
    assert agent.read_text(encoding="utf-8") != "edited locally"


def test_upgrade_from_older_version(tmp_project: Path, bundled_templates: TemplatesInfo) -> None:
    _install(tmp_project, bundled_templates, "0.9.0")
    ctx = AppContext.for_test(
        tmp_project, templates=bundled_templates, framework_version="1.1.0"
    )

    result = CliRunner().invoke(cli, ["upgrade", "--with-openspec"], obj=ctx)

    assert result.exit_code == 0, result.output
    assert "0.9.0 → 1.1.0 (upgrade)" in result.output
    assert "/os-apply-iterative command" in result.output
    installed = get_installed_version(tmp_project)
    assert installed is not None
    assert installed.version == "1.1.0"


def test_upgrade_failure_exits_nonzero(tmp_path: Path) -> None:
    project = tmp_path / "project"
    project.mkdir()
    templates = TemplatesInfo(path=tmp_path / "missing", source="development")
    ctx = AppContext.for_test(project, templates=templates)

    result = CliRunner().invoke(cli, ["upgrade"], obj=ctx)

    assert result.exit_code == 1
    assert "Upgrade failed" in result.output
    assert "Troubleshooting:" in result.output
