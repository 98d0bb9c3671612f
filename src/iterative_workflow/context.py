"""Application context with dependency injection."""

from dataclasses import dataclass
from pathlib import Path

import click

from iterative_workflow.config import ConfigError, WorkflowConfig, load_workflow_config
from iterative_workflow.core.version import get_current_version
from iterative_workflow.gateway.time.abc import Time
from iterative_workflow.gateway.time.real import RealTime
from iterative_workflow.observability.context import Observability, create_observability
from iterative_workflow.templates.models import TemplatesInfo


@dataclass(frozen=True)
class AppContext:
    """Immutable context holding all dependencies for CLI commands.

    Created at the CLI entry point and passed to commands via ``ctx.obj``.
    ``templates`` overrides bundled template discovery when set.
    """

    cwd: Path
    time: Time
    config: WorkflowConfig
    observability: Observability
    framework_version: str
    templates: TemplatesInfo | None

    @staticmethod
    def for_test(
        cwd: Path,
        *,
        time: Time | None = None,
        config: WorkflowConfig | None = None,
        templates: TemplatesInfo | None = None,
        framework_version: str = "1.0.0",
    ) -> "AppContext":
        """Create a context with test defaults and no global logging changes."""
        from iterative_workflow.gateway.time.fake import FakeTime

        resolved_time = time if time is not None else FakeTime()
        resolved_config = config if config is not None else WorkflowConfig()
        return AppContext(
            cwd=cwd,
            time=resolved_time,
            config=resolved_config,
            observability=create_observability(
                cwd,
                resolved_config.observability,
                time=resolved_time,
                install_handlers=False,
            ),
            framework_version=framework_version,
            templates=templates,
        )


def create_context(*, debug: bool) -> AppContext:
    """Create the production context for the current directory.

    With ``debug`` the caller has already configured root logging, so no
    package handler is installed.
    """
    cwd = Path.cwd()
    try:
        config = load_workflow_config(cwd)
    except ConfigError as e:
        click.echo(click.style("Error: ", fg="red") + str(e), err=True)
        raise SystemExit(1) from e

    time = RealTime()
    return AppContext(
        cwd=cwd,
        time=time,
        config=config,
        observability=create_observability(
            cwd, config.observability, time=time, install_handlers=not debug
        ),
        framework_version=get_current_version(),
        templates=None,
    )
