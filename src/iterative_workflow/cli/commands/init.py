"""Install the framework's templates into the current project."""

import click

from iterative_workflow.cli.display import display_components
from iterative_workflow.cli.troubleshooting import INSTALL_ERRORS, report_failure
from iterative_workflow.context import AppContext
from iterative_workflow.templates.install import copy_templates


@click.command("init")
@click.option(
    "--with-openspec",
    is_flag=True,
    help="Also install the OpenSpec integration command (/os-apply-iterative).",
)
@click.pass_obj
def init_cmd(ctx: AppContext, with_openspec: bool) -> None:
    """Initialize the iterative code generation framework in this project.

    Copies agents, commands and skills into .claude/ and records the
    installed version in .claude/iterative-workflow.json.

    Examples:

    \b
      # Install the core framework
      iterative-workflow init

    \b
      # Include OpenSpec integration
      iterative-workflow init --with-openspec
    """
    click.echo(click.style("Initializing iterative code generation framework...", fg="blue"))
    click.echo("")

    try:
        result = copy_templates(
            ctx.cwd,
            with_openspec=with_openspec,
            now=ctx.time.now(),
            templates=ctx.templates,
            version=ctx.framework_version,
        )
    except INSTALL_ERRORS as e:
        report_failure("Initialization failed", e)
        raise SystemExit(1) from e

    click.echo(click.style("Initialization complete!", fg="green"))
    click.echo("")
    click.echo("Installed components:")
    display_components(result.version_info.components)
    click.echo("")
    click.echo("Usage:")
    click.echo(click.style("  /iterative-code [requirement description]", fg="yellow"))
    click.echo("")
    click.echo("Example:")
    click.echo(
        click.style(
            "  /iterative-code Implement user login with password hashing and JWT issuance",
            dim=True,
        )
    )

    if with_openspec:
        click.echo("")
        click.echo("OpenSpec integration:")
        click.echo(click.style("  /os-apply-iterative [change-id]", fg="yellow"))
        click.echo("")
        click.echo("Note: run 'openspec init' first to initialize the OpenSpec system")
