"""Reinstall templates when the installed version is behind."""

import click

from iterative_workflow.cli.display import display_components
from iterative_workflow.cli.troubleshooting import INSTALL_ERRORS, report_failure
from iterative_workflow.context import AppContext
from iterative_workflow.core.version import format_version_change
from iterative_workflow.templates.install import (
    check_upgrade,
    copy_templates,
    get_installed_version,
)


@click.command("upgrade")
@click.option(
    "--with-openspec",
    is_flag=True,
    help="Also install the OpenSpec integration command (/os-apply-iterative).",
)
@click.option("--force", is_flag=True, help="Reinstall even if already up to date.")
@click.pass_obj
def upgrade_cmd(ctx: AppContext, with_openspec: bool, force: bool) -> None:
    """Upgrade installed templates to the running framework version.

    Examples:

    \b
      # Upgrade if a newer version is available
      iterative-workflow upgrade

    \b
      # Reinstall regardless of version
      iterative-workflow upgrade --force
    """
    click.echo(click.style("Checking for iterative-workflow updates...", fg="blue"))
    click.echo("")

    upgrade_info = check_upgrade(ctx.cwd, available_version=ctx.framework_version)
    installed = get_installed_version(ctx.cwd)

    if not upgrade_info.needs_upgrade and not force:
        click.echo(click.style("✓ ", fg="green") + "Already up to date!")
        click.echo(f"  Current version: {click.style(ctx.framework_version, fg='cyan')}")
        if installed is not None:
            click.echo(f"  Installed at: {click.style(installed.installed_at, dim=True)}")
        click.echo("")
        click.echo(click.style("Use --force to reinstall anyway.", dim=True))
        return

    if installed is None:
        click.echo(click.style("  No version info found. Performing fresh install.", fg="yellow"))
    else:
        click.echo(f"  {format_version_change(installed.version, ctx.framework_version)}")
    click.echo("")

    click.echo(click.style("Upgrading templates...", fg="blue"))
    try:
        result = copy_templates(
            ctx.cwd,
            with_openspec=with_openspec,
            now=ctx.time.now(),
            templates=ctx.templates,
            version=ctx.framework_version,
        )
    except INSTALL_ERRORS as e:
        report_failure("Upgrade failed", e)
        raise SystemExit(1) from e

    click.echo("")
    click.echo(click.style("✓ ", fg="green") + "Upgrade complete!")
    click.echo(f"  New version: {click.style(result.version_info.version, fg='cyan')}")
    click.echo("")
    click.echo("Updated components:")
    display_components(result.version_info.components)
