"""Show installed framework version and whether an upgrade is available."""

import click

from iterative_workflow.context import AppContext
from iterative_workflow.core.version import format_version_change
from iterative_workflow.templates.install import check_upgrade, get_installed_version


@click.command("status")
@click.pass_obj
def status_cmd(ctx: AppContext) -> None:
    """Show installed version and check for updates. Always exits 0."""
    installed = get_installed_version(ctx.cwd)
    upgrade_info = check_upgrade(ctx.cwd, available_version=ctx.framework_version)

    click.echo(click.style("iterative-workflow status", bold=True))
    click.echo("")

    if installed is not None:
        click.echo(f"  Installed version: {click.style(installed.version, fg='cyan')}")
        click.echo(f"  Installed at: {click.style(installed.installed_at, dim=True)}")
        click.echo(f"  Source: {click.style(installed.source, dim=True)}")
        click.echo("")
        click.echo("  Components:")
        click.echo(f"    Agents: {len(installed.components.agents)}")
        click.echo(f"    Commands: {', '.join(installed.components.commands)}")
        click.echo(f"    Skills: {len(installed.components.skills)}")
    else:
        click.echo(click.style("  Not installed in this project.", fg="yellow"))
        click.echo(f"  Run {click.style('iterative-workflow init', fg='cyan')} to install.")

    click.echo("")
    click.echo(f"  Framework version: {click.style(ctx.framework_version, fg='cyan')}")

    if upgrade_info.needs_upgrade:
        change = format_version_change(
            upgrade_info.current_version, upgrade_info.available_version
        )
        click.echo("")
        click.echo(click.style(f"  ⚠ Update available: {change}", fg="yellow"))
        click.echo(f"  Run {click.style('iterative-workflow upgrade', fg='cyan')} to update.")
    elif installed is not None:
        click.echo(click.style("  ✓ Up to date", fg="green"))
