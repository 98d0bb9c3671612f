"""Validate the bundled agent, command and skill templates."""

import click

from iterative_workflow.context import AppContext
from iterative_workflow.templates.agents import (
    discover_agents,
    format_agent_names,
    get_agent_stats,
    group_agents_by_category,
)
from iterative_workflow.templates.commands import discover_commands, format_command_names
from iterative_workflow.templates.models import DiscoveryError
from iterative_workflow.templates.paths import TemplatesNotFoundError, get_templates_dir_info
from iterative_workflow.templates.skills import discover_skills, format_skill_names


@click.group("templates")
def templates_group() -> None:
    """Inspect the templates shipped with this installation."""


def _display_errors(errors: list[DiscoveryError]) -> None:
    click.echo(click.style("⚠️  ", fg="yellow") + f"Found {len(errors)} invalid template(s)")
    for error in errors:
        click.echo(f"   {error.file}: {error.error}")


@templates_group.command("check")
@click.pass_obj
def check_cmd(ctx: AppContext) -> None:
    """Validate every bundled template's frontmatter.

    Exits 1 if any template is invalid.

    Examples:

    \b
      iterative-workflow templates check
    """
    try:
        info = ctx.templates if ctx.templates is not None else get_templates_dir_info()
    except TemplatesNotFoundError as e:
        click.echo(click.style("Error: ", fg="red") + str(e), err=True)
        raise SystemExit(1) from e

    agents = discover_agents(info.path / "agents")
    commands = discover_commands(info.path / "commands", include_optional=True)
    skills = discover_skills(info.path / "skills")

    click.echo(f"Templates: {info.path} ({info.source})")
    click.echo("")

    stats = get_agent_stats(agents.items)
    click.echo(click.style(f"Agents ({stats['total']})", bold=True))
    for category, members in group_agents_by_category(agents.items).items():
        if members:
            click.echo(f"  {category}: {format_agent_names(members)}")
    click.echo(click.style(f"Commands ({len(commands.items)})", bold=True))
    if commands.items:
        click.echo(f"  {format_command_names(commands.items)}")
    click.echo(click.style(f"Skills ({len(skills.items)})", bold=True))
    if skills.items:
        click.echo(f"  {format_skill_names(skills.items)}")
    click.echo("")

    errors = [*agents.errors, *commands.errors, *skills.errors]
    if errors:
        _display_errors(errors)
        raise SystemExit(1)
    click.echo(click.style("✓ ", fg="green") + "All templates valid")
