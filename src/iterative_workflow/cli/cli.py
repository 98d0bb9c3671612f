import logging

import click

from iterative_workflow.cli.commands.checkpoint import checkpoint_group
from iterative_workflow.cli.commands.init import init_cmd
from iterative_workflow.cli.commands.quality import quality_group
from iterative_workflow.cli.commands.status import status_cmd
from iterative_workflow.cli.commands.templates import templates_group
from iterative_workflow.cli.commands.upgrade import upgrade_cmd
from iterative_workflow.context import create_context

CONTEXT_SETTINGS = dict(help_option_names=["-h", "--help"])


@click.group(context_settings=CONTEXT_SETTINGS)
@click.version_option(package_name="iterative-workflow")
@click.option("--debug", is_flag=True, help="Enable debug logging")
@click.pass_context
def cli(ctx: click.Context, debug: bool) -> None:
    """Install and manage the iterative multi-agent code generation workflow."""
    if debug:
        logging.basicConfig(level=logging.DEBUG, format="%(name)s - %(levelname)s - %(message)s")

    # Only create context if not already provided (e.g., by tests)
    if ctx.obj is None:
        ctx.obj = create_context(debug=debug)


cli.add_command(init_cmd)
cli.add_command(upgrade_cmd)
cli.add_command(status_cmd)
cli.add_command(templates_group)
cli.add_command(checkpoint_group)
cli.add_command(quality_group)


def main() -> None:
    """CLI entry point used by the `iterative-workflow` console script."""
    cli()
