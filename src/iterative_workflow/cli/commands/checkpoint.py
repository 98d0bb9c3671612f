"""Manage saved workflow checkpoints."""

import click

from iterative_workflow.checkpoint.store import CheckpointStore
from iterative_workflow.context import AppContext


@click.group("checkpoint")
def checkpoint_group() -> None:
    """Manage checkpoints under .claude/checkpoints."""


@checkpoint_group.command("list")
@click.pass_obj
def list_cmd(ctx: AppContext) -> None:
    """List saved checkpoints, newest first."""
    summaries = CheckpointStore(ctx.cwd, time=ctx.time).list_checkpoints()
    if not summaries:
        click.echo("No checkpoints found")
        return
    for summary in summaries:
        click.echo(
            f"{click.style(summary.trace_id, fg='cyan')}  "
            f"iteration {summary.iteration}  "
            f"{click.style(summary.updated_at, dim=True)}"
        )
        click.echo(f"   {summary.requirement}")


@checkpoint_group.command("clean")
@click.option(
    "--keep",
    type=click.IntRange(min=0),
    default=None,
    help="Number of most recent checkpoints to keep (default from config, else 5).",
)
@click.pass_obj
def clean_cmd(ctx: AppContext, keep: int | None) -> None:
    """Delete all but the most recently modified checkpoints."""
    keep_count = keep if keep is not None else ctx.config.checkpoint_keep
    deleted = CheckpointStore(ctx.cwd, time=ctx.time).clean_old_checkpoints(keep_count)
    click.echo(f"Deleted {deleted} checkpoint(s), kept up to {keep_count}")


@checkpoint_group.command("delete")
@click.argument("trace_id")
@click.pass_obj
def delete_cmd(ctx: AppContext, trace_id: str) -> None:
    """Delete the checkpoint for TRACE_ID."""
    store = CheckpointStore(ctx.cwd, time=ctx.time)
    try:
        deleted = store.delete(trace_id)
    except ValueError as e:
        raise click.BadParameter(str(e), param_hint="TRACE_ID") from e
    if not deleted:
        click.echo(f"No checkpoint found for {trace_id}", err=True)
        raise SystemExit(1)
    click.echo(click.style("✓ ", fg="green") + f"Deleted checkpoint {trace_id}")
