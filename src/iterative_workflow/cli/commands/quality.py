"""Audit result-aggregator decisions."""

from typing import TextIO

import click

from iterative_workflow.context import AppContext
from iterative_workflow.quality.schemas import AggregatorOutput
from iterative_workflow.quality.scoring import (
    compare_with_second_opinion,
    sanity_check_aggregator_output,
)
from iterative_workflow.quality.validation import format_validation_errors, parse_and_validate


@click.group("quality")
def quality_group() -> None:
    """Check quality decisions made by the workflow agents."""


@quality_group.command("check")
@click.argument("aggregator_output", type=click.File("r", encoding="utf-8"))
@click.pass_obj
def check_cmd(ctx: AppContext, aggregator_output: TextIO) -> None:
    """Sanity-check a result-aggregator JSON document.

    Validates AGGREGATOR_OUTPUT (a file path, or - for stdin), checks it for
    contradictions and recomputes the decision with the project's configured
    thresholds and weights. Exits 1 on errors or a decision mismatch.

    Examples:

    \b
      iterative-workflow quality check aggregator.json
    """
    try:
        text = aggregator_output.read()
    except UnicodeDecodeError as e:
        click.echo(click.style("Invalid aggregator output:", fg="red"), err=True)
        click.echo(f"   File is not valid UTF-8: {e}", err=True)
        raise SystemExit(1) from e

    parsed = parse_and_validate(AggregatorOutput, text)
    if not parsed.success or parsed.data is None:
        ctx.observability.logger.validation_error("AggregatorOutput", parsed.errors)
        click.echo(click.style("Invalid aggregator output:", fg="red"), err=True)
        for line in format_validation_errors(parsed.errors).splitlines():
            click.echo(f"   {line}", err=True)
        raise SystemExit(1)

    sanity = sanity_check_aggregator_output(parsed.data)
    comparison = compare_with_second_opinion(
        parsed.data, ctx.config.thresholds, ctx.config.weights
    )

    for error in sanity.errors:
        click.echo(click.style("✗ ", fg="red") + error)
    for warning in sanity.warnings:
        click.echo(click.style("⚠️  ", fg="yellow") + warning)
    for discrepancy in comparison.discrepancies:
        click.echo(click.style("≠ ", fg="yellow") + discrepancy)

    if sanity.corrected_output is not None:
        corrected = sanity.corrected_output
        click.echo(
            f"Suggested correction: recommendation={corrected.recommendation}, "
            f"passed={str(corrected.passed).lower()}"
        )

    if sanity.valid and comparison.match:
        click.echo(
            click.style("✓ ", fg="green")
            + f"Aggregator decision {comparison.aggregator_decision} confirmed"
        )
        return
    raise SystemExit(1)
