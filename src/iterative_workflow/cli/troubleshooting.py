"""Failure reporting for commands that write into the project."""

import errno

import click

from iterative_workflow.templates.install import InvalidTemplatesError
from iterative_workflow.templates.paths import TemplatesNotFoundError


def troubleshooting_hints(error: BaseException) -> list[str]:
    """Suggestions for recovering from ``error``, chosen by exception type."""
    if isinstance(error, TemplatesNotFoundError):
        return [
            "The bundled templates are missing from this installation.",
            "Reinstall with: pip install --force-reinstall iterative-workflow",
        ]
    if isinstance(error, InvalidTemplatesError):
        return [
            "The bundled templates failed validation; this is a packaging bug.",
            "Run 'iterative-workflow templates check' for details.",
        ]
    if isinstance(error, PermissionError):
        return [
            "Permission denied while writing into the project.",
            "Check that you own the project directory and that .claude/ is writable.",
        ]
    if isinstance(error, FileExistsError):
        return [
            "A file is in the way of a directory the installer needs to create.",
            "Move or remove the conflicting path under .claude/ and retry.",
        ]
    if isinstance(error, FileNotFoundError):
        return [
            "A required file or directory disappeared during installation.",
            "Make sure you are running from the project root and retry.",
        ]
    if isinstance(error, OSError) and error.errno == errno.ENOSPC:
        return [
            "The disk is full.",
            "Free up some space and retry.",
        ]
    return [
        "Re-run with --debug for detailed logs.",
        "If the problem persists, please report it with the output above.",
    ]


def report_failure(title: str, error: BaseException) -> None:
    click.echo(click.style(f"{title}: ", fg="red") + str(error), err=True)
    click.echo("", err=True)
    click.echo(click.style("Troubleshooting:", bold=True), err=True)
    for hint in troubleshooting_hints(error):
        click.echo(f"  - {hint}", err=True)


# Errors init/upgrade report with troubleshooting hints instead of a traceback
INSTALL_ERRORS = (OSError, TemplatesNotFoundError, InvalidTemplatesError)
