"""Shared console output for install-related commands."""

from pathlib import PurePosixPath

import click

from iterative_workflow.templates.models import InstalledComponents


def _stems(file_names: tuple[str, ...]) -> list[str]:
    return [PurePosixPath(name).stem for name in file_names]


def _skill_names(skill_paths: tuple[str, ...]) -> list[str]:
    # SKILL.md files are named by their directory
    names: list[str] = []
    for path in skill_paths:
        parts = PurePosixPath(path).parts
        names.append(parts[0] if len(parts) > 1 else PurePosixPath(path).stem)
    return sorted(set(names))


def display_components(components: InstalledComponents) -> None:
    agents = _stems(components.agents)
    click.echo(click.style(f"  - {len(agents)} agents ({', '.join(agents)})", fg="cyan"))
    for command in _stems(components.commands):
        click.echo(click.style(f"  - /{command} command", fg="cyan"))
    for skill in _skill_names(components.skills):
        click.echo(click.style(f"  - {skill} skill", fg="cyan"))
