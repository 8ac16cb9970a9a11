"""Output utilities for CLI commands with clear intent.

- user_output: progress and diagnostics for humans, written to stderr
- machine_output: data meant for pipes and scripts, written to stdout
"""

import click


def user_output(message: str = "", *, nl: bool = True) -> None:
    """Write a human-facing message to stderr."""
    click.echo(message, err=True, nl=nl)


def machine_output(message: str = "", *, nl: bool = True) -> None:
    """Write machine-readable output to stdout."""
    click.echo(message, nl=nl)
