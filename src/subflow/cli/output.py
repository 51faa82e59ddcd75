"""Output utilities for CLI commands with clear intent.

user_output is for diagnostics and progress meant for humans (stderr);
machine_output is for data another program may consume (stdout).
"""

from typing import Any

import click


def user_output(message: Any = "", nl: bool = True, color: bool | None = None) -> None:
    """Print a user-facing message to stderr."""
    click.echo(message, nl=nl, err=True, color=color)


def machine_output(message: Any = "", nl: bool = True) -> None:
    """Print data to stdout."""
    click.echo(message, nl=nl)
