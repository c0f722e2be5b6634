"""Output helpers separating user-facing messages from machine output.

user_output goes to stderr so that stdout stays parseable (for example
``ghp dashboard --json | jq``).
"""

from typing import Any

import click


def user_output(message: Any = "", *, nl: bool = True) -> None:
    """Write a user-facing message to stderr."""
    click.echo(message, err=True, nl=nl)


def machine_output(message: Any = "", *, nl: bool = True) -> None:
    """Write structured or final output to stdout."""
    click.echo(message, nl=nl)
