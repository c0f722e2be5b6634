"""CLI error handling.

Commands report failures through ``Ensure``: the message goes to stderr via
``user_output`` and the process exits with status 1.
"""

from typing import NoReturn, TypeVar

import click

from ghp.context import GhpContext
from ghp.github.types import RepoInfo
from ghp.github.url_parser import detect_repository
from ghp.output import user_output

T = TypeVar("T")


class Ensure:
    """Helpers that either return a usable value or exit with an error."""

    @staticmethod
    def fail(message: str) -> NoReturn:
        user_output(click.style("Error: ", fg="red") + message)
        raise SystemExit(1)

    @staticmethod
    def not_none(value: T | None, message: str) -> T:
        """Return value, or exit with message when it is None."""
        if value is None:
            Ensure.fail(message)
        return value

    @staticmethod
    def repository(ctx: GhpContext) -> RepoInfo:
        """Detect the GitHub repository from the origin remote of ctx.cwd."""
        return Ensure.not_none(
            detect_repository(ctx.git, ctx.cwd),
            "Could not detect a GitHub repository from the origin remote",
        )

    @staticmethod
    def current_branch(ctx: GhpContext) -> str:
        return Ensure.not_none(
            ctx.git.get_current_branch(ctx.cwd),
            "HEAD is detached; check out a branch first",
        )
