import logging

import click

from ghp.cli.commands.dashboard import dashboard_cmd
from ghp.cli.commands.dashboard_hooks import dashboard_hooks_group
from ghp.cli.commands.hooks import hooks_group
from ghp.cli.commands.pr import pr_group
from ghp.cli.commands.worktree import worktree_group
from ghp.cli.ensure import Ensure
from ghp.config import ConfigError
from ghp.context import create_context

CONTEXT_SETTINGS = dict(help_option_names=["-h", "--help"])


@click.group(context_settings=CONTEXT_SETTINGS)
@click.option("--debug", is_flag=True, help="Enable debug logging")
@click.option(
    "--no-input",
    is_flag=True,
    help="Never prompt; interactive hooks behave as blocking hooks",
)
@click.pass_context
def cli(ctx: click.Context, debug: bool, no_input: bool) -> None:
    """Lifecycle hooks and dashboards for GitHub project workflows."""
    if debug:
        logging.basicConfig(level=logging.DEBUG, format="%(name)s - %(levelname)s - %(message)s")

    # Tests inject a context through CliRunner.invoke(obj=...)
    if ctx.obj is None:
        try:
            ctx.obj = create_context(interactive=not no_input)
        except ConfigError as e:
            Ensure.fail(str(e))


cli.add_command(hooks_group)
cli.add_command(dashboard_hooks_group)
cli.add_command(dashboard_cmd)
cli.add_command(worktree_group)
cli.add_command(pr_group)
