"""Commands for managing dashboard hooks."""

from typing import Any

import click

from ghp.cli.ensure import Ensure
from ghp.context import GhpContext
from ghp.dashboard.registry import DashboardHookRegistry, parse_dashboard_hook
from ghp.dashboard.types import DEFAULT_CATEGORY
from ghp.hooks.registry import HookRegistryError
from ghp.output import machine_output, user_output


def _save_or_fail(registry: DashboardHookRegistry) -> None:
    try:
        registry.save()
    except OSError as e:
        Ensure.fail(f"Could not write {registry.path}: {e}")


@click.group("dashboard-hooks")
def dashboard_hooks_group() -> None:
    """Manage commands that contribute sections to the dashboard."""


@dashboard_hooks_group.command("list")
@click.pass_obj
def list_dashboard_hooks(ctx: GhpContext) -> None:
    """List dashboard hooks grouped by category."""
    registry = ctx.load_dashboard_hooks()
    grouped = registry.hooks_by_category()
    if not grouped:
        user_output("No dashboard hooks registered.")
        return
    for category, hooks in grouped.items():
        machine_output(click.style(category, bold=True))
        for hook in hooks:
            state = "" if hook.enabled else click.style(" (disabled)", fg="yellow")
            machine_output(f"  {click.style(hook.name, fg='cyan')}{state}  {hook.command}")


@dashboard_hooks_group.command("add")
@click.argument("name")
@click.option("--command", "command", required=True, help="Command to run")
@click.option("--category", default=DEFAULT_CATEGORY, show_default=True)
@click.option("--display-name", help="Section name shown on the dashboard")
@click.option("--timeout", "timeout_ms", type=int, help="Timeout in milliseconds")
@click.pass_obj
def add_dashboard_hook(
    ctx: GhpContext,
    name: str,
    command: str,
    category: str,
    display_name: str | None,
    timeout_ms: int | None,
) -> None:
    """Register a new dashboard hook.

    The command is called with --branch and --repo appended and must print
    {"success": true, "data": {"title": ..., "items": [...]}}.
    """
    data: dict[str, Any] = {"name": name, "command": command, "category": category}
    if display_name:
        data["displayName"] = display_name
    if timeout_ms is not None:
        data["timeout"] = timeout_ms

    registry = ctx.load_dashboard_hooks()
    try:
        hook = registry.add(parse_dashboard_hook(data))
    except HookRegistryError as e:
        Ensure.fail(str(e))
    _save_or_fail(registry)
    user_output(f"Added dashboard hook {click.style(hook.name, fg='cyan')}")


@dashboard_hooks_group.command("remove")
@click.argument("name")
@click.pass_obj
def remove_dashboard_hook(ctx: GhpContext, name: str) -> None:
    """Remove a dashboard hook."""
    registry = ctx.load_dashboard_hooks()
    if not registry.remove(name):
        Ensure.fail(f'Hook "{name}" not found')
    _save_or_fail(registry)
    user_output(f"Removed dashboard hook {click.style(name, fg='cyan')}")


@dashboard_hooks_group.command("enable")
@click.argument("name")
@click.pass_obj
def enable_dashboard_hook(ctx: GhpContext, name: str) -> None:
    """Enable a dashboard hook."""
    registry = ctx.load_dashboard_hooks()
    try:
        registry.enable(name)
    except HookRegistryError as e:
        Ensure.fail(str(e))
    _save_or_fail(registry)
    user_output(f"Enabled dashboard hook {click.style(name, fg='cyan')}")


@dashboard_hooks_group.command("disable")
@click.argument("name")
@click.pass_obj
def disable_dashboard_hook(ctx: GhpContext, name: str) -> None:
    """Disable a dashboard hook."""
    registry = ctx.load_dashboard_hooks()
    try:
        registry.disable(name)
    except HookRegistryError as e:
        Ensure.fail(str(e))
    _save_or_fail(registry)
    user_output(f"Disabled dashboard hook {click.style(name, fg='cyan')}")
