"""Commands for managing event hooks."""

import json
from typing import Any

import click

from ghp.cli.ensure import Ensure
from ghp.context import GhpContext
from ghp.hooks.registry import EventHookRegistry, HookRegistryError, parse_event_hook
from ghp.hooks.types import EVENT_TYPES, HOOK_MODES, EventHook
from ghp.output import machine_output, user_output


def _format_hook_line(hook: EventHook) -> str:
    name = click.style(hook.name, fg="cyan", bold=True)
    state = "" if hook.enabled else click.style(" (disabled)", fg="yellow")
    return f"{name}{state}  [{hook.event}, {hook.mode}]  {hook.command}"


def _save_or_fail(registry: EventHookRegistry) -> None:
    try:
        registry.save()
    except OSError as e:
        Ensure.fail(f"Could not write {registry.path}: {e}")


@click.group("hooks")
def hooks_group() -> None:
    """Manage event hooks run at lifecycle events."""


@hooks_group.command("list")
@click.option("--event", type=click.Choice(EVENT_TYPES), help="Only show hooks for this event")
@click.pass_obj
def list_hooks(ctx: GhpContext, event: str | None) -> None:
    """List registered event hooks."""
    registry = ctx.load_event_hooks()
    hooks = [hook for hook in registry.hooks() if event is None or hook.event == event]
    if not hooks:
        user_output("No event hooks registered.")
        return
    for hook in hooks:
        machine_output(_format_hook_line(hook))


@hooks_group.command("show")
@click.argument("name")
@click.pass_obj
def show_hook(ctx: GhpContext, name: str) -> None:
    """Show one hook as JSON."""
    hook = Ensure.not_none(ctx.load_event_hooks().get(name), f'Hook "{name}" not found')
    machine_output(json.dumps(hook.to_json_dict(), indent=2))


@hooks_group.command("add")
@click.argument("name")
@click.option("--event", required=True, type=click.Choice(EVENT_TYPES), help="Event to hook")
@click.option("--command", "command", required=True, help="Shell command template to run")
@click.option(
    "--mode",
    type=click.Choice(HOOK_MODES),
    default="fire-and-forget",
    show_default=True,
    help="How a failure affects the workflow",
)
@click.option("--timeout", "timeout_ms", type=int, help="Timeout in milliseconds")
@click.option("--display-name", help="Name shown in output")
@click.option("--continue-prompt", help="Question asked by interactive hooks")
@click.option("--success-code", "success_codes", type=int, multiple=True, help="Exit code meaning success")
@click.option("--warn-code", "warn_codes", type=int, multiple=True, help="Exit code meaning warn")
@click.option("--abort-code", "abort_codes", type=int, multiple=True, help="Exit code meaning abort")
@click.pass_obj
def add_hook(
    ctx: GhpContext,
    name: str,
    event: str,
    command: str,
    mode: str,
    timeout_ms: int | None,
    display_name: str | None,
    continue_prompt: str | None,
    success_codes: tuple[int, ...],
    warn_codes: tuple[int, ...],
    abort_codes: tuple[int, ...],
) -> None:
    """Register a new event hook.

    \b
    Examples:
      ghp hooks add lint --event pre-pr --mode blocking --command "make lint"
      ghp hooks add notify --event pr-created --command 'notify ${pr.url}'
    """
    data: dict[str, Any] = {"name": name, "event": event, "command": command, "mode": mode}
    if timeout_ms is not None:
        data["timeout"] = timeout_ms
    if display_name:
        data["displayName"] = display_name
    if continue_prompt:
        data["continuePrompt"] = continue_prompt

    exit_codes: dict[str, list[int]] = {}
    if success_codes:
        exit_codes["success"] = list(success_codes)
    if warn_codes:
        exit_codes["warn"] = list(warn_codes)
    if abort_codes:
        exit_codes["abort"] = list(abort_codes)
    if exit_codes:
        data["exitCodes"] = exit_codes

    registry = ctx.load_event_hooks()
    try:
        hook = registry.add(parse_event_hook(data))
    except HookRegistryError as e:
        Ensure.fail(str(e))
    _save_or_fail(registry)
    user_output(f"Added hook {click.style(hook.name, fg='cyan')} for {hook.event}")


@hooks_group.command("remove")
@click.argument("name")
@click.pass_obj
def remove_hook(ctx: GhpContext, name: str) -> None:
    """Remove an event hook."""
    registry = ctx.load_event_hooks()
    if not registry.remove(name):
        Ensure.fail(f'Hook "{name}" not found')
    _save_or_fail(registry)
    user_output(f"Removed hook {click.style(name, fg='cyan')}")


def _set_enabled(ctx: GhpContext, name: str, enabled: bool) -> None:
    registry = ctx.load_event_hooks()
    try:
        if enabled:
            registry.enable(name)
        else:
            registry.disable(name)
    except HookRegistryError as e:
        Ensure.fail(str(e))
    _save_or_fail(registry)
    user_output(f"{'Enabled' if enabled else 'Disabled'} hook {click.style(name, fg='cyan')}")


@hooks_group.command("enable")
@click.argument("name")
@click.pass_obj
def enable_hook(ctx: GhpContext, name: str) -> None:
    """Enable an event hook."""
    _set_enabled(ctx, name, True)


@hooks_group.command("disable")
@click.argument("name")
@click.pass_obj
def disable_hook(ctx: GhpContext, name: str) -> None:
    """Disable an event hook without removing it."""
    _set_enabled(ctx, name, False)


@hooks_group.command("events")
@click.pass_obj
def list_events(ctx: GhpContext) -> None:
    """List lifecycle events with their hook counts and failure policy."""
    registry = ctx.load_event_hooks()
    for event in EVENT_TYPES:
        count = len(registry.hooks_for_event(event))
        policy = registry.on_failure_for(event, ctx.config.hooks_on_failure)
        machine_output(f"{event:<18} {count} enabled  on-failure: {policy}")
