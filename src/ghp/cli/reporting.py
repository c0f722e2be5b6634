"""Rendering of hook results after a workflow runs."""

import click

from ghp.hooks.types import HookResult
from ghp.output import user_output


def format_hook_result(result: HookResult) -> str:
    if result.success:
        marker = click.style("✓", fg="green")
        detail = f"{result.duration_ms}ms"
    elif result.aborted:
        marker = click.style("✗", fg="red")
        detail = result.error or "aborted"
    else:
        marker = click.style("!", fg="yellow")
        detail = result.error or "failed"
    return f"  {marker} {result.hook_name} ({detail})"


def report_hook_results(results: list[HookResult]) -> None:
    """Print one line per hook that ran; nothing when no hooks ran."""
    if not results:
        return
    user_output(click.style("Hooks:", bold=True))
    for result in results:
        user_output(format_hook_result(result))
