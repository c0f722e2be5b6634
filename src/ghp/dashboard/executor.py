"""Execute dashboard hooks and validate their JSON responses."""

import json
import logging
import time
from concurrent.futures import ThreadPoolExecutor
from typing import Any

from ghp.dashboard.types import DashboardHook, DashboardHookResult, DashboardSection, HookItem
from ghp.hooks.types import HookResult
from ghp.shell.abc import ShellRunner, shell_escape

logger = logging.getLogger(__name__)

MAX_CONCURRENT_DASHBOARD_HOOKS = 8
INVALID_DATA_STRUCTURE = "Invalid data structure: expected data.title (string) and data.items (array)"


def build_dashboard_command(hook: DashboardHook, branch: str, repo: str) -> str:
    return f"{hook.command} --branch {shell_escape(branch)} --repo {shell_escape(repo)}"


def _parse_item(raw: dict[str, Any]) -> HookItem:
    metadata = raw.get("metadata")
    summary = raw.get("summary")
    timestamp = raw.get("timestamp")
    return HookItem(
        id=str(raw.get("id", "")),
        type=str(raw.get("type", "")),
        title=str(raw.get("title", "")),
        summary=str(summary) if summary is not None else None,
        timestamp=str(timestamp) if timestamp is not None else None,
        metadata=metadata if isinstance(metadata, dict) else {},
    )


def parse_dashboard_response(stdout: str) -> DashboardSection | str:
    """Validate a dashboard hook's stdout.

    Returns:
        The parsed section on success, otherwise the error message
    """
    try:
        response = json.loads(stdout)
    except json.JSONDecodeError as e:
        return f"Invalid JSON output: {e}"

    if not isinstance(response, dict) or not isinstance(response.get("success"), bool):
        return "Invalid response: missing success boolean"

    if not response["success"]:
        error = response.get("error")
        return str(error) if error else "Hook reported failure"

    data = response.get("data")
    if (
        not isinstance(data, dict)
        or not isinstance(data.get("title"), str)
        or not isinstance(data.get("items"), list)
    ):
        return INVALID_DATA_STRUCTURE

    items: list[HookItem] = []
    for raw_item in data["items"]:
        if not isinstance(raw_item, dict):
            logger.debug("Skipping non-object dashboard item: %r", raw_item)
            continue
        items.append(_parse_item(raw_item))
    return DashboardSection(title=data["title"], items=tuple(items))


def execute_dashboard_hook(
    shell: ShellRunner, hook: DashboardHook, branch: str, repo: str
) -> DashboardHookResult:
    """Run one dashboard hook and validate its output.

    Failures are reported in the result, never raised.
    """
    command = build_dashboard_command(hook, branch, repo)
    logger.debug("Running dashboard hook %r: %s", hook.name, command)

    start = time.monotonic()
    run = shell.run(command, cwd=None, timeout_ms=hook.timeout_ms)
    duration_ms = int((time.monotonic() - start) * 1000)

    def failed(error: str) -> DashboardHookResult:
        logger.debug("Dashboard hook %r failed: %s", hook.name, error)
        return DashboardHookResult(
            hook=hook,
            result=HookResult(
                hook_name=hook.name,
                success=False,
                output=run.stdout,
                stderr=run.stderr,
                error=error,
                duration_ms=duration_ms,
                exit_code=run.exit_code,
            ),
        )

    if run.timed_out:
        return failed(f"Hook timed out after {hook.timeout_ms}ms")
    if run.exit_code != 0:
        return failed(f"Hook exited with code {run.exit_code}: {run.stderr.strip()}")

    parsed = parse_dashboard_response(run.stdout)
    if isinstance(parsed, str):
        return failed(parsed)

    return DashboardHookResult(
        hook=hook,
        result=HookResult(
            hook_name=hook.name,
            success=True,
            output=run.stdout,
            stderr=run.stderr,
            duration_ms=duration_ms,
            exit_code=run.exit_code,
        ),
        data=parsed,
    )


def execute_dashboard_hooks(
    shell: ShellRunner,
    hooks: list[DashboardHook],
    branch: str,
    repo: str,
    *,
    max_workers: int = MAX_CONCURRENT_DASHBOARD_HOOKS,
) -> list[DashboardHookResult]:
    """Run hooks concurrently; results are returned in the order of hooks."""
    if not hooks:
        return []
    with ThreadPoolExecutor(max_workers=min(len(hooks), max_workers)) as pool:
        futures = [
            pool.submit(_execute_safely, shell, hook, branch, repo) for hook in hooks
        ]
        return [future.result() for future in futures]


def _execute_safely(
    shell: ShellRunner, hook: DashboardHook, branch: str, repo: str
) -> DashboardHookResult:
    try:
        return execute_dashboard_hook(shell, hook, branch, repo)
    except Exception as e:
        logger.debug("Dashboard hook %r raised", hook.name, exc_info=True)
        return DashboardHookResult(
            hook=hook,
            result=HookResult(
                hook_name=hook.name,
                success=False,
                error=f"Hook raised an unexpected error: {e}",
            ),
        )


def group_results_by_category(
    results: list[DashboardHookResult],
) -> dict[str, list[DashboardHookResult]]:
    """Group results by their hook's category, in first-seen category order."""
    grouped: dict[str, list[DashboardHookResult]] = {}
    for result in results:
        grouped.setdefault(result.hook.category, []).append(result)
    return grouped
