"""Branch dashboard: commits and diff stats against the base branch, plus hook sections."""

import json
from dataclasses import asdict
from typing import Any

import click

from ghp.cli.ensure import Ensure
from ghp.context import GhpContext
from ghp.dashboard.branch_data import BranchDashboardData, gather_dashboard_data
from ghp.dashboard.executor import execute_dashboard_hooks, group_results_by_category
from ghp.dashboard.types import DashboardHookResult
from ghp.github.url_parser import detect_repository
from ghp.output import machine_output, user_output


def _section_json(category: str, result: DashboardHookResult) -> dict[str, Any]:
    data: dict[str, Any] = {
        "category": category,
        "hook": result.hook.name,
        "name": result.hook.label,
        "success": result.result.success,
    }
    if result.data is not None:
        data["title"] = result.data.title
        data["items"] = [asdict(item) for item in result.data.items]
    if result.result.error is not None:
        data["error"] = result.result.error
    return data


def _dashboard_json(
    data: BranchDashboardData, grouped: dict[str, list[DashboardHookResult]]
) -> dict[str, Any]:
    output: dict[str, Any] = {
        "branch": data.branch,
        "base": data.base_branch,
        "commits": [asdict(commit) for commit in data.commits],
        "stats": {
            "files_changed": data.stats.files_changed,
            "insertions": data.stats.insertions,
            "deletions": data.stats.deletions,
            "files": [asdict(change) for change in data.stats.files],
        },
        "sections": [
            _section_json(category, result)
            for category, results in grouped.items()
            for result in results
        ],
    }
    if data.diff is not None:
        output["diff"] = data.diff
    return output


def _render(data: BranchDashboardData, grouped: dict[str, list[DashboardHookResult]]) -> None:
    branch = click.style(data.branch, fg="cyan", bold=True)
    machine_output(f"{branch} vs {data.base_branch}")
    stats = data.stats
    machine_output(
        f"{stats.files_changed} files changed, "
        f"{click.style(f'+{stats.insertions}', fg='green')} "
        f"{click.style(f'-{stats.deletions}', fg='red')}"
    )

    machine_output("")
    machine_output(click.style(f"Commits ({len(data.commits)})", bold=True))
    for commit in data.commits:
        machine_output(f"  {click.style(commit.short_sha, fg='yellow')} {commit.subject}")

    for category, results in grouped.items():
        machine_output("")
        machine_output(click.style(category.upper(), bold=True))
        for result in results:
            if result.data is None:
                error = click.style(result.result.error or "failed", fg="red")
                machine_output(f"  {result.hook.label}: {error}")
                continue
            machine_output(f"  {click.style(result.data.title, bold=True)}")
            for item in result.data.items:
                summary = f" - {item.summary}" if item.summary else ""
                machine_output(f"    • {item.title}{summary}")

    if data.diff is not None:
        machine_output("")
        machine_output(data.diff)


@click.command("dashboard")
@click.option("--base", help="Base branch (defaults to the repository's default branch)")
@click.option("--diff", "include_diff", is_flag=True, help="Include the full diff")
@click.option("--max-diff-lines", type=int, help="Truncate the diff to this many lines")
@click.option("--json", "as_json", is_flag=True, help="Output JSON")
@click.pass_obj
def dashboard_cmd(
    ctx: GhpContext,
    base: str | None,
    include_diff: bool,
    max_diff_lines: int | None,
    as_json: bool,
) -> None:
    """Show the current branch's changes and dashboard hook sections."""
    if not ctx.git.is_git_repository(ctx.cwd):
        Ensure.fail("Not inside a git repository")

    data = Ensure.not_none(
        gather_dashboard_data(
            ctx.git,
            ctx.cwd,
            base=base,
            include_diff=include_diff,
            max_diff_lines=max_diff_lines,
        ),
        "HEAD is detached; check out a branch first",
    )

    hooks = ctx.load_dashboard_hooks().enabled_hooks()
    results: list[DashboardHookResult] = []
    if hooks:
        repo = detect_repository(ctx.git, ctx.cwd)
        if repo is None:
            user_output("Warning: no GitHub remote detected; skipping dashboard hooks")
        else:
            results = execute_dashboard_hooks(ctx.shell, hooks, data.branch, repo.full_name)

    grouped = group_results_by_category(results)
    if as_json:
        machine_output(json.dumps(_dashboard_json(data, grouped), indent=2))
    else:
        _render(data, grouped)
