"""Gather the git data shown on the branch dashboard."""

from dataclasses import dataclass
from pathlib import Path

from ghp.git.abc import Commit, DiffStats, Git


@dataclass(frozen=True)
class BranchDashboardData:
    branch: str
    base_branch: str
    commits: tuple[Commit, ...]
    stats: DiffStats
    diff: str | None = None


def truncate_diff(diff: str, max_lines: int | None) -> str:
    """Keep the first max_lines lines and note how many were dropped."""
    lines = diff.split("\n")
    if not max_lines or len(lines) <= max_lines:
        return diff
    dropped = len(lines) - max_lines
    return "\n".join(lines[:max_lines]) + f"\n\n... (truncated, {dropped} more lines)"


def gather_dashboard_data(
    git: Git,
    cwd: Path,
    base: str | None = None,
    include_diff: bool = False,
    max_diff_lines: int | None = None,
) -> BranchDashboardData | None:
    """Collect commits, diff stats and optionally the diff for the current branch.

    Args:
        git: Git gateway
        cwd: Directory inside the repository
        base: Base branch (defaults to the repository's default branch)
        include_diff: Whether to include the full patch
        max_diff_lines: Truncate the patch to this many lines

    Returns:
        None when HEAD is detached
    """
    branch = git.get_current_branch(cwd)
    if branch is None:
        return None

    base_branch = base or git.get_default_branch(cwd)
    diff = None
    if include_diff:
        diff = truncate_diff(git.get_full_diff(cwd, base_branch), max_diff_lines)

    return BranchDashboardData(
        branch=branch,
        base_branch=base_branch,
        commits=tuple(git.get_commits_since(cwd, base_branch)),
        stats=git.get_diff_stats(cwd, base_branch),
        diff=diff,
    )
