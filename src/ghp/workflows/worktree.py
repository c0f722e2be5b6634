"""Worktree workflows.

Hooks for a new worktree run with the worktree as their working directory,
so files they write land in the worktree rather than the main checkout.
"""

import logging
from pathlib import Path

from ghp.git.abc import Git, GitError, GitWorktree, find_worktree_for_branch
from ghp.hooks.executor import EventHookExecutor
from ghp.hooks.types import (
    HookResult,
    IssueSnapshot,
    WorktreeCreatedPayload,
    WorktreeRemovedPayload,
    WorktreeSnapshot,
)
from ghp.naming import branch_matches_issue
from ghp.workflows.types import (
    CreateWorktreeOptions,
    CreateWorktreeResult,
    RemoveWorktreeOptions,
    RemoveWorktreeResult,
    WorktreeInfo,
)

logger = logging.getLogger(__name__)


def format_workflow_error(error: Exception) -> str:
    """Render an error for a workflow result, including git's stderr when present."""
    if isinstance(error, GitError) and error.stderr:
        return f"{error.message}\n{error.stderr}"
    return str(error)


def absolute_worktree_path(cwd: Path, path: Path) -> Path:
    """Return path as an absolute path, taking relative paths from cwd."""
    return (cwd / path).resolve()


def _issue_snapshot(options: CreateWorktreeOptions | RemoveWorktreeOptions) -> IssueSnapshot | None:
    if not options.issue_number:
        return None
    return IssueSnapshot(
        number=options.issue_number,
        title=options.issue_title or "",
        url=options.repo.issue_url(options.issue_number),
    )


def create_worktree_workflow(
    git: Git, hooks: EventHookExecutor, options: CreateWorktreeOptions
) -> CreateWorktreeResult:
    """Create a worktree for a branch and fire worktree-created.

    Idempotent: when a non-main worktree already has the branch checked out
    it is returned with already_existed=True and no hooks fire.
    """
    hook_results: list[HookResult] = []
    try:
        existing = find_worktree_for_branch(git.list_worktrees(options.cwd), options.branch)
        if existing is not None:
            logger.debug("Worktree for %s already exists at %s", options.branch, existing.path)
            return CreateWorktreeResult(
                success=True,
                worktree=WorktreeInfo.from_path(existing.path),
                already_existed=True,
                branch=options.branch,
            )

        path = absolute_worktree_path(options.cwd, options.path)
        git.create_worktree(options.cwd, path, options.branch)
        worktree = WorktreeInfo.from_path(path)

        if hooks.has_hooks_for_event("worktree-created"):
            payload = WorktreeCreatedPayload(
                repo=options.repo.full_name,
                branch=options.branch,
                worktree=WorktreeSnapshot(path=str(worktree.path), name=worktree.name),
                issue=_issue_snapshot(options),
            )
            hook_results.extend(
                hooks.execute_hooks_for_event(
                    "worktree-created",
                    payload,
                    cwd=worktree.path,
                    on_failure=options.on_failure,
                )
            )

        return CreateWorktreeResult(
            success=True,
            worktree=worktree,
            already_existed=False,
            branch=options.branch,
            hook_results=hook_results,
        )
    except Exception as e:
        logger.debug("create_worktree_workflow failed", exc_info=True)
        return CreateWorktreeResult(
            success=False, error=format_workflow_error(e), hook_results=hook_results
        )


def resolve_worktree(
    worktrees: list[GitWorktree], *, branch: str | None, issue_number: int
) -> GitWorktree | None:
    """Find the worktree for an issue: by exact branch, then by issue-number heuristic."""
    if branch:
        exact = find_worktree_for_branch(worktrees, branch)
        if exact is not None:
            return exact
    for wt in worktrees:
        if wt.is_main or not wt.branch:
            continue
        if branch_matches_issue(wt.branch, issue_number):
            return wt
    return None


def remove_worktree_workflow(
    git: Git, hooks: EventHookExecutor, options: RemoveWorktreeOptions
) -> RemoveWorktreeResult:
    """Remove the worktree for an issue and fire worktree-removed.

    The worktree is resolved by explicit path, then branch, then by the
    issue number appearing in a worktree's branch name.
    """
    hook_results: list[HookResult] = []
    try:
        target_path = (
            absolute_worktree_path(options.cwd, options.worktree_path)
            if options.worktree_path is not None
            else None
        )
        target_branch = options.branch

        if target_path is None:
            found = resolve_worktree(
                git.list_worktrees(options.cwd),
                branch=options.branch,
                issue_number=options.issue_number,
            )
            if found is not None:
                target_path = found.path
                target_branch = found.branch

        if target_path is None:
            return RemoveWorktreeResult(
                success=False, error=f"No worktree found for issue #{options.issue_number}"
            )

        git.remove_worktree(options.cwd, target_path, force=options.force)
        worktree = WorktreeInfo.from_path(target_path)

        if hooks.has_hooks_for_event("worktree-removed"):
            payload = WorktreeRemovedPayload(
                repo=options.repo.full_name,
                branch=target_branch or "",
                worktree=WorktreeSnapshot(path=str(worktree.path), name=worktree.name),
                issue=_issue_snapshot(options),
            )
            hook_results.extend(
                hooks.execute_hooks_for_event(
                    "worktree-removed",
                    payload,
                    cwd=options.cwd,
                    on_failure=options.on_failure,
                )
            )

        return RemoveWorktreeResult(
            success=True, worktree=worktree, branch=target_branch, hook_results=hook_results
        )
    except Exception as e:
        logger.debug("remove_worktree_workflow failed", exc_info=True)
        return RemoveWorktreeResult(
            success=False, error=format_workflow_error(e), hook_results=hook_results
        )
