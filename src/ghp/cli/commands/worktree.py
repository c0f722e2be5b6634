"""Worktree commands."""

from pathlib import Path

import click

from ghp.cli.ensure import Ensure
from ghp.cli.reporting import report_hook_results
from ghp.context import GhpContext
from ghp.naming import generate_branch_name, generate_worktree_path
from ghp.output import machine_output, user_output
from ghp.workflows import create_worktree_workflow, remove_worktree_workflow
from ghp.workflows.types import CreateWorktreeOptions, RemoveWorktreeOptions


@click.group("worktree")
def worktree_group() -> None:
    """Create and remove worktrees for parallel work on issues."""


def _branch_for_issue(
    ctx: GhpContext, repo_name: str, issue_number: int | None, issue_title: str | None
) -> str:
    if issue_number is None or not issue_title:
        Ensure.fail("Pass --branch, or --issue and --issue-title to generate one")
    if "{user}" in ctx.config.branch_pattern and not ctx.config.username:
        Ensure.fail("Set username in config.toml to generate branch names, or pass --branch")
    return generate_branch_name(
        ctx.config.branch_pattern,
        user=ctx.config.username or "",
        number=issue_number,
        title=issue_title,
        repo=repo_name,
    )


@worktree_group.command("create")
@click.option(
    "--branch",
    help="Branch to check out (defaults to branch_pattern from config for --issue/--issue-title)",
)
@click.option(
    "--path",
    "path",
    type=click.Path(path_type=Path),
    help="Worktree directory (defaults to the configured worktree_path layout)",
)
@click.option("--issue", "issue_number", type=int, help="Issue the worktree is for")
@click.option("--issue-title", help="Title of the issue, passed to hooks")
@click.pass_obj
def create_worktree(
    ctx: GhpContext,
    branch: str | None,
    path: Path | None,
    issue_number: int | None,
    issue_title: str | None,
) -> None:
    """Create a worktree and run worktree-created hooks inside it.

    Without --branch the branch name is generated from --issue and
    --issue-title using branch_pattern and username from config.toml.

    Prints the worktree path on stdout. Running it again for the same branch
    reuses the existing worktree.
    """
    repo = Ensure.repository(ctx)
    if branch is None:
        branch = _branch_for_issue(ctx, repo.name, issue_number, issue_title)
    if path is None:
        identifier: str | int = issue_number if issue_number is not None else branch
        path = generate_worktree_path(
            str(ctx.config.worktree_path), repo.name, identifier, issue_title
        )

    result = create_worktree_workflow(
        ctx.git,
        ctx.hook_executor(),
        CreateWorktreeOptions(
            repo=repo,
            branch=branch,
            path=path,
            cwd=ctx.cwd,
            issue_number=issue_number,
            issue_title=issue_title,
            on_failure=ctx.config.hooks_on_failure,
        ),
    )
    report_hook_results(result.hook_results)
    if not result.success:
        Ensure.fail(result.error or "Failed to create worktree")

    worktree = Ensure.not_none(result.worktree, "Failed to create worktree")
    if result.already_existed:
        user_output(f"Worktree for {click.style(branch, fg='yellow')} already exists")
    else:
        user_output(f"Created worktree for {click.style(branch, fg='yellow')}")
    machine_output(str(worktree.path))


@worktree_group.command("remove")
@click.option("--issue", "issue_number", type=int, required=True, help="Issue whose worktree to remove")
@click.option("--branch", help="Branch checked out in the worktree")
@click.option("--path", "path", type=click.Path(path_type=Path), help="Worktree directory")
@click.option("--issue-title", help="Title of the issue, passed to hooks")
@click.option("-f", "--force", is_flag=True, help="Remove even with uncommitted changes")
@click.pass_obj
def remove_worktree(
    ctx: GhpContext,
    issue_number: int,
    branch: str | None,
    path: Path | None,
    issue_title: str | None,
    force: bool,
) -> None:
    """Remove the worktree for an issue and run worktree-removed hooks.

    The worktree is found by --path, then --branch, then by the issue number
    appearing in a worktree's branch name.
    """
    repo = Ensure.repository(ctx)
    result = remove_worktree_workflow(
        ctx.git,
        ctx.hook_executor(),
        RemoveWorktreeOptions(
            repo=repo,
            issue_number=issue_number,
            cwd=ctx.cwd,
            issue_title=issue_title,
            branch=branch,
            worktree_path=path,
            force=force,
            on_failure=ctx.config.hooks_on_failure,
        ),
    )
    report_hook_results(result.hook_results)
    if not result.success:
        Ensure.fail(result.error or "Failed to remove worktree")

    worktree = Ensure.not_none(result.worktree, "Failed to remove worktree")
    user_output(f"Removed worktree {click.style(str(worktree.path), fg='cyan')}")
