"""Pull request commands."""

from datetime import UTC, datetime

import click

from ghp.cli.ensure import Ensure
from ghp.cli.reporting import report_hook_results
from ghp.context import GhpContext
from ghp.output import machine_output, user_output
from ghp.validation import InvalidInputError, validate_url
from ghp.workflows import create_pr_workflow, fire_pr_merged_hooks
from ghp.workflows.types import CreatePROptions, PrMergedOptions


@click.group("pr")
def pr_group() -> None:
    """Create pull requests with hook checkpoints."""


@pr_group.command("create")
@click.option("--title", required=True, help="Pull request title")
@click.option("--body", default="", help="Pull request body")
@click.option("--base", help="Base branch (defaults to main_branch from config)")
@click.option("--issue", "issue_number", type=int, help="Issue this pull request relates to")
@click.option("--issue-title", help="Title of the issue, passed to hooks")
@click.option("--web", "open_in_browser", is_flag=True, help="Finish creating the PR in a browser")
@click.option("-f", "--force", is_flag=True, help="Create the PR even if a hook aborts")
@click.option("--no-hooks", "skip_hooks", is_flag=True, help="Do not run any hooks")
@click.pass_obj
def create_pr(
    ctx: GhpContext,
    title: str,
    body: str,
    base: str | None,
    issue_number: int | None,
    issue_title: str | None,
    open_in_browser: bool,
    force: bool,
    skip_hooks: bool,
) -> None:
    """Create a pull request for the current branch.

    pre-pr and pr-creating hooks run first and can stop the PR; pr-created
    hooks run afterwards. Prints the PR URL on stdout.
    """
    repo = Ensure.repository(ctx)
    result = create_pr_workflow(
        ctx.git,
        ctx.pr_creator,
        ctx.hook_executor(),
        CreatePROptions(
            repo=repo,
            title=title,
            cwd=ctx.cwd,
            body=body,
            base_branch=base or ctx.config.main_branch,
            issue_number=issue_number,
            issue_title=issue_title,
            open_in_browser=open_in_browser,
            skip_hooks=skip_hooks,
            force=force,
            on_failure=ctx.config.hooks_on_failure,
        ),
    )
    report_hook_results(result.hook_results)
    if not result.success:
        if result.aborted_by_hook is not None:
            user_output("Use --force to create the PR anyway.")
        Ensure.fail(result.error or "Failed to create pull request")

    pr = Ensure.not_none(result.pr, "Failed to create pull request")
    user_output(f"Created PR {click.style(f'#{pr.number}', fg='cyan')}")
    machine_output(pr.url)


@pr_group.command("merged")
@click.option("--number", "pr_number", type=int, required=True, help="Pull request number")
@click.option("--title", required=True, help="Pull request title")
@click.option("--branch", help="Head branch (defaults to the current branch)")
@click.option("--base", help="Base branch (defaults to main_branch from config)")
@click.option("--url", "pr_url", help="Pull request URL")
@click.option("--merged-at", help="ISO 8601 merge time (defaults to now)")
@click.pass_obj
def pr_merged(
    ctx: GhpContext,
    pr_number: int,
    title: str,
    branch: str | None,
    base: str | None,
    pr_url: str | None,
    merged_at: str | None,
) -> None:
    """Run pr-merged hooks for a pull request that has been merged."""
    repo = Ensure.repository(ctx)
    if pr_url is not None:
        try:
            validate_url(pr_url)
        except InvalidInputError as e:
            Ensure.fail(str(e))
    result = fire_pr_merged_hooks(
        ctx.hook_executor(),
        PrMergedOptions(
            repo=repo,
            pr_number=pr_number,
            pr_title=title,
            merged_at=merged_at or datetime.now(UTC).isoformat(timespec="seconds"),
            branch=branch or Ensure.current_branch(ctx),
            base=base or ctx.config.main_branch,
            pr_url=pr_url,
            cwd=ctx.cwd,
            on_failure=ctx.config.hooks_on_failure,
        ),
    )
    report_hook_results(result.hook_results)
    if not result.hook_results:
        user_output("No pr-merged hooks ran.")
