"""Pull request workflows."""

import logging

from ghp.git.abc import Git
from ghp.github.pr.abc import (
    PullRequestCreationError,
    PullRequestCreator,
    PullRequestExistsError,
)
from ghp.hooks.executor import EventHookExecutor
from ghp.hooks.types import (
    DiffStat,
    HookResult,
    MergedPullRequestSnapshot,
    PrCreatedPayload,
    PrCreatingPayload,
    PrePrPayload,
    PrMergedPayload,
    PullRequestSnapshot,
    first_aborted,
)
from ghp.workflows.types import (
    CreatePROptions,
    CreatePRResult,
    IssueInfo,
    PrAbortEvent,
    PrMergedOptions,
    PRInfo,
    WorkflowResult,
)
from ghp.workflows.worktree import format_workflow_error

logger = logging.getLogger(__name__)

PR_EXISTS_ERROR = "A pull request already exists for this branch"


def _aborted(
    event: PrAbortEvent, results: list[HookResult], hook_results: list[HookResult]
) -> CreatePRResult | None:
    aborting = first_aborted(results)
    if aborting is None:
        return None
    return CreatePRResult(
        success=False,
        error=f'PR creation aborted by {event} hook "{aborting.hook_name}"',
        hook_results=hook_results,
        aborted_by_hook=aborting.hook_name,
        aborted_at_event=event,
    )


def create_pr_workflow(
    git: Git,
    pr_creator: PullRequestCreator,
    hooks: EventHookExecutor,
    options: CreatePROptions,
) -> CreatePRResult:
    """Create a pull request surrounded by three hook checkpoints.

    1. pre-pr: receives diff stats and changed files; an aborted result stops
       the workflow unless ``force`` is set
    2. pr-creating: receives the proposed title and body; same contract
    3. the PR is created
    4. pr-created: fired after the fact and never stops anything

    ``skip_hooks`` bypasses all checkpoints.
    """
    hook_results: list[HookResult] = []
    repo = options.repo
    base = options.base_branch
    try:
        head = options.head_branch or git.get_current_branch(options.cwd)
        if not head:
            return CreatePRResult(success=False, error="Could not determine current branch")

        if not options.skip_hooks and hooks.has_hooks_for_event("pre-pr"):
            stats = git.get_diff_stats(options.cwd, base)
            changed = git.get_changed_files(options.cwd, base)
            pre_pr_payload = PrePrPayload(
                repo=repo.full_name,
                branch=head,
                base=base,
                changed_files=tuple(change.path for change in changed),
                diff_stat=DiffStat(
                    additions=stats.insertions,
                    deletions=stats.deletions,
                    files_changed=stats.files_changed,
                ),
            )
            results = hooks.execute_hooks_for_event(
                "pre-pr", pre_pr_payload, cwd=options.cwd, on_failure=options.on_failure
            )
            hook_results.extend(results)
            if not options.force:
                aborted = _aborted("pre-pr", results, hook_results)
                if aborted is not None:
                    return aborted

        body = options.body
        if not body and options.issue_number:
            body = f"Relates to #{options.issue_number}"

        if not options.skip_hooks and hooks.has_hooks_for_event("pr-creating"):
            creating_payload = PrCreatingPayload(
                repo=repo.full_name, branch=head, base=base, title=options.title, body=body
            )
            results = hooks.execute_hooks_for_event(
                "pr-creating", creating_payload, cwd=options.cwd, on_failure=options.on_failure
            )
            hook_results.extend(results)
            if not options.force:
                aborted = _aborted("pr-creating", results, hook_results)
                if aborted is not None:
                    return aborted

        created = pr_creator.create(
            options.cwd,
            title=options.title,
            body=body,
            base=base,
            head=head,
            open_in_browser=options.open_in_browser,
        )
        pr = PRInfo(
            number=created.number,
            title=options.title,
            body=body,
            url=created.url or repo.pull_request_url(created.number),
        )

        issue = None
        if options.issue_number:
            issue = IssueInfo(
                number=options.issue_number,
                title=options.issue_title or "",
                url=repo.issue_url(options.issue_number),
            )

        if not options.skip_hooks and hooks.has_hooks_for_event("pr-created"):
            created_payload = PrCreatedPayload(
                repo=repo.full_name,
                pr=PullRequestSnapshot(number=pr.number, title=pr.title, url=pr.url, body=body),
                branch=head,
                issue=issue.to_snapshot() if issue is not None else None,
            )
            hook_results.extend(
                hooks.execute_hooks_for_event(
                    "pr-created", created_payload, cwd=options.cwd, on_failure=options.on_failure
                )
            )

        return CreatePRResult(success=True, pr=pr, issue=issue, hook_results=hook_results)
    except PullRequestExistsError:
        return CreatePRResult(success=False, error=PR_EXISTS_ERROR, hook_results=hook_results)
    except PullRequestCreationError as e:
        return CreatePRResult(
            success=False, error=e.stderr or str(e), hook_results=hook_results
        )
    except Exception as e:
        logger.debug("create_pr_workflow failed", exc_info=True)
        return CreatePRResult(
            success=False, error=format_workflow_error(e), hook_results=hook_results
        )


def fire_pr_merged_hooks(hooks: EventHookExecutor, options: PrMergedOptions) -> WorkflowResult:
    """Fire pr-merged for a pull request that has been merged."""
    repo = options.repo
    payload = PrMergedPayload(
        repo=repo.full_name,
        pr=MergedPullRequestSnapshot(
            number=options.pr_number,
            title=options.pr_title,
            url=options.pr_url or repo.pull_request_url(options.pr_number),
            merged_at=options.merged_at,
        ),
        branch=options.branch,
        base=options.base,
    )
    results = hooks.execute_hooks_for_event(
        "pr-merged", payload, cwd=options.cwd, on_failure=options.on_failure
    )
    return WorkflowResult(success=True, hook_results=results)
