"""Issue workflows: create an issue, and start work on one."""

import logging

from ghp.git.abc import Git
from ghp.github.abc import GitHubApi
from ghp.hooks.executor import EventHookExecutor
from ghp.hooks.types import HookResult, IssueCreatedPayload, IssueStartedPayload
from ghp.naming import generate_branch_name
from ghp.workflows.types import (
    CreateIssueOptions,
    CreateIssueResult,
    CreateWorktreeOptions,
    IssueInfo,
    StartIssueOptions,
    StartIssueResult,
    WorktreeInfo,
)
from ghp.workflows.worktree import create_worktree_workflow, format_workflow_error

logger = logging.getLogger(__name__)

ADD_TO_PROJECT_WARNING = "Issue created but failed to add to project"


def create_issue_workflow(
    github: GitHubApi, hooks: EventHookExecutor, options: CreateIssueOptions
) -> CreateIssueResult:
    """Create an issue, add it to a project, and fire issue-created.

    Steps, in order:
    1. Create the issue (failure stops the workflow)
    2. Add it to the project (failure returns success with a warning, since
       the issue already exists)
    3. Set the initial status, matched case-insensitively; no match is skipped
    4. Apply labels, one call per label
    5. Set assignees
    6. Link to the parent issue
    7. Fire issue-created
    """
    hook_results: list[HookResult] = []
    repo = options.repo
    try:
        created = github.create_issue(repo, options.title, options.body)
        if created is None:
            return CreateIssueResult(success=False, error="Failed to create issue")

        issue = IssueInfo(
            number=created.number,
            title=options.title,
            body=options.body,
            url=repo.issue_url(created.number),
        )

        item_id = github.add_to_project(options.project_id, created.node_id)
        if item_id is None:
            logger.warning("Issue #%d was not added to project %s", issue.number, options.project_id)
            return CreateIssueResult(success=True, error=ADD_TO_PROJECT_WARNING, issue=issue)

        if options.status:
            status_field = github.get_status_field(options.project_id)
            option = status_field.find_option(options.status) if status_field else None
            if status_field is not None and option is not None:
                github.update_item_status(
                    options.project_id, item_id, status_field.field_id, option.id
                )
            else:
                logger.debug("No status option named %r; skipping", options.status)

        for label in options.labels:
            github.add_label_to_issue(repo, issue.number, label)

        if options.assignees:
            github.update_assignees(repo, issue.number, list(options.assignees))

        if options.parent_issue_number:
            github.add_sub_issue(repo, options.parent_issue_number, issue.number)

        if hooks.has_hooks_for_event("issue-created"):
            payload = IssueCreatedPayload(repo=repo.full_name, issue=issue.to_snapshot())
            hook_results.extend(
                hooks.execute_hooks_for_event(
                    "issue-created", payload, on_failure=options.on_failure
                )
            )

        return CreateIssueResult(
            success=True, issue=issue, project_item_id=item_id, hook_results=hook_results
        )
    except Exception as e:
        logger.debug("create_issue_workflow failed", exc_info=True)
        return CreateIssueResult(
            success=False, error=format_workflow_error(e), hook_results=hook_results
        )


def start_issue_workflow(
    git: Git, github: GitHubApi, hooks: EventHookExecutor, options: StartIssueOptions
) -> StartIssueResult:
    """Start work on an issue.

    Derives the branch from the branch pattern when none is linked and
    creates it if missing. In parallel mode the branch gets its own
    worktree; otherwise it is checked out in place. Unless reviewing, the
    issue's project status is updated and issue-started fires, from inside
    the worktree when there is one. Review mode changes nothing on GitHub
    and fires no issue hooks.
    """
    hook_results: list[HookResult] = []
    repo = options.repo
    issue = IssueInfo(
        number=options.issue_number,
        title=options.issue_title,
        url=repo.issue_url(options.issue_number),
    )
    try:
        branch = options.linked_branch
        branch_created = False
        if branch is None:
            branch = generate_branch_name(
                options.branch_pattern,
                user=options.username,
                number=options.issue_number,
                title=options.issue_title,
                repo=repo.name,
            )
            if not git.branch_exists(options.cwd, branch):
                branch_created = True
                # In parallel mode the worktree creates the branch, leaving
                # the main checkout where it is
                if not options.parallel:
                    git.create_branch(options.cwd, branch)

        worktree: WorktreeInfo | None = None
        worktree_created = False
        if options.parallel:
            if options.worktree_path is None:
                return StartIssueResult(
                    success=False,
                    error="worktree_path is required when parallel mode is enabled",
                )
            worktree_result = create_worktree_workflow(
                git,
                hooks,
                CreateWorktreeOptions(
                    repo=repo,
                    branch=branch,
                    path=options.worktree_path,
                    cwd=options.cwd,
                    issue_number=options.issue_number,
                    issue_title=options.issue_title,
                    on_failure=options.on_failure,
                ),
            )
            hook_results.extend(worktree_result.hook_results)
            if not worktree_result.success:
                return StartIssueResult(
                    success=False, error=worktree_result.error, hook_results=hook_results
                )
            worktree = worktree_result.worktree
            worktree_created = not worktree_result.already_existed
        elif not branch_created:
            git.checkout_branch(options.cwd, branch)

        if not options.review:
            _update_status(github, options)

            if hooks.has_hooks_for_event("issue-started"):
                payload = IssueStartedPayload(
                    repo=repo.full_name, issue=issue.to_snapshot(), branch=branch
                )
                hook_results.extend(
                    hooks.execute_hooks_for_event(
                        "issue-started",
                        payload,
                        cwd=worktree.path if worktree is not None else None,
                        on_failure=options.on_failure,
                    )
                )

        return StartIssueResult(
            success=True,
            branch=branch,
            branch_created=branch_created,
            worktree=worktree,
            worktree_created=worktree_created,
            issue=issue,
            hook_results=hook_results,
        )
    except Exception as e:
        logger.debug("start_issue_workflow failed", exc_info=True)
        return StartIssueResult(
            success=False, error=format_workflow_error(e), hook_results=hook_results
        )


def _update_status(github: GitHubApi, options: StartIssueOptions) -> None:
    if not (options.project_id and options.status_field_id and options.status_option_id):
        return
    item = github.find_item_by_number(options.repo, options.issue_number)
    if item is None:
        logger.debug("Issue #%d is not in a project; status unchanged", options.issue_number)
        return
    github.update_item_status(
        options.project_id, item.id, options.status_field_id, options.status_option_id
    )
