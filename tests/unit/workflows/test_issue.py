"""Tests for the issue workflows."""

from pathlib import Path

from ghp.git.abc import GitError
from ghp.git.fake import FakeGit
from ghp.github.fake import FakeGitHubApi
from ghp.github.types import ProjectItem, StatusField, StatusOption
from ghp.shell.fake import FakeShellRunner, exited
from ghp.workflows import create_issue_workflow, start_issue_workflow
from ghp.workflows.issue import ADD_TO_PROJECT_WARNING
from ghp.workflows.types import CreateIssueOptions, StartIssueOptions
from tests.test_utils.builders import REPO, make_executor, make_hook

CWD = Path("/repo")
STATUS_FIELD = StatusField(
    field_id="F_status",
    options=(StatusOption(id="opt_todo", name="Todo"), StatusOption(id="opt_doing", name="In Progress")),
)


# ============================================================================
# create_issue_workflow
# ============================================================================


def test_create_issue_runs_every_step_and_fires_hook() -> None:
    github = FakeGitHubApi(next_issue_number=42, status_field=STATUS_FIELD)
    shell = FakeShellRunner()
    hooks = make_executor(
        make_hook("announce", "issue-created", "announce ${issue.number} ${issue.title}"),
        shell=shell,
    )

    result = create_issue_workflow(
        github,
        hooks,
        CreateIssueOptions(
            repo=REPO,
            title="Fix login",
            project_id="P1",
            body="Details",
            status="todo",
            labels=("bug", "p1"),
            assignees=("alice",),
            parent_issue_number=7,
        ),
    )

    assert result.success
    assert result.error is None
    assert result.issue is not None
    assert result.issue.number == 42
    assert result.issue.url == "https://github.com/acme/app/issues/42"
    assert result.project_item_id == "PVTI_I_42"
    assert github.project_additions == [("P1", "I_42")]
    assert github.status_updates == [("P1", "PVTI_I_42", "F_status", "opt_todo")]
    assert github.added_labels == [(42, "bug"), (42, "p1")]
    assert github.assignee_updates == [(42, ["alice"])]
    assert github.sub_issue_links == [(7, 42)]
    assert shell.commands == ["announce 42 'Fix login'"]


def test_create_issue_failure_stops_workflow() -> None:
    github = FakeGitHubApi(create_issue_fails=True)

    result = create_issue_workflow(
        github, make_executor(), CreateIssueOptions(repo=REPO, title="x", project_id="P1")
    )

    assert not result.success
    assert result.error == "Failed to create issue"
    assert github.project_additions == []


def test_create_issue_add_to_project_failure_is_a_warning() -> None:
    github = FakeGitHubApi(add_to_project_fails=True)
    shell = FakeShellRunner()
    hooks = make_executor(make_hook("announce", "issue-created"), shell=shell)

    result = create_issue_workflow(
        github, hooks, CreateIssueOptions(repo=REPO, title="x", project_id="P1", labels=("bug",))
    )

    assert result.success
    assert result.error == ADD_TO_PROJECT_WARNING
    assert result.issue is not None
    assert github.added_labels == []
    assert shell.calls == []


def test_create_issue_unknown_status_is_skipped() -> None:
    github = FakeGitHubApi(status_field=STATUS_FIELD)

    result = create_issue_workflow(
        github,
        make_executor(),
        CreateIssueOptions(repo=REPO, title="x", project_id="P1", status="Blocked"),
    )

    assert result.success
    assert github.status_updates == []


def test_create_issue_unexpected_error_becomes_result() -> None:
    github = FakeGitHubApi(create_issue_error=RuntimeError("network down"))

    result = create_issue_workflow(
        github, make_executor(), CreateIssueOptions(repo=REPO, title="x", project_id="P1")
    )

    assert not result.success
    assert result.error == "network down"


# ============================================================================
# start_issue_workflow
# ============================================================================


def _start_options(**overrides: object) -> StartIssueOptions:
    fields: dict[str, object] = {
        "repo": REPO,
        "issue_number": 42,
        "cwd": CWD,
        "issue_title": "Fix the bug",
        "username": "alice",
        "project_id": "P1",
        "status_field_id": "F_status",
        "status_option_id": "opt_doing",
    }
    fields.update(overrides)
    return StartIssueOptions(**fields)


def test_start_issue_creates_branch_updates_status_and_fires_hook() -> None:
    git = FakeGit()
    github = FakeGitHubApi(project_items={42: ProjectItem(id="PVTI_42", number=42, title="Fix")})
    shell = FakeShellRunner()
    hooks = make_executor(make_hook("started", "issue-started", "started ${branch}"), shell=shell)

    result = start_issue_workflow(git, github, hooks, _start_options())

    assert result.success
    assert result.branch == "alice/42-fix-the-bug"
    assert result.branch_created
    assert result.worktree is None
    assert git.created_branches == ["alice/42-fix-the-bug"]
    assert git.checked_out_branches == []
    assert github.status_updates == [("P1", "PVTI_42", "F_status", "opt_doing")]
    assert shell.calls == [("started 'alice/42-fix-the-bug'", None, 30_000)]


def test_start_issue_checks_out_existing_linked_branch() -> None:
    git = FakeGit(local_branches={"main", "feature/login"})

    result = start_issue_workflow(
        git, FakeGitHubApi(), make_executor(), _start_options(linked_branch="feature/login")
    )

    assert result.success
    assert not result.branch_created
    assert git.created_branches == []
    assert git.checked_out_branches == [(CWD, "feature/login")]


def test_start_issue_checks_out_existing_generated_branch() -> None:
    git = FakeGit(local_branches={"main", "alice/42-fix-the-bug"})

    result = start_issue_workflow(git, FakeGitHubApi(), make_executor(), _start_options())

    assert not result.branch_created
    assert git.checked_out_branches == [(CWD, "alice/42-fix-the-bug")]


def test_start_issue_parallel_creates_worktree_without_touching_main_checkout() -> None:
    git = FakeGit()
    shell = FakeShellRunner()
    hooks = make_executor(
        make_hook("setup", "worktree-created", "setup"),
        make_hook("started", "issue-started", "started"),
        shell=shell,
    )

    result = start_issue_workflow(
        git,
        FakeGitHubApi(),
        hooks,
        _start_options(parallel=True, worktree_path=Path("/wt/app/42-fix-the-bug")),
    )

    assert result.success
    assert result.branch_created
    assert result.worktree_created
    assert result.worktree is not None
    assert result.worktree.path == Path("/wt/app/42-fix-the-bug")
    assert git.created_branches == []
    assert git.checked_out_branches == []
    assert git.get_current_branch(CWD) == "main"
    assert [r.hook_name for r in result.hook_results] == ["setup", "started"]
    # issue-started runs inside the worktree
    assert shell.calls[1][1] == Path("/wt/app/42-fix-the-bug")


def test_start_issue_parallel_requires_worktree_path() -> None:
    result = start_issue_workflow(
        FakeGit(), FakeGitHubApi(), make_executor(), _start_options(parallel=True)
    )

    assert not result.success
    assert result.error == "worktree_path is required when parallel mode is enabled"


def test_start_issue_review_mode_changes_nothing_on_github() -> None:
    github = FakeGitHubApi(project_items={42: ProjectItem(id="PVTI_42", number=42, title="Fix")})
    shell = FakeShellRunner()
    hooks = make_executor(make_hook("started", "issue-started"), shell=shell)

    result = start_issue_workflow(FakeGit(), github, hooks, _start_options(review=True))

    assert result.success
    assert github.status_updates == []
    assert shell.calls == []


def test_start_issue_without_project_item_skips_status() -> None:
    github = FakeGitHubApi()

    result = start_issue_workflow(FakeGit(), github, make_executor(), _start_options())

    assert result.success
    assert github.status_updates == []


def test_start_issue_checkout_failure_reports_stderr() -> None:
    error = GitError(
        "Failed to checkout 'feature'",
        command="git checkout feature",
        stderr="error: Your local changes would be overwritten",
        exit_code=1,
        cwd=CWD,
    )
    git = FakeGit(local_branches={"main", "feature"}, checkout_error=error)

    result = start_issue_workflow(
        git, FakeGitHubApi(), make_executor(), _start_options(linked_branch="feature")
    )

    assert not result.success
    assert result.error == (
        "Failed to checkout 'feature'\nerror: Your local changes would be overwritten"
    )


def test_start_issue_hook_failure_does_not_fail_workflow() -> None:
    shell = FakeShellRunner(default=exited(1))
    hooks = make_executor(make_hook("started", "issue-started", mode="blocking"), shell=shell)

    result = start_issue_workflow(FakeGit(), FakeGitHubApi(), hooks, _start_options())

    assert result.success
    assert result.hook_results[0].aborted
