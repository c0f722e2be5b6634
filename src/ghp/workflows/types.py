"""Options and results for the workflow layer.

Workflows take a frozen options dataclass and return a result dataclass.
Results always carry every hook result collected before the workflow
finished or stopped.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Literal

from ghp.github.types import RepoInfo
from ghp.hooks.types import HookResult, IssueSnapshot, OnFailure
from ghp.naming import DEFAULT_BRANCH_PATTERN

PrAbortEvent = Literal["pre-pr", "pr-creating"]


@dataclass(frozen=True)
class IssueInfo:
    number: int
    title: str
    url: str
    body: str = ""

    def to_snapshot(self) -> IssueSnapshot:
        return IssueSnapshot(number=self.number, title=self.title, url=self.url, body=self.body)


@dataclass(frozen=True)
class PRInfo:
    number: int
    title: str
    url: str
    body: str = ""


@dataclass(frozen=True)
class WorktreeInfo:
    path: Path
    name: str

    @classmethod
    def from_path(cls, path: Path) -> "WorktreeInfo":
        return cls(path=path, name=path.name)


@dataclass(frozen=True)
class WorkflowResult:
    success: bool
    error: str | None = None
    hook_results: list[HookResult] = field(default_factory=list)


# ============================================================================
# Issues
# ============================================================================


@dataclass(frozen=True)
class CreateIssueOptions:
    repo: RepoInfo
    title: str
    project_id: str
    body: str = ""
    status: str | None = None
    labels: tuple[str, ...] = ()
    assignees: tuple[str, ...] = ()
    parent_issue_number: int | None = None
    on_failure: OnFailure | None = None


@dataclass(frozen=True)
class CreateIssueResult(WorkflowResult):
    issue: IssueInfo | None = None
    project_item_id: str | None = None


@dataclass(frozen=True)
class StartIssueOptions:
    """Options for starting work on an issue.

    ``worktree_path`` is required when ``parallel`` is set; choosing where
    worktrees live is the caller's job.
    """

    repo: RepoInfo
    issue_number: int
    cwd: Path
    issue_title: str = ""
    linked_branch: str | None = None
    parallel: bool = False
    worktree_path: Path | None = None
    review: bool = False
    branch_pattern: str = DEFAULT_BRANCH_PATTERN
    username: str = "user"
    project_id: str | None = None
    status_field_id: str | None = None
    status_option_id: str | None = None
    on_failure: OnFailure | None = None


@dataclass(frozen=True)
class StartIssueResult(WorkflowResult):
    branch: str | None = None
    branch_created: bool = False
    worktree: WorktreeInfo | None = None
    worktree_created: bool = False
    issue: IssueInfo | None = None


# ============================================================================
# Pull requests
# ============================================================================


@dataclass(frozen=True)
class CreatePROptions:
    repo: RepoInfo
    title: str
    cwd: Path
    body: str = ""
    base_branch: str = "main"
    head_branch: str | None = None
    issue_number: int | None = None
    issue_title: str | None = None
    open_in_browser: bool = False
    skip_hooks: bool = False
    force: bool = False
    on_failure: OnFailure | None = None


@dataclass(frozen=True)
class CreatePRResult(WorkflowResult):
    pr: PRInfo | None = None
    issue: IssueInfo | None = None
    aborted_by_hook: str | None = None
    aborted_at_event: PrAbortEvent | None = None


@dataclass(frozen=True)
class PrMergedOptions:
    repo: RepoInfo
    pr_number: int
    pr_title: str
    merged_at: str
    branch: str
    base: str
    pr_url: str | None = None
    cwd: Path | None = None
    on_failure: OnFailure | None = None


# ============================================================================
# Worktrees
# ============================================================================


@dataclass(frozen=True)
class CreateWorktreeOptions:
    repo: RepoInfo
    branch: str
    path: Path
    cwd: Path
    issue_number: int | None = None
    issue_title: str | None = None
    on_failure: OnFailure | None = None


@dataclass(frozen=True)
class CreateWorktreeResult(WorkflowResult):
    worktree: WorktreeInfo | None = None
    already_existed: bool = False
    branch: str | None = None


@dataclass(frozen=True)
class RemoveWorktreeOptions:
    repo: RepoInfo
    issue_number: int
    cwd: Path
    issue_title: str | None = None
    branch: str | None = None
    worktree_path: Path | None = None
    force: bool = False
    on_failure: OnFailure | None = None


@dataclass(frozen=True)
class RemoveWorktreeResult(WorkflowResult):
    worktree: WorktreeInfo | None = None
    branch: str | None = None
