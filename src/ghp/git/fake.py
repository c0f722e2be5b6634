"""Fake Git implementation for testing."""

from pathlib import Path

from ghp.git.abc import (
    EMPTY_DIFF_STATS,
    Commit,
    DiffStats,
    FileChange,
    Git,
    GitError,
    GitWorktree,
)
from ghp.validation import validate_branch_name, validate_path


class FakeGit(Git):
    """In-memory Git implementation for tests.

    All state is provided through constructor keyword arguments. Worktree and
    branch mutations update the in-memory state so that follow-up queries see
    them, which makes idempotence checks observable in tests.

    Configured errors (``create_worktree_error`` and friends) are raised from
    the corresponding method after input validation, mirroring RealGit.

    Mutation Tracking:
    - created_branches: branches created via create_branch
    - checked_out_branches: (cwd, branch) pairs passed to checkout_branch
    - added_worktrees: (path, branch) pairs passed to create_worktree
    - removed_worktrees: (path, force) pairs passed to remove_worktree
    """

    def __init__(
        self,
        *,
        current_branch: str | None = "main",
        default_branch: str = "main",
        local_branches: set[str] | None = None,
        worktrees: list[GitWorktree] | None = None,
        repository_root: Path | None = None,
        is_repository: bool = True,
        remote_urls: dict[str, str] | None = None,
        uncommitted_changes: bool = False,
        diff_stats: DiffStats | None = None,
        changed_files: list[FileChange] | None = None,
        commits: list[Commit] | None = None,
        full_diff: str = "",
        create_worktree_error: GitError | None = None,
        remove_worktree_error: GitError | None = None,
        checkout_error: GitError | None = None,
    ) -> None:
        self._current_branch = current_branch
        self._default_branch = default_branch
        self._local_branches = set(local_branches) if local_branches is not None else {"main"}
        self._worktrees = list(worktrees) if worktrees is not None else []
        self._repository_root = repository_root or Path("/repo")
        self._is_repository = is_repository
        self._remote_urls = remote_urls or {}
        self._uncommitted_changes = uncommitted_changes
        self._diff_stats = diff_stats or EMPTY_DIFF_STATS
        self._changed_files = changed_files or []
        self._commits = commits or []
        self._full_diff = full_diff
        self._create_worktree_error = create_worktree_error
        self._remove_worktree_error = remove_worktree_error
        self._checkout_error = checkout_error

        self._created_branches: list[str] = []
        self._checked_out_branches: list[tuple[Path, str]] = []
        self._added_worktrees: list[tuple[Path, str]] = []
        self._removed_worktrees: list[tuple[Path, bool]] = []

    @property
    def created_branches(self) -> list[str]:
        return list(self._created_branches)

    @property
    def checked_out_branches(self) -> list[tuple[Path, str]]:
        return list(self._checked_out_branches)

    @property
    def added_worktrees(self) -> list[tuple[Path, str]]:
        return list(self._added_worktrees)

    @property
    def removed_worktrees(self) -> list[tuple[Path, bool]]:
        return list(self._removed_worktrees)

    def get_current_branch(self, cwd: Path) -> str | None:
        return self._current_branch

    def get_default_branch(self, cwd: Path) -> str:
        return self._default_branch

    def branch_exists(self, cwd: Path, branch: str) -> bool:
        validate_branch_name(branch)
        return branch in self._local_branches

    def is_git_repository(self, cwd: Path) -> bool:
        return self._is_repository

    def get_repository_root(self, cwd: Path) -> Path:
        return self._repository_root

    def get_remote_url(self, cwd: Path, remote: str = "origin") -> str:
        if remote not in self._remote_urls:
            raise GitError(
                f"Failed to get URL of '{remote}'",
                command=f"git remote get-url {remote}",
                stderr=f"error: No such remote '{remote}'",
                exit_code=2,
                cwd=cwd,
            )
        return self._remote_urls[remote]

    def has_uncommitted_changes(self, cwd: Path) -> bool:
        return self._uncommitted_changes

    def create_branch(self, cwd: Path, branch: str) -> None:
        validate_branch_name(branch)
        self._local_branches.add(branch)
        self._created_branches.append(branch)
        self._current_branch = branch

    def checkout_branch(self, cwd: Path, branch: str) -> None:
        validate_branch_name(branch)
        if self._checkout_error is not None:
            raise self._checkout_error
        self._checked_out_branches.append((cwd, branch))
        self._current_branch = branch

    def list_worktrees(self, repo_root: Path) -> list[GitWorktree]:
        return list(self._worktrees)

    def create_worktree(self, repo_root: Path, path: Path, branch: str) -> None:
        validate_branch_name(branch)
        validate_path(str(path))
        if self._create_worktree_error is not None:
            raise self._create_worktree_error
        self._local_branches.add(branch)
        self._worktrees.append(GitWorktree(path=path, head="0" * 40, branch=branch))
        self._added_worktrees.append((path, branch))

    def remove_worktree(self, repo_root: Path, path: Path, *, force: bool) -> None:
        validate_path(str(path))
        if self._remove_worktree_error is not None:
            raise self._remove_worktree_error
        self._worktrees = [wt for wt in self._worktrees if wt.path != path]
        self._removed_worktrees.append((path, force))

    def get_diff_stats(self, cwd: Path, base_branch: str) -> DiffStats:
        return self._diff_stats

    def get_changed_files(self, cwd: Path, base_branch: str) -> list[FileChange]:
        return list(self._changed_files)

    def get_commits_since(self, cwd: Path, base_branch: str) -> list[Commit]:
        return list(self._commits)

    def get_full_diff(self, cwd: Path, base_branch: str) -> str:
        return self._full_diff
