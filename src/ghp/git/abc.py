"""High-level git operations interface.

This module provides a clean abstraction over git subprocess calls, making the
workflow layer testable without a real repository.

Architecture:
- Git: Abstract base class defining the interface
- RealGit: Production implementation using subprocess
- FakeGit: In-memory implementation for tests
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Literal

FileStatus = Literal["added", "modified", "deleted", "renamed"]


class GitError(Exception):
    """A failed git invocation with full diagnostic context.

    Callers pattern-match on exit_code to decide whether a failure is an
    expected "does not exist" answer or must propagate.
    """

    def __init__(
        self,
        message: str,
        *,
        command: str,
        stderr: str,
        exit_code: int | None,
        cwd: Path,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.command = command
        self.stderr = stderr
        self.exit_code = exit_code
        self.cwd = cwd

    def to_detailed_string(self) -> str:
        lines = [
            f"GitError: {self.message}",
            f"  Command: {self.command}",
            f"  Working directory: {self.cwd}",
            f"  Exit code: {self.exit_code}",
        ]
        if self.stderr:
            lines.append(f"  Stderr: {self.stderr}")
        return "\n".join(lines)


class GitFailureKind(Enum):
    """How a git failure should be interpreted by the caller."""

    NOT_FOUND = "not-found"
    ERROR = "error"


def classify_git_failure(
    exit_code: int | None, *, not_found_codes: tuple[int, ...]
) -> GitFailureKind:
    """Classify a git exit code for an existence-style query.

    Args:
        exit_code: Exit code of the failed git process (None if killed)
        not_found_codes: Exit codes that this particular command uses to say
            "the thing you asked about does not exist"

    Returns:
        NOT_FOUND if the code is one of not_found_codes, ERROR otherwise
    """
    if exit_code is not None and exit_code in not_found_codes:
        return GitFailureKind.NOT_FOUND
    return GitFailureKind.ERROR


@dataclass(frozen=True)
class GitWorktree:
    """Information about a single git worktree."""

    path: Path
    head: str
    branch: str | None
    is_main: bool = False


@dataclass(frozen=True)
class FileChange:
    """A file changed between a base branch and HEAD."""

    path: str
    insertions: int
    deletions: int
    status: FileStatus


@dataclass(frozen=True)
class DiffStats:
    """Aggregate diff statistics between a base branch and HEAD."""

    files_changed: int
    insertions: int
    deletions: int
    files: tuple[FileChange, ...]


@dataclass(frozen=True)
class Commit:
    """A commit on the current branch that is not on the base branch."""

    sha: str
    short_sha: str
    subject: str
    author: str
    date: str


EMPTY_DIFF_STATS = DiffStats(files_changed=0, insertions=0, deletions=0, files=())


def find_worktree_for_branch(worktrees: list[GitWorktree], branch: str) -> GitWorktree | None:
    """Find the non-main worktree that has the given branch checked out."""
    for wt in worktrees:
        if wt.branch == branch and not wt.is_main:
            return wt
    return None


# ============================================================================
# Abstract Interface
# ============================================================================


class Git(ABC):
    """Abstract interface for git operations.

    Every operation takes the working directory explicitly and either returns
    a value or raises GitError. Existence queries (branch_exists,
    is_git_repository) answer False for their documented "not found" exit
    codes and raise for everything else.
    """

    @abstractmethod
    def get_current_branch(self, cwd: Path) -> str | None:
        """Get the checked-out branch, or None in detached HEAD state."""
        ...

    @abstractmethod
    def get_default_branch(self, cwd: Path) -> str:
        """Get the default branch from origin/HEAD, falling back to main, then master."""
        ...

    @abstractmethod
    def branch_exists(self, cwd: Path, branch: str) -> bool:
        """Check whether a local branch exists."""
        ...

    @abstractmethod
    def is_git_repository(self, cwd: Path) -> bool:
        """Check whether cwd is inside a git repository."""
        ...

    @abstractmethod
    def get_repository_root(self, cwd: Path) -> Path:
        """Get the top-level directory of the repository containing cwd."""
        ...

    @abstractmethod
    def get_remote_url(self, cwd: Path, remote: str = "origin") -> str:
        """Get the URL of a remote."""
        ...

    @abstractmethod
    def has_uncommitted_changes(self, cwd: Path) -> bool:
        """Check for staged, unstaged or untracked changes."""
        ...

    @abstractmethod
    def create_branch(self, cwd: Path, branch: str) -> None:
        """Create a new branch from HEAD and check it out."""
        ...

    @abstractmethod
    def checkout_branch(self, cwd: Path, branch: str) -> None:
        """Check out an existing branch."""
        ...

    @abstractmethod
    def list_worktrees(self, repo_root: Path) -> list[GitWorktree]:
        """List all worktrees; the main worktree is flagged with is_main."""
        ...

    @abstractmethod
    def create_worktree(self, repo_root: Path, path: Path, branch: str) -> None:
        """Create a worktree at path with branch checked out.

        Tries, in order: the existing local branch, a new local branch
        tracking origin/<branch>, and a new branch from HEAD. Each fallback
        only happens when the previous attempt failed because the ref does
        not exist.

        Raises:
            InvalidInputError: If branch or path is unsafe (before running git)
            GitError: If worktree creation fails for any other reason
        """
        ...

    @abstractmethod
    def remove_worktree(self, repo_root: Path, path: Path, *, force: bool) -> None:
        """Remove a worktree, optionally discarding uncommitted changes."""
        ...

    @abstractmethod
    def get_diff_stats(self, cwd: Path, base_branch: str) -> DiffStats:
        """Get diff statistics for base_branch...HEAD."""
        ...

    @abstractmethod
    def get_changed_files(self, cwd: Path, base_branch: str) -> list[FileChange]:
        """Get files changed in base_branch...HEAD with their status."""
        ...

    @abstractmethod
    def get_commits_since(self, cwd: Path, base_branch: str) -> list[Commit]:
        """Get commits in base_branch..HEAD, newest first."""
        ...

    @abstractmethod
    def get_full_diff(self, cwd: Path, base_branch: str) -> str:
        """Get the full patch for base_branch...HEAD."""
        ...
