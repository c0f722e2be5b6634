"""Production Git implementation using subprocess."""

import logging
import os
import subprocess
from pathlib import Path

from ghp.git.abc import (
    EMPTY_DIFF_STATS,
    Commit,
    DiffStats,
    FileChange,
    FileStatus,
    Git,
    GitError,
    GitFailureKind,
    GitWorktree,
    classify_git_failure,
)
from ghp.validation import validate_branch_name, validate_path

logger = logging.getLogger(__name__)

# Exit codes meaning "ref does not exist" for the commands that use them
SHOW_REF_MISSING = (1,)
NOT_A_REPOSITORY = (128,)
SYMBOLIC_REF_MISSING = (1, 128)
WORKTREE_REF_MISSING = (128,)

_LOG_FIELD_SEPARATOR = "\x1f"
_STATUS_BY_LETTER: dict[str, FileStatus] = {
    "A": "added",
    "D": "deleted",
    "R": "renamed",
    "M": "modified",
}


def copied_env_for_git_subprocess() -> dict[str, str]:
    """Copy the environment with interactive credential prompts disabled."""
    env = os.environ.copy()
    env["GIT_TERMINAL_PROMPT"] = "0"
    return env


def run_git(args: list[str], *, cwd: Path, operation_context: str) -> str:
    """Run a git subcommand and return its stdout.

    Args:
        args: Arguments after "git"
        cwd: Working directory for the command
        operation_context: Human-readable description used in the error message

    Raises:
        GitError: If git exits non-zero or cannot be started
    """
    cmd = ["git", *args]
    command = " ".join(cmd)
    logger.debug("Running: %s (cwd=%s)", command, cwd)
    try:
        result = subprocess.run(
            cmd,
            cwd=cwd,
            capture_output=True,
            text=True,
            check=False,
            env=copied_env_for_git_subprocess(),
        )
    except OSError as e:
        raise GitError(
            f"Failed to {operation_context}: {e}",
            command=command,
            stderr="",
            exit_code=None,
            cwd=cwd,
        ) from e

    if result.returncode != 0:
        raise GitError(
            f"Failed to {operation_context}",
            command=command,
            stderr=result.stderr.strip(),
            exit_code=result.returncode,
            cwd=cwd,
        )
    return result.stdout


class RealGit(Git):
    """Production implementation using subprocess."""

    def get_current_branch(self, cwd: Path) -> str | None:
        stdout = run_git(["branch", "--show-current"], cwd=cwd, operation_context="get branch")
        return stdout.strip() or None

    def get_default_branch(self, cwd: Path) -> str:
        try:
            ref = run_git(
                ["symbolic-ref", "refs/remotes/origin/HEAD"],
                cwd=cwd,
                operation_context="read origin HEAD",
            ).strip()
        except GitError as e:
            # Repos without an origin HEAD are expected; anything else is not
            kind = classify_git_failure(e.exit_code, not_found_codes=SYMBOLIC_REF_MISSING)
            if kind is GitFailureKind.ERROR:
                raise
        else:
            prefix = "refs/remotes/origin/"
            if ref.startswith(prefix):
                return ref.removeprefix(prefix)

        if self.branch_exists(cwd, "main"):
            return "main"
        return "master"

    def branch_exists(self, cwd: Path, branch: str) -> bool:
        validate_branch_name(branch)
        try:
            run_git(
                ["show-ref", "--verify", "--quiet", f"refs/heads/{branch}"],
                cwd=cwd,
                operation_context=f"check branch '{branch}'",
            )
        except GitError as e:
            if classify_git_failure(e.exit_code, not_found_codes=SHOW_REF_MISSING) is (
                GitFailureKind.NOT_FOUND
            ):
                return False
            raise
        return True

    def is_git_repository(self, cwd: Path) -> bool:
        try:
            run_git(["rev-parse", "--git-dir"], cwd=cwd, operation_context="detect repository")
        except GitError as e:
            if classify_git_failure(e.exit_code, not_found_codes=NOT_A_REPOSITORY) is (
                GitFailureKind.NOT_FOUND
            ):
                return False
            raise
        return True

    def get_repository_root(self, cwd: Path) -> Path:
        stdout = run_git(
            ["rev-parse", "--show-toplevel"], cwd=cwd, operation_context="find repository root"
        )
        return Path(stdout.strip())

    def get_remote_url(self, cwd: Path, remote: str = "origin") -> str:
        stdout = run_git(
            ["remote", "get-url", remote], cwd=cwd, operation_context=f"get URL of '{remote}'"
        )
        return stdout.strip()

    def has_uncommitted_changes(self, cwd: Path) -> bool:
        stdout = run_git(["status", "--porcelain"], cwd=cwd, operation_context="read status")
        return bool(stdout.strip())

    def create_branch(self, cwd: Path, branch: str) -> None:
        validate_branch_name(branch)
        run_git(["checkout", "-b", branch], cwd=cwd, operation_context=f"create '{branch}'")

    def checkout_branch(self, cwd: Path, branch: str) -> None:
        validate_branch_name(branch)
        run_git(["checkout", branch], cwd=cwd, operation_context=f"checkout '{branch}'")

    def list_worktrees(self, repo_root: Path) -> list[GitWorktree]:
        stdout = run_git(
            ["worktree", "list", "--porcelain"], cwd=repo_root, operation_context="list worktrees"
        )
        return parse_worktree_porcelain(stdout)

    def create_worktree(self, repo_root: Path, path: Path, branch: str) -> None:
        validate_branch_name(branch)
        validate_path(str(path))

        if self.branch_exists(repo_root, branch):
            run_git(
                ["worktree", "add", str(path), branch],
                cwd=repo_root,
                operation_context=f"add worktree for branch '{branch}' at {path}",
            )
            return

        try:
            run_git(
                ["worktree", "add", str(path), "-b", branch, f"origin/{branch}"],
                cwd=repo_root,
                operation_context=f"add worktree tracking 'origin/{branch}' at {path}",
            )
        except GitError as e:
            if classify_git_failure(e.exit_code, not_found_codes=WORKTREE_REF_MISSING) is (
                GitFailureKind.ERROR
            ):
                raise
            logger.debug("No remote branch origin/%s, creating from HEAD", branch)
            run_git(
                ["worktree", "add", "-b", branch, str(path)],
                cwd=repo_root,
                operation_context=f"add worktree with new branch '{branch}' at {path}",
            )

    def remove_worktree(self, repo_root: Path, path: Path, *, force: bool) -> None:
        validate_path(str(path))
        cmd = ["worktree", "remove"]
        if force:
            cmd.append("--force")
        cmd.append(str(path))
        run_git(cmd, cwd=repo_root, operation_context=f"remove worktree at {path}")

    def get_diff_stats(self, cwd: Path, base_branch: str) -> DiffStats:
        validate_branch_name(base_branch)
        numstat = run_git(
            ["diff", "--numstat", "--no-renames", f"{base_branch}...HEAD"],
            cwd=cwd,
            operation_context=f"diff against '{base_branch}'",
        )
        statuses = {
            change.path: change.status
            for change in self._name_status(cwd, base_branch, detect_renames=False)
        }

        files: list[FileChange] = []
        for line in numstat.splitlines():
            parts = line.split("\t", 2)
            if len(parts) != 3:
                continue
            added, deleted, file_path = parts
            # Binary files report "-" for both counts
            insertions = int(added) if added.isdigit() else 0
            deletions = int(deleted) if deleted.isdigit() else 0
            files.append(
                FileChange(
                    path=file_path,
                    insertions=insertions,
                    deletions=deletions,
                    status=statuses.get(file_path, "modified"),
                )
            )

        if not files:
            return EMPTY_DIFF_STATS
        return DiffStats(
            files_changed=len(files),
            insertions=sum(f.insertions for f in files),
            deletions=sum(f.deletions for f in files),
            files=tuple(files),
        )

    def get_changed_files(self, cwd: Path, base_branch: str) -> list[FileChange]:
        validate_branch_name(base_branch)
        return self._name_status(cwd, base_branch, detect_renames=True)

    def get_commits_since(self, cwd: Path, base_branch: str) -> list[Commit]:
        validate_branch_name(base_branch)
        fmt = _LOG_FIELD_SEPARATOR.join(["%H", "%h", "%s", "%an", "%ai"])
        stdout = run_git(
            ["log", f"{base_branch}..HEAD", f"--format={fmt}"],
            cwd=cwd,
            operation_context=f"list commits since '{base_branch}'",
        )
        commits: list[Commit] = []
        for line in stdout.splitlines():
            fields = line.split(_LOG_FIELD_SEPARATOR)
            if len(fields) != 5:
                continue
            sha, short_sha, subject, author, date = fields
            commits.append(
                Commit(sha=sha, short_sha=short_sha, subject=subject, author=author, date=date)
            )
        return commits

    def get_full_diff(self, cwd: Path, base_branch: str) -> str:
        validate_branch_name(base_branch)
        return run_git(
            ["diff", f"{base_branch}...HEAD"],
            cwd=cwd,
            operation_context=f"diff against '{base_branch}'",
        )

    def _name_status(self, cwd: Path, base_branch: str, *, detect_renames: bool) -> list[FileChange]:
        args = ["diff", "--name-status"]
        if not detect_renames:
            args.append("--no-renames")
        args.append(f"{base_branch}...HEAD")
        stdout = run_git(args, cwd=cwd, operation_context=f"list changes since '{base_branch}'")

        changes: list[FileChange] = []
        for line in stdout.splitlines():
            if not line.strip():
                continue
            status_field, _, paths = line.partition("\t")
            # Renames list "old<TAB>new"; report the new path
            file_path = paths.split("\t")[-1]
            status = _STATUS_BY_LETTER.get(status_field[:1], "modified")
            changes.append(FileChange(path=file_path, insertions=0, deletions=0, status=status))
        return changes


def parse_worktree_porcelain(output: str) -> list[GitWorktree]:
    """Parse `git worktree list --porcelain` output.

    Entries are separated by blank lines. The first entry, and any entry
    marked "bare", is the main worktree. Entries without a HEAD line are
    skipped.
    """
    worktrees: list[GitWorktree] = []
    entries = [entry for entry in output.strip().split("\n\n") if entry.strip()]
    for index, entry in enumerate(entries):
        path: Path | None = None
        head: str | None = None
        branch: str | None = None
        is_main = index == 0
        for line in entry.splitlines():
            if line.startswith("worktree "):
                path = Path(line.removeprefix("worktree "))
            elif line.startswith("HEAD "):
                head = line.removeprefix("HEAD ")
            elif line.startswith("branch "):
                branch = line.removeprefix("branch ").removeprefix("refs/heads/")
            elif line == "bare":
                is_main = True
        if path is not None and head is not None:
            worktrees.append(GitWorktree(path=path, head=head, branch=branch, is_main=is_main))
    return worktrees
