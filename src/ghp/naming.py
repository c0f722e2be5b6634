"""Naming utilities for branches and worktrees derived from issues."""

import re
from pathlib import Path

DEFAULT_BRANCH_PATTERN = "{user}/{number}-{title}"
MAX_BRANCH_LENGTH = 60
MAX_TITLE_SLUG_LENGTH = 50
MAX_WORKTREE_SLUG_LENGTH = 35

# Ordered from most to least specific. The trailing-number pattern also
# matches names like "release/2024"; callers must treat the result as a hint.
_ISSUE_NUMBER_PATTERNS = (
    re.compile(r"/(\d+)-"),  # user/123-title
    re.compile(r"^(\d+)-"),  # 123-title
    re.compile(r"-(\d+)-"),  # feature-123-title
    re.compile(r"[/#](\d+)$"),  # ends with /123 or #123
)


def sanitize_for_branch_name(text: str) -> str:
    """Return a lowercase, hyphenated slug usable inside a branch name.

    - Lowercases input
    - Replaces characters outside `[a-z0-9-]` with `-`
    - Collapses consecutive `-` and strips them from both ends
    - Truncates to 50 characters

    Examples:
        >>> sanitize_for_branch_name("Fix: Login Bug!")
        "fix-login-bug"
    """
    lowered = text.lower()
    replaced = re.sub(r"[^a-z0-9-]", "-", lowered)
    collapsed = re.sub(r"-+", "-", replaced)
    return collapsed.strip("-")[:MAX_TITLE_SLUG_LENGTH]


def sanitize_for_path(text: str) -> str:
    """Make an arbitrary string safe as a single path component.

    Neutralises traversal sequences and shell metacharacters.
    """
    result = str(text).replace("..", "_")
    result = re.sub(r"[;&|`$(){}\[\]<>!]", "", result)
    result = re.sub(r"\s+", "-", result)
    return re.sub(r"[^a-zA-Z0-9_\-./]", "_", result)


def generate_branch_name(
    pattern: str,
    *,
    user: str,
    number: int | None,
    title: str,
    repo: str,
    max_length: int = MAX_BRANCH_LENGTH,
) -> str:
    """Expand a branch pattern such as "{user}/{number}-{title}".

    Supported placeholders: {user}, {number} ("draft" when None), {title}
    (sanitized) and {repo}. The result is truncated to max_length with any
    trailing hyphen removed.

    Examples:
        >>> generate_branch_name("{user}/{number}-{title}", user="alice",
        ...     number=42, title="Fix the bug", repo="app")
        "alice/42-fix-the-bug"
    """
    branch = (
        pattern.replace("{user}", user, 1)
        .replace("{number}", str(number) if number is not None else "draft", 1)
        .replace("{title}", sanitize_for_branch_name(title), 1)
        .replace("{repo}", repo, 1)
    )
    if len(branch) > max_length:
        branch = branch[:max_length].removesuffix("-")
    return branch


def extract_issue_number_from_branch(branch_name: str) -> int | None:
    """Guess the issue number encoded in a branch name.

    Patterns are tried in order and the first match wins.

    Examples:
        >>> extract_issue_number_from_branch("alice/42-fix-bug")
        42
        >>> extract_issue_number_from_branch("fix-99-thing")
        99
        >>> extract_issue_number_from_branch("release/2024")  # false positive
        2024
        >>> extract_issue_number_from_branch("main")
        None
    """
    for pattern in _ISSUE_NUMBER_PATTERNS:
        match = pattern.search(branch_name)
        if match:
            return int(match.group(1))
    return None


def branch_matches_issue(branch: str, issue_number: int) -> bool:
    """Check whether a branch name looks like it belongs to an issue.

    Matches "user/123-title", "user/123_title", "123-title" and "issue-123".

    Examples:
        >>> branch_matches_issue("alice/123-fix", 123)
        True
        >>> branch_matches_issue("issue-123", 12)  # false positive
        True
    """
    return (
        f"/{issue_number}-" in branch
        or f"/{issue_number}_" in branch
        or branch.startswith(f"{issue_number}-")
        or f"issue-{issue_number}" in branch
    )


def generate_worktree_path(
    base_path: str,
    repo_name: str,
    identifier: str | int,
    title: str | None = None,
) -> Path:
    """Build the directory for a parallel worktree.

    The layout is {base_path}/{repo_name}/{dir_name}, where dir_name is
    "{number}-{title-slug}" when an issue number and title are given and the
    sanitized identifier otherwise. A leading "~" in base_path is expanded.

    Examples:
        >>> generate_worktree_path("~/.ghp/worktrees", "app", 42, "Fix the bug")
        PosixPath("/home/me/.ghp/worktrees/app/42-fix-the-bug")
    """
    safe_repo = sanitize_for_path(repo_name)
    if title and isinstance(identifier, int):
        slug = sanitize_for_branch_name(title)[:MAX_WORKTREE_SLUG_LENGTH].removesuffix("-")
        dir_name = f"{identifier}-{slug}"
    else:
        dir_name = sanitize_for_path(str(identifier))

    return Path(base_path.rstrip("/")).expanduser() / safe_repo / dir_name
