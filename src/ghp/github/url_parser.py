"""Parse GitHub remote URLs into RepoInfo."""

import logging
import re
from pathlib import Path

from ghp.git.abc import Git, GitError
from ghp.github.types import RepoInfo

logger = logging.getLogger(__name__)

_REMOTE_PATTERNS = (
    re.compile(r"^git@github\.com:([^/]+)/(.+?)(?:\.git)?/?$"),
    re.compile(r"^ssh://git@github\.com/([^/]+)/(.+?)(?:\.git)?/?$"),
    re.compile(r"^https?://(?:[^@/]+@)?github\.com/([^/]+)/(.+?)(?:\.git)?/?$"),
)

_ISSUE_URL_PATTERN = re.compile(r"https://github\.com/([^/]+)/([^/]+)/(issues|pull)/(\d+)")


def parse_github_url(url: str) -> RepoInfo | None:
    """Parse a GitHub remote URL.

    Supports ``git@github.com:owner/repo.git``, ``ssh://git@github.com/owner/repo``
    and ``https://github.com/owner/repo(.git)``. Returns None for anything else.
    """
    stripped = url.strip()
    for pattern in _REMOTE_PATTERNS:
        match = pattern.match(stripped)
        if match:
            return RepoInfo(owner=match.group(1), name=match.group(2))
    return None


def parse_issue_url(url: str) -> tuple[RepoInfo, int] | None:
    """Extract the repository and number from an issue or pull request URL."""
    match = _ISSUE_URL_PATTERN.search(url)
    if match is None:
        return None
    return RepoInfo(owner=match.group(1), name=match.group(2)), int(match.group(4))


def detect_repository(git: Git, cwd: Path) -> RepoInfo | None:
    """Detect the GitHub repository from the ``origin`` remote of cwd."""
    try:
        url = git.get_remote_url(cwd, "origin")
    except GitError as e:
        logger.debug("No origin remote in %s: %s", cwd, e.message)
        return None
    return parse_github_url(url)
