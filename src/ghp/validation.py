"""Validation of untrusted values before they reach a subprocess.

Branch names, paths and other free text end up inside git invocations and
hook command lines. These validators reject unsafe input up front with a
descriptive InvalidInputError instead of passing it through.
"""

import re
from urllib.parse import urlparse

# Characters that can trigger shell expansion even inside double quotes
_BRANCH_SHELL_CHARS = re.compile(r"[`$\\!;|&<>(){}\[\]'\"]")
# Characters git itself rejects in ref names
_BRANCH_GIT_CHARS = re.compile(r"[\s~^:?*\[\\]")
_PATH_SHELL_CHARS = re.compile(r"[`$;|&<>(){}\[\]'\"\n\r]")
_SAFE_STRING = re.compile(r"^[@a-zA-Z0-9._/-]+$")
_URL_DANGEROUS_CHARS = re.compile(r"[`$\\!<>|;&(){}\[\]'\"]")
_NUMERIC = re.compile(r"^\d+$")


class InvalidInputError(ValueError):
    """Raised when a value is unsafe to embed in a command."""


def validate_branch_name(branch: str) -> str:
    """Validate a git branch name.

    Returns:
        The branch name unchanged

    Raises:
        InvalidInputError: If the name is empty, contains shell or git
            metacharacters, contains '..', or starts/ends with '/' or '.'
    """
    if not branch or not branch.strip():
        raise InvalidInputError("Branch name cannot be empty")
    if _BRANCH_SHELL_CHARS.search(branch):
        raise InvalidInputError(f"Branch name contains invalid characters: {branch}")
    if _BRANCH_GIT_CHARS.search(branch):
        raise InvalidInputError(f"Branch name contains invalid git characters: {branch}")
    if ".." in branch:
        raise InvalidInputError(f"Branch name cannot contain '..': {branch}")
    if branch[0] in "./" or branch[-1] in "./":
        raise InvalidInputError(f"Branch name cannot start or end with '/' or '.': {branch}")
    return branch


def validate_path(path: str) -> str:
    """Validate a filesystem path that will be passed to git.

    Raises:
        InvalidInputError: If the path is empty or contains shell metacharacters
    """
    if not path or not path.strip():
        raise InvalidInputError("Path cannot be empty")
    if _PATH_SHELL_CHARS.search(path):
        raise InvalidInputError(f"Path contains invalid characters: {path}")
    return path


def validate_numeric_input(value: object, field_name: str = "value") -> int:
    """Validate a non-negative integer, accepting digit-only strings."""
    if isinstance(value, str):
        if not _NUMERIC.match(value):
            raise InvalidInputError(f"Invalid {field_name}: must be a non-negative integer")
        return int(value)
    # bool is an int subclass but never a meaningful number here
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise InvalidInputError(f"Invalid {field_name}: must be a non-negative integer")
    return value


def validate_safe_string(
    value: str,
    field_name: str = "value",
    pattern: re.Pattern[str] = _SAFE_STRING,
) -> str:
    """Validate that a value matches a conservative allow-list pattern."""
    if not pattern.match(value):
        raise InvalidInputError(f"Invalid {field_name}: contains unsafe characters")
    return value


def validate_url(url: str) -> str:
    """Validate an http(s) URL free of shell metacharacters."""
    parsed = urlparse(url)
    if not parsed.scheme or not parsed.netloc:
        raise InvalidInputError(f"Invalid URL: {url}")
    if parsed.scheme not in ("http", "https"):
        raise InvalidInputError(
            f"Invalid URL protocol: {parsed.scheme} (only http/https allowed)"
        )
    if _URL_DANGEROUS_CHARS.search(url):
        raise InvalidInputError(f"URL contains potentially dangerous characters: {url}")
    return url
