"""Delegated pull request creation."""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path


class PullRequestExistsError(Exception):
    """A pull request already exists for the head branch."""


class PullRequestCreationError(Exception):
    """PR creation failed; ``stderr`` holds the tool's diagnostic."""

    def __init__(self, message: str, *, stderr: str) -> None:
        super().__init__(message)
        self.stderr = stderr


@dataclass(frozen=True)
class CreatedPullRequest:
    """Number and URL of a created pull request.

    Either may be unknown (0 / "") when the PR was created but its details
    could not be read back.
    """

    number: int
    url: str


class PullRequestCreator(ABC):
    @abstractmethod
    def create(
        self,
        cwd: Path,
        *,
        title: str,
        body: str,
        base: str,
        head: str,
        open_in_browser: bool,
    ) -> CreatedPullRequest:
        """Create a pull request from head into base.

        Raises:
            PullRequestExistsError: If a PR for head already exists
            PullRequestCreationError: For any other failure
        """
        ...
