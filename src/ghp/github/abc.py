"""Interface to the GitHub API used by the workflows.

Implementations return None or False for recoverable API failures and raise
only for unexpected errors. Retries are the implementation's concern.
"""

from abc import ABC, abstractmethod

from ghp.github.types import CreatedIssue, ProjectItem, RepoInfo, StatusField


class GitHubApi(ABC):
    """Abstract GitHub Issues/Projects client."""

    @abstractmethod
    def create_issue(self, repo: RepoInfo, title: str, body: str) -> CreatedIssue | None:
        """Create an issue, returning None on failure."""
        ...

    @abstractmethod
    def add_to_project(self, project_id: str, issue_node_id: str) -> str | None:
        """Add an issue to a project, returning the project item id."""
        ...

    @abstractmethod
    def get_status_field(self, project_id: str) -> StatusField | None:
        ...

    @abstractmethod
    def update_item_status(
        self, project_id: str, item_id: str, field_id: str, option_id: str
    ) -> bool:
        ...

    @abstractmethod
    def add_label_to_issue(self, repo: RepoInfo, issue_number: int, label: str) -> bool:
        ...

    @abstractmethod
    def update_assignees(self, repo: RepoInfo, issue_number: int, assignees: list[str]) -> bool:
        ...

    @abstractmethod
    def add_sub_issue(self, repo: RepoInfo, parent_number: int, child_number: int) -> bool:
        """Link child_number as a sub-issue of parent_number."""
        ...

    @abstractmethod
    def find_item_by_number(self, repo: RepoInfo, issue_number: int) -> ProjectItem | None:
        """Find the project item for an issue number."""
        ...
