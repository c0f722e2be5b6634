"""Fake GitHubApi for testing."""

from ghp.github.abc import GitHubApi
from ghp.github.types import CreatedIssue, ProjectItem, RepoInfo, StatusField


class FakeGitHubApi(GitHubApi):
    """In-memory GitHubApi with constructor-injected state.

    ``create_issue_error`` is raised from create_issue to simulate an
    unexpected client failure; ``create_issue_fails`` simulates a recoverable
    one (None).

    Mutation Tracking:
    - created_issues: (repo, title, body) per create_issue call
    - project_additions: (project_id, issue_node_id)
    - status_updates: (project_id, item_id, field_id, option_id)
    - added_labels: (issue_number, label)
    - assignee_updates: (issue_number, assignees)
    - sub_issue_links: (parent_number, child_number)
    """

    def __init__(
        self,
        *,
        next_issue_number: int = 1,
        create_issue_fails: bool = False,
        create_issue_error: Exception | None = None,
        add_to_project_fails: bool = False,
        status_field: StatusField | None = None,
        project_items: dict[int, ProjectItem] | None = None,
    ) -> None:
        self._next_issue_number = next_issue_number
        self._create_issue_fails = create_issue_fails
        self._create_issue_error = create_issue_error
        self._add_to_project_fails = add_to_project_fails
        self._status_field = status_field
        self._project_items = dict(project_items or {})

        self._created_issues: list[tuple[RepoInfo, str, str]] = []
        self._project_additions: list[tuple[str, str]] = []
        self._status_updates: list[tuple[str, str, str, str]] = []
        self._added_labels: list[tuple[int, str]] = []
        self._assignee_updates: list[tuple[int, list[str]]] = []
        self._sub_issue_links: list[tuple[int, int]] = []

    @property
    def created_issues(self) -> list[tuple[RepoInfo, str, str]]:
        return list(self._created_issues)

    @property
    def project_additions(self) -> list[tuple[str, str]]:
        return list(self._project_additions)

    @property
    def status_updates(self) -> list[tuple[str, str, str, str]]:
        return list(self._status_updates)

    @property
    def added_labels(self) -> list[tuple[int, str]]:
        return list(self._added_labels)

    @property
    def assignee_updates(self) -> list[tuple[int, list[str]]]:
        return list(self._assignee_updates)

    @property
    def sub_issue_links(self) -> list[tuple[int, int]]:
        return list(self._sub_issue_links)

    def create_issue(self, repo: RepoInfo, title: str, body: str) -> CreatedIssue | None:
        if self._create_issue_error is not None:
            raise self._create_issue_error
        self._created_issues.append((repo, title, body))
        if self._create_issue_fails:
            return None
        number = self._next_issue_number
        self._next_issue_number += 1
        return CreatedIssue(node_id=f"I_{number}", number=number)

    def add_to_project(self, project_id: str, issue_node_id: str) -> str | None:
        self._project_additions.append((project_id, issue_node_id))
        if self._add_to_project_fails:
            return None
        return f"PVTI_{issue_node_id}"

    def get_status_field(self, project_id: str) -> StatusField | None:
        return self._status_field

    def update_item_status(
        self, project_id: str, item_id: str, field_id: str, option_id: str
    ) -> bool:
        self._status_updates.append((project_id, item_id, field_id, option_id))
        return True

    def add_label_to_issue(self, repo: RepoInfo, issue_number: int, label: str) -> bool:
        self._added_labels.append((issue_number, label))
        return True

    def update_assignees(self, repo: RepoInfo, issue_number: int, assignees: list[str]) -> bool:
        self._assignee_updates.append((issue_number, list(assignees)))
        return True

    def add_sub_issue(self, repo: RepoInfo, parent_number: int, child_number: int) -> bool:
        self._sub_issue_links.append((parent_number, child_number))
        return True

    def find_item_by_number(self, repo: RepoInfo, issue_number: int) -> ProjectItem | None:
        return self._project_items.get(issue_number)
