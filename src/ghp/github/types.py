"""Types shared between the GitHub client interface and the workflows."""

from dataclasses import dataclass


@dataclass(frozen=True)
class RepoInfo:
    """A GitHub repository identified by owner and name."""

    owner: str
    name: str

    @property
    def full_name(self) -> str:
        return f"{self.owner}/{self.name}"

    def issue_url(self, number: int) -> str:
        return f"https://github.com/{self.owner}/{self.name}/issues/{number}"

    def pull_request_url(self, number: int) -> str:
        return f"https://github.com/{self.owner}/{self.name}/pull/{number}"


@dataclass(frozen=True)
class CreatedIssue:
    """Identifiers of a freshly created issue.

    ``node_id`` is the GraphQL id needed to add the issue to a project.
    """

    node_id: str
    number: int


@dataclass(frozen=True)
class StatusOption:
    id: str
    name: str


@dataclass(frozen=True)
class StatusField:
    """The single-select "Status" field of a project and its options."""

    field_id: str
    options: tuple[StatusOption, ...]

    def find_option(self, name: str) -> StatusOption | None:
        """Find an option by name, case-insensitively."""
        wanted = name.lower()
        for option in self.options:
            if option.name.lower() == wanted:
                return option
        return None


@dataclass(frozen=True)
class ProjectItem:
    """A project item wrapping an issue."""

    id: str
    number: int
    title: str
