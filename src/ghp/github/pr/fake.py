"""Fake PullRequestCreator for testing."""

from pathlib import Path

from ghp.github.pr.abc import CreatedPullRequest, PullRequestCreator


class FakePullRequestCreator(PullRequestCreator):
    """Returns a scripted PR, or raises ``error`` when configured.

    Mutation Tracking:
    - created: one dict of the call's keyword arguments per create call
    """

    def __init__(
        self,
        *,
        number: int = 1,
        url: str | None = None,
        error: Exception | None = None,
    ) -> None:
        self._number = number
        self._url = url
        self._error = error
        self._created: list[dict[str, object]] = []

    @property
    def created(self) -> list[dict[str, object]]:
        return list(self._created)

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
        self._created.append(
            {
                "cwd": cwd,
                "title": title,
                "body": body,
                "base": base,
                "head": head,
                "open_in_browser": open_in_browser,
            }
        )
        if self._error is not None:
            raise self._error
        url = self._url if self._url is not None else f"https://github.com/o/r/pull/{self._number}"
        return CreatedPullRequest(number=self._number, url=url)
