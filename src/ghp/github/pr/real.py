"""PullRequestCreator backed by the gh CLI."""

import json
import logging
import re
import subprocess
from pathlib import Path

from ghp.github.pr.abc import (
    CreatedPullRequest,
    PullRequestCreationError,
    PullRequestCreator,
    PullRequestExistsError,
)
from ghp.validation import InvalidInputError, validate_numeric_input

logger = logging.getLogger(__name__)

_PR_URL_PATTERN = re.compile(r"https://github\.com/[^/\s]+/[^/\s]+/pull/(\d+)")
GH_TIMEOUT_SECONDS = 120


class GhPullRequestCreator(PullRequestCreator):
    """Creates pull requests with ``gh pr create``.

    Arguments are passed as an argument vector, so title and body are never
    interpreted by a shell.
    """

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
        cmd = ["gh", "pr", "create", "--title", title, "--body", body, "--base", base]
        cmd.extend(["--head", head])
        if open_in_browser:
            cmd.append("--web")

        logger.debug("Running: gh pr create --base %s --head %s", base, head)
        try:
            result = subprocess.run(
                cmd,
                cwd=cwd,
                capture_output=True,
                text=True,
                check=False,
                timeout=GH_TIMEOUT_SECONDS,
            )
        except subprocess.TimeoutExpired as e:
            raise PullRequestCreationError(
                f"gh pr create timed out after {GH_TIMEOUT_SECONDS}s", stderr=""
            ) from e
        except OSError as e:
            raise PullRequestCreationError(f"Failed to run gh: {e}", stderr="") from e

        if result.returncode != 0:
            stderr = result.stderr.strip()
            if "already exists" in stderr:
                raise PullRequestExistsError(stderr)
            raise PullRequestCreationError(
                stderr or f"gh pr create exited with code {result.returncode}", stderr=stderr
            )

        match = _PR_URL_PATTERN.search(result.stdout)
        if match:
            return CreatedPullRequest(number=int(match.group(1)), url=match.group(0))
        return self._view_current(cwd)

    def _view_current(self, cwd: Path) -> CreatedPullRequest:
        # --web prints no URL; read the details back from the current branch's PR
        try:
            result = subprocess.run(
                ["gh", "pr", "view", "--json", "number,url"],
                cwd=cwd,
                capture_output=True,
                text=True,
                check=False,
                timeout=GH_TIMEOUT_SECONDS,
            )
        except (subprocess.TimeoutExpired, OSError) as e:
            logger.debug("gh pr view failed: %s", e)
            return CreatedPullRequest(number=0, url="")

        if result.returncode != 0:
            logger.debug("gh pr view exited with code %s", result.returncode)
            return CreatedPullRequest(number=0, url="")
        try:
            data = json.loads(result.stdout)
        except json.JSONDecodeError:
            logger.debug("gh pr view returned invalid JSON")
            return CreatedPullRequest(number=0, url="")
        if not isinstance(data, dict):
            logger.debug("gh pr view returned %r, expected an object", data)
            return CreatedPullRequest(number=0, url="")
        try:
            number = validate_numeric_input(data.get("number", 0), "PR number")
        except InvalidInputError as e:
            logger.debug("gh pr view: %s", e)
            return CreatedPullRequest(number=0, url="")
        return CreatedPullRequest(number=number, url=str(data.get("url", "")))
