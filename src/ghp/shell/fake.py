"""Fake ShellRunner for testing."""

from collections.abc import Callable
from pathlib import Path

from ghp.shell.abc import ShellResult, ShellRunner

ShellHandler = Callable[[str], ShellResult]


class FakeShellRunner(ShellRunner):
    """In-memory ShellRunner that returns scripted results.

    Results are chosen in this order:
    1. ``handler`` if provided (called with the full command string)
    2. the first ``results`` entry whose key is a substring of the command
    3. ``default`` (exit code 0, no output)

    Mutation Tracking:
    - calls: list of (command, cwd, timeout_ms) in invocation order
    """

    def __init__(
        self,
        *,
        results: dict[str, ShellResult] | None = None,
        handler: ShellHandler | None = None,
        default: ShellResult | None = None,
    ) -> None:
        self._results = results or {}
        self._handler = handler
        self._default = default or ShellResult(stdout="", stderr="", exit_code=0, timed_out=False)
        self._calls: list[tuple[str, Path | None, int]] = []

    @property
    def calls(self) -> list[tuple[str, Path | None, int]]:
        return list(self._calls)

    @property
    def commands(self) -> list[str]:
        return [command for command, _, _ in self._calls]

    def run(self, command: str, *, cwd: Path | None, timeout_ms: int) -> ShellResult:
        self._calls.append((command, cwd, timeout_ms))
        if self._handler is not None:
            return self._handler(command)
        for key, result in self._results.items():
            if key in command:
                return result
        return self._default


def exited(code: int, stdout: str = "", stderr: str = "") -> ShellResult:
    """Build a ShellResult for a process that exited normally."""
    return ShellResult(stdout=stdout, stderr=stderr, exit_code=code, timed_out=False)


def timed_out() -> ShellResult:
    """Build a ShellResult for a process that was killed on timeout."""
    return ShellResult(stdout="", stderr="", exit_code=None, timed_out=True)
