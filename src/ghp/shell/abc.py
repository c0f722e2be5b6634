"""Shell command execution interface.

Hook commands are user-authored shell strings, so unlike git (which is run
from argument vectors) they are executed through ``/bin/sh -c``. Every value
interpolated into such a string must go through ``shell_escape`` first.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class ShellResult:
    """Outcome of running one shell command.

    Attributes:
        stdout: Captured standard output, stripped
        stderr: Captured standard error, stripped
        exit_code: Process exit code, or None if killed by a signal
        timed_out: True if the command exceeded its timeout and was killed
    """

    stdout: str
    stderr: str
    exit_code: int | None
    timed_out: bool


def shell_escape(value: str) -> str:
    """Quote a value for safe interpolation into a POSIX shell command.

    Wraps the value in single quotes; embedded single quotes become '\\''.

    Example:
        >>> shell_escape("it's")
        "'it'\\\\''s'"
    """
    return "'" + value.replace("'", "'\\''") + "'"


class ShellRunner(ABC):
    """Abstract runner for shell-invoked commands."""

    @abstractmethod
    def run(self, command: str, *, cwd: Path | None, timeout_ms: int) -> ShellResult:
        """Run a command string through the shell.

        Args:
            command: Full shell command line (already escaped)
            cwd: Working directory, or None for the current directory
            timeout_ms: Kill the command after this many milliseconds

        Returns:
            ShellResult describing the outcome. Timeouts and non-zero exits
            are reported in the result, never raised.
        """
        ...
