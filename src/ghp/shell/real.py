"""Production ShellRunner using subprocess."""

import logging
import os
import signal
import subprocess
from pathlib import Path

from ghp.shell.abc import ShellResult, ShellRunner

logger = logging.getLogger(__name__)

SHELL_PATH = "/bin/sh"


class RealShellRunner(ShellRunner):
    """Runs commands with /bin/sh in a fresh process group.

    The process group is killed on timeout so that grandchildren spawned by
    the hook command do not outlive it or hold the output pipes open.
    """

    def run(self, command: str, *, cwd: Path | None, timeout_ms: int) -> ShellResult:
        logger.debug("Running shell command (timeout=%dms, cwd=%s): %s", timeout_ms, cwd, command)
        try:
            process = subprocess.Popen(
                [SHELL_PATH, "-c", command],
                cwd=cwd,
                stdin=subprocess.DEVNULL,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                text=True,
                start_new_session=True,
            )
        except OSError as e:
            return ShellResult(stdout="", stderr=str(e), exit_code=None, timed_out=False)

        try:
            stdout, stderr = process.communicate(timeout=timeout_ms / 1000)
        except subprocess.TimeoutExpired:
            logger.debug("Shell command timed out after %dms, killing process group", timeout_ms)
            _kill_process_group(process)
            stdout, stderr = process.communicate()
            return ShellResult(
                stdout=(stdout or "").strip(),
                stderr=(stderr or "").strip(),
                exit_code=None,
                timed_out=True,
            )

        exit_code = process.returncode
        # Negative return codes mean the process died from a signal
        return ShellResult(
            stdout=stdout.strip(),
            stderr=stderr.strip(),
            exit_code=exit_code if exit_code >= 0 else None,
            timed_out=False,
        )


def _kill_process_group(process: subprocess.Popen[str]) -> None:
    try:
        os.killpg(process.pid, signal.SIGKILL)
    except ProcessLookupError:
        pass
