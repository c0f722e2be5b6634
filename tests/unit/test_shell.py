"""Tests for shell escaping and the fake shell runner."""

from pathlib import Path

from ghp.shell.abc import ShellResult, shell_escape
from ghp.shell.fake import FakeShellRunner, exited, timed_out


def test_shell_escape_wraps_in_single_quotes() -> None:
    assert shell_escape("hello world") == "'hello world'"
    assert shell_escape("") == "''"


def test_shell_escape_embedded_single_quote() -> None:
    assert shell_escape("it's") == "'it'\\''s'"


def test_shell_escape_leaves_metacharacters_inert() -> None:
    assert shell_escape("$(rm -rf /); `id`") == "'$(rm -rf /); `id`'"


def test_fake_shell_runner_default_result() -> None:
    shell = FakeShellRunner()

    result = shell.run("echo hi", cwd=None, timeout_ms=1000)

    assert result == ShellResult(stdout="", stderr="", exit_code=0, timed_out=False)
    assert shell.calls == [("echo hi", None, 1000)]


def test_fake_shell_runner_matches_results_by_substring() -> None:
    shell = FakeShellRunner(results={"lint": exited(1, stderr="bad"), "slow": timed_out()})

    assert shell.run("make lint", cwd=Path("/repo"), timeout_ms=5).exit_code == 1
    assert shell.run("slow-task", cwd=None, timeout_ms=5).timed_out
    assert shell.run("other", cwd=None, timeout_ms=5).exit_code == 0
    assert shell.commands == ["make lint", "slow-task", "other"]


def test_fake_shell_runner_handler_takes_precedence() -> None:
    shell = FakeShellRunner(
        results={"lint": exited(1)},
        handler=lambda command: exited(0, stdout=command.upper()),
    )

    assert shell.run("lint", cwd=None, timeout_ms=5).stdout == "LINT"


def test_fake_shell_runner_calls_is_a_copy() -> None:
    shell = FakeShellRunner()
    shell.run("a", cwd=None, timeout_ms=1)

    shell.calls.clear()

    assert shell.commands == ["a"]
