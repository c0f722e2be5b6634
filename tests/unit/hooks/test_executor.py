"""Tests for event hook execution, modes and failure policies."""

import threading
from pathlib import Path

from ghp.hooks.executor import EventHookExecutor, classify_exit_code
from ghp.hooks.fake import FakeHookPrompter
from ghp.hooks.prompter import HookDecision
from ghp.hooks.types import (
    DiffStat,
    HookExitCodes,
    IssueCreatedPayload,
    IssueSnapshot,
    PrePrPayload,
)
from ghp.shell.abc import ShellResult
from ghp.shell.fake import FakeShellRunner, exited, timed_out
from tests.test_utils.builders import make_executor, make_hook, make_registry

PRE_PR = PrePrPayload(
    repo="acme/app",
    branch="feature",
    base="main",
    changed_files=("a.py",),
    diff_stat=DiffStat(additions=1, deletions=0, files_changed=1),
)


def test_classify_exit_code_defaults() -> None:
    assert classify_exit_code(0, None) == "success"
    assert classify_exit_code(1, None) == "abort"
    assert classify_exit_code(2, None) == "abort"
    assert classify_exit_code(None, None) == "abort"


def test_classify_exit_code_custom_lists() -> None:
    codes = HookExitCodes(success=(0, 3), warn=(2,), abort=(1,))

    assert classify_exit_code(3, codes) == "success"
    assert classify_exit_code(2, codes) == "warn"
    assert classify_exit_code(9, codes) == "abort"


def test_execute_hook_substitutes_template_and_passes_cwd_and_timeout() -> None:
    shell = FakeShellRunner(default=exited(0, stdout="  done \n"))
    hook = make_hook("notify", "issue-created", "notify ${issue.number}", timeout_ms=1234)
    executor = make_executor(hook, shell=shell)
    payload = IssueCreatedPayload(repo="acme/app", issue=IssueSnapshot(number=42, title="t", url="u"))

    result = executor.execute_hook(hook, payload, cwd=Path("/wt"))

    assert shell.calls == [("notify 42", Path("/wt"), 1234)]
    assert result.success
    assert result.output == "done"
    assert result.outcome == "success"
    assert result.mode == "fire-and-forget"


def test_fire_and_forget_failure_never_aborts() -> None:
    hook = make_hook("notify", mode="fire-and-forget")
    executor = make_executor(hook, shell=FakeShellRunner(default=exited(1, stderr="nope")))

    result = executor.execute_hook(hook, PRE_PR)

    assert not result.success
    assert not result.aborted
    assert result.error == "Hook exited with code 1"
    assert result.stderr == "nope"


def test_blocking_failure_aborts_and_shows_output() -> None:
    prompter = FakeHookPrompter(interactive=False)
    hook = make_hook("lint", mode="blocking", display_name="Linter")
    executor = make_executor(
        hook, shell=FakeShellRunner(default=exited(1, stderr="E501")), prompter=prompter
    )

    result = executor.execute_hook(hook, PRE_PR)

    assert result.aborted
    assert result.outcome == "abort"
    assert prompter.shown_outputs == [("Linter", "E501")]


def test_blocking_success_does_not_abort() -> None:
    prompter = FakeHookPrompter()
    hook = make_hook("lint", mode="blocking")
    executor = make_executor(hook, prompter=prompter)

    result = executor.execute_hook(hook, PRE_PR)

    assert result.success
    assert not result.aborted
    assert prompter.shown_outputs == []


def test_warn_exit_code_succeeds_without_abort() -> None:
    hook = make_hook("lint", mode="blocking", exit_codes={"success": [0], "warn": [2], "abort": [1]})
    executor = make_executor(hook, shell=FakeShellRunner(default=exited(2)))

    result = executor.execute_hook(hook, PRE_PR)

    assert result.success
    assert result.outcome == "warn"
    assert not result.aborted
    assert result.error is None


def test_timeout_reports_duration_and_aborts_blocking_hook() -> None:
    hook = make_hook("slow", mode="blocking", timeout_ms=250)
    executor = make_executor(hook, shell=FakeShellRunner(default=timed_out()))

    result = executor.execute_hook(hook, PRE_PR)

    assert result.error == "Hook timed out after 250ms"
    assert result.aborted
    assert result.exit_code is None


def test_interactive_continue_overrides_failure() -> None:
    prompter = FakeHookPrompter(interactive=True, decisions=[HookDecision.CONTINUE])
    hook = make_hook("review", mode="interactive", continue_prompt="Ship it?")
    executor = make_executor(
        hook, shell=FakeShellRunner(default=exited(1, stdout="warnings")), prompter=prompter
    )

    result = executor.execute_hook(hook, PRE_PR)

    assert not result.aborted
    assert result.outcome == "continue"
    assert prompter.questions == ["Ship it?"]
    assert prompter.shown_outputs == [("review", "warnings")]


def test_interactive_asks_even_on_success_and_abort_wins() -> None:
    prompter = FakeHookPrompter(interactive=True, decisions=[HookDecision.ABORT])
    hook = make_hook("review", mode="interactive")
    executor = make_executor(hook, shell=FakeShellRunner(default=exited(0, stdout="ok")), prompter=prompter)

    result = executor.execute_hook(hook, PRE_PR)

    assert result.success
    assert result.aborted
    assert prompter.questions == ["Continue?"]


def test_interactive_view_shows_full_output_then_prompts_again() -> None:
    prompter = FakeHookPrompter(
        interactive=True, decisions=[HookDecision.VIEW, HookDecision.VIEW, HookDecision.CONTINUE]
    )
    hook = make_hook("review", mode="interactive")
    executor = make_executor(
        hook, shell=FakeShellRunner(default=exited(0, stdout="long output")), prompter=prompter
    )

    result = executor.execute_hook(hook, PRE_PR)

    assert not result.aborted
    assert prompter.full_outputs == ["long output", "long output"]
    assert len(prompter.questions) == 3


def test_interactive_without_operator_behaves_as_blocking() -> None:
    prompter = FakeHookPrompter(interactive=False)
    hook = make_hook("review", mode="interactive")
    failing = make_executor(hook, shell=FakeShellRunner(default=exited(1)), prompter=prompter)
    passing = make_executor(hook, prompter=prompter)

    assert failing.execute_hook(hook, PRE_PR).aborted
    assert not passing.execute_hook(hook, PRE_PR).aborted
    assert prompter.questions == []


def test_execute_hooks_for_event_without_hooks_returns_empty() -> None:
    assert make_executor().execute_hooks_for_event("pre-pr", PRE_PR) == []


def test_fail_fast_stops_after_first_abort() -> None:
    shell = FakeShellRunner(results={"run-second": exited(1)})
    executor = make_executor(
        make_hook("first", mode="blocking"),
        make_hook("second", mode="blocking"),
        make_hook("third", mode="blocking"),
        shell=shell,
    )

    results = executor.execute_hooks_for_event("pre-pr", PRE_PR)

    assert [result.hook_name for result in results] == ["first", "second"]
    assert results[1].aborted
    assert shell.commands == ["run-first", "run-second"]


def test_fail_fast_keeps_going_after_fire_and_forget_failure() -> None:
    shell = FakeShellRunner(results={"run-first": exited(1)})
    executor = make_executor(make_hook("first"), make_hook("second"), shell=shell)

    results = executor.execute_hooks_for_event("pre-pr", PRE_PR)

    assert [result.success for result in results] == [False, True]


def test_continue_runs_all_hooks_and_preserves_order() -> None:
    shell = FakeShellRunner(results={"run-second": exited(1)})
    executor = make_executor(
        make_hook("first", mode="blocking"),
        make_hook("second", mode="blocking"),
        make_hook("third", mode="blocking"),
        shell=shell,
    )

    results = executor.execute_hooks_for_event("pre-pr", PRE_PR, on_failure="continue")

    assert [result.hook_name for result in results] == ["first", "second", "third"]
    assert [result.aborted for result in results] == [False, True, False]
    assert sorted(shell.commands) == ["run-first", "run-second", "run-third"]


def test_continue_runs_hooks_concurrently() -> None:
    barrier = threading.Barrier(2, timeout=5)

    def handler(command: str) -> ShellResult:
        # Both hooks must be running at once for the barrier to release
        barrier.wait()
        return exited(0)

    executor = make_executor(
        make_hook("first"), make_hook("second"), shell=FakeShellRunner(handler=handler)
    )

    results = executor.execute_hooks_for_event("pre-pr", PRE_PR, on_failure="continue")

    assert all(result.success for result in results)


def test_per_event_setting_overrides_call_argument() -> None:
    shell = FakeShellRunner(results={"run-first": exited(1)})
    executor = make_executor(
        make_hook("first", mode="blocking"),
        make_hook("second", mode="blocking"),
        shell=shell,
        event_settings={"pre-pr": "fail-fast"},
    )

    results = executor.execute_hooks_for_event("pre-pr", PRE_PR, on_failure="continue")

    assert [result.hook_name for result in results] == ["first"]


def test_unexpected_exception_becomes_failed_result_and_stops_fail_fast() -> None:
    def handler(command: str) -> ShellResult:
        if command == "run-first":
            raise RuntimeError("boom")
        return exited(0)

    shell = FakeShellRunner(handler=handler)
    executor = make_executor(make_hook("first"), make_hook("second"), shell=shell)

    results = executor.execute_hooks_for_event("pre-pr", PRE_PR)

    assert len(results) == 1
    assert results[0].error == "Hook raised an unexpected error: boom"
    assert not results[0].success
    # fire-and-forget hooks never abort, even on internal errors
    assert not results[0].aborted


def test_unexpected_exception_in_blocking_hook_aborts() -> None:
    def handler(command: str) -> ShellResult:
        raise RuntimeError("boom")

    executor = EventHookExecutor(
        make_registry(make_hook("gate", mode="blocking")),
        FakeShellRunner(handler=handler),
        FakeHookPrompter(interactive=False),
    )

    results = executor.execute_hooks_for_event("pre-pr", PRE_PR, on_failure="continue")

    assert results[0].aborted
