"""Event hook executor.

Runs the hooks registered for an event, classifies each run according to the
hook's mode, and returns one HookResult per hook. Hook failures never raise;
they are reported in the results.
"""

import logging
import threading
import time
from concurrent.futures import ThreadPoolExecutor
from dataclasses import replace
from pathlib import Path

from ghp.hooks.prompter import HookDecision, HookPrompter
from ghp.hooks.registry import EventHookRegistry
from ghp.hooks.templates import substitute_template_variables
from ghp.hooks.types import (
    DEFAULT_CONTINUE_PROMPT,
    DEFAULT_EXIT_CODES,
    EventHook,
    EventPayload,
    EventType,
    HookExitCodes,
    HookOutcome,
    HookResult,
    OnFailure,
)
from ghp.shell.abc import ShellRunner

logger = logging.getLogger(__name__)

MAX_CONCURRENT_HOOKS = 8
NO_OUTPUT = "(no output)"


def classify_exit_code(exit_code: int | None, exit_codes: HookExitCodes | None) -> HookOutcome:
    """Classify an exit code as success, warn or abort.

    A process killed by a signal (None) and any code not listed in
    exit_codes are classified as abort.
    """
    codes = exit_codes or DEFAULT_EXIT_CODES
    if exit_code is None:
        return "abort"
    if exit_code in codes.success:
        return "success"
    if exit_code in codes.warn:
        return "warn"
    return "abort"


def _failure_message(exit_code: int | None, stderr: str) -> str:
    if exit_code is None:
        return f"Hook did not exit normally: {stderr}" if stderr else "Hook did not exit normally"
    return f"Hook exited with code {exit_code}"


class EventHookExecutor:
    """Executes event hooks from a registry.

    The failure policy decides how hooks for one event are scheduled:
    fail-fast runs them one at a time in registry order and stops after the
    first aborted result or internal error; continue runs them all
    concurrently and returns results in registry order.
    """

    def __init__(
        self,
        registry: EventHookRegistry,
        shell: ShellRunner,
        prompter: HookPrompter,
        *,
        max_workers: int = MAX_CONCURRENT_HOOKS,
    ) -> None:
        self._registry = registry
        self._shell = shell
        self._prompter = prompter
        self._max_workers = max_workers
        self._prompt_lock = threading.Lock()

    @property
    def registry(self) -> EventHookRegistry:
        return self._registry

    def has_hooks_for_event(self, event: EventType) -> bool:
        return self._registry.has_hooks_for_event(event)

    def execute_hook(
        self, hook: EventHook, payload: EventPayload, cwd: Path | None = None
    ) -> HookResult:
        """Run one hook and apply its mode.

        Args:
            hook: The hook to run
            payload: Event payload used to fill the command template
            cwd: Working directory for the command (None for the current one)
        """
        command = substitute_template_variables(hook.command, payload)
        logger.debug("Running %s hook %r in %s: %s", hook.event, hook.name, cwd, command)

        start = time.monotonic()
        run = self._shell.run(command, cwd=cwd, timeout_ms=hook.timeout_ms)
        duration_ms = int((time.monotonic() - start) * 1000)

        stdout = run.stdout.strip()
        stderr = run.stderr.strip()
        if run.timed_out:
            outcome: HookOutcome = "abort"
            error: str | None = f"Hook timed out after {hook.timeout_ms}ms"
        else:
            outcome = classify_exit_code(run.exit_code, hook.exit_codes)
            error = None if outcome != "abort" else _failure_message(run.exit_code, stderr)
        success = outcome in ("success", "warn")

        result = HookResult(
            hook_name=hook.name,
            success=success,
            output=stdout,
            stderr=stderr,
            error=error,
            aborted=False,
            duration_ms=duration_ms,
            exit_code=run.exit_code,
            mode=hook.mode,
            outcome=outcome,
        )
        if not success:
            logger.warning("Hook %r failed for %s: %s", hook.name, hook.event, error)

        match hook.mode:
            case "fire-and-forget":
                return result
            case "blocking":
                return self._apply_blocking(hook, result)
            case "interactive":
                if not self._prompter.is_interactive():
                    logger.debug("No operator for interactive hook %r; treating as blocking", hook.name)
                    return self._apply_blocking(hook, result)
                return self._apply_interactive(hook, result)

    def execute_hooks_for_event(
        self,
        event: EventType,
        payload: EventPayload,
        cwd: Path | None = None,
        on_failure: OnFailure | None = None,
    ) -> list[HookResult]:
        """Run every enabled hook registered for event.

        Args:
            event: Event being fired
            payload: Payload for the event
            cwd: Working directory for all hooks
            on_failure: Policy used when the event has no setting of its own
        """
        hooks = self._registry.hooks_for_event(event)
        if not hooks:
            return []

        policy = self._registry.on_failure_for(event, on_failure)
        logger.debug("Firing %d hook(s) for %s with policy %s", len(hooks), event, policy)

        if policy == "continue" and len(hooks) > 1:
            workers = min(len(hooks), self._max_workers)
            with ThreadPoolExecutor(max_workers=workers) as pool:
                futures = [pool.submit(self._execute_safely, hook, payload, cwd) for hook in hooks]
                return [future.result()[0] for future in futures]

        results: list[HookResult] = []
        for hook in hooks:
            result, internal_error = self._execute_safely(hook, payload, cwd)
            results.append(result)
            if policy == "fail-fast" and (result.aborted or internal_error):
                logger.debug("Stopping %s hooks after %r", event, hook.name)
                break
        return results

    def _execute_safely(
        self, hook: EventHook, payload: EventPayload, cwd: Path | None
    ) -> tuple[HookResult, bool]:
        """Run a hook, converting any exception into a failed result.

        Returns:
            The result, and whether it came from an internal error
        """
        try:
            return self.execute_hook(hook, payload, cwd), False
        except Exception as e:
            logger.debug("Hook %r raised", hook.name, exc_info=True)
            return (
                HookResult(
                    hook_name=hook.name,
                    success=False,
                    error=f"Hook raised an unexpected error: {e}",
                    aborted=hook.mode != "fire-and-forget",
                    mode=hook.mode,
                    outcome="abort",
                ),
                True,
            )

    def _apply_blocking(self, hook: EventHook, result: HookResult) -> HookResult:
        if result.success:
            return result
        self._prompter.show_output(
            hook.label, result.stderr or result.output or result.error or NO_OUTPUT
        )
        return replace(result, aborted=True)

    def _apply_interactive(self, hook: EventHook, result: HookResult) -> HookResult:
        output = result.stderr or result.output or result.error or NO_OUTPUT
        question = hook.continue_prompt or DEFAULT_CONTINUE_PROMPT

        # Only one hook may own the terminal at a time
        with self._prompt_lock:
            self._prompter.show_output(hook.label, output)
            decision = self._prompter.prompt(question)
            while decision is HookDecision.VIEW:
                self._prompter.show_full_output(output)
                decision = self._prompter.prompt(question)

        if decision is HookDecision.CONTINUE:
            return replace(result, aborted=False, outcome="continue")
        return replace(result, aborted=True, outcome="abort")
