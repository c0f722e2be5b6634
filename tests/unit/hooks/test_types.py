"""Tests for event hook models and payloads."""

import pytest
from pydantic import ValidationError

from ghp.hooks.types import (
    DEFAULT_EVENT_HOOK_TIMEOUT_MS,
    EventHook,
    HookExitCodes,
    HookResult,
    IssueSnapshot,
    PrCreatedPayload,
    PullRequestSnapshot,
    first_aborted,
    should_abort,
)


def test_event_hook_defaults() -> None:
    hook = EventHook(name="lint", event="pre-pr", command="make lint")

    assert hook.enabled is True
    assert hook.mode == "fire-and-forget"
    assert hook.timeout_ms == DEFAULT_EVENT_HOOK_TIMEOUT_MS
    assert hook.exit_codes is None
    assert hook.label == "lint"


def test_event_hook_accepts_file_aliases() -> None:
    hook = EventHook.model_validate(
        {
            "name": "lint",
            "event": "pre-pr",
            "command": "make lint",
            "displayName": "Linter",
            "timeout": 500,
            "exitCodes": {"success": [0], "warn": [2], "abort": [1]},
            "continuePrompt": "Ship it?",
        }
    )

    assert hook.label == "Linter"
    assert hook.timeout_ms == 500
    assert hook.exit_codes == HookExitCodes(success=(0,), warn=(2,), abort=(1,))
    assert hook.continue_prompt == "Ship it?"


@pytest.mark.parametrize(
    "fields",
    [
        {"name": "", "event": "pre-pr", "command": "x"},
        {"name": "has space", "event": "pre-pr", "command": "x"},
        {"name": "x" * 64, "event": "pre-pr", "command": "x"},
        {"name": "ok", "event": "pre-deploy", "command": "x"},
        {"name": "ok", "event": "pre-pr", "command": "   "},
        {"name": "ok", "event": "pre-pr", "command": "x", "mode": "sometimes"},
        {"name": "ok", "event": "pre-pr", "command": "x", "timeout": 0},
    ],
)
def test_event_hook_rejects_invalid_fields(fields: dict[str, object]) -> None:
    with pytest.raises(ValidationError):
        EventHook.model_validate(fields)


def test_to_json_dict_uses_file_keys_and_fills_display_name() -> None:
    hook = EventHook(name="lint", event="pre-pr", command="make lint", mode="blocking")

    data = hook.to_json_dict()

    assert data == {
        "name": "lint",
        "event": "pre-pr",
        "command": "make lint",
        "displayName": "lint",
        "enabled": True,
        "mode": "blocking",
        "timeout": DEFAULT_EVENT_HOOK_TIMEOUT_MS,
    }


def test_should_abort_and_first_aborted() -> None:
    ok = HookResult(hook_name="a", success=True)
    bad = HookResult(hook_name="b", success=False, aborted=True)
    soft = HookResult(hook_name="c", success=False)

    assert not should_abort([ok, soft])
    assert should_abort([ok, bad])
    assert first_aborted([ok, soft, bad]) == bad
    assert first_aborted([]) is None


def test_payload_to_dict_drops_missing_optionals() -> None:
    payload = PrCreatedPayload(
        repo="acme/app",
        pr=PullRequestSnapshot(number=3, title="T", url="u"),
        branch="b",
    )

    data = payload.to_dict()

    assert "issue" not in data
    assert data["pr"]["number"] == 3
    assert PrCreatedPayload.event == "pr-created"


def test_payload_to_dict_keeps_nested_issue() -> None:
    payload = PrCreatedPayload(
        repo="acme/app",
        pr=PullRequestSnapshot(number=3, title="T", url="u"),
        branch="b",
        issue=IssueSnapshot(number=1, title="I", url="iu"),
    )

    assert payload.to_dict()["issue"]["title"] == "I"
