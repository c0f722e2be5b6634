"""Tests for hook output rendering and decision parsing."""

import pytest

from ghp.hooks.prompter import (
    OUTPUT_BOX_WIDTH,
    HookDecision,
    NonInteractiveHookPrompter,
    format_output_box,
    parse_decision,
)


@pytest.mark.parametrize(
    ("answer", "decision"),
    [
        ("y", HookDecision.CONTINUE),
        ("YES", HookDecision.CONTINUE),
        (" v ", HookDecision.VIEW),
        ("view", HookDecision.VIEW),
        ("", HookDecision.ABORT),
        ("n", HookDecision.ABORT),
        ("maybe", HookDecision.ABORT),
    ],
)
def test_parse_decision(answer: str, decision: HookDecision) -> None:
    assert parse_decision(answer) is decision


def test_format_output_box_frames_lines() -> None:
    box = format_output_box("lint", "line one\nline two")

    lines = box.split("\n")
    assert lines[0].startswith("┌─ lint ")
    assert lines[1] == f"│ {'line one'.ljust(OUTPUT_BOX_WIDTH - 2)} │"
    assert lines[-1] == "└" + "─" * OUTPUT_BOX_WIDTH + "┘"


def test_format_output_box_truncates() -> None:
    output = "\n".join(f"line {i}" for i in range(20)) + "\n" + "x" * 200

    box = format_output_box("lint", output, max_lines=5)

    assert "line 4" in box
    assert "line 5" not in box
    assert "... (truncated)" in box


def test_format_output_box_shortens_long_lines() -> None:
    box = format_output_box("lint", "x" * 200)

    assert "..." in box.split("\n")[1]
    assert "x" * 100 not in box


def test_non_interactive_prompter_never_continues(capsys: pytest.CaptureFixture[str]) -> None:
    prompter = NonInteractiveHookPrompter()

    prompter.show_output("lint", "E501 line too long")

    assert not prompter.is_interactive()
    assert prompter.prompt("Continue?") is HookDecision.ABORT
    assert "E501 line too long" in capsys.readouterr().err
