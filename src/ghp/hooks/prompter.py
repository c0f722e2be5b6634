"""Operator interaction for hook output and interactive hooks.

The executor never touches the terminal directly. It asks a HookPrompter to
show output and, for interactive hooks, to decide whether to continue.
"""

import sys
from abc import ABC, abstractmethod
from enum import Enum

import click

from ghp.output import user_output

OUTPUT_BOX_WIDTH = 60
OUTPUT_BOX_MAX_LINES = 10


class HookDecision(Enum):
    CONTINUE = "continue"
    ABORT = "abort"
    VIEW = "view"


def format_output_box(title: str, output: str, max_lines: int = OUTPUT_BOX_MAX_LINES) -> str:
    """Frame output in a box, truncating long lines and showing max_lines lines."""
    width = OUTPUT_BOX_WIDTH
    lines = output.split("\n")
    truncated = len(lines) > max_lines
    shown = lines[:max_lines]

    top = f"┌─ {title} " + "─" * max(0, width - len(title) - 4) + "┐"
    bottom = "└" + "─" * width + "┘"
    body: list[str] = []
    for line in shown:
        if len(line) > width - 4:
            line = line[: width - 7] + "..."
        body.append(f"│ {line.ljust(width - 2)} │")
    if truncated:
        body.append(f"│ {'... (truncated)'.ljust(width - 2)} │")
    return "\n".join([top, *body, bottom])


def parse_decision(answer: str) -> HookDecision:
    """Interpret a y/N/v answer. Anything unrecognised aborts."""
    normalized = answer.strip().lower()
    if normalized in ("y", "yes"):
        return HookDecision.CONTINUE
    if normalized in ("v", "view"):
        return HookDecision.VIEW
    return HookDecision.ABORT


class HookPrompter(ABC):
    """Capability interface for surfacing hook output to an operator."""

    @abstractmethod
    def is_interactive(self) -> bool:
        """Whether an operator can answer prompts.

        When False, interactive hooks behave exactly like blocking hooks.
        """
        ...

    @abstractmethod
    def show_output(self, title: str, output: str) -> None:
        """Show (possibly truncated) hook output."""
        ...

    @abstractmethod
    def show_full_output(self, output: str) -> None:
        ...

    @abstractmethod
    def prompt(self, question: str) -> HookDecision:
        """Ask whether to continue. Only called when is_interactive() is True."""
        ...


class ClickHookPrompter(HookPrompter):
    """Terminal prompter using click; interactive only when stdin is a TTY."""

    def is_interactive(self) -> bool:
        return sys.stdin.isatty()

    def show_output(self, title: str, output: str) -> None:
        user_output(format_output_box(title, output))

    def show_full_output(self, output: str) -> None:
        click.echo_via_pager(output)

    def prompt(self, question: str) -> HookDecision:
        answer = click.prompt(
            f"{question} (y/N/v)", default="", show_default=False, err=True
        )
        return parse_decision(answer)


class NonInteractiveHookPrompter(HookPrompter):
    """Prompter for automation: shows output on stderr and never asks."""

    def is_interactive(self) -> bool:
        return False

    def show_output(self, title: str, output: str) -> None:
        user_output(format_output_box(title, output))

    def show_full_output(self, output: str) -> None:
        user_output(output)

    def prompt(self, question: str) -> HookDecision:
        return HookDecision.ABORT
