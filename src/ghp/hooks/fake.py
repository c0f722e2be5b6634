"""Fake HookPrompter for testing."""

from ghp.hooks.prompter import HookDecision, HookPrompter


class FakeHookPrompter(HookPrompter):
    """Answers prompts from a scripted list of decisions.

    When the script runs out, further prompts answer ABORT.

    Mutation Tracking:
    - shown_outputs: (title, output) pairs passed to show_output
    - full_outputs: outputs passed to show_full_output
    - questions: prompt texts in the order asked
    """

    def __init__(
        self,
        *,
        interactive: bool = True,
        decisions: list[HookDecision] | None = None,
    ) -> None:
        self._interactive = interactive
        self._decisions = list(decisions or [])
        self._shown_outputs: list[tuple[str, str]] = []
        self._full_outputs: list[str] = []
        self._questions: list[str] = []

    @property
    def shown_outputs(self) -> list[tuple[str, str]]:
        return list(self._shown_outputs)

    @property
    def full_outputs(self) -> list[str]:
        return list(self._full_outputs)

    @property
    def questions(self) -> list[str]:
        return list(self._questions)

    def is_interactive(self) -> bool:
        return self._interactive

    def show_output(self, title: str, output: str) -> None:
        self._shown_outputs.append((title, output))

    def show_full_output(self, output: str) -> None:
        self._full_outputs.append(output)

    def prompt(self, question: str) -> HookDecision:
        self._questions.append(question)
        if not self._decisions:
            return HookDecision.ABORT
        return self._decisions.pop(0)
