"""Fake prompter for testing."""

from subflow.core.prompter import Prompter


class FakePrompter(Prompter):
    """Replays scripted answers in order and records every question asked.

    Running out of answers raises AssertionError so a test never blocks on an
    unexpected prompt.

    Examples:
        >>> prompter = FakePrompter(answers=["feature/login", "1"])
        >>> prompter.prompt("Enter branch name")
        'feature/login'
        >>> prompter.prompts
        ['Enter branch name']
    """

    def __init__(
        self, answers: list[str] | None = None, confirms: list[bool] | None = None
    ) -> None:
        self._answers = list(answers or [])
        self._confirms = list(confirms or [])
        self._prompts: list[str] = []

    @property
    def prompts(self) -> list[str]:
        """Questions asked so far, in order."""
        return list(self._prompts)

    @property
    def remaining(self) -> list[str]:
        return list(self._answers)

    def prompt(self, text: str, default: str | None = None) -> str:
        self._prompts.append(text)
        if not self._answers:
            if default is not None:
                return default
            raise AssertionError(f"Unexpected prompt: {text!r}")
        return self._answers.pop(0).strip()

    def confirm(self, text: str, default: bool = False) -> bool:
        self._prompts.append(text)
        if not self._confirms:
            return default
        return self._confirms.pop(0)
