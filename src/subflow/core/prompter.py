"""Interactive input collection."""

from abc import ABC, abstractmethod

import click


class Prompter(ABC):
    """Abstract interface for reading answers from the user.

    Commands never read from the terminal directly; tests substitute a fake
    that replays scripted answers.
    """

    @abstractmethod
    def prompt(self, text: str, default: str | None = None) -> str:
        """Ask a free-form question and return the answer (stripped)."""
        ...

    @abstractmethod
    def confirm(self, text: str, default: bool = False) -> bool:
        """Ask a yes/no question."""
        ...


class ClickPrompter(Prompter):
    """Production implementation reading from the controlling terminal."""

    def prompt(self, text: str, default: str | None = None) -> str:
        answer = click.prompt(text, default=default, show_default=default is not None, err=True)
        return str(answer).strip()

    def confirm(self, text: str, default: bool = False) -> bool:
        return click.confirm(text, default=default, err=True)
