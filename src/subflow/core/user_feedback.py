"""User-facing diagnostic output with verbosity awareness."""

from abc import ABC, abstractmethod

import click

from subflow.cli.output import user_output


class UserFeedback(ABC):
    """Provides user-facing diagnostic output that respects the verbose toggle.

    Functions call ctx.feedback methods instead of threading a 'verbose'
    boolean through their signatures.

    Two modes:
    - Verbose: show everything (info, success, warnings, errors)
    - Quiet: suppress info, keep success, warnings and errors

    Usage:
        ctx.feedback.info("Checking out main in frontend/ee...")
        ctx.feedback.success("✓ Switched frontend/ee to main")
        ctx.feedback.warning("No upstream branch set for main")
        ctx.feedback.error("Error: checkout failed in server/ee")
    """

    @abstractmethod
    def info(self, message: str) -> None:
        """Show informational message (suppressed in quiet mode)."""

    @abstractmethod
    def success(self, message: str) -> None:
        """Show success message."""

    @abstractmethod
    def warning(self, message: str) -> None:
        """Show warning message."""

    @abstractmethod
    def error(self, message: str) -> None:
        """Show error message."""


class InteractiveFeedback(UserFeedback):
    """Feedback shown in verbose mode (all messages)."""

    def info(self, message: str) -> None:
        user_output(click.style(message, fg="cyan"))

    def success(self, message: str) -> None:
        user_output(click.style(message, fg="green"))

    def warning(self, message: str) -> None:
        user_output(click.style(message, fg="yellow"))

    def error(self, message: str) -> None:
        user_output(click.style(message, fg="red"))


class QuietFeedback(UserFeedback):
    """Feedback with informational messages suppressed."""

    def info(self, message: str) -> None:
        pass

    def success(self, message: str) -> None:
        user_output(click.style(message, fg="green"))

    def warning(self, message: str) -> None:
        user_output(click.style(message, fg="yellow"))

    def error(self, message: str) -> None:
        user_output(click.style(message, fg="red"))
