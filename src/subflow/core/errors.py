"""Error taxonomy for subflow operations.

Validation and precondition problems are raised as exceptions before any git
command runs. Failures of the git binary itself surface as GitCommandError and
are converted into per-repository outcomes by the operation driver, so one
failing repository never unwinds the others.
"""

from collections.abc import Sequence


class SubflowError(Exception):
    """Base class for errors reported to the user as `Error: <message>`."""


class ValidationError(SubflowError):
    """Invalid user input (branch/tag name, commit message, menu choice)."""


class PreconditionError(SubflowError):
    """Repository state does not allow the operation to start."""


class GitCommandError(RuntimeError):
    """A git subprocess exited with a non-zero status."""

    def __init__(
        self,
        operation_context: str,
        cmd: Sequence[str],
        returncode: int,
        stdout: str = "",
        stderr: str = "",
    ) -> None:
        self.operation_context = operation_context
        self.cmd = list(cmd)
        self.returncode = returncode
        self.stdout = stdout
        self.stderr = stderr

        message = f"Failed to {operation_context}"
        message += f"\nCommand: {' '.join(self.cmd)}"
        message += f"\nExit code: {returncode}"
        if stdout.strip():
            message += f"\nstdout: {stdout.strip()}"
        if stderr.strip():
            message += f"\nstderr: {stderr.strip()}"
        super().__init__(message)
