"""Subprocess execution with rich error context for git invocations."""

import subprocess
from collections.abc import Sequence
from pathlib import Path
from typing import Any

from subflow.core.errors import GitCommandError


def run_subprocess_with_context(
    cmd: Sequence[str],
    operation_context: str,
    cwd: Path | None = None,
    capture_output: bool = True,
    check: bool = True,
    **kwargs: Any,
) -> subprocess.CompletedProcess[str]:
    """Execute subprocess with enriched error reporting.

    Wraps subprocess.run() and re-raises a non-zero exit as GitCommandError
    carrying the operation context, the command and any captured output.

    Args:
        cmd: Command and arguments to execute (never a shell string)
        operation_context: Human-readable description of operation
        cwd: Working directory for command execution
        capture_output: Whether to capture stdout/stderr. When False the
            command writes straight to the terminal.
        check: Whether to raise on non-zero exit (default: True)
        **kwargs: Additional arguments passed to subprocess.run()

    Returns:
        CompletedProcess instance from subprocess.run()

    Raises:
        GitCommandError: If command fails and check is True
        FileNotFoundError: If the git binary is not installed
    """
    result = subprocess.run(
        list(cmd),
        cwd=cwd,
        capture_output=capture_output,
        text=True,
        encoding="utf-8",
        check=False,
        **kwargs,
    )

    if check and result.returncode != 0:
        raise GitCommandError(
            operation_context,
            cmd,
            result.returncode,
            stdout=result.stdout or "",
            stderr=result.stderr or "",
        )

    return result
