"""Git operations subpackage.

This subpackage provides abstractions over git operations with support for
testing via fakes and dry-run via wrappers.
"""

from subflow.core.git.abc import Git, StashEntry
from subflow.core.git.dry_run import DryRunGit
from subflow.core.git.real import RealGit

__all__ = [
    "Git",
    "StashEntry",
    "RealGit",
    "DryRunGit",
]
