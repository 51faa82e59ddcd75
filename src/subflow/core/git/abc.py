"""High-level git operations interface.

This module provides a clean abstraction over git subprocess calls, making the
multi-repository workflows testable and dry-run capable.

Architecture:
- Git: Abstract base class defining the interface
- RealGit: Production implementation using subprocess
- DryRunGit: Wrapper that prints mutating commands instead of running them

Every method receives the working directory of the repository it acts on.
Nothing in this package changes the process working directory.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class StashEntry:
    """A single line of `git stash list`.

    Attributes:
        ref: Stash reference usable with `git stash pop` (e.g. "stash@{0}")
        message: Stash subject after the ref (e.g. "On main: stash-for-main")
    """

    ref: str
    message: str

    @property
    def tag(self) -> str:
        """Message given to `git stash push -m`, without the `On <branch>: ` prefix."""
        _, sep, tag = self.message.partition(": ")
        if not sep:
            return self.message
        return tag


# ============================================================================
# Abstract Interface
# ============================================================================


class Git(ABC):
    """Abstract interface for git operations.

    All implementations (real, dry-run and fake) must implement this interface.
    Query methods return None/False/empty when git reports absence. Mutating
    methods raise GitCommandError when git exits non-zero.
    """

    # Repository queries

    @abstractmethod
    def is_git_repository(self, cwd: Path) -> bool:
        """Check whether `cwd` is the top level of a git working tree."""
        ...

    @abstractmethod
    def get_repository_root(self, cwd: Path) -> Path | None:
        """Get the top-level directory of the working tree containing `cwd`."""
        ...

    @abstractmethod
    def get_current_branch(self, cwd: Path) -> str | None:
        """Get the currently checked-out branch, or None when HEAD is detached."""
        ...

    @abstractmethod
    def get_upstream_branch(self, cwd: Path) -> str | None:
        """Get the upstream tracking branch (e.g. "origin/main") of HEAD, if any."""
        ...

    @abstractmethod
    def branch_exists_locally(self, cwd: Path, branch: str) -> bool:
        """Check whether refs/heads/<branch> exists."""
        ...

    @abstractmethod
    def remote_branch_exists(self, cwd: Path, remote: str, branch: str) -> bool:
        """Check whether `branch` exists on `remote` (git ls-remote --exit-code)."""
        ...

    @abstractmethod
    def has_uncommitted_changes(self, cwd: Path) -> bool:
        """Check for tracked or staged changes, ignoring untracked files."""
        ...

    @abstractmethod
    def has_staged_changes(self, cwd: Path) -> bool:
        """Check if the index differs from HEAD (git diff --cached --quiet)."""
        ...

    @abstractmethod
    def list_submodules(self, cwd: Path) -> list[str] | None:
        """List submodule paths reported by `git submodule status --recursive`.

        Returns:
            Submodule paths in reported order, an empty list when there are
            none, or None when the command could not be run.
        """
        ...

    @abstractmethod
    def list_stashes(self, cwd: Path) -> list[StashEntry]:
        """List stash entries, most recent first."""
        ...

    @abstractmethod
    def get_status_short(self, cwd: Path) -> str:
        """Get `git status --short --branch` output."""
        ...

    # Staged diff queries (commit message generation)

    @abstractmethod
    def get_staged_diff(self, cwd: Path) -> str:
        """Get the full staged diff (git diff --cached)."""
        ...

    @abstractmethod
    def get_staged_files(self, cwd: Path, diff_filter: str | None = None) -> list[str]:
        """Get staged file names, optionally restricted by --diff-filter (A, M, D)."""
        ...

    @abstractmethod
    def get_staged_diff_stat(self, cwd: Path) -> str:
        """Get `git diff --cached --stat` output."""
        ...

    @abstractmethod
    def get_recent_commit_subjects(self, cwd: Path, *, limit: int = 3) -> list[str]:
        """Get the subjects of the most recent commits on HEAD."""
        ...

    # Merge / conflict queries

    @abstractmethod
    def is_merge_in_progress(self, cwd: Path) -> bool:
        """Check whether MERGE_HEAD exists."""
        ...

    @abstractmethod
    def list_conflicted_paths(self, cwd: Path) -> list[str]:
        """List unmerged paths (git diff --name-only --diff-filter=U)."""
        ...

    @abstractmethod
    def get_tree_entry_sha(self, cwd: Path, treeish: str, path: str) -> str | None:
        """Get the object id recorded for `path` in `treeish` (git ls-tree)."""
        ...

    @abstractmethod
    def get_commit_oneline(self, cwd: Path, commit: str) -> str | None:
        """Get the `git log --oneline -1` summary of a commit, if known locally."""
        ...

    @abstractmethod
    def get_left_right_count(self, cwd: Path, left: str, right: str) -> tuple[int, int] | None:
        """Count commits only in `left` and only in `right` (git rev-list --left-right)."""
        ...

    # Filesystem checks

    @abstractmethod
    def path_exists(self, path: Path) -> bool:
        """Check if a path exists on the filesystem.

        In production (RealGit), this delegates to Path.exists(). In tests
        (FakeGit), this checks an in-memory set of paths.
        """
        ...

    @abstractmethod
    def is_dir(self, path: Path) -> bool:
        """Check if a path is a directory."""
        ...

    # Mutating operations

    @abstractmethod
    def stash_push(self, cwd: Path, message: str) -> None:
        """Stash working tree changes with a message."""
        ...

    @abstractmethod
    def stash_pop(self, cwd: Path, ref: str) -> None:
        """Pop a specific stash entry."""
        ...

    @abstractmethod
    def checkout_branch(self, cwd: Path, branch: str, *, recurse_submodules: bool = False) -> None:
        """Checkout a branch (optionally with --recurse-submodules)."""
        ...

    @abstractmethod
    def checkout_detached(self, cwd: Path, ref: str) -> None:
        """Checkout a ref as a detached HEAD."""
        ...

    @abstractmethod
    def create_branch(self, cwd: Path, branch: str) -> None:
        """Create and checkout a new branch (git checkout -b)."""
        ...

    @abstractmethod
    def fetch_all(self, cwd: Path) -> None:
        """Fetch all remotes."""
        ...

    @abstractmethod
    def fetch(self, cwd: Path, remote: str, branch: str | None = None) -> None:
        """Fetch a remote, optionally a single branch."""
        ...

    @abstractmethod
    def pull(self, cwd: Path, remote: str | None = None, branch: str | None = None) -> None:
        """Pull, either from the configured upstream or from remote/branch."""
        ...

    @abstractmethod
    def push(
        self,
        cwd: Path,
        remote: str | None = None,
        ref: str | None = None,
        *,
        set_upstream: bool = False,
    ) -> None:
        """Push, either to the configured upstream or to remote/ref."""
        ...

    @abstractmethod
    def add_all(self, cwd: Path) -> None:
        """Stage all changes (git add -A)."""
        ...

    @abstractmethod
    def add_path(self, cwd: Path, path: str) -> None:
        """Stage a single path."""
        ...

    @abstractmethod
    def commit(self, cwd: Path, message: str) -> None:
        """Create a commit from the index."""
        ...

    @abstractmethod
    def create_tag(self, cwd: Path, name: str) -> None:
        """Create a lightweight tag at HEAD."""
        ...

    @abstractmethod
    def merge(self, cwd: Path, ref: str) -> None:
        """Merge `ref` into the current branch."""
        ...

    @abstractmethod
    def merge_abort(self, cwd: Path) -> None:
        """Abort the merge in progress."""
        ...

    @abstractmethod
    def stage_gitlink(self, cwd: Path, commit: str, path: str) -> None:
        """Record `commit` as the gitlink of submodule `path` in the index."""
        ...
