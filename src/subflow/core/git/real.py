"""Production Git implementation using subprocess.

This module provides the real Git implementation that executes actual git
commands via subprocess. Commands whose output is parsed are captured; the
rest stream git's own progress and messages to the terminal.
"""

import subprocess
from pathlib import Path

from subflow.core.git.abc import Git, StashEntry
from subflow.core.git.parsing import (
    parse_left_right_count,
    parse_ls_tree_sha,
    parse_stash_list,
    parse_submodule_status,
)
from subflow.core.subprocess import run_subprocess_with_context

# ============================================================================
# Production Implementation
# ============================================================================


class RealGit(Git):
    """Production implementation using subprocess.

    All git operations execute actual git commands via subprocess.
    """

    def _query(self, cwd: Path, *args: str) -> subprocess.CompletedProcess[str]:
        return subprocess.run(
            ["git", *args],
            cwd=cwd,
            capture_output=True,
            text=True,
            encoding="utf-8",
            check=False,
        )

    def _run(self, cwd: Path, operation_context: str, *args: str) -> None:
        run_subprocess_with_context(
            ["git", *args],
            operation_context=operation_context,
            cwd=cwd,
            capture_output=False,
        )

    def is_git_repository(self, cwd: Path) -> bool:
        """Check whether `cwd` is the top level of a git working tree.

        A directory nested in another work tree (for example an uninitialized
        submodule) is not a repository of its own.
        """
        if not cwd.is_dir():
            return False
        result = self._query(cwd, "rev-parse", "--show-toplevel")
        if result.returncode != 0 or not result.stdout.strip():
            return False
        return Path(result.stdout.strip()).resolve() == cwd.resolve()

    def get_repository_root(self, cwd: Path) -> Path | None:
        """Get the top-level directory of the working tree containing `cwd`."""
        result = self._query(cwd, "rev-parse", "--show-toplevel")
        if result.returncode != 0:
            return None
        return Path(result.stdout.strip())

    def get_current_branch(self, cwd: Path) -> str | None:
        """Get the currently checked-out branch."""
        result = self._query(cwd, "symbolic-ref", "--short", "-q", "HEAD")
        if result.returncode != 0:
            return None
        branch = result.stdout.strip()
        if not branch:
            return None
        return branch

    def get_upstream_branch(self, cwd: Path) -> str | None:
        """Get the upstream tracking branch of HEAD."""
        result = self._query(cwd, "rev-parse", "--abbrev-ref", "--symbolic-full-name", "@{u}")
        if result.returncode != 0:
            return None
        upstream = result.stdout.strip()
        if not upstream:
            return None
        return upstream

    def branch_exists_locally(self, cwd: Path, branch: str) -> bool:
        """Check whether refs/heads/<branch> exists."""
        result = self._query(cwd, "show-ref", "--verify", "--quiet", f"refs/heads/{branch}")
        return result.returncode == 0

    def remote_branch_exists(self, cwd: Path, remote: str, branch: str) -> bool:
        """Check whether `branch` exists on `remote`."""
        result = self._query(cwd, "ls-remote", "--exit-code", "--heads", remote, branch)
        return result.returncode == 0

    def has_uncommitted_changes(self, cwd: Path) -> bool:
        """Check for tracked or staged changes that `git stash push` would save.

        Untracked files and dirty submodule work trees are not counted.
        """
        result = self._query(
            cwd, "status", "--porcelain", "--untracked-files=no", "--ignore-submodules=dirty"
        )
        if result.returncode != 0:
            return False
        return bool(result.stdout.strip())

    def has_staged_changes(self, cwd: Path) -> bool:
        """Check if the index differs from HEAD."""
        result = self._query(cwd, "diff", "--cached", "--quiet")
        # 0 = no differences, 1 = differences, anything else = error
        return result.returncode == 1

    def list_submodules(self, cwd: Path) -> list[str] | None:
        """List submodule paths, or None when enumeration fails."""
        result = self._query(cwd, "submodule", "status", "--recursive")
        if result.returncode != 0:
            return None
        return parse_submodule_status(result.stdout)

    def list_stashes(self, cwd: Path) -> list[StashEntry]:
        """List stash entries, most recent first."""
        result = self._query(cwd, "stash", "list")
        if result.returncode != 0:
            return []
        return parse_stash_list(result.stdout)

    def get_status_short(self, cwd: Path) -> str:
        """Get `git status --short --branch` output."""
        result = run_subprocess_with_context(
            ["git", "status", "--short", "--branch"],
            operation_context=f"get status of {cwd}",
            cwd=cwd,
        )
        return result.stdout

    def get_staged_diff(self, cwd: Path) -> str:
        """Get the full staged diff."""
        result = run_subprocess_with_context(
            ["git", "diff", "--cached"],
            operation_context="read staged diff",
            cwd=cwd,
        )
        return result.stdout

    def get_staged_files(self, cwd: Path, diff_filter: str | None = None) -> list[str]:
        """Get staged file names, optionally restricted by --diff-filter."""
        cmd = ["git", "diff", "--cached", "--name-only"]
        if diff_filter is not None:
            cmd.append(f"--diff-filter={diff_filter}")
        result = run_subprocess_with_context(
            cmd,
            operation_context="list staged files",
            cwd=cwd,
        )
        return [line.strip() for line in result.stdout.splitlines() if line.strip()]

    def get_staged_diff_stat(self, cwd: Path) -> str:
        """Get `git diff --cached --stat` output."""
        result = run_subprocess_with_context(
            ["git", "diff", "--cached", "--stat"],
            operation_context="read staged diff stat",
            cwd=cwd,
        )
        return result.stdout

    def get_recent_commit_subjects(self, cwd: Path, *, limit: int = 3) -> list[str]:
        """Get `git log --oneline` lines of the most recent commits."""
        result = self._query(cwd, "log", "--oneline", f"-{limit}")
        if result.returncode != 0:
            return []
        return [line for line in result.stdout.splitlines() if line.strip()]

    def is_merge_in_progress(self, cwd: Path) -> bool:
        """Check whether MERGE_HEAD exists."""
        result = self._query(cwd, "rev-parse", "-q", "--verify", "MERGE_HEAD")
        return result.returncode == 0

    def list_conflicted_paths(self, cwd: Path) -> list[str]:
        """List unmerged paths."""
        result = run_subprocess_with_context(
            ["git", "diff", "--name-only", "--diff-filter=U"],
            operation_context="list conflicted paths",
            cwd=cwd,
        )
        return [line.strip() for line in result.stdout.splitlines() if line.strip()]

    def get_tree_entry_sha(self, cwd: Path, treeish: str, path: str) -> str | None:
        """Get the object id recorded for `path` in `treeish`."""
        result = self._query(cwd, "ls-tree", treeish, path)
        if result.returncode != 0:
            return None
        return parse_ls_tree_sha(result.stdout)

    def get_commit_oneline(self, cwd: Path, commit: str) -> str | None:
        """Get the one-line summary of a commit."""
        result = self._query(cwd, "log", "--oneline", "-1", commit)
        if result.returncode != 0:
            return None
        summary = result.stdout.strip()
        if not summary:
            return None
        return summary

    def get_left_right_count(self, cwd: Path, left: str, right: str) -> tuple[int, int] | None:
        """Count commits only reachable from `left` and only from `right`."""
        result = self._query(cwd, "rev-list", "--count", "--left-right", f"{left}...{right}")
        if result.returncode != 0:
            return None
        return parse_left_right_count(result.stdout)

    def path_exists(self, path: Path) -> bool:
        """Check if a path exists on the filesystem."""
        return path.exists()

    def is_dir(self, path: Path) -> bool:
        """Check if a path is a directory."""
        return path.is_dir()

    def stash_push(self, cwd: Path, message: str) -> None:
        """Stash working tree changes with a message."""
        self._run(cwd, f"stash changes in {cwd}", "stash", "push", "-m", message)

    def stash_pop(self, cwd: Path, ref: str) -> None:
        """Pop a specific stash entry."""
        self._run(cwd, f"pop {ref} in {cwd}", "stash", "pop", ref)

    def checkout_branch(self, cwd: Path, branch: str, *, recurse_submodules: bool = False) -> None:
        """Checkout a branch."""
        args = ["checkout"]
        if recurse_submodules:
            args.append("--recurse-submodules")
        args.append(branch)
        self._run(cwd, f"checkout branch '{branch}'", *args)

    def checkout_detached(self, cwd: Path, ref: str) -> None:
        """Checkout a ref as a detached HEAD."""
        self._run(cwd, f"checkout '{ref}'", "checkout", "--detach", ref)

    def create_branch(self, cwd: Path, branch: str) -> None:
        """Create and checkout a new branch."""
        self._run(cwd, f"create branch '{branch}'", "checkout", "-b", branch)

    def fetch_all(self, cwd: Path) -> None:
        """Fetch all remotes."""
        self._run(cwd, "fetch all remotes", "fetch", "--all")

    def fetch(self, cwd: Path, remote: str, branch: str | None = None) -> None:
        """Fetch a remote, optionally a single branch."""
        args = ["fetch", remote]
        if branch is not None:
            args.append(branch)
        self._run(cwd, f"fetch from {remote}", *args)

    def pull(self, cwd: Path, remote: str | None = None, branch: str | None = None) -> None:
        """Pull from the upstream or from remote/branch."""
        args = ["pull"]
        if remote is not None:
            args.append(remote)
            if branch is not None:
                args.append(branch)
        self._run(cwd, "pull changes", *args)

    def push(
        self,
        cwd: Path,
        remote: str | None = None,
        ref: str | None = None,
        *,
        set_upstream: bool = False,
    ) -> None:
        """Push to the upstream or to remote/ref."""
        args = ["push"]
        if set_upstream:
            args.append("--set-upstream")
        if remote is not None:
            args.append(remote)
            if ref is not None:
                args.append(ref)
        self._run(cwd, "push changes", *args)

    def add_all(self, cwd: Path) -> None:
        """Stage all changes."""
        self._run(cwd, "stage all changes", "add", "-A")

    def add_path(self, cwd: Path, path: str) -> None:
        """Stage a single path."""
        self._run(cwd, f"stage '{path}'", "add", path)

    def commit(self, cwd: Path, message: str) -> None:
        """Create a commit from the index."""
        self._run(cwd, "commit staged changes", "commit", "-m", message)

    def create_tag(self, cwd: Path, name: str) -> None:
        """Create a lightweight tag at HEAD."""
        self._run(cwd, f"create tag '{name}'", "tag", name)

    def merge(self, cwd: Path, ref: str) -> None:
        """Merge `ref` into the current branch."""
        self._run(cwd, f"merge '{ref}'", "merge", ref)

    def merge_abort(self, cwd: Path) -> None:
        """Abort the merge in progress."""
        self._run(cwd, "abort merge", "merge", "--abort")

    def stage_gitlink(self, cwd: Path, commit: str, path: str) -> None:
        """Record `commit` as the gitlink of submodule `path` in the index."""
        self._run(
            cwd,
            f"stage submodule pointer for '{path}'",
            "update-index",
            "--add",
            "--cacheinfo",
            f"160000,{commit},{path}",
        )
