"""Dry-run Git wrapper.

This module provides a Git wrapper that prevents execution of mutating
operations while delegating read-only operations to the wrapped implementation.
"""

import shlex
from pathlib import Path

from subflow.cli.output import user_output
from subflow.core.git.abc import Git, StashEntry

# ============================================================================
# Dry-run Wrapper
# ============================================================================


class DryRunGit(Git):
    """Wrapper that prints mutating git commands instead of running them.

    Read-only operations are delegated to the wrapped implementation so that
    the printed plan reflects the real repository state.

    Usage:
        real_ops = RealGit()
        dry_ops = DryRunGit(real_ops, repo_root)

        # Prints "[DRY RUN] Would run: git commit -m 'msg'"
        dry_ops.commit(repo_root, "msg")
    """

    def __init__(self, wrapped: Git, repo_root: Path | None = None) -> None:
        """Create a dry-run wrapper around a Git implementation.

        Args:
            wrapped: The Git implementation to wrap (usually RealGit or FakeGit)
            repo_root: Base repository; commands for other directories are
                annotated with their path relative to it
        """
        self._wrapped = wrapped
        self._repo_root = repo_root

    def _announce(self, cwd: Path, *args: str) -> None:
        command = shlex.join(["git", *args])
        location = self._describe_location(cwd)
        if location is None:
            user_output(f"[DRY RUN] Would run: {command}")
        else:
            user_output(f"[DRY RUN] Would run: {command} (in {location})")

    def _describe_location(self, cwd: Path) -> str | None:
        if self._repo_root is None:
            return str(cwd)
        if cwd == self._repo_root:
            return None
        if cwd.is_relative_to(self._repo_root):
            return str(cwd.relative_to(self._repo_root))
        return str(cwd)

    # Read-only operations: delegate to wrapped implementation

    def is_git_repository(self, cwd: Path) -> bool:
        return self._wrapped.is_git_repository(cwd)

    def get_repository_root(self, cwd: Path) -> Path | None:
        return self._wrapped.get_repository_root(cwd)

    def get_current_branch(self, cwd: Path) -> str | None:
        return self._wrapped.get_current_branch(cwd)

    def get_upstream_branch(self, cwd: Path) -> str | None:
        return self._wrapped.get_upstream_branch(cwd)

    def branch_exists_locally(self, cwd: Path, branch: str) -> bool:
        return self._wrapped.branch_exists_locally(cwd, branch)

    def remote_branch_exists(self, cwd: Path, remote: str, branch: str) -> bool:
        return self._wrapped.remote_branch_exists(cwd, remote, branch)

    def has_uncommitted_changes(self, cwd: Path) -> bool:
        return self._wrapped.has_uncommitted_changes(cwd)

    def has_staged_changes(self, cwd: Path) -> bool:
        return self._wrapped.has_staged_changes(cwd)

    def list_submodules(self, cwd: Path) -> list[str] | None:
        return self._wrapped.list_submodules(cwd)

    def list_stashes(self, cwd: Path) -> list[StashEntry]:
        return self._wrapped.list_stashes(cwd)

    def get_status_short(self, cwd: Path) -> str:
        return self._wrapped.get_status_short(cwd)

    def get_staged_diff(self, cwd: Path) -> str:
        return self._wrapped.get_staged_diff(cwd)

    def get_staged_files(self, cwd: Path, diff_filter: str | None = None) -> list[str]:
        return self._wrapped.get_staged_files(cwd, diff_filter)

    def get_staged_diff_stat(self, cwd: Path) -> str:
        return self._wrapped.get_staged_diff_stat(cwd)

    def get_recent_commit_subjects(self, cwd: Path, *, limit: int = 3) -> list[str]:
        return self._wrapped.get_recent_commit_subjects(cwd, limit=limit)

    def is_merge_in_progress(self, cwd: Path) -> bool:
        return self._wrapped.is_merge_in_progress(cwd)

    def list_conflicted_paths(self, cwd: Path) -> list[str]:
        return self._wrapped.list_conflicted_paths(cwd)

    def get_tree_entry_sha(self, cwd: Path, treeish: str, path: str) -> str | None:
        return self._wrapped.get_tree_entry_sha(cwd, treeish, path)

    def get_commit_oneline(self, cwd: Path, commit: str) -> str | None:
        return self._wrapped.get_commit_oneline(cwd, commit)

    def get_left_right_count(self, cwd: Path, left: str, right: str) -> tuple[int, int] | None:
        return self._wrapped.get_left_right_count(cwd, left, right)

    def path_exists(self, path: Path) -> bool:
        return self._wrapped.path_exists(path)

    def is_dir(self, path: Path) -> bool:
        return self._wrapped.is_dir(path)

    # Mutating operations: print dry-run message instead of executing

    def stash_push(self, cwd: Path, message: str) -> None:
        self._announce(cwd, "stash", "push", "-m", message)

    def stash_pop(self, cwd: Path, ref: str) -> None:
        self._announce(cwd, "stash", "pop", ref)

    def checkout_branch(self, cwd: Path, branch: str, *, recurse_submodules: bool = False) -> None:
        if recurse_submodules:
            self._announce(cwd, "checkout", "--recurse-submodules", branch)
        else:
            self._announce(cwd, "checkout", branch)

    def checkout_detached(self, cwd: Path, ref: str) -> None:
        self._announce(cwd, "checkout", "--detach", ref)

    def create_branch(self, cwd: Path, branch: str) -> None:
        self._announce(cwd, "checkout", "-b", branch)

    def fetch_all(self, cwd: Path) -> None:
        self._announce(cwd, "fetch", "--all")

    def fetch(self, cwd: Path, remote: str, branch: str | None = None) -> None:
        if branch is None:
            self._announce(cwd, "fetch", remote)
        else:
            self._announce(cwd, "fetch", remote, branch)

    def pull(self, cwd: Path, remote: str | None = None, branch: str | None = None) -> None:
        args = ["pull"]
        if remote is not None:
            args.append(remote)
            if branch is not None:
                args.append(branch)
        self._announce(cwd, *args)

    def push(
        self,
        cwd: Path,
        remote: str | None = None,
        ref: str | None = None,
        *,
        set_upstream: bool = False,
    ) -> None:
        args = ["push"]
        if set_upstream:
            args.append("--set-upstream")
        if remote is not None:
            args.append(remote)
            if ref is not None:
                args.append(ref)
        self._announce(cwd, *args)

    def add_all(self, cwd: Path) -> None:
        self._announce(cwd, "add", "-A")

    def add_path(self, cwd: Path, path: str) -> None:
        self._announce(cwd, "add", path)

    def commit(self, cwd: Path, message: str) -> None:
        self._announce(cwd, "commit", "-m", message)

    def create_tag(self, cwd: Path, name: str) -> None:
        self._announce(cwd, "tag", name)

    def merge(self, cwd: Path, ref: str) -> None:
        self._announce(cwd, "merge", ref)

    def merge_abort(self, cwd: Path) -> None:
        self._announce(cwd, "merge", "--abort")

    def stage_gitlink(self, cwd: Path, commit: str, path: str) -> None:
        self._announce(cwd, "update-index", "--add", "--cacheinfo", f"160000,{commit},{path}")
