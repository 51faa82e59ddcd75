"""Stash and restore uncommitted work keyed by branch name."""

from pathlib import Path

from subflow.core.context import SubflowContext
from subflow.core.errors import GitCommandError
from subflow.core.repos import RepoOutcome, RepoRef

STASH_TAG_PREFIX = "stash-for-"


def stash_tag(branch: str) -> str:
    """Stash message used for work parked on `branch`.

    >>> stash_tag("release/v1")
    'stash-for-release/v1'
    """
    return f"{STASH_TAG_PREFIX}{branch}"


class StashCoordinator:
    """Parks and restores uncommitted changes per (repository, branch).

    Lookup is by exact tag: `git stash push -m stash-for-main` is recorded as
    `On <branch>: stash-for-main`, and only entries whose text after the first
    `: ` equals the tag are considered. When several entries carry the same
    tag the most recent one is popped and the others are left alone.
    """

    def __init__(self, ctx: SubflowContext, repo_root: Path) -> None:
        self._ctx = ctx
        self._repo_root = repo_root

    def stash(self, repo: RepoRef, branch: str) -> RepoOutcome:
        """Stash uncommitted changes in `repo` under `stash-for-<branch>`.

        Returns SKIPPED when there are no tracked changes, or when git saves no
        new entry, so an older stash with the same tag is never mistaken for
        this one.
        """
        cwd = repo.resolve(self._repo_root)
        if not self._ctx.git.is_git_repository(cwd):
            return RepoOutcome.failed(repo, f"{repo.name} is not a git repository", step="stash")

        if not self._ctx.git.has_uncommitted_changes(cwd):
            self._ctx.feedback.info(f"No changes to stash in {repo.name}")
            return RepoOutcome.skipped(repo, f"No changes to stash in {repo.name}", step="stash")

        tag = stash_tag(branch)
        self._ctx.feedback.info(f"Stashing changes in {repo.name} as {tag}...")
        before = len(self._ctx.git.list_stashes(cwd))
        try:
            self._ctx.git.stash_push(cwd, tag)
        except GitCommandError as e:
            self._ctx.feedback.error(f"Failed to stash changes in {repo.name}")
            return RepoOutcome.failed(repo, str(e), step="stash")

        # git exits 0 with "No local changes to save" when nothing was stashed
        if not self._ctx.dry_run and not self._created_entry(cwd, tag, before):
            self._ctx.feedback.info(f"No changes to stash in {repo.name}")
            return RepoOutcome.skipped(repo, f"No changes to stash in {repo.name}", step="stash")
        return RepoOutcome.success(repo, f"Stashed changes as {tag}", step="stash")

    def _created_entry(self, cwd: Path, tag: str, before: int) -> bool:
        entries = self._ctx.git.list_stashes(cwd)
        return len(entries) > before and entries[0].tag == tag

    def restore(self, repo: RepoRef, branch: str) -> RepoOutcome:
        """Pop the most recent stash tagged `stash-for-<branch>` in `repo`.

        Returns SKIPPED when no such stash exists. A pop that git refuses
        (conflicts, unmerged paths) leaves the entry in the stash list and is
        reported FAILED with the command to finish by hand.
        """
        cwd = repo.resolve(self._repo_root)
        if not self._ctx.git.is_git_repository(cwd):
            return RepoOutcome.failed(repo, f"{repo.name} is not a git repository", step="restore")

        tag = stash_tag(branch)
        matches = [entry for entry in self._ctx.git.list_stashes(cwd) if entry.tag == tag]
        if not matches:
            self._ctx.feedback.info(f"No stash to restore for {tag} in {repo.name}")
            return RepoOutcome.skipped(repo, f"No stash found for {tag}", step="restore")

        entry = matches[0]
        if len(matches) > 1:
            self._ctx.feedback.warning(
                f"{len(matches)} stashes tagged {tag} in {repo.name}; "
                f"restoring the most recent ({entry.ref})"
            )

        self._ctx.feedback.info(f"Restoring {entry.ref} ({tag}) in {repo.name}...")
        try:
            self._ctx.git.stash_pop(cwd, entry.ref)
        except GitCommandError as e:
            self._ctx.feedback.error(f"Could not restore stash {tag} in {repo.name}")
            self._ctx.feedback.warning(
                f"Your changes are still stashed. Resolve manually in {repo.name}:\n"
                f"  git stash list\n"
                f"  git stash pop {entry.ref}"
            )
            return RepoOutcome.failed(
                repo,
                f"Stash pop failed, changes kept in {entry.ref}: {e}",
                step="restore",
            )
        return RepoOutcome.success(repo, f"Restored {tag}", step="restore")
