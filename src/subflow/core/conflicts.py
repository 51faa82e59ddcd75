"""Submodule pointer conflict analysis and resolution during a merge.

Only submodule (gitlink) conflicts are resolved here. Regular file conflicts
are reported and left to the user's merge tool. Nothing in this module
creates a commit; resolved paths are only staged.
"""

from dataclasses import dataclass
from pathlib import Path

from subflow.core.context import SubflowContext
from subflow.core.errors import GitCommandError, PreconditionError
from subflow.core.repos import RepoOutcome, submodule_ref

DEFAULT_UPDATE_BRANCH = "main"


@dataclass(frozen=True)
class ConflictRecord:
    """A conflicted path.

    Attributes:
        path: Path relative to the base repository root
        is_submodule: True when the path is a known submodule (gitlink conflict)
        head_commit: Submodule commit recorded on HEAD (submodule conflicts only)
        incoming_commit: Submodule commit recorded on MERGE_HEAD (submodule conflicts only)
    """

    path: str
    is_submodule: bool
    head_commit: str | None = None
    incoming_commit: str | None = None


@dataclass(frozen=True)
class ConflictReport:
    submodule_conflicts: tuple[ConflictRecord, ...]
    file_conflicts: tuple[ConflictRecord, ...]

    @property
    def has_conflicts(self) -> bool:
        return bool(self.submodule_conflicts or self.file_conflicts)


@dataclass(frozen=True)
class ConflictDetails:
    """Local knowledge about both sides of a submodule conflict.

    Summaries and counts are None when the submodule is not checked out or
    the commit is not available locally.
    """

    record: ConflictRecord
    checked_out: bool
    head_summary: str | None
    incoming_summary: str | None
    # (commits only on HEAD side, commits only on incoming side)
    left_right: tuple[int, int] | None


def short_sha(commit: str | None) -> str:
    if commit is None:
        return "unknown"
    return commit[:8]


class SubmoduleConflictResolver:
    """Classifies merge conflicts and stages submodule pointer resolutions."""

    def __init__(self, ctx: SubflowContext, repo_root: Path) -> None:
        self._ctx = ctx
        self._repo_root = repo_root

    def ensure_merge_in_progress(self) -> None:
        """Raise PreconditionError unless MERGE_HEAD exists."""
        if not self._ctx.git.is_merge_in_progress(self._repo_root):
            raise PreconditionError(
                "No active merge detected. This tool works during merge conflicts."
            )

    def analyze(self) -> ConflictReport:
        """Partition conflicted paths into submodule and regular file conflicts.

        Raises:
            PreconditionError: If no merge is in progress
        """
        self.ensure_merge_in_progress()
        git = self._ctx.git

        conflicted = git.list_conflicted_paths(self._repo_root)
        known_submodules = set(git.list_submodules(self._repo_root) or [])

        submodule_conflicts: list[ConflictRecord] = []
        file_conflicts: list[ConflictRecord] = []
        for path in conflicted:
            if path in known_submodules:
                submodule_conflicts.append(
                    ConflictRecord(
                        path=path,
                        is_submodule=True,
                        head_commit=git.get_tree_entry_sha(self._repo_root, "HEAD", path),
                        incoming_commit=git.get_tree_entry_sha(self._repo_root, "MERGE_HEAD", path),
                    )
                )
            else:
                file_conflicts.append(ConflictRecord(path=path, is_submodule=False))

        return ConflictReport(
            submodule_conflicts=tuple(submodule_conflicts),
            file_conflicts=tuple(file_conflicts),
        )

    def details(self, record: ConflictRecord) -> ConflictDetails:
        """Look up both sides of a submodule conflict inside the submodule."""
        git = self._ctx.git
        submodule_dir = self._repo_root / record.path
        checked_out = git.is_dir(submodule_dir) and git.is_git_repository(submodule_dir)
        if not checked_out:
            return ConflictDetails(
                record=record,
                checked_out=False,
                head_summary=None,
                incoming_summary=None,
                left_right=None,
            )

        head_summary = None
        incoming_summary = None
        left_right = None
        if record.head_commit is not None:
            head_summary = git.get_commit_oneline(submodule_dir, record.head_commit)
        if record.incoming_commit is not None:
            incoming_summary = git.get_commit_oneline(submodule_dir, record.incoming_commit)
        if record.head_commit is not None and record.incoming_commit is not None:
            left_right = git.get_left_right_count(
                submodule_dir, record.head_commit, record.incoming_commit
            )

        return ConflictDetails(
            record=record,
            checked_out=True,
            head_summary=head_summary,
            incoming_summary=incoming_summary,
            left_right=left_right,
        )

    def keep_current(self, record: ConflictRecord) -> RepoOutcome:
        """Stage the submodule at its currently checked-out commit (`git add <path>`)."""
        repo = submodule_ref(record.path)
        self._ctx.feedback.info(f"Keeping current version of {record.path}")
        try:
            self._ctx.git.add_path(self._repo_root, record.path)
        except GitCommandError as e:
            self._ctx.feedback.error(f"Failed to stage {record.path}")
            return RepoOutcome.failed(repo, str(e), step="resolve")
        return RepoOutcome.success(repo, "Kept current version", step="resolve")

    def accept_incoming(self, record: ConflictRecord) -> RepoOutcome:
        """Stage the MERGE_HEAD commit as the submodule gitlink."""
        repo = submodule_ref(record.path)
        if record.incoming_commit is None:
            self._ctx.feedback.error(f"No incoming commit recorded for {record.path}")
            return RepoOutcome.failed(repo, "No incoming commit recorded", step="resolve")

        self._ctx.feedback.info(f"Accepting incoming version of {record.path}")
        try:
            self._ctx.git.stage_gitlink(self._repo_root, record.incoming_commit, record.path)
        except GitCommandError as e:
            self._ctx.feedback.error(f"Failed to stage incoming version of {record.path}")
            return RepoOutcome.failed(repo, str(e), step="resolve")
        return RepoOutcome.success(
            repo, f"Accepted incoming version {short_sha(record.incoming_commit)}", step="resolve"
        )

    def update_to_latest(
        self, record: ConflictRecord, branch: str = DEFAULT_UPDATE_BRANCH
    ) -> RepoOutcome:
        """Move the submodule to `origin/<branch>` and stage it.

        Returns SKIPPED when the submodule directory is not present.
        """
        git = self._ctx.git
        repo = submodule_ref(record.path)
        submodule_dir = self._repo_root / record.path
        if not git.is_dir(submodule_dir):
            self._ctx.feedback.warning(f"Submodule directory {record.path} not found, skipping")
            return RepoOutcome.skipped(repo, "Submodule directory not found", step="resolve")

        self._ctx.feedback.info(f"Updating {record.path} to latest origin/{branch}")
        try:
            git.fetch(submodule_dir, "origin", branch)
            git.checkout_detached(submodule_dir, f"origin/{branch}")
            git.add_path(self._repo_root, record.path)
        except GitCommandError as e:
            self._ctx.feedback.error(f"Failed to update {record.path}")
            return RepoOutcome.failed(repo, str(e), step="resolve")
        return RepoOutcome.success(repo, f"Updated to origin/{branch}", step="resolve")

    def abort_merge(self) -> None:
        """Abort the merge in progress (`git merge --abort`).

        Raises:
            GitCommandError: If git refuses to abort
        """
        self._ctx.git.merge_abort(self._repo_root)

    def remaining_conflicts(self) -> list[str]:
        """Paths still unmerged."""
        return self._ctx.git.list_conflicted_paths(self._repo_root)
