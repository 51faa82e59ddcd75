"""Repository references and per-repository outcomes."""

from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from subflow.core.context import SubflowContext

BASE_REPO_NAME = "base repository"


@dataclass(frozen=True)
class RepoRef:
    """A repository taking part in a multi-repo operation.

    Attributes:
        path: Path relative to the base repository root (Path(".") for the base)
        name: Name used in messages
    """

    path: Path
    name: str

    @property
    def is_base(self) -> bool:
        return self.path == Path(".")

    def resolve(self, repo_root: Path) -> Path:
        """Absolute working directory of this repository."""
        return repo_root / self.path


BASE_REPO = RepoRef(path=Path("."), name=BASE_REPO_NAME)


def submodule_ref(path: str) -> RepoRef:
    return RepoRef(path=Path(path), name=path)


class OutcomeStatus(Enum):
    SUCCESS = "success"
    SKIPPED = "skipped"
    FAILED = "failed"


@dataclass(frozen=True)
class RepoOutcome:
    """Result of one step of an operation in one repository.

    Attributes:
        repo: Repository the step ran in
        status: SUCCESS, SKIPPED (benign no-op) or FAILED
        message: Human-readable detail
        step: Step name within the operation (e.g. "stash", "checkout")
    """

    repo: RepoRef
    status: OutcomeStatus
    message: str = ""
    step: str = ""

    @staticmethod
    def success(repo: RepoRef, message: str = "", step: str = "") -> "RepoOutcome":
        return RepoOutcome(repo=repo, status=OutcomeStatus.SUCCESS, message=message, step=step)

    @staticmethod
    def skipped(repo: RepoRef, message: str, step: str = "") -> "RepoOutcome":
        return RepoOutcome(repo=repo, status=OutcomeStatus.SKIPPED, message=message, step=step)

    @staticmethod
    def failed(repo: RepoRef, message: str, step: str = "") -> "RepoOutcome":
        return RepoOutcome(repo=repo, status=OutcomeStatus.FAILED, message=message, step=step)


@dataclass(frozen=True)
class MultiRepoResult:
    """Ordered outcomes of one logical operation across repositories.

    There is no rollback: outcomes that succeeded stay applied even when
    others failed.
    """

    outcomes: tuple[RepoOutcome, ...] = ()

    @staticmethod
    def of(outcomes: Iterable[RepoOutcome]) -> "MultiRepoResult":
        return MultiRepoResult(outcomes=tuple(outcomes))

    def __iter__(self) -> Iterator[RepoOutcome]:
        return iter(self.outcomes)

    def __len__(self) -> int:
        return len(self.outcomes)

    @property
    def ok(self) -> bool:
        return not any(o.status is OutcomeStatus.FAILED for o in self.outcomes)

    @property
    def succeeded(self) -> tuple[RepoOutcome, ...]:
        return tuple(o for o in self.outcomes if o.status is OutcomeStatus.SUCCESS)

    @property
    def skipped(self) -> tuple[RepoOutcome, ...]:
        return tuple(o for o in self.outcomes if o.status is OutcomeStatus.SKIPPED)

    @property
    def failed(self) -> tuple[RepoOutcome, ...]:
        return tuple(o for o in self.outcomes if o.status is OutcomeStatus.FAILED)

    @property
    def failed_names(self) -> list[str]:
        """Names of failed repositories, each listed once, in order."""
        names: list[str] = []
        for outcome in self.failed:
            if outcome.repo.name not in names:
                names.append(outcome.repo.name)
        return names

    def for_repo(self, repo: RepoRef) -> tuple[RepoOutcome, ...]:
        return tuple(o for o in self.outcomes if o.repo == repo)


def enumerate_submodules(ctx: SubflowContext, repo_root: Path) -> list[RepoRef]:
    """Live list of submodules of the base repository.

    Never cached. Falls back to the configured default submodule list only
    when git cannot enumerate submodules at all.
    """
    paths = ctx.git.list_submodules(repo_root)
    if paths is None:
        if ctx.config.default_submodules:
            ctx.feedback.warning(
                "Could not enumerate submodules, using configured default list: "
                + ", ".join(ctx.config.default_submodules)
            )
        return [submodule_ref(p) for p in ctx.config.default_submodules]
    return [submodule_ref(p) for p in paths]
