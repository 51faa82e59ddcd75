"""Tests for repository references and result aggregation."""

from pathlib import Path

from subflow.core.repos import (
    BASE_REPO,
    MultiRepoResult,
    OutcomeStatus,
    RepoOutcome,
    submodule_ref,
)

FRONTEND = submodule_ref("frontend/ee")


def test_repo_ref_resolves_against_root() -> None:
    root = Path("/work/app")

    assert BASE_REPO.is_base
    assert BASE_REPO.resolve(root) == root
    assert not FRONTEND.is_base
    assert FRONTEND.resolve(root) == root / "frontend" / "ee"


def test_skipped_outcomes_do_not_fail_the_result() -> None:
    result = MultiRepoResult.of(
        [
            RepoOutcome.success(BASE_REPO, "Committed changes", step="commit"),
            RepoOutcome.skipped(FRONTEND, "Nothing to commit", step="commit"),
        ]
    )

    assert result.ok
    assert len(result.succeeded) == 1
    assert len(result.skipped) == 1


def test_failed_names_are_listed_once_in_order() -> None:
    result = MultiRepoResult.of(
        [
            RepoOutcome.failed(FRONTEND, "boom", step="checkout"),
            RepoOutcome.success(BASE_REPO),
            RepoOutcome.failed(FRONTEND, "boom", step="restore"),
            RepoOutcome.failed(BASE_REPO, "boom", step="push"),
        ]
    )

    assert not result.ok
    assert result.failed_names == ["frontend/ee", "base repository"]
    assert [o.status for o in result.for_repo(FRONTEND)] == [
        OutcomeStatus.FAILED,
        OutcomeStatus.FAILED,
    ]
