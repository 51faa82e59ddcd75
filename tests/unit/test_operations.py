"""Tests for MultiRepoDriver against FakeGit."""

from pathlib import Path

import pytest

from subflow.core.config_store import GlobalConfig
from subflow.core.context import SubflowContext
from subflow.core.errors import PreconditionError, ValidationError
from subflow.core.git.abc import StashEntry
from subflow.core.operations import MultiRepoDriver, prefixed_branch_name
from subflow.core.repos import BASE_REPO, OutcomeStatus, RepoOutcome, submodule_ref
from tests.fakes.git import FakeGit

ROOT = Path("/work/app")
FRONTEND_DIR = ROOT / "frontend/ee"
SERVER_DIR = ROOT / "server/ee"
FRONTEND = submodule_ref("frontend/ee")
SERVER = submodule_ref("server/ee")


def _git(**overrides) -> FakeGit:
    state = dict(
        current_branches={ROOT: "main", FRONTEND_DIR: "main", SERVER_DIR: "main"},
        submodules={ROOT: ["frontend/ee", "server/ee"]},
        upstreams={ROOT: "origin/main", FRONTEND_DIR: "origin/main", SERVER_DIR: "origin/main"},
        remote_branches={FRONTEND_DIR: {"main"}, SERVER_DIR: {"main"}},
    )
    state.update(overrides)
    return FakeGit(**state)


def _driver(
    git: FakeGit, config: GlobalConfig | None = None
) -> tuple[MultiRepoDriver, SubflowContext]:
    ctx = SubflowContext.for_test(git=git, repo_root=ROOT, config=config)
    return MultiRepoDriver(ctx, ROOT), ctx


def _steps(outcomes: tuple[RepoOutcome, ...]) -> list[tuple[str, str, OutcomeStatus]]:
    return [(o.repo.name, o.step, o.status) for o in outcomes]


# ----------------------------------------------------------------------
# enumeration
# ----------------------------------------------------------------------


def test_all_repos_puts_base_first() -> None:
    driver, _ = _driver(_git())

    assert driver.all_repos() == [BASE_REPO, FRONTEND, SERVER]


def test_default_submodules_used_only_when_listing_fails() -> None:
    config = GlobalConfig(default_submodules=("frontend/ee",))

    listing_fails, ctx = _driver(_git(submodules={ROOT: None}), config)
    assert listing_fails.submodules() == [FRONTEND]
    assert ctx.feedback.warnings

    no_submodules, _ = _driver(_git(submodules={ROOT: []}), config)
    assert no_submodules.submodules() == []


# ----------------------------------------------------------------------
# checkout
# ----------------------------------------------------------------------


def test_checkout_switches_then_pulls_each_target() -> None:
    git = _git()
    driver, _ = _driver(git)

    result = driver.checkout("develop", [BASE_REPO, FRONTEND])

    assert result.ok
    assert git.commands_in(ROOT) == [("checkout", "develop"), ("pull",)]
    assert git.commands_in(FRONTEND_DIR) == [("checkout", "develop"), ("pull",)]
    assert git.commands_in(SERVER_DIR) == []


def test_checkout_failure_skips_pull_and_continues() -> None:
    git = _git(failing={(FRONTEND_DIR, "checkout_branch")})
    driver, _ = _driver(git)

    result = driver.checkout("develop", [BASE_REPO, FRONTEND, SERVER])

    assert not result.ok
    assert result.failed_names == ["frontend/ee"]
    assert git.commands_in(FRONTEND_DIR) == [("checkout", "develop")]
    assert git.commands_in(SERVER_DIR) == [("checkout", "develop"), ("pull",)]


def test_checkout_rejects_invalid_branch_before_git() -> None:
    git = _git()
    driver, _ = _driver(git)

    with pytest.raises(ValidationError):
        driver.checkout("bad name", [BASE_REPO])
    assert git.commands == []


def test_checkout_with_stash_end_to_end() -> None:
    git = _git(dirty={FRONTEND_DIR})
    driver, _ = _driver(git)

    result = driver.checkout_with_stash("release/v1")

    assert result.ok
    stash_outcomes = [o for o in result if o.step == "stash"]
    assert _steps(tuple(stash_outcomes)) == [
        ("base repository", "stash", OutcomeStatus.SKIPPED),
        ("frontend/ee", "stash", OutcomeStatus.SUCCESS),
        ("server/ee", "stash", OutcomeStatus.SKIPPED),
    ]
    assert git.commands_in(ROOT) == [("checkout", "--recurse-submodules", "release/v1")]
    assert git.commands_in(FRONTEND_DIR) == [
        ("stash", "push", "-m", "stash-for-main"),
        ("checkout", "release/v1"),
    ]
    assert git.commands_in(SERVER_DIR) == [("checkout", "release/v1")]

    restore = {o.repo.name: o for o in result if o.step == "restore"}
    assert restore["frontend/ee"].status is OutcomeStatus.SKIPPED
    assert restore["server/ee"].status is OutcomeStatus.SKIPPED
    assert restore["frontend/ee"].message == "No stash found for stash-for-release/v1"
    # The work parked on main stays in the frontend stash list
    assert [e.tag for e in git.list_stashes(FRONTEND_DIR)] == ["stash-for-main"]


def test_checkout_with_stash_restores_work_parked_on_target() -> None:
    git = _git(
        dirty={FRONTEND_DIR},
        stashes={
            FRONTEND_DIR: [
                StashEntry(ref="stash@{0}", message="On release/v1: stash-for-release/v1")
            ]
        },
    )
    driver, _ = _driver(git)

    result = driver.checkout_with_stash("release/v1")

    assert result.ok
    assert git.commands_in(FRONTEND_DIR) == [
        ("stash", "push", "-m", "stash-for-main"),
        ("checkout", "release/v1"),
        ("stash", "pop", "stash@{1}"),
    ]
    assert [e.tag for e in git.list_stashes(FRONTEND_DIR)] == ["stash-for-main"]


def test_checkout_with_stash_skips_submodule_already_on_branch() -> None:
    git = _git(current_branches={ROOT: "main", FRONTEND_DIR: "release/v1", SERVER_DIR: "main"})
    driver, _ = _driver(git)

    result = driver.checkout_with_stash("release/v1")

    assert result.ok
    assert git.commands_in(FRONTEND_DIR) == []
    frontend_checkout = [o for o in result.for_repo(FRONTEND) if o.step == "checkout"]
    assert frontend_checkout[0].message == "Already on 'release/v1'"


def test_checkout_with_stash_restores_original_tag_when_switch_fails() -> None:
    git = _git(dirty={SERVER_DIR}, failing={(SERVER_DIR, "checkout_branch")})
    driver, ctx = _driver(git)

    result = driver.checkout_with_stash("release/v1")

    assert result.failed_names == ["server/ee"]
    assert git.commands_in(SERVER_DIR) == [
        ("stash", "push", "-m", "stash-for-main"),
        ("checkout", "release/v1"),
        ("stash", "pop", "stash@{0}"),
    ]
    assert git.has_uncommitted_changes(SERVER_DIR)
    assert any("Switch failed in server/ee" in w for w in ctx.feedback.warnings)


def test_checkout_with_stash_requires_branch_on_base() -> None:
    git = _git(current_branches={ROOT: None, FRONTEND_DIR: "main", SERVER_DIR: "main"})
    driver, _ = _driver(git)

    with pytest.raises(PreconditionError):
        driver.checkout_with_stash("release/v1")
    assert git.commands == []


# ----------------------------------------------------------------------
# pull
# ----------------------------------------------------------------------


def test_pull_base_and_submodules() -> None:
    git = _git()
    driver, _ = _driver(git)

    result = driver.pull(driver.all_repos())

    assert result.ok
    assert git.commands_in(ROOT) == [("fetch", "--all"), ("pull",)]
    assert git.commands_in(FRONTEND_DIR) == [
        ("fetch", "origin", "main"),
        ("pull", "origin", "main"),
    ]


def test_pull_base_without_upstream_shows_fix() -> None:
    git = _git(upstreams={})
    driver, ctx = _driver(git)

    result = driver.pull([BASE_REPO])

    assert result.failed_names == ["base repository"]
    assert git.commands_in(ROOT) == [("fetch", "--all")]
    assert any(
        "git branch --set-upstream-to=origin/main main" in w for w in ctx.feedback.warnings
    )


def test_pull_skips_detached_submodule_and_missing_remote_branch() -> None:
    git = _git(
        current_branches={ROOT: "main", FRONTEND_DIR: None, SERVER_DIR: "feature/x"},
    )
    driver, _ = _driver(git)

    result = driver.pull([FRONTEND, SERVER])

    assert result.ok
    assert [o.status for o in result] == [OutcomeStatus.SKIPPED, OutcomeStatus.SKIPPED]
    assert git.commands_in(FRONTEND_DIR) == []
    assert git.commands_in(SERVER_DIR) == [("fetch", "origin", "feature/x")]


def test_pull_submodule_fetch_failure_is_only_a_warning() -> None:
    git = _git(failing={(FRONTEND_DIR, "fetch")})
    driver, ctx = _driver(git)

    result = driver.pull([FRONTEND])

    assert result.ok
    assert git.commands_in(FRONTEND_DIR)[-1] == ("pull", "origin", "main")
    assert ctx.feedback.warnings


# ----------------------------------------------------------------------
# push
# ----------------------------------------------------------------------


def test_push_without_upstream_sets_it() -> None:
    git = _git(upstreams={FRONTEND_DIR: "origin/main", SERVER_DIR: "origin/main"})
    driver, _ = _driver(git)

    result = driver.push(driver.all_repos())

    assert result.ok
    assert git.commands_in(ROOT) == [("push", "--set-upstream", "origin", "main")]
    assert git.commands_in(FRONTEND_DIR) == [("push",)]


def test_push_base_failure_stops_submodules() -> None:
    git = _git(failing={(ROOT, "push")})
    driver, _ = _driver(git)

    result = driver.push(driver.all_repos())

    assert result.failed_names == ["base repository"]
    assert git.commands_in(FRONTEND_DIR) == []
    assert git.commands_in(SERVER_DIR) == []


def test_push_skips_detached_submodule() -> None:
    git = _git(current_branches={ROOT: "main", FRONTEND_DIR: None, SERVER_DIR: "main"})
    driver, _ = _driver(git)

    result = driver.push(driver.all_repos())

    assert result.ok
    assert result.for_repo(FRONTEND)[0].status is OutcomeStatus.SKIPPED


# ----------------------------------------------------------------------
# add / commit
# ----------------------------------------------------------------------


def test_add_stages_everywhere() -> None:
    git = _git()
    driver, _ = _driver(git)

    result = driver.add(driver.all_repos())

    assert result.ok
    assert [args for _, args in git.commands] == [("add", "-A")] * 3


def test_commit_base_failure_attempts_no_submodule_commit() -> None:
    git = _git(
        staged_files={FRONTEND_DIR: {"a.py": "M"}, SERVER_DIR: {"b.py": "M"}},
        failing={(ROOT, "commit")},
    )
    driver, _ = _driver(git)

    result = driver.commit("feat: add login", driver.all_repos())

    assert not result.ok
    assert len(result) == 1
    assert git.commands_in(FRONTEND_DIR) == []
    assert git.commands_in(SERVER_DIR) == []


def test_commit_skips_submodules_without_staged_changes() -> None:
    git = _git(staged_files={ROOT: {"x.py": "M"}, SERVER_DIR: {"b.py": "A"}})
    driver, _ = _driver(git)

    result = driver.commit("feat: add login", driver.all_repos())

    assert result.ok
    assert _steps(result.outcomes) == [
        ("base repository", "commit", OutcomeStatus.SUCCESS),
        ("frontend/ee", "commit", OutcomeStatus.SKIPPED),
        ("server/ee", "commit", OutcomeStatus.SUCCESS),
    ]
    assert git.commands_in(FRONTEND_DIR) == []


def test_commit_requires_message() -> None:
    git = _git()
    driver, _ = _driver(git)

    with pytest.raises(ValidationError):
        driver.commit("  ", driver.all_repos())
    assert git.commands == []


# ----------------------------------------------------------------------
# tag / branch
# ----------------------------------------------------------------------


def test_tag_creates_and_pushes_everywhere() -> None:
    git = _git()
    driver, _ = _driver(git)

    result = driver.tag("v1.0.0", driver.all_repos())

    assert result.ok
    for cwd in (ROOT, FRONTEND_DIR, SERVER_DIR):
        assert git.commands_in(cwd) == [("tag", "v1.0.0"), ("push", "origin", "v1.0.0")]


def test_create_branch_existing_in_base_runs_no_git_command() -> None:
    git = _git(local_branches={ROOT: {"feature/x"}})
    driver, _ = _driver(git)

    with pytest.raises(PreconditionError, match="already exists"):
        driver.create_branch("feature/x", driver.all_repos())
    assert git.commands == []


def test_create_branch_existing_in_submodule_fails_only_there() -> None:
    git = _git(local_branches={SERVER_DIR: {"feature/x"}})
    driver, _ = _driver(git)

    result = driver.create_branch("feature/x", driver.all_repos())

    assert result.failed_names == ["server/ee"]
    assert git.commands_in(FRONTEND_DIR) == [("checkout", "-b", "feature/x")]
    assert git.commands_in(SERVER_DIR) == []


def test_create_branch_push_flags() -> None:
    git = _git()
    driver, _ = _driver(git)

    result = driver.create_branch("feature/x", driver.all_repos(), push_base=True)

    assert result.ok
    assert git.commands_in(ROOT) == [
        ("checkout", "-b", "feature/x"),
        ("push", "--set-upstream", "origin", "feature/x"),
    ]
    assert git.commands_in(FRONTEND_DIR) == [("checkout", "-b", "feature/x")]


def test_prefixed_branch_name() -> None:
    assert prefixed_branch_name("hotfix", "crash") == "hotfix/crash"
    with pytest.raises(ValidationError):
        prefixed_branch_name("feature", " ")


# ----------------------------------------------------------------------
# merge
# ----------------------------------------------------------------------


def test_merge_fetches_base_first_then_merges_each_target() -> None:
    git = _git(current_branches={ROOT: "feature/x", FRONTEND_DIR: "feature/x", SERVER_DIR: "main"})
    driver, _ = _driver(git)

    result = driver.merge("main", [BASE_REPO, FRONTEND])

    assert result.ok
    assert git.commands[0] == (ROOT, ("fetch", "origin", "main"))
    assert git.commands_in(ROOT) == [("fetch", "origin", "main"), ("merge", "origin/main")]
    assert git.commands_in(FRONTEND_DIR) == [("fetch", "origin", "main"), ("merge", "origin/main")]


def test_merge_into_itself_is_rejected() -> None:
    git = _git()
    driver, _ = _driver(git)

    with pytest.raises(ValidationError):
        driver.merge("main", driver.all_repos())
    assert git.commands == []


def test_merge_with_stash_restores_even_after_failed_merge() -> None:
    git = _git(
        current_branches={ROOT: "feature/x", FRONTEND_DIR: "feature/x", SERVER_DIR: "feature/x"},
        dirty={ROOT, FRONTEND_DIR},
        failing={(FRONTEND_DIR, "merge")},
    )
    driver, _ = _driver(git)

    result = driver.merge("main", driver.all_repos(), stash=True)

    assert result.failed_names == ["frontend/ee"]
    assert git.commands_in(FRONTEND_DIR) == [
        ("stash", "push", "-m", "stash-for-feature/x"),
        ("fetch", "origin", "main"),
        ("merge", "origin/main"),
        ("stash", "pop", "stash@{0}"),
    ]
    assert git.commands_in(ROOT)[-1] == ("stash", "pop", "stash@{0}")
    assert ("stash", "pop", "stash@{0}") not in git.commands_in(SERVER_DIR)


def test_merge_with_stash_on_detached_base_is_rejected() -> None:
    git = _git(current_branches={ROOT: None, FRONTEND_DIR: "main", SERVER_DIR: "main"})
    driver, _ = _driver(git)

    with pytest.raises(PreconditionError):
        driver.merge("main", driver.all_repos(), stash=True)
    assert git.commands == []


def test_merge_with_stash_leaves_older_stash_alone_when_nothing_was_saved() -> None:
    parked = StashEntry(ref="stash@{0}", message="On feature/x: stash-for-feature/x")
    git = _git(
        current_branches={ROOT: "feature/x", FRONTEND_DIR: "main", SERVER_DIR: "main"},
        dirty={ROOT},
        unstashable={ROOT},
        stashes={ROOT: [parked]},
    )
    driver, _ = _driver(git)

    result = driver.merge("main", [BASE_REPO], stash=True)

    assert result.ok
    stash_outcome = next(o for o in result if o.step == "stash")
    assert stash_outcome.status is OutcomeStatus.SKIPPED
    assert [o for o in result if o.step == "restore"] == []
    assert git.list_stashes(ROOT) == [parked]


# ----------------------------------------------------------------------
# status
# ----------------------------------------------------------------------


def test_status_collects_text() -> None:
    git = _git(status_outputs={ROOT: "## main...origin/main\n M README.md\n"})
    driver, _ = _driver(git)

    result = driver.status([BASE_REPO, FRONTEND])

    assert result.ok
    assert result.outcomes[0].message == "## main...origin/main\n M README.md"
    assert result.outcomes[1].message == "## main"
    assert git.commands == []
