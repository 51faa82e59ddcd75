"""Tests for resolve-submodule-conflicts."""

from click.testing import CliRunner

from subflow.cli.cli import cli
from tests.test_utils.fake_repos import (
    FRONTEND_DIR,
    ROOT,
    SERVER_DIR,
    assert_cli_error,
    assert_cli_success,
    build_context,
    standard_git,
)

HEAD_SHA = "a" * 40
INCOMING_SHA = "b" * 40


def _conflicted_git(paths=("frontend/ee", "README.md"), **overrides):
    tree_entries = {}
    for path in ("frontend/ee", "server/ee"):
        tree_entries[(ROOT, "HEAD", path)] = HEAD_SHA
        tree_entries[(ROOT, "MERGE_HEAD", path)] = INCOMING_SHA
    return standard_git(
        merges_in_progress={ROOT},
        conflicted_paths={ROOT: list(paths)},
        tree_entries=tree_entries,
        **overrides,
    )


def test_requires_merge_in_progress() -> None:
    git = standard_git()
    runner = CliRunner()

    result = runner.invoke(cli, ["resolve-submodule-conflicts"], obj=build_context(git))

    assert_cli_error(result, "No active merge detected")


def test_only_file_conflicts() -> None:
    git = _conflicted_git(paths=("README.md",))
    ctx = build_context(git)
    runner = CliRunner()

    result = runner.invoke(cli, ["resolve-submodule-conflicts"], obj=ctx)

    assert_cli_success(result)
    assert "No submodule conflicts detected" in result.output
    assert "git mergetool" in result.output
    assert ctx.prompter.prompts == []


def test_accept_incoming_for_all() -> None:
    git = _conflicted_git()
    runner = CliRunner()

    result = runner.invoke(cli, ["resolve-submodule-conflicts"], obj=build_context(git, ["3"]))

    assert_cli_success(result)
    assert "Current (HEAD): aaaaaaaa" in result.output
    assert git.commands_in(ROOT) == [
        ("update-index", "--add", "--cacheinfo", f"160000,{INCOMING_SHA},frontend/ee")
    ]
    assert "Still conflicted:" in result.output
    assert "README.md" in result.output
    assert "Submodule conflict resolution completed" in result.output


def test_keep_current_for_all() -> None:
    git = _conflicted_git(paths=("frontend/ee", "server/ee"))
    runner = CliRunner()

    result = runner.invoke(cli, ["resolve-submodule-conflicts"], obj=build_context(git, ["2"]))

    assert_cli_success(result)
    assert git.commands_in(ROOT) == [("add", "frontend/ee"), ("add", "server/ee")]
    assert git.list_conflicted_paths(ROOT) == []
    assert "Still conflicted:" not in result.output


def test_update_to_latest_main() -> None:
    git = _conflicted_git(paths=("frontend/ee",))
    runner = CliRunner()

    result = runner.invoke(cli, ["resolve-submodule-conflicts"], obj=build_context(git, ["5"]))

    assert_cli_success(result)
    assert git.commands_in(FRONTEND_DIR) == [
        ("fetch", "origin", "main"),
        ("checkout", "--detach", "origin/main"),
    ]
    assert git.commands_in(ROOT) == [("add", "frontend/ee")]


def test_resolve_individually() -> None:
    git = _conflicted_git(paths=("frontend/ee", "server/ee"))
    ctx = build_context(git, ["4", "2", "4"])
    runner = CliRunner()

    result = runner.invoke(cli, ["resolve-submodule-conflicts"], obj=ctx)

    assert_cli_success(result)
    assert ctx.prompter.prompts == [
        "Enter your choice",
        "Choice for frontend/ee",
        "Choice for server/ee",
    ]
    assert git.commands_in(ROOT) == [
        ("update-index", "--add", "--cacheinfo", f"160000,{INCOMING_SHA},frontend/ee")
    ]
    assert git.list_conflicted_paths(ROOT) == ["server/ee"]
    assert "server/ee [resolve] Left conflicted" in result.output


def test_show_details() -> None:
    git = _conflicted_git(
        paths=("frontend/ee",),
        commit_summaries={
            (FRONTEND_DIR, HEAD_SHA): "aaaaaaa feat: current work",
            (FRONTEND_DIR, INCOMING_SHA): "bbbbbbb fix: incoming work",
        },
        left_right_counts={(FRONTEND_DIR, HEAD_SHA, INCOMING_SHA): (2, 3)},
    )
    runner = CliRunner()

    result = runner.invoke(cli, ["resolve-submodule-conflicts"], obj=build_context(git, ["1"]))

    assert_cli_success(result)
    assert "feat: current work" in result.output
    assert "fix: incoming work" in result.output
    assert "Relationship: current ahead 2, incoming ahead 3" in result.output
    assert git.commands == []


def test_abort_merge() -> None:
    git = _conflicted_git()
    runner = CliRunner()

    result = runner.invoke(cli, ["resolve-submodule-conflicts"], obj=build_context(git, ["6"]))

    assert_cli_success(result)
    assert git.commands_in(ROOT) == [("merge", "--abort")]
    assert not git.is_merge_in_progress(ROOT)
    assert "Merge aborted successfully" in result.output


def test_failed_resolution_exits_nonzero() -> None:
    git = _conflicted_git(paths=("frontend/ee",), failing={(ROOT, "add_path")})
    runner = CliRunner()

    result = runner.invoke(cli, ["resolve-submodule-conflicts"], obj=build_context(git, ["2"]))

    assert_cli_error(result, "Failed in: frontend/ee")
    assert git.list_conflicted_paths(ROOT) == ["frontend/ee"]


def test_invalid_choice() -> None:
    git = _conflicted_git()
    runner = CliRunner()

    result = runner.invoke(cli, ["resolve-submodule-conflicts"], obj=build_context(git, ["9"]))

    assert_cli_error(result, "Invalid choice! Please enter 1, 2, 3, 4, 5, or 6.")
    assert git.commands == []


def test_untouched_submodule_dir_is_unaffected() -> None:
    git = _conflicted_git(paths=("frontend/ee",))
    runner = CliRunner()

    runner.invoke(cli, ["resolve-submodule-conflicts"], obj=build_context(git, ["3"]))

    assert git.commands_in(SERVER_DIR) == []
