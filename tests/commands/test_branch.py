"""Tests for the branch creation commands."""

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


def test_create_branch_everywhere() -> None:
    git = standard_git()
    runner = CliRunner()

    result = runner.invoke(cli, ["create-branch", "feature/login"], obj=build_context(git))

    assert_cli_success(result)
    for cwd in (ROOT, FRONTEND_DIR, SERVER_DIR):
        assert git.commands_in(cwd) == [("checkout", "-b", "feature/login")]
        assert git.get_current_branch(cwd) == "feature/login"


def test_create_branch_existing_in_base_runs_nothing() -> None:
    git = standard_git(local_branches={ROOT: {"develop"}})
    runner = CliRunner()

    result = runner.invoke(cli, ["create-branch", "develop"], obj=build_context(git))

    assert_cli_error(result, "Branch 'develop' already exists in the base repository")
    assert git.commands == []


def test_create_branch_existing_in_submodule_fails_that_submodule() -> None:
    git = standard_git(local_branches={SERVER_DIR: {"develop"}})
    runner = CliRunner()

    result = runner.invoke(cli, ["create-branch", "develop"], obj=build_context(git))

    assert_cli_error(result, "Failed in: server/ee")
    assert git.commands_in(FRONTEND_DIR) == [("checkout", "-b", "develop")]
    assert git.commands_in(SERVER_DIR) == []


def test_create_prefixed_branch() -> None:
    git = standard_git()
    runner = CliRunner()

    result = runner.invoke(
        cli, ["create-prefixed-branch", "hotfix", "crash"], obj=build_context(git)
    )

    assert_cli_success(result)
    assert git.commands_in(ROOT) == [("checkout", "-b", "hotfix/crash")]
    assert "Warning" not in result.output


def test_create_prefixed_branch_warns_on_unusual_prefix() -> None:
    git = standard_git()
    ctx = build_context(git)
    runner = CliRunner()

    result = runner.invoke(cli, ["create-prefixed-branch", "chore", "deps"], obj=ctx)

    assert_cli_success(result)
    assert git.commands_in(ROOT) == [("checkout", "-b", "chore/deps")]
    assert ctx.feedback.warnings == [
        "'chore' is not one of: feature, hotfix, release, revamp, sprint"
    ]


def test_start_branch_base_scope_pushes_base() -> None:
    git = standard_git()
    ctx = build_context(git, answers=["experiment", "1"])
    runner = CliRunner()

    result = runner.invoke(cli, ["start-branch"], obj=ctx)

    assert_cli_success(result)
    assert ctx.prompter.prompts == ["Enter branch name", "Enter your choice"]
    assert git.commands_in(ROOT) == [
        ("checkout", "-b", "experiment"),
        ("push", "--set-upstream", "origin", "experiment"),
    ]
    assert git.commands_in(FRONTEND_DIR) == []
    assert "Branch 'experiment' created successfully!" in result.output


def test_start_feature_submodules_scope_pushes_submodules() -> None:
    git = standard_git()
    ctx = build_context(git, answers=["login", "2"])
    runner = CliRunner()

    result = runner.invoke(cli, ["start-feature"], obj=ctx)

    assert_cli_success(result)
    assert ctx.prompter.prompts[0] == "Enter feature branch name"
    assert git.commands_in(ROOT) == []
    for cwd in (FRONTEND_DIR, SERVER_DIR):
        assert git.commands_in(cwd) == [
            ("checkout", "-b", "feature/login"),
            ("push", "--set-upstream", "origin", "feature/login"),
        ]


def test_start_branch_type_keeps_existing_prefix() -> None:
    git = standard_git()
    ctx = build_context(git, answers=["release/v2", "4"])
    runner = CliRunner()

    result = runner.invoke(cli, ["start-branch", "release"], obj=ctx)

    assert_cli_success(result)
    assert git.commands_in(ROOT) == [
        ("checkout", "-b", "release/v2"),
        ("push", "--set-upstream", "origin", "release/v2"),
    ]
    assert git.commands_in(SERVER_DIR) == [("checkout", "-b", "release/v2")]


def test_start_branch_folders_scope_creates_locally() -> None:
    git = standard_git()
    ctx = build_context(git, answers=["spike", "3", "server/ee missing/dir"])
    runner = CliRunner()

    result = runner.invoke(cli, ["start-branch"], obj=ctx)

    assert_cli_success(result)
    assert git.commands_in(SERVER_DIR) == [("checkout", "-b", "spike")]
    assert git.commands_in(ROOT) == []
    assert "Skipping missing/dir: directory does not exist" in ctx.feedback.warnings


def test_start_hotfix_requires_name() -> None:
    git = standard_git()
    runner = CliRunner()

    result = runner.invoke(cli, ["start-hotfix"], obj=build_context(git, answers=[""]))

    assert_cli_error(result, "Name required for hotfix branch")
    assert git.commands == []
