"""Branch creation commands."""

import click

from subflow.cli.core import create_driver
from subflow.cli.error_boundary import cli_error_boundary
from subflow.cli.rendering import render_result
from subflow.core.context import SubflowContext
from subflow.core.operations import BRANCH_PREFIXES, prefixed_branch_name
from subflow.core.repos import BASE_REPO
from subflow.core.scope import BRANCH_SCOPES, Scope, resolve_targets, select_scope
from subflow.core.validation import validate_branch_name


@click.command("create-branch")
@click.argument("name")
@click.pass_obj
@cli_error_boundary
def create_branch_cmd(ctx: SubflowContext, name: str) -> None:
    """Create and checkout branch NAME in the base repository and every submodule.

    Fails before running any git command when NAME already exists in the
    base repository.
    """
    driver = create_driver(ctx)
    result = driver.create_branch(name, driver.all_repos())
    render_result(ctx, result, f"Branch '{name}' created in all repositories")


@click.command("create-prefixed-branch")
@click.argument("prefix", metavar="PREFIX")
@click.argument("name")
@click.pass_obj
@cli_error_boundary
def create_prefixed_branch_cmd(ctx: SubflowContext, prefix: str, name: str) -> None:
    """Create PREFIX/NAME everywhere (e.g. `feature login` -> feature/login).

    Usual prefixes: feature, hotfix, release, revamp, sprint.
    """
    if prefix not in BRANCH_PREFIXES:
        ctx.feedback.warning(f"'{prefix}' is not one of: {', '.join(BRANCH_PREFIXES)}")
    branch = prefixed_branch_name(prefix, name)
    driver = create_driver(ctx)
    result = driver.create_branch(branch, driver.all_repos())
    render_result(ctx, result, f"Branch '{branch}' created in all repositories")


def _start_branch(ctx: SubflowContext, branch_type: str | None) -> None:
    driver = create_driver(ctx)

    if branch_type:
        name = ctx.prompter.prompt(f"Enter {branch_type} branch name")
        if name.startswith(f"{branch_type}/"):
            branch = name
        else:
            branch = prefixed_branch_name(branch_type, name)
    else:
        branch = ctx.prompter.prompt("Enter branch name")
    validate_branch_name(branch)

    scope = select_scope(
        ctx.prompter,
        BRANCH_SCOPES,
        f"Where do you want to create the '{branch}' branch?",
    )
    targets = resolve_targets(ctx, driver.repo_root, scope)

    if scope is Scope.BASE:
        result = driver.create_branch(branch, [BASE_REPO], push_base=True)
    elif scope is Scope.SUBMODULES:
        result = driver.create_branch(branch, targets, push_submodules=True)
    elif scope is Scope.ALL:
        result = driver.create_branch(branch, targets, push_base=True)
    else:
        result = driver.create_branch(branch, targets)

    render_result(ctx, result, f"Branch '{branch}' created successfully!")


@click.command("start-branch")
@click.argument("branch_type", metavar="[TYPE]", required=False)
@click.pass_obj
@cli_error_boundary
def start_branch_cmd(ctx: SubflowContext, branch_type: str | None) -> None:
    """Interactively create a branch, optionally prefixed with TYPE.

    \b
    Scopes:
      1) base repository (also pushed with -u origin)
      2) submodules (each pushed with -u origin)
      3) specific folders (local only)
      4) all: base (pushed) and every submodule (local)
    """
    _start_branch(ctx, branch_type)


def _make_start_alias(branch_type: str) -> click.Command:
    @click.command(f"start-{branch_type}")
    @click.pass_obj
    @cli_error_boundary
    def start_alias(ctx: SubflowContext) -> None:
        _start_branch(ctx, branch_type)

    start_alias.help = (
        f"Interactively create a {branch_type}/<name> branch (start-branch {branch_type})."
    )
    return start_alias


start_feature_cmd = _make_start_alias("feature")
start_hotfix_cmd = _make_start_alias("hotfix")
start_release_cmd = _make_start_alias("release")
start_sprint_cmd = _make_start_alias("sprint")
