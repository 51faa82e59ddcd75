"""Merge command - merge origin/<base branch> across repositories."""

import click

from subflow.cli.core import create_driver
from subflow.cli.error_boundary import cli_error_boundary
from subflow.cli.rendering import render_result
from subflow.core.context import SubflowContext
from subflow.core.repos import BASE_REPO
from subflow.core.scope import MERGE_SCOPES, Scope, select_scope, select_submodules
from subflow.core.validation import validate_branch_name


@click.command("merge")
@click.argument("base_branch", metavar="BASE_BRANCH", required=False)
@click.option(
    "--scope",
    "scope_value",
    type=click.Choice([s.value for s in MERGE_SCOPES]),
    help="Where to merge; prompted for when omitted.",
)
@click.pass_obj
@cli_error_boundary
def merge_cmd(ctx: SubflowContext, base_branch: str | None, scope_value: str | None) -> None:
    """Merge origin/BASE_BRANCH into the current branch.

    \b
    Scopes:
      base            the base repository
      submodules      submodules picked from a numbered list
      all             base repository, then every submodule
      all-with-stash  stash everything first and restore afterwards
    """
    driver = create_driver(ctx)

    if base_branch is None:
        base_branch = ctx.prompter.prompt("Enter the base branch to merge from")
    validate_branch_name(base_branch)

    current = ctx.git.get_current_branch(driver.repo_root) or "HEAD"
    if scope_value is None:
        scope = select_scope(
            ctx.prompter,
            MERGE_SCOPES,
            f"Where do you want to merge '{base_branch}' into '{current}'?",
        )
    else:
        scope = Scope(scope_value)

    if scope is Scope.BASE:
        result = driver.merge(base_branch, [BASE_REPO])
    elif scope is Scope.SUBMODULES:
        chosen = select_submodules(ctx.prompter, driver.submodules())
        result = driver.merge(base_branch, chosen)
    else:
        result = driver.merge(
            base_branch,
            driver.all_repos(),
            stash=scope is Scope.ALL_WITH_STASH,
        )

    render_result(ctx, result, f"Merge from '{base_branch}' completed!")
