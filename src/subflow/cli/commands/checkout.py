"""Checkout command - switch a branch across the base repository and submodules."""

import click

from subflow.cli.core import create_driver
from subflow.cli.error_boundary import cli_error_boundary
from subflow.cli.rendering import render_result
from subflow.core.context import SubflowContext
from subflow.core.scope import CHECKOUT_SCOPES, Scope, resolve_targets, select_scope
from subflow.core.validation import validate_branch_name


@click.command("checkout")
@click.argument("branch", metavar="BRANCH", required=False)
@click.option(
    "--scope",
    "scope_value",
    type=click.Choice([s.value for s in CHECKOUT_SCOPES]),
    help="Where to check out; prompted for when omitted.",
)
@click.pass_obj
@cli_error_boundary
def checkout_cmd(ctx: SubflowContext, branch: str | None, scope_value: str | None) -> None:
    """Checkout BRANCH in the base repository, submodules, or both.

    \b
    Scopes:
      base            checkout + pull in the base repository
      submodules      checkout + pull in every submodule
      all             base repository, then every submodule
      all-with-stash  stash uncommitted work, switch everything, restore the
                      work previously parked on BRANCH
    """
    driver = create_driver(ctx)

    if branch is None:
        branch = ctx.prompter.prompt("Enter the branch name to checkout")
    validate_branch_name(branch)

    if scope_value is None:
        scope = select_scope(
            ctx.prompter,
            CHECKOUT_SCOPES,
            f"Where do you want to checkout the '{branch}' branch?",
        )
    else:
        scope = Scope(scope_value)

    if scope is Scope.ALL_WITH_STASH:
        result = driver.checkout_with_stash(branch)
    else:
        targets = resolve_targets(ctx, driver.repo_root, scope)
        result = driver.checkout(branch, targets)

    render_result(ctx, result, f"Checkout of '{branch}' completed!")
