"""Push command."""

import click

from subflow.cli.core import create_driver
from subflow.cli.error_boundary import cli_error_boundary
from subflow.cli.rendering import render_result
from subflow.core.context import SubflowContext


@click.command("push")
@click.pass_obj
@cli_error_boundary
def push_cmd(ctx: SubflowContext) -> None:
    """Push the base repository and every submodule.

    Branches without an upstream are pushed with --set-upstream origin <branch>.
    """
    driver = create_driver(ctx)
    result = driver.push(driver.all_repos())
    render_result(ctx, result, "All repositories pushed successfully")
