"""Pull command."""

import click

from subflow.cli.core import create_driver
from subflow.cli.error_boundary import cli_error_boundary
from subflow.cli.rendering import render_result
from subflow.core.context import SubflowContext


@click.command("pull")
@click.pass_obj
@cli_error_boundary
def pull_cmd(ctx: SubflowContext) -> None:
    """Fetch and pull the base repository and every submodule.

    The base repository must track an upstream branch. Submodules in detached
    HEAD state, or whose branch does not exist on origin, are skipped.
    """
    driver = create_driver(ctx)
    result = driver.pull(driver.all_repos())
    render_result(ctx, result, "Pull completed for all repositories")
