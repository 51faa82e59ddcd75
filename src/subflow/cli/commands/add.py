"""Add command."""

import click

from subflow.cli.core import create_driver
from subflow.cli.error_boundary import cli_error_boundary
from subflow.cli.rendering import render_result
from subflow.core.context import SubflowContext


@click.command("add")
@click.pass_obj
@cli_error_boundary
def add_cmd(ctx: SubflowContext) -> None:
    """Stage all changes in the base repository and every submodule."""
    driver = create_driver(ctx)
    result = driver.add(driver.all_repos())
    render_result(ctx, result, "All changes staged")
