"""Commit command."""

import click

from subflow.cli.core import create_driver
from subflow.cli.error_boundary import cli_error_boundary
from subflow.cli.rendering import render_result
from subflow.core.context import SubflowContext


@click.command("commit")
@click.argument("message")
@click.pass_obj
@cli_error_boundary
def commit_cmd(ctx: SubflowContext, message: str) -> None:
    """Commit staged changes everywhere with MESSAGE.

    The base repository is committed first; if that fails, no submodule is
    committed. Submodules with nothing staged are skipped.
    """
    driver = create_driver(ctx)
    result = driver.commit(message, driver.all_repos())
    render_result(ctx, result, "Changes committed in all repositories")
