"""Tag command."""

import click

from subflow.cli.core import create_driver
from subflow.cli.error_boundary import cli_error_boundary
from subflow.cli.rendering import render_result
from subflow.core.context import SubflowContext


@click.command("create-tag")
@click.argument("name")
@click.pass_obj
@cli_error_boundary
def create_tag_cmd(ctx: SubflowContext, name: str) -> None:
    """Create lightweight tag NAME everywhere and push it to origin."""
    driver = create_driver(ctx)
    result = driver.tag(name, driver.all_repos())
    render_result(ctx, result, f"Tag '{name}' created and pushed in all repositories")
