"""Status command."""

import click

from subflow.cli.core import create_driver
from subflow.cli.error_boundary import cli_error_boundary
from subflow.cli.output import machine_output, user_output
from subflow.core.context import SubflowContext
from subflow.core.repos import OutcomeStatus


@click.command("status")
@click.pass_obj
@cli_error_boundary
def status_cmd(ctx: SubflowContext) -> None:
    """Show `git status --short --branch` for every repository."""
    driver = create_driver(ctx)
    result = driver.status(driver.all_repos())

    for outcome in result:
        if outcome.repo.is_base:
            heading = "=== Base Repository Status ==="
        else:
            heading = f"=== {outcome.repo.name} ==="
        machine_output(click.style(heading, bold=True))
        if outcome.status is OutcomeStatus.SUCCESS:
            machine_output(outcome.message)
        else:
            user_output(click.style("Error: ", fg="red") + outcome.message)
        machine_output()

    if not result.ok:
        raise SystemExit(1)
