"""Commands that flip persisted settings."""

from dataclasses import replace

import click

from subflow.cli.error_boundary import cli_error_boundary
from subflow.core.context import SubflowContext


@click.command("toggle-verbose")
@click.pass_obj
@cli_error_boundary
def toggle_verbose_cmd(ctx: SubflowContext) -> None:
    """Flip the stored verbose setting."""
    stored = ctx.config_store.load()
    updated = replace(stored, verbose=not stored.verbose)
    ctx.config_store.save(updated)

    if updated.verbose:
        ctx.feedback.success("Verbose mode enabled")
    else:
        ctx.feedback.success("Verbose mode disabled")


@click.command("toggle-dry-run")
@click.pass_obj
@cli_error_boundary
def toggle_dry_run_cmd(ctx: SubflowContext) -> None:
    """Flip the stored dry-run setting."""
    stored = ctx.config_store.load()
    updated = replace(stored, dry_run=not stored.dry_run)
    ctx.config_store.save(updated)

    if updated.dry_run:
        ctx.feedback.success("Dry-run mode enabled")
    else:
        ctx.feedback.success("Dry-run mode disabled")
