"""Rendering of multi-repository results."""

import click

from subflow.cli.output import user_output
from subflow.core.context import SubflowContext
from subflow.core.repos import MultiRepoResult, OutcomeStatus, RepoOutcome

_STATUS_SYMBOLS = {
    OutcomeStatus.SUCCESS: click.style("✓", fg="green"),
    OutcomeStatus.SKIPPED: click.style("-", fg="yellow"),
    OutcomeStatus.FAILED: click.style("✗", fg="red"),
}


def format_outcome(outcome: RepoOutcome) -> str:
    """One summary line, e.g. `✓ frontend/ee [checkout] Switched to 'main'`."""
    symbol = _STATUS_SYMBOLS[outcome.status]
    name = click.style(outcome.repo.name, fg="cyan", bold=True)
    step = f" [{outcome.step}]" if outcome.step else ""
    first_line = outcome.message.splitlines()[0] if outcome.message else ""
    return f"{symbol} {name}{step} {first_line}".rstrip()


def render_result(ctx: SubflowContext, result: MultiRepoResult, done_message: str) -> None:
    """Print per-repository outcomes and exit 1 when any repository failed.

    Args:
        ctx: Application context
        result: Aggregated outcomes
        done_message: Shown when every repository succeeded or was skipped

    Raises:
        SystemExit: If any outcome is FAILED (with exit code 1)
    """
    if len(result) > 0:
        user_output("")
        user_output("Summary:")
        for outcome in result:
            user_output(f"  {format_outcome(outcome)}")

    if not result.ok:
        user_output(
            click.style("Error: ", fg="red")
            + "Failed in: "
            + ", ".join(result.failed_names)
        )
        raise SystemExit(1)

    ctx.feedback.success(done_message)
