import click

from subflow.cli.commands.add import add_cmd
from subflow.cli.commands.branch import (
    create_branch_cmd,
    create_prefixed_branch_cmd,
    start_branch_cmd,
    start_feature_cmd,
    start_hotfix_cmd,
    start_release_cmd,
    start_sprint_cmd,
)
from subflow.cli.commands.checkout import checkout_cmd
from subflow.cli.commands.commit import commit_cmd
from subflow.cli.commands.commit_message import generate_commit_message_cmd, smart_commit_cmd
from subflow.cli.commands.conflicts import resolve_submodule_conflicts_cmd
from subflow.cli.commands.merge import merge_cmd
from subflow.cli.commands.pull import pull_cmd
from subflow.cli.commands.push import push_cmd
from subflow.cli.commands.status import status_cmd
from subflow.cli.commands.status_report import status_report_cmd
from subflow.cli.commands.tag import create_tag_cmd
from subflow.cli.commands.toggle import toggle_dry_run_cmd, toggle_verbose_cmd
from subflow.cli.help_formatter import GroupedCommandGroup
from subflow.core.context import create_context

CONTEXT_SETTINGS = dict(help_option_names=["-h", "--help"])  # terse help flags


@click.group(cls=GroupedCommandGroup, context_settings=CONTEXT_SETTINGS)
@click.version_option(package_name="subflow")
@click.option("--dry-run", is_flag=True, help="Print git commands instead of running them.")
@click.option("--verbose", is_flag=True, help="Show progress messages.")
@click.option("--quiet", is_flag=True, help="Only show warnings, errors and results.")
@click.pass_context
def cli(ctx: click.Context, dry_run: bool, verbose: bool, quiet: bool) -> None:
    """Run git operations across a repository and its submodules.

    Flags left out fall back to SUBFLOW_* environment variables, then to
    ~/.subflow/config.toml.
    """
    if verbose and quiet:
        raise click.UsageError("--verbose and --quiet are mutually exclusive")

    # Only create context if not already provided (e.g., by tests)
    if ctx.obj is None:
        verbosity = None
        if verbose:
            verbosity = True
        elif quiet:
            verbosity = False
        ctx.obj = create_context(dry_run=True if dry_run else None, verbose=verbosity)


# Register all commands
cli.add_command(checkout_cmd)
cli.add_command(pull_cmd)
cli.add_command(add_cmd)
cli.add_command(commit_cmd)
cli.add_command(push_cmd)
cli.add_command(status_cmd)
cli.add_command(merge_cmd)
cli.add_command(create_branch_cmd)
cli.add_command(create_prefixed_branch_cmd)
cli.add_command(create_tag_cmd)
cli.add_command(start_branch_cmd)
cli.add_command(start_feature_cmd)
cli.add_command(start_hotfix_cmd)
cli.add_command(start_release_cmd)
cli.add_command(start_sprint_cmd)
cli.add_command(generate_commit_message_cmd)
cli.add_command(smart_commit_cmd)
cli.add_command(resolve_submodule_conflicts_cmd)
cli.add_command(status_report_cmd)
cli.add_command(toggle_verbose_cmd)
cli.add_command(toggle_dry_run_cmd)


def main() -> None:
    """CLI entry point used by the `subflow` console script."""
    cli()
