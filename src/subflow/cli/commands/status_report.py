"""Status report of the tool settings and the current repository."""

import click
from rich.console import Console
from rich.table import Table

from subflow.cli.error_boundary import cli_error_boundary
from subflow.core.context import SubflowContext
from subflow.core.repos import enumerate_submodules


def _on_off(value: bool) -> str:
    if value:
        return "[green]on[/green]"
    return "[dim]off[/dim]"


@click.command("status-report")
@click.pass_obj
@cli_error_boundary
def status_report_cmd(ctx: SubflowContext) -> None:
    """Show settings, config location and the submodules of the current repository."""
    console = Console(stderr=True, width=200)

    console.print("[bold]=== subflow status ===[/bold]")
    console.print(f"Verbose mode: {_on_off(ctx.verbose)}")
    console.print(f"Dry-run mode: {_on_off(ctx.dry_run)}")
    console.print(f"Config file: {ctx.config_store.path()}")

    repo_root = ctx.repo_root
    if repo_root is None or not ctx.git.is_git_repository(repo_root):
        console.print("Current repository: [red]not a git repository[/red]")
        console.print()
        return

    console.print(f"Current repository: [green]valid git repository[/green] ({repo_root})")

    submodules = enumerate_submodules(ctx, repo_root)
    console.print(f"Submodules found: {len(submodules)}")
    if not submodules:
        console.print()
        return

    table = Table(show_header=True, header_style="bold")
    table.add_column("path", style="cyan", no_wrap=True)
    table.add_column("branch", no_wrap=True)
    table.add_column("state", no_wrap=True)
    table.add_column("upstream", no_wrap=True)

    for repo in submodules:
        cwd = repo.resolve(repo_root)
        if not ctx.git.is_git_repository(cwd):
            table.add_row(repo.name, "[dim]-[/dim]", "[red]not checked out[/red]", "[dim]-[/dim]")
            continue

        branch = ctx.git.get_current_branch(cwd)
        branch_cell = branch if branch is not None else "[yellow]detached[/yellow]"
        if ctx.git.has_uncommitted_changes(cwd):
            state_cell = "[yellow]dirty[/yellow]"
        else:
            state_cell = "[green]clean[/green]"
        upstream = ctx.git.get_upstream_branch(cwd)
        upstream_cell = upstream if upstream is not None else "[dim]-[/dim]"
        table.add_row(repo.name, branch_cell, state_cell, upstream_cell)

    console.print(table)
    console.print()
