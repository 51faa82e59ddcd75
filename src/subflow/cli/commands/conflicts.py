"""Interactive submodule conflict resolution during a merge."""

import click

from subflow.cli.core import discover_repo_root
from subflow.cli.error_boundary import cli_error_boundary
from subflow.cli.output import user_output
from subflow.cli.rendering import format_outcome
from subflow.core.conflicts import (
    ConflictRecord,
    SubmoduleConflictResolver,
    short_sha,
)
from subflow.core.context import SubflowContext
from subflow.core.errors import ValidationError
from subflow.core.repos import MultiRepoResult, RepoOutcome, submodule_ref

_MENU = (
    "Show detailed conflict info for each submodule",
    "Keep current version (HEAD) for all submodules",
    "Accept incoming version (MERGE_HEAD) for all submodules",
    "Resolve each submodule individually",
    "Update submodules to latest origin/main",
    "Abort merge",
)

_INDIVIDUAL_MENU = (
    "Keep current version (HEAD)",
    "Accept incoming version (MERGE_HEAD)",
    "Update to latest origin/main",
    "Skip this submodule",
)


def _show_details(resolver: SubmoduleConflictResolver, records: tuple[ConflictRecord, ...]) -> None:
    for record in records:
        details = resolver.details(record)
        user_output("")
        user_output(click.style(f"=== {record.path} conflict details ===", bold=True))
        user_output(f"Current (HEAD): {record.head_commit or 'unknown'}")
        if details.checked_out:
            user_output(f"  {details.head_summary or 'Commit not found locally'}")
        user_output(f"Incoming (MERGE_HEAD): {record.incoming_commit or 'unknown'}")
        if details.checked_out:
            user_output(f"  {details.incoming_summary or 'Commit not found locally'}")
        if details.left_right is not None:
            ahead, behind = details.left_right
            user_output(f"Relationship: current ahead {ahead}, incoming ahead {behind}")
    user_output("")
    user_output("Run resolve-submodule-conflicts again to choose a resolution.")


def _resolve_individually(
    ctx: SubflowContext,
    resolver: SubmoduleConflictResolver,
    records: tuple[ConflictRecord, ...],
) -> list[RepoOutcome]:
    outcomes: list[RepoOutcome] = []
    for record in records:
        user_output("")
        user_output(f"Resolving: {record.path}")
        for index, label in enumerate(_INDIVIDUAL_MENU, start=1):
            user_output(f"  {index}) {label}")
        choice = ctx.prompter.prompt(f"Choice for {record.path}")

        if choice == "1":
            outcomes.append(resolver.keep_current(record))
        elif choice == "2":
            outcomes.append(resolver.accept_incoming(record))
        elif choice == "3":
            outcomes.append(resolver.update_to_latest(record))
        else:
            if choice == "4":
                ctx.feedback.info(f"Skipping {record.path}")
            else:
                ctx.feedback.error(f"Invalid choice, skipping {record.path}")
            outcomes.append(
                RepoOutcome.skipped(submodule_ref(record.path), "Left conflicted", step="resolve")
            )
    return outcomes


@click.command("resolve-submodule-conflicts")
@click.pass_obj
@cli_error_boundary
def resolve_submodule_conflicts_cmd(ctx: SubflowContext) -> None:
    """Resolve submodule pointer conflicts of the merge in progress.

    Regular file conflicts are listed and left to `git mergetool`. Resolved
    submodules are staged; nothing is committed.
    """
    repo_root = discover_repo_root(ctx)
    resolver = SubmoduleConflictResolver(ctx, repo_root)
    report = resolver.analyze()

    user_output(click.style("=== Submodule Conflict Resolution ===", bold=True))
    user_output("Conflict analysis:")
    user_output(f"  Submodule conflicts: {len(report.submodule_conflicts)}")
    user_output(f"  Regular file conflicts: {len(report.file_conflicts)}")

    if report.file_conflicts:
        for record in report.file_conflicts:
            user_output(f"    {record.path}")

    if not report.submodule_conflicts:
        ctx.feedback.info("No submodule conflicts detected")
        if report.file_conflicts:
            user_output("For regular file conflicts, use your preferred merge tool")
            user_output("  Example: git mergetool")
        return

    user_output("")
    user_output("Submodule conflicts found:")
    for index, record in enumerate(report.submodule_conflicts, start=1):
        user_output(f"  {index}) {record.path}")
        user_output(f"      Current (HEAD): {short_sha(record.head_commit)}")
        user_output(f"      Incoming: {short_sha(record.incoming_commit)}")

    user_output("")
    user_output("Resolution options:")
    for index, label in enumerate(_MENU, start=1):
        user_output(f"  {index}) {label}")
    choice = ctx.prompter.prompt("Enter your choice")

    records = report.submodule_conflicts
    if choice == "1":
        _show_details(resolver, records)
        return
    if choice == "6":
        user_output("Aborting merge...")
        resolver.abort_merge()
        ctx.feedback.success("Merge aborted successfully")
        return

    if choice == "2":
        outcomes = [resolver.keep_current(record) for record in records]
    elif choice == "3":
        outcomes = [resolver.accept_incoming(record) for record in records]
    elif choice == "4":
        outcomes = _resolve_individually(ctx, resolver, records)
    elif choice == "5":
        outcomes = [resolver.update_to_latest(record) for record in records]
    else:
        raise ValidationError("Invalid choice! Please enter 1, 2, 3, 4, 5, or 6.")

    result = MultiRepoResult.of(outcomes)
    user_output("")
    user_output("Summary:")
    for outcome in result:
        user_output(f"  {format_outcome(outcome)}")

    remaining = resolver.remaining_conflicts()
    if remaining:
        user_output("")
        ctx.feedback.warning("Still conflicted:")
        for path in remaining:
            user_output(f"  {path}")

    user_output("")
    user_output("Next steps:")
    user_output("  1) Review: git status")
    user_output("  2) Commit: git commit")

    if not result.ok:
        user_output(
            click.style("Error: ", fg="red") + "Failed in: " + ", ".join(result.failed_names)
        )
        raise SystemExit(1)
    ctx.feedback.success("Submodule conflict resolution completed")
