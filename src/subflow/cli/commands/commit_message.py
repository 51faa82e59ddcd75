"""Commit message generator and the smart commit workflow."""

from pathlib import Path

import click

from subflow.cli.core import create_driver, discover_repo_root
from subflow.cli.error_boundary import cli_error_boundary
from subflow.cli.output import machine_output, user_output
from subflow.cli.rendering import render_result
from subflow.core.commit_message import (
    analyze_diff,
    detected_change_labels,
    read_staged_changes,
    suggest,
)
from subflow.core.context import SubflowContext
from subflow.core.errors import ValidationError
from subflow.core.validation import validate_commit_message

_MENU = (
    "Use suggested message #1",
    "Use suggested message #2",
    "Write custom message",
    "Show staged diff stat first",
    "Cancel",
)


def choose_commit_message(ctx: SubflowContext, repo_root: Path) -> str:
    """Analyze the staged diff of the base repository and let the user pick a message.

    Prints the analysis report, then a menu. Only returns when a message was
    chosen; every other path exits with status 1. Never commits.

    Raises:
        ValidationError: If the custom message is empty or the choice is invalid
        SystemExit: If nothing is staged, or on "show diff" and "cancel"
    """
    git = ctx.git
    changes = read_staged_changes(git, repo_root)
    if changes.is_empty:
        ctx.feedback.warning("No staged changes found. Run 'subflow add' first.")
        raise SystemExit(1)

    user_output(click.style("=== Commit Message Generator ===", bold=True))
    user_output(f"Files changed: {len(changes.changed)}")
    ctx.feedback.info("Analyzing code changes...")

    analysis = analyze_diff(changes.diff)
    primary, alternative = suggest(changes, analysis)

    user_output("")
    user_output("Suggestions (based on code analysis):")
    user_output(f"  1) {primary.format()}")
    user_output(f"  2) {alternative.format()}")

    user_output("")
    user_output("Code analysis:")
    user_output(f"  +{analysis.added_lines}/-{analysis.removed_lines} lines")
    labels = detected_change_labels(analysis)
    if labels:
        user_output(f"  Detected: {', '.join(labels)}")

    recent = git.get_recent_commit_subjects(repo_root, limit=3)
    if recent:
        user_output("")
        user_output("Recent commits:")
        for subject in recent:
            user_output(f"  {subject}")

    user_output("")
    user_output("File summary:")
    if changes.added:
        user_output(f"  Added: {len(changes.added)} files")
    if changes.modified:
        user_output(f"  Modified: {len(changes.modified)} files")
    if changes.deleted:
        user_output(f"  Deleted: {len(changes.deleted)} files")

    user_output("")
    user_output("Choose an option:")
    for index, label in enumerate(_MENU, start=1):
        user_output(f"  {index}) {label}")
    choice = ctx.prompter.prompt("Enter your choice")

    if choice == "1":
        message = primary.format()
    elif choice == "2":
        message = alternative.format()
    elif choice == "3":
        custom = ctx.prompter.prompt("Enter your commit message")
        if not custom.strip():
            raise ValidationError("Empty message provided")
        message = validate_commit_message(custom)
    elif choice == "4":
        user_output("")
        user_output("Staged changes:")
        machine_output(git.get_staged_diff_stat(repo_root).rstrip("\n"))
        user_output("Run generate-commit-message again to choose a message.")
        raise SystemExit(1)
    elif choice == "5":
        ctx.feedback.info("Operation cancelled")
        raise SystemExit(1)
    else:
        raise ValidationError("Invalid choice! Please enter 1, 2, 3, 4, or 5.")

    user_output(f"Using: {message}")
    return message


@click.command("generate-commit-message")
@click.pass_obj
@cli_error_boundary
def generate_commit_message_cmd(ctx: SubflowContext) -> None:
    """Suggest conventional commit messages from the staged diff.

    The chosen message is printed to stdout; nothing is committed.
    """
    repo_root = discover_repo_root(ctx)
    message = choose_commit_message(ctx, repo_root)
    machine_output(message)


@click.command("smart-commit")
@click.pass_obj
@cli_error_boundary
def smart_commit_cmd(ctx: SubflowContext) -> None:
    """Generate a commit message, then commit it in all repositories."""
    driver = create_driver(ctx)
    git = ctx.git

    user_output(click.style("=== Smart Commit Workflow ===", bold=True))
    if git.has_staged_changes(driver.repo_root):
        ctx.feedback.info("Found staged changes in base repository")
    else:
        ctx.feedback.info("No staged changes in base repository")

    submodules = driver.submodules()
    with_changes = [
        repo.name
        for repo in submodules
        if git.is_dir(repo.resolve(driver.repo_root))
        and git.is_git_repository(repo.resolve(driver.repo_root))
        and git.has_staged_changes(repo.resolve(driver.repo_root))
    ]
    if with_changes:
        ctx.feedback.info(f"Submodules with staged changes: {', '.join(with_changes)}")

    message = choose_commit_message(ctx, driver.repo_root)

    ctx.feedback.info("Proceeding with commit...")
    result = driver.commit(message, driver.all_repos())
    render_result(ctx, result, "Changes committed in all repositories")
