"""Interactive selection of the repositories an operation applies to."""

import re
from collections.abc import Sequence
from enum import Enum
from pathlib import Path

from subflow.cli.output import user_output
from subflow.core.context import SubflowContext
from subflow.core.errors import PreconditionError, ValidationError
from subflow.core.prompter import Prompter
from subflow.core.repos import BASE_REPO, RepoRef, enumerate_submodules


class Scope(Enum):
    BASE = "base"
    SUBMODULES = "submodules"
    FOLDERS = "folders"
    ALL = "all"
    ALL_WITH_STASH = "all-with-stash"

    @property
    def label(self) -> str:
        return _SCOPE_LABELS[self]


_SCOPE_LABELS = {
    Scope.BASE: "Base repository",
    Scope.SUBMODULES: "Submodules",
    Scope.FOLDERS: "Specific folders",
    Scope.ALL: "All (base + submodules)",
    Scope.ALL_WITH_STASH: "All with stash handling",
}

CHECKOUT_SCOPES = (Scope.BASE, Scope.SUBMODULES, Scope.ALL, Scope.ALL_WITH_STASH)
MERGE_SCOPES = CHECKOUT_SCOPES
BRANCH_SCOPES = (Scope.BASE, Scope.SUBMODULES, Scope.FOLDERS, Scope.ALL)


def _choice_hint(count: int) -> str:
    numbers = [str(i) for i in range(1, count + 1)]
    if len(numbers) == 1:
        return numbers[0]
    if len(numbers) == 2:
        return f"{numbers[0]} or {numbers[1]}"
    return ", ".join(numbers[:-1]) + f", or {numbers[-1]}"


def select_scope(prompter: Prompter, scopes: Sequence[Scope], question: str) -> Scope:
    """Show a numbered menu of `scopes` and return the chosen one.

    Raises:
        ValidationError: If the answer is not one of the menu numbers
    """
    user_output(question)
    for index, scope in enumerate(scopes, start=1):
        user_output(f"  {index}) {scope.label}")

    answer = prompter.prompt("Enter your choice")
    if answer.isdigit() and 1 <= int(answer) <= len(scopes):
        return scopes[int(answer) - 1]
    raise ValidationError(f"Invalid choice! Please enter {_choice_hint(len(scopes))}.")


def resolve_targets(
    ctx: SubflowContext,
    repo_root: Path,
    scope: Scope,
    folders: Sequence[str] | None = None,
) -> list[RepoRef]:
    """Map a scope to the ordered list of target repositories.

    Args:
        ctx: Application context
        repo_root: Base repository root
        scope: Chosen scope
        folders: Folder paths for Scope.FOLDERS; prompted for when None

    Raises:
        PreconditionError: If a submodules-only scope finds no submodules
        ValidationError: If no given folder exists
    """
    if scope is Scope.BASE:
        return [BASE_REPO]

    if scope is Scope.FOLDERS:
        return _resolve_folders(ctx, repo_root, folders)

    submodules = enumerate_submodules(ctx, repo_root)

    if scope is Scope.SUBMODULES:
        if not submodules:
            ctx.feedback.warning("No submodules found in this repository")
            raise PreconditionError("No submodules found")
        return submodules

    if not submodules:
        ctx.feedback.warning("No submodules found; operating on the base repository only")
    return [BASE_REPO, *submodules]


def _resolve_folders(
    ctx: SubflowContext,
    repo_root: Path,
    folders: Sequence[str] | None,
) -> list[RepoRef]:
    if folders is None:
        answer = ctx.prompter.prompt("Enter folder paths (space-separated)")
        folders = answer.split()

    targets: list[RepoRef] = []
    for folder in folders:
        relative = Path(folder)
        if not ctx.git.is_dir(repo_root / relative):
            ctx.feedback.warning(f"Skipping {folder}: directory does not exist")
            continue
        target = BASE_REPO if relative == Path(".") else RepoRef(path=relative, name=folder)
        if target not in targets:
            targets.append(target)

    if not targets:
        raise ValidationError("No valid folders selected")
    return targets


def select_submodules(prompter: Prompter, submodules: Sequence[RepoRef]) -> list[RepoRef]:
    """Let the user pick one, several or all submodules by 1-based index.

    Accepts indices separated by spaces or commas, or "all".

    Raises:
        PreconditionError: If there are no submodules to choose from
        ValidationError: If an index is not valid
    """
    if not submodules:
        raise PreconditionError("No submodules found")

    user_output("Available submodules:")
    for index, repo in enumerate(submodules, start=1):
        user_output(f"  {index}) {repo.name}")
    user_output("  all) All submodules")

    answer = prompter.prompt("Select submodules (e.g. 1 3, or all)")
    if answer.lower() in ("all", "a"):
        return list(submodules)

    selected: list[RepoRef] = []
    for token in re.split(r"[\s,]+", answer):
        if not token:
            continue
        if not token.isdigit() or not 1 <= int(token) <= len(submodules):
            raise ValidationError(
                f"Invalid submodule selection '{token}'. "
                f"Enter numbers between 1 and {len(submodules)}, or 'all'."
            )
        repo = submodules[int(token) - 1]
        if repo not in selected:
            selected.append(repo)

    if not selected:
        raise ValidationError("No submodules selected")
    return selected
