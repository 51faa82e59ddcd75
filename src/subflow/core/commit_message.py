"""Conventional commit message suggestions from the staged diff.

The classifier is a set of pure functions over StagedChanges: keyword scans
over the diff text produce a DiffAnalysis, and a fixed priority order picks
one commit type and description. File lists are sorted before use so the
same staged content always yields the same suggestion.
"""

import re
from dataclasses import dataclass
from pathlib import Path

from subflow.core.git.abc import Git

# Keyword scans run over every line starting with "+" (or "-" where noted),
# including the "+++ b/<path>" file headers.
_FUNCTION_ADDITION = re.compile(r"function|def |const.*=|let.*=|var.*=|=>|func ")
_FUNCTION_DEFINITION = re.compile(r"function|def ")
_IMPORTS = re.compile(r"import|require|#include|use ")
_EXPORTS = re.compile(r"export|module\.exports|__all__")
_ERROR_HANDLING = re.compile(r"try|catch|except|finally|throw|raise|error")
_LOGGING = re.compile(r"log|print|console|debug|info|warn|error")
_TESTS = re.compile(r"test|spec|expect|assert|should|describe|it\(")
_COMMENTS = re.compile(r"//|#|/\*|\"\"\"|'''")
_CONFIGS = re.compile(r"config|settings|env|\.json|\.yaml|\.toml")
_DEPENDENCIES = re.compile(r"package\.json|requirements\.txt|go\.mod|Cargo\.toml|pom\.xml")
_STYLING = re.compile(r"\.css|\.scss|\.less|style|className|class=")
_DATABASE = re.compile(r"SELECT|INSERT|UPDATE|DELETE|CREATE TABLE|ALTER TABLE|database|query")
_API_ENDPOINTS = re.compile(
    r"@app\.route|@router|app\.get|app\.post|app\.put|app\.delete|router\.|/api/"
)
_UI_COMPONENTS = re.compile(r"<|React|Component|render|jsx|tsx")

# Path patterns
_DOCS_PATH = re.compile(r"README|CHANGELOG|\.md$|docs/")
_DEPENDENCY_PATH = re.compile(r"package\.json|requirements\.txt|go\.mod|Cargo\.toml")
_CONFIG_PATH = re.compile(r"\.config|\.env|settings")
_FIX_PATH = re.compile(r"fix|bug|error")
_STYLESHEET_PATH = re.compile(r"\.css$|\.scss$")

_SCOPE_BY_DIRECTORY = {
    "frontend": "frontend",
    "client": "frontend",
    "ui": "frontend",
    "web": "frontend",
    "backend": "backend",
    "server": "backend",
    "api": "backend",
    "mobile": "mobile",
    "app": "mobile",
    "ios": "mobile",
    "android": "mobile",
    "docs": "docs",
    "documentation": "docs",
    "tests": "test",
    "test": "test",
    "spec": "test",
}


@dataclass(frozen=True)
class StagedChanges:
    """Staged file lists and diff of the base repository."""

    changed: tuple[str, ...]
    added: tuple[str, ...] = ()
    modified: tuple[str, ...] = ()
    deleted: tuple[str, ...] = ()
    diff: str = ""

    @staticmethod
    def create(
        changed: list[str] | tuple[str, ...],
        added: list[str] | tuple[str, ...] = (),
        modified: list[str] | tuple[str, ...] = (),
        deleted: list[str] | tuple[str, ...] = (),
        diff: str = "",
    ) -> "StagedChanges":
        """Build with every file list sorted."""
        return StagedChanges(
            changed=tuple(sorted(changed)),
            added=tuple(sorted(added)),
            modified=tuple(sorted(modified)),
            deleted=tuple(sorted(deleted)),
            diff=diff,
        )

    @property
    def is_empty(self) -> bool:
        return not self.changed


@dataclass(frozen=True)
class DiffAnalysis:
    """Line counts and change signals detected in a diff."""

    added_lines: int = 0
    removed_lines: int = 0
    has_function_additions: bool = False
    has_function_modifications: bool = False
    has_imports: bool = False
    has_exports: bool = False
    has_error_handling: bool = False
    has_logging: bool = False
    has_tests: bool = False
    has_comments: bool = False
    has_configs: bool = False
    has_dependencies: bool = False
    has_styling: bool = False
    has_database: bool = False
    has_api_endpoints: bool = False
    has_ui_components: bool = False


@dataclass(frozen=True)
class CommitSuggestion:
    """A conventional commit message: `type(scope): description`."""

    type: str
    scope: str | None
    description: str

    @property
    def prefix(self) -> str:
        if self.scope:
            return f"{self.type}({self.scope})"
        return self.type

    def format(self) -> str:
        return f"{self.prefix}: {self.description}"


def read_staged_changes(git: Git, repo_root: Path) -> StagedChanges:
    """Collect the staged file lists and diff of `repo_root`."""
    return StagedChanges.create(
        changed=git.get_staged_files(repo_root),
        added=git.get_staged_files(repo_root, "A"),
        modified=git.get_staged_files(repo_root, "M"),
        deleted=git.get_staged_files(repo_root, "D"),
        diff=git.get_staged_diff(repo_root),
    )


def analyze_diff(diff: str) -> DiffAnalysis:
    """Count changed lines and detect change signals in a unified diff."""
    plus_lines = [line for line in diff.splitlines() if line.startswith("+")]
    minus_lines = [line for line in diff.splitlines() if line.startswith("-")]

    def any_plus(pattern: re.Pattern[str]) -> bool:
        return any(pattern.search(line) for line in plus_lines)

    def any_minus(pattern: re.Pattern[str]) -> bool:
        return any(pattern.search(line) for line in minus_lines)

    return DiffAnalysis(
        added_lines=sum(1 for line in plus_lines if len(line) > 1 and line[1] != "+"),
        removed_lines=sum(1 for line in minus_lines if len(line) > 1 and line[1] != "-"),
        has_function_additions=any_plus(_FUNCTION_ADDITION),
        has_function_modifications=(
            any_minus(_FUNCTION_DEFINITION) or any_plus(_FUNCTION_DEFINITION)
        ),
        has_imports=any_plus(_IMPORTS),
        has_exports=any_plus(_EXPORTS),
        has_error_handling=any_plus(_ERROR_HANDLING),
        has_logging=any_plus(_LOGGING),
        has_tests=any_plus(_TESTS),
        has_comments=any_plus(_COMMENTS),
        has_configs=any_plus(_CONFIGS),
        has_dependencies=any_plus(_DEPENDENCIES),
        has_styling=any_plus(_STYLING),
        has_database=any_plus(_DATABASE),
        has_api_endpoints=any_plus(_API_ENDPOINTS),
        has_ui_components=any_plus(_UI_COMPONENTS),
    )


def base_name(path: str) -> str:
    """Last path segment without its last extension.

    >>> base_name("src/components/Button.test.tsx")
    'Button.test'
    """
    name = path.rsplit("/", 1)[-1]
    dot = name.rfind(".")
    if dot > 0:
        return name[:dot]
    return name


def _first(paths: tuple[str, ...]) -> str:
    if not paths:
        return ""
    return paths[0]


def classify(changes: StagedChanges, analysis: DiffAnalysis) -> tuple[str, str]:
    """Pick the commit type and description for the staged changes.

    Priority: tests, docs, dependencies, config, styling, API endpoints, UI
    components, database, error handling, new functions, modified functions,
    deletions, large import additions, then a fallback on the file lists.
    """
    changed = changes.changed
    first_changed = base_name(_first(changed))

    if analysis.has_tests:
        if changes.added:
            return "test", f"add test coverage for {base_name(changes.added[0])}"
        return "test", "update test cases"

    if any(_DOCS_PATH.search(path) for path in changed):
        if analysis.has_comments:
            return "docs", "improve code documentation and comments"
        return "docs", "update documentation"

    if analysis.has_dependencies or any(_DEPENDENCY_PATH.search(path) for path in changed):
        if analysis.added_lines > analysis.removed_lines:
            return "build", "add new dependencies"
        return "build", "update dependencies"

    if analysis.has_configs or any(_CONFIG_PATH.search(path) for path in changed):
        return "config", "update configuration settings"

    if analysis.has_styling:
        if changes.added:
            non_stylesheets = [p for p in changed if not _STYLESHEET_PATH.search(p)]
            target = non_stylesheets[0] if non_stylesheets else _first(changed)
            return "style", f"add styling for {base_name(target)}"
        return "style", "update component styles"

    if analysis.has_api_endpoints:
        if changes.added:
            return "feat", f"add API endpoint for {first_changed}"
        return "feat", "update API endpoints"

    if analysis.has_ui_components:
        if changes.added:
            return "feat", f"add {base_name(changes.added[0])} component"
        return "feat", "update UI components"

    if analysis.has_database:
        return "feat", "update database operations"

    if analysis.has_error_handling:
        return "fix", "improve error handling"

    if analysis.has_function_additions:
        return "feat", f"add functionality to {first_changed}"

    if analysis.has_function_modifications:
        if any(_FIX_PATH.search(path) for path in changed):
            return "fix", f"resolve issues in {first_changed}"
        return "feat", f"enhance {first_changed} functionality"

    if changes.deleted:
        return "refactor", f"remove unused {changes.deleted[0].rsplit('/', 1)[-1]}"

    if analysis.has_imports and analysis.added_lines > 5:
        return "feat", "integrate new functionality"

    if changes.added:
        return "feat", f"add {base_name(changes.added[0])}"

    if changes.modified:
        modified = base_name(changes.modified[0])
        if analysis.removed_lines > analysis.added_lines:
            return "refactor", f"simplify {modified}"
        return "feat", f"enhance {modified}"

    return "feat", f"update {first_changed}"


def infer_scope(changes: StagedChanges) -> str | None:
    """Scope from the first directory of the first changed path, if known.

    >>> infer_scope(StagedChanges.create(changed=["frontend/src/App.tsx"]))
    'frontend'
    """
    first = _first(changes.changed)
    if not first:
        return None
    top = first.split("/", 1)[0]
    return _SCOPE_BY_DIRECTORY.get(top)


def alternative_description(changes: StagedChanges) -> str:
    if changes.added:
        return f"implement {base_name(changes.added[0])}"
    return f"update {base_name(_first(changes.changed))}"


def suggest(
    changes: StagedChanges,
    analysis: DiffAnalysis | None = None,
) -> tuple[CommitSuggestion, CommitSuggestion]:
    """Primary and alternative commit message suggestions.

    Args:
        changes: Staged changes of the base repository
        analysis: Precomputed analysis of changes.diff (computed when None)

    Returns:
        (primary, alternative), both sharing the same type and scope
    """
    if analysis is None:
        analysis = analyze_diff(changes.diff)
    commit_type, description = classify(changes, analysis)
    scope = infer_scope(changes)
    return (
        CommitSuggestion(type=commit_type, scope=scope, description=description),
        CommitSuggestion(
            type=commit_type, scope=scope, description=alternative_description(changes)
        ),
    )


def detected_change_labels(analysis: DiffAnalysis) -> list[str]:
    """Human-readable names of the signals found in the diff."""
    labels = [
        (analysis.has_function_additions, "new functions"),
        (analysis.has_function_modifications, "modified functions"),
        (analysis.has_imports, "imports"),
        (analysis.has_error_handling, "error handling"),
        (analysis.has_logging, "logging"),
        (analysis.has_tests, "tests"),
        (analysis.has_styling, "styling"),
        (analysis.has_database, "database"),
        (analysis.has_api_endpoints, "API endpoints"),
        (analysis.has_ui_components, "UI components"),
    ]
    return [label for present, label in labels if present]
