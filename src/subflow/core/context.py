"""Application context with dependency injection."""

from dataclasses import dataclass, replace
from pathlib import Path

import click

from subflow.cli.output import user_output
from subflow.core.config_store import (
    ConfigStore,
    GlobalConfig,
    RealConfigStore,
    apply_env_overrides,
)
from subflow.core.git.abc import Git
from subflow.core.git.dry_run import DryRunGit
from subflow.core.git.real import RealGit
from subflow.core.prompter import ClickPrompter, Prompter
from subflow.core.user_feedback import InteractiveFeedback, QuietFeedback, UserFeedback


@dataclass(frozen=True)
class SubflowContext:
    """Immutable context holding all dependencies for subflow operations.

    Created at CLI entry point and threaded through the application.
    Frozen to prevent accidental modification at runtime.

    repo_root is None when the command was started outside a git repository;
    commands that operate on repositories reject that case up front.
    """

    git: Git
    prompter: Prompter
    feedback: UserFeedback
    config_store: ConfigStore
    config: GlobalConfig
    cwd: Path  # Current working directory at CLI invocation
    repo_root: Path | None
    dry_run: bool

    @property
    def verbose(self) -> bool:
        return self.config.verbose

    @staticmethod
    def for_test(
        git: Git | None = None,
        prompter: Prompter | None = None,
        feedback: UserFeedback | None = None,
        config_store: ConfigStore | None = None,
        config: GlobalConfig | None = None,
        cwd: Path | None = None,
        repo_root: Path | None = None,
        dry_run: bool = False,
    ) -> "SubflowContext":
        """Create test context with optional pre-configured collaborators.

        Args:
            git: Optional Git implementation. If None, creates empty FakeGit.
            prompter: Optional Prompter. If None, creates FakePrompter with no answers.
            feedback: Optional UserFeedback. If None, creates FakeUserFeedback.
            config_store: Optional ConfigStore. If None, creates InMemoryConfigStore
                holding `config`.
            config: Optional GlobalConfig. If None, uses defaults.
            cwd: Optional current working directory. If None, uses repo_root or
                Path("/test/repo").
            repo_root: Optional base repository root. If None, uses cwd.
            dry_run: Whether to wrap git in DryRunGit (default False).

        Example:
            >>> git = FakeGit(current_branches={Path("/repo"): "main"})
            >>> ctx = SubflowContext.for_test(git=git, repo_root=Path("/repo"))
        """
        from tests.fakes.git import FakeGit
        from tests.fakes.prompter import FakePrompter
        from tests.fakes.user_feedback import FakeUserFeedback

        from subflow.core.config_store import InMemoryConfigStore

        if git is None:
            git = FakeGit()

        if prompter is None:
            prompter = FakePrompter()

        if feedback is None:
            feedback = FakeUserFeedback()

        if config is None:
            config = GlobalConfig()

        if config_store is None:
            config_store = InMemoryConfigStore(config=config)

        if cwd is None:
            cwd = repo_root if repo_root is not None else Path("/test/repo")

        if repo_root is None:
            repo_root = cwd

        if dry_run:
            git = DryRunGit(git, repo_root)

        return SubflowContext(
            git=git,
            prompter=prompter,
            feedback=feedback,
            config_store=config_store,
            config=replace(config, dry_run=dry_run),
            cwd=cwd,
            repo_root=repo_root,
            dry_run=dry_run,
        )


def safe_cwd() -> tuple[Path | None, str | None]:
    """Get current working directory, detecting if it no longer exists.

    Returns:
        (path, None) on success, (None, error_message) if the directory was deleted
    """
    try:
        return (Path.cwd(), None)
    except (FileNotFoundError, OSError):
        return (None, "Current working directory no longer exists")


def create_context(*, dry_run: bool | None = None, verbose: bool | None = None) -> SubflowContext:
    """Create production context with real implementations.

    Called at CLI entry point to create the context for the entire command
    execution. Settings resolve as: CLI flag > environment > config file > default.

    Args:
        dry_run: --dry-run flag value, or None when not given
        verbose: --verbose/--quiet flag value, or None when not given

    Returns:
        SubflowContext with real implementations, with git wrapped in DryRunGit
        when dry-run is in effect
    """
    # 1. Capture cwd (no deps)
    cwd, error_msg = safe_cwd()
    if cwd is None:
        user_output(click.style("Error: ", fg="red") + str(error_msg))
        user_output("\nThe directory you're running from has been deleted.")
        user_output("Please change to a valid directory and try again.")
        raise SystemExit(1)

    # 2. Load config file, then environment, then flags
    config_store = RealConfigStore()
    try:
        config = apply_env_overrides(config_store.load())
    except ValueError as e:
        user_output(click.style("Error: ", fg="red") + str(e))
        raise SystemExit(1) from e

    if dry_run is not None:
        config = replace(config, dry_run=dry_run)
    if verbose is not None:
        config = replace(config, verbose=verbose)

    # 3. Discover base repository
    git: Git = RealGit()
    repo_root = git.get_repository_root(cwd)

    # 4. Choose feedback implementation based on verbosity
    feedback: UserFeedback
    if config.verbose:
        feedback = InteractiveFeedback()
    else:
        feedback = QuietFeedback()

    # 5. Apply dry-run wrapper if needed
    if config.dry_run:
        git = DryRunGit(git, repo_root)

    return SubflowContext(
        git=git,
        prompter=ClickPrompter(),
        feedback=feedback,
        config_store=config_store,
        config=config,
        cwd=cwd,
        repo_root=repo_root,
        dry_run=config.dry_run,
    )
