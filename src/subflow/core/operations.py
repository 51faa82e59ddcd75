"""Multi-repository operation driver.

Applies one logical git operation to the base repository and a chosen set of
submodules, one repository at a time, and aggregates per-repository outcomes
into a MultiRepoResult. A failing git command is recorded as a FAILED outcome
for that repository; it does not unwind the other repositories and nothing
that succeeded is rolled back.
"""

from collections.abc import Callable, Sequence
from pathlib import Path

from subflow.core.context import SubflowContext
from subflow.core.errors import GitCommandError, PreconditionError, ValidationError
from subflow.core.repos import (
    BASE_REPO,
    MultiRepoResult,
    OutcomeStatus,
    RepoOutcome,
    RepoRef,
    enumerate_submodules,
)
from subflow.core.stash import StashCoordinator
from subflow.core.validation import (
    validate_branch_name,
    validate_commit_message,
    validate_tag_name,
)

DEFAULT_REMOTE = "origin"
BRANCH_PREFIXES = ("feature", "hotfix", "release", "revamp", "sprint")


def _describe_failure(error: GitCommandError) -> str:
    command = " ".join(error.cmd)
    detail = error.stderr.strip().splitlines()[-1] if error.stderr.strip() else ""
    if detail:
        return f"{command} exited with {error.returncode}: {detail}"
    return f"{command} exited with {error.returncode}"


def prefixed_branch_name(prefix: str, name: str) -> str:
    """Join a branch prefix (feature, hotfix, ...) and a name.

    >>> prefixed_branch_name("feature", "login")
    'feature/login'
    """
    prefix = prefix.strip().strip("/")
    name = name.strip()
    if not prefix:
        raise ValidationError("Branch prefix is required")
    if not name:
        raise ValidationError(f"Name required for {prefix} branch")
    return f"{prefix}/{name}"


class MultiRepoDriver:
    """Runs multi-repository git operations for one base repository.

    Targets are processed sequentially in the order given; callers put the
    base repository first. Every git call carries the target's working
    directory, the process working directory is never changed.
    """

    def __init__(self, ctx: SubflowContext, repo_root: Path) -> None:
        self._ctx = ctx
        self._repo_root = repo_root
        self._stasher = StashCoordinator(ctx, repo_root)

    @property
    def repo_root(self) -> Path:
        return self._repo_root

    def submodules(self) -> list[RepoRef]:
        """Live submodule list of the base repository."""
        return enumerate_submodules(self._ctx, self._repo_root)

    def all_repos(self) -> list[RepoRef]:
        """Base repository followed by every submodule."""
        return [BASE_REPO, *self.submodules()]

    # ------------------------------------------------------------------
    # Step helpers
    # ------------------------------------------------------------------

    def _cwd(self, repo: RepoRef) -> Path:
        return repo.resolve(self._repo_root)

    def _check_repo(self, repo: RepoRef, step: str) -> RepoOutcome | None:
        """FAILED outcome when `repo` is not a git repository, else None."""
        if self._ctx.git.is_git_repository(self._cwd(repo)):
            return None
        self._ctx.feedback.error(f"{repo.name} is not a git repository")
        return RepoOutcome.failed(repo, f"{repo.name} is not a git repository", step=step)

    def _run_step(
        self,
        repo: RepoRef,
        step: str,
        action: Callable[[Path], None],
        success_message: str,
    ) -> RepoOutcome:
        """Run one git action in `repo` and turn its exit status into an outcome."""
        not_repo = self._check_repo(repo, step)
        if not_repo is not None:
            return not_repo

        try:
            action(self._cwd(repo))
        except GitCommandError as e:
            self._ctx.feedback.error(f"Failed to {step} in {repo.name}")
            return RepoOutcome.failed(repo, _describe_failure(e), step=step)
        return RepoOutcome.success(repo, success_message, step=step)

    # ------------------------------------------------------------------
    # checkout
    # ------------------------------------------------------------------

    def checkout(
        self,
        branch: str,
        targets: Sequence[RepoRef],
        *,
        pull: bool = True,
    ) -> MultiRepoResult:
        """Switch every target to `branch`, then pull.

        A failed checkout skips the pull for that target; a failed pull marks
        the target FAILED.
        """
        validate_branch_name(branch)
        git = self._ctx.git
        outcomes: list[RepoOutcome] = []

        for repo in targets:
            self._ctx.feedback.info(f"Checking out '{branch}' in {repo.name}...")
            checkout = self._run_step(
                repo,
                "checkout",
                lambda cwd: git.checkout_branch(cwd, branch),
                f"Switched to '{branch}'",
            )
            outcomes.append(checkout)
            if checkout.status is not OutcomeStatus.SUCCESS or not pull:
                continue
            outcomes.append(
                self._run_step(repo, "pull", lambda cwd: git.pull(cwd), "Pulled latest changes")
            )

        return MultiRepoResult.of(outcomes)

    def checkout_with_stash(self, branch: str) -> MultiRepoResult:
        """Switch base and all submodules to `branch`, parking uncommitted work.

        1. Stash base then every submodule as `stash-for-<current branch>`
        2. `checkout --recurse-submodules <branch>` in base
        3. `checkout <branch>` in every submodule not already on it
        4. Restore `stash-for-<branch>` everywhere the switch succeeded; a
           target whose switch failed is still on the original branch and is
           restored with `stash-for-<current branch>`

        Raises:
            PreconditionError: If the base repository HEAD is detached
        """
        validate_branch_name(branch)
        git = self._ctx.git

        current = git.get_current_branch(self._repo_root)
        if current is None:
            raise PreconditionError(
                "Base repository is in detached HEAD state; cannot tag stashes by branch"
            )

        repos = self.all_repos()
        outcomes: list[RepoOutcome] = []

        self._ctx.feedback.info("Handling stashes before switching...")
        stashed: list[RepoRef] = []
        for repo in repos:
            outcome = self._stasher.stash(repo, current)
            outcomes.append(outcome)
            if outcome.status is OutcomeStatus.SUCCESS:
                stashed.append(repo)

        self._ctx.feedback.info(f"Checking out '{branch}' in base repository and submodules...")
        switched: list[RepoRef] = []
        for repo in repos:
            if repo.is_base:
                outcome = self._run_step(
                    repo,
                    "checkout",
                    lambda cwd: git.checkout_branch(cwd, branch, recurse_submodules=True),
                    f"Switched to '{branch}'",
                )
            elif git.get_current_branch(self._cwd(repo)) == branch:
                outcome = RepoOutcome.success(repo, f"Already on '{branch}'", step="checkout")
            else:
                outcome = self._run_step(
                    repo,
                    "checkout",
                    lambda cwd: git.checkout_branch(cwd, branch),
                    f"Switched to '{branch}'",
                )
            outcomes.append(outcome)
            if outcome.status is OutcomeStatus.SUCCESS:
                switched.append(repo)

        self._ctx.feedback.info("Applying stashes for base repository and submodules...")
        for repo in repos:
            if repo in switched:
                outcomes.append(self._stasher.restore(repo, branch))
            elif repo in stashed:
                self._ctx.feedback.warning(
                    f"Switch failed in {repo.name}; restoring its changes on '{current}'"
                )
                outcomes.append(self._stasher.restore(repo, current))

        return MultiRepoResult.of(outcomes)

    # ------------------------------------------------------------------
    # pull / push / add
    # ------------------------------------------------------------------

    def pull(self, targets: Sequence[RepoRef]) -> MultiRepoResult:
        """Fetch and pull every target.

        The base repository needs an upstream branch; without one the pull is
        not attempted and the remediation command is shown. Submodules are
        pulled from `origin/<their branch>`; detached submodules and branches
        missing on origin are skipped.
        """
        outcomes: list[RepoOutcome] = []
        for repo in targets:
            if repo.is_base:
                outcomes.extend(self._pull_base(repo))
            else:
                outcomes.append(self._pull_submodule(repo))
        return MultiRepoResult.of(outcomes)

    def _pull_base(self, repo: RepoRef) -> list[RepoOutcome]:
        git = self._ctx.git
        self._ctx.feedback.info("Fetching and pulling base repository...")
        fetch = self._run_step(repo, "fetch", git.fetch_all, "Fetched all remotes")
        if fetch.status is OutcomeStatus.FAILED:
            return [fetch]

        cwd = self._cwd(repo)
        branch = git.get_current_branch(cwd)
        upstream = git.get_upstream_branch(cwd)
        if upstream is None:
            shown = branch if branch is not None else "HEAD"
            self._ctx.feedback.warning(
                f"No upstream tracking branch set for '{shown}'.\n"
                f"To fix: git branch --set-upstream-to={DEFAULT_REMOTE}/{shown} {shown}"
            )
            return [
                fetch,
                RepoOutcome.failed(repo, f"No upstream tracking branch for '{shown}'", step="pull"),
            ]

        self._ctx.feedback.info(f"Pulling latest changes from {upstream}...")
        pull = self._run_step(repo, "pull", lambda c: git.pull(c), f"Pulled from {upstream}")
        return [fetch, pull]

    def _pull_submodule(self, repo: RepoRef) -> RepoOutcome:
        git = self._ctx.git
        not_repo = self._check_repo(repo, "pull")
        if not_repo is not None:
            return not_repo

        cwd = self._cwd(repo)
        branch = git.get_current_branch(cwd)
        if branch is None:
            self._ctx.feedback.warning(f"Submodule {repo.name} is in detached HEAD. Skipping...")
            return RepoOutcome.skipped(repo, "Detached HEAD", step="pull")

        self._ctx.feedback.info(f"Fetching and pulling branch {branch} in {repo.name}...")
        try:
            git.fetch(cwd, DEFAULT_REMOTE, branch)
        except GitCommandError:
            self._ctx.feedback.warning(f"Could not fetch {branch} in {repo.name}")

        if not git.remote_branch_exists(cwd, DEFAULT_REMOTE, branch):
            self._ctx.feedback.warning(
                f"Remote branch {branch} not found in {repo.name}. Skipping pull."
            )
            return RepoOutcome.skipped(repo, f"No remote branch '{branch}'", step="pull")

        return self._run_step(
            repo,
            "pull",
            lambda c: git.pull(c, DEFAULT_REMOTE, branch),
            f"Pulled {DEFAULT_REMOTE}/{branch}",
        )

    def push(self, targets: Sequence[RepoRef]) -> MultiRepoResult:
        """Push every target, setting `origin/<branch>` as upstream where none is set.

        A failing base push aborts the submodule pushes.
        """
        outcomes: list[RepoOutcome] = []
        for repo in targets:
            outcome = self._push_one(repo)
            outcomes.append(outcome)
            if repo.is_base and outcome.status is OutcomeStatus.FAILED:
                self._ctx.feedback.error("Base repository push failed; submodules not pushed")
                break
        return MultiRepoResult.of(outcomes)

    def _push_one(self, repo: RepoRef) -> RepoOutcome:
        git = self._ctx.git
        not_repo = self._check_repo(repo, "push")
        if not_repo is not None:
            return not_repo

        cwd = self._cwd(repo)
        branch = git.get_current_branch(cwd)
        if branch is None:
            if repo.is_base:
                return RepoOutcome.failed(repo, "Detached HEAD; nothing to push", step="push")
            self._ctx.feedback.warning(f"Submodule {repo.name} is in detached HEAD. Skipping...")
            return RepoOutcome.skipped(repo, "Detached HEAD", step="push")

        if git.get_upstream_branch(cwd) is None:
            self._ctx.feedback.warning(
                f"No upstream for '{branch}' in {repo.name}. "
                f"Setting upstream to {DEFAULT_REMOTE}/{branch}..."
            )
            return self._run_step(
                repo,
                "push",
                lambda c: git.push(c, DEFAULT_REMOTE, branch, set_upstream=True),
                f"Pushed '{branch}' and set upstream to {DEFAULT_REMOTE}/{branch}",
            )

        self._ctx.feedback.info(f"Pushing {branch} in {repo.name}...")
        return self._run_step(repo, "push", lambda c: git.push(c), f"Pushed '{branch}'")

    def add(self, targets: Sequence[RepoRef]) -> MultiRepoResult:
        """Stage all changes (`add -A`) in every target."""
        git = self._ctx.git
        outcomes = []
        for repo in targets:
            self._ctx.feedback.info(f"Staging changes in {repo.name}...")
            outcomes.append(self._run_step(repo, "add", git.add_all, "Staged all changes"))
        return MultiRepoResult.of(outcomes)

    # ------------------------------------------------------------------
    # commit / tag / branch
    # ------------------------------------------------------------------

    def commit(self, message: str, targets: Sequence[RepoRef]) -> MultiRepoResult:
        """Commit staged changes in every target with the same message.

        The base repository is committed first; if that fails no submodule
        commit is attempted. Submodules without staged changes are SKIPPED.

        Raises:
            ValidationError: If the message is shorter than three characters
        """
        message = validate_commit_message(message)
        git = self._ctx.git
        outcomes: list[RepoOutcome] = []

        for repo in targets:
            if not repo.is_base:
                not_repo = self._check_repo(repo, "commit")
                if not_repo is not None:
                    outcomes.append(not_repo)
                    continue
                if not git.has_staged_changes(self._cwd(repo)):
                    self._ctx.feedback.info(f"Nothing to commit in {repo.name}")
                    outcomes.append(RepoOutcome.skipped(repo, "Nothing to commit", step="commit"))
                    continue

            self._ctx.feedback.info(f"Committing changes in {repo.name}...")
            outcome = self._run_step(
                repo,
                "commit",
                lambda cwd: git.commit(cwd, message),
                "Committed changes",
            )
            outcomes.append(outcome)
            if repo.is_base and outcome.status is OutcomeStatus.FAILED:
                self._ctx.feedback.error("Base repository commit failed; submodules not committed")
                break

        return MultiRepoResult.of(outcomes)

    def tag(self, name: str, targets: Sequence[RepoRef]) -> MultiRepoResult:
        """Create a lightweight tag and push it to origin in every target.

        A failure in the base repository aborts the submodules.

        Raises:
            ValidationError: If the tag name is invalid
        """
        validate_tag_name(name)
        git = self._ctx.git
        outcomes: list[RepoOutcome] = []

        for repo in targets:
            self._ctx.feedback.info(f"Creating and pushing tag '{name}' in {repo.name}...")

            def create_and_push(cwd: Path) -> None:
                git.create_tag(cwd, name)
                git.push(cwd, DEFAULT_REMOTE, name)

            outcome = self._run_step(
                repo, "tag", create_and_push, f"Created and pushed tag '{name}'"
            )
            outcomes.append(outcome)
            if repo.is_base and outcome.status is OutcomeStatus.FAILED:
                self._ctx.feedback.error("Base repository tag failed; submodules not tagged")
                break

        return MultiRepoResult.of(outcomes)

    def create_branch(
        self,
        name: str,
        targets: Sequence[RepoRef],
        *,
        push_base: bool = False,
        push_submodules: bool = False,
    ) -> MultiRepoResult:
        """Create and checkout branch `name` in every target.

        Args:
            name: New branch name
            targets: Repositories to create the branch in
            push_base: Also `push -u origin <name>` in the base repository
            push_submodules: Also `push -u origin <name>` in each submodule

        A failure in the base repository aborts the remaining targets.

        Raises:
            ValidationError: If the branch name is invalid
            PreconditionError: If the base repository is a target and the
                branch already exists there; no git command has run yet
        """
        validate_branch_name(name)
        git = self._ctx.git

        if any(repo.is_base for repo in targets) and git.branch_exists_locally(
            self._repo_root, name
        ):
            raise PreconditionError(f"Branch '{name}' already exists in the base repository")

        outcomes: list[RepoOutcome] = []
        for repo in targets:
            if not repo.is_base and git.is_git_repository(self._cwd(repo)):
                if git.branch_exists_locally(self._cwd(repo), name):
                    self._ctx.feedback.error(f"Branch '{name}' already exists in {repo.name}")
                    outcomes.append(
                        RepoOutcome.failed(repo, f"Branch '{name}' already exists", step="branch")
                    )
                    continue

            should_push = push_base if repo.is_base else push_submodules
            self._ctx.feedback.info(f"Creating branch '{name}' in {repo.name}...")

            def create(cwd: Path, should_push: bool = should_push) -> None:
                git.create_branch(cwd, name)
                if should_push:
                    git.push(cwd, DEFAULT_REMOTE, name, set_upstream=True)

            outcome = self._run_step(repo, "branch", create, f"Created branch '{name}'")
            outcomes.append(outcome)
            if repo.is_base and outcome.status is OutcomeStatus.FAILED:
                self._ctx.feedback.error("Base repository branch creation failed; aborting")
                break

        return MultiRepoResult.of(outcomes)

    # ------------------------------------------------------------------
    # merge
    # ------------------------------------------------------------------

    def merge(
        self,
        base_branch: str,
        targets: Sequence[RepoRef],
        *,
        stash: bool = False,
    ) -> MultiRepoResult:
        """Merge `origin/<base_branch>` into the current branch of every target.

        `fetch origin <base_branch>` runs in the base repository first, and in
        each submodule before its merge. With `stash`, every target is stashed
        as `stash-for-<current branch>` beforehand, and every target that was
        stashed gets a restore attempt afterwards whether or not its merge
        succeeded.

        Raises:
            ValidationError: If `base_branch` is invalid or is the current branch
            PreconditionError: If stashing is requested on a detached HEAD
        """
        validate_branch_name(base_branch)
        git = self._ctx.git

        current = git.get_current_branch(self._repo_root)
        if current == base_branch:
            raise ValidationError(f"Cannot merge '{base_branch}' into itself")
        stash_branch: str | None = None
        if stash:
            if current is None:
                raise PreconditionError(
                    "Base repository is in detached HEAD state; cannot tag stashes by branch"
                )
            stash_branch = current

        outcomes: list[RepoOutcome] = []
        remote_ref = f"{DEFAULT_REMOTE}/{base_branch}"

        base_fetch = self._run_step(
            BASE_REPO,
            "fetch",
            lambda cwd: git.fetch(cwd, DEFAULT_REMOTE, base_branch),
            f"Fetched {remote_ref}",
        )
        if base_fetch.status is OutcomeStatus.FAILED or any(repo.is_base for repo in targets):
            outcomes.append(base_fetch)

        stashed: list[RepoRef] = []
        if stash_branch is not None:
            self._ctx.feedback.info("Stashing changes before merge...")
            for repo in targets:
                outcome = self._stasher.stash(repo, stash_branch)
                outcomes.append(outcome)
                if outcome.status is OutcomeStatus.SUCCESS:
                    stashed.append(repo)

        def merge_remote(cwd: Path) -> None:
            git.merge(cwd, remote_ref)

        def fetch_and_merge_remote(cwd: Path) -> None:
            git.fetch(cwd, DEFAULT_REMOTE, base_branch)
            git.merge(cwd, remote_ref)

        for repo in targets:
            self._ctx.feedback.info(f"Merging {remote_ref} into {repo.name}...")
            if repo.is_base and base_fetch.status is OutcomeStatus.FAILED:
                outcomes.append(
                    RepoOutcome.failed(repo, f"Could not fetch {remote_ref}", step="merge")
                )
                continue
            action = merge_remote if repo.is_base else fetch_and_merge_remote
            outcomes.append(self._run_step(repo, "merge", action, f"Merged {remote_ref}"))

        if stash_branch is not None:
            self._ctx.feedback.info("Applying stashes after merge...")
            for repo in stashed:
                outcomes.append(self._stasher.restore(repo, stash_branch))

        return MultiRepoResult.of(outcomes)

    # ------------------------------------------------------------------
    # status
    # ------------------------------------------------------------------

    def status(self, targets: Sequence[RepoRef]) -> MultiRepoResult:
        """Collect `status --short --branch` of every target.

        Successful outcomes carry the status text as their message.
        """
        git = self._ctx.git
        outcomes: list[RepoOutcome] = []
        for repo in targets:
            not_repo = self._check_repo(repo, "status")
            if not_repo is not None:
                outcomes.append(not_repo)
                continue
            try:
                text = git.get_status_short(self._cwd(repo))
            except GitCommandError as e:
                outcomes.append(RepoOutcome.failed(repo, _describe_failure(e), step="status"))
                continue
            outcomes.append(RepoOutcome.success(repo, text.rstrip("\n"), step="status"))
        return MultiRepoResult.of(outcomes)
