"""Shared pytest fixtures for subflow tests.

The real-git fixtures build throwaway repositories under tmp_path: a base
repository with one submodule, each with a bare "origin" next to it.
"""

import subprocess
from dataclasses import dataclass
from pathlib import Path

import pytest


def run_git(cwd: Path, *args: str) -> str:
    """Run a git command for test setup and return its stdout."""
    result = subprocess.run(
        ["git", *args],
        cwd=cwd,
        check=True,
        capture_output=True,
        text=True,
    )
    return result.stdout


@pytest.fixture
def git_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    """Isolate git from the user's configuration.

    Allows file:// submodule clones, which recent git refuses by default.
    """
    monkeypatch.setenv("HOME", str(tmp_path / "home"))
    monkeypatch.setenv("GIT_CONFIG_NOSYSTEM", "1")
    monkeypatch.setenv("GIT_AUTHOR_NAME", "Test User")
    monkeypatch.setenv("GIT_AUTHOR_EMAIL", "test@example.com")
    monkeypatch.setenv("GIT_COMMITTER_NAME", "Test User")
    monkeypatch.setenv("GIT_COMMITTER_EMAIL", "test@example.com")
    monkeypatch.setenv("GIT_CONFIG_COUNT", "1")
    monkeypatch.setenv("GIT_CONFIG_KEY_0", "protocol.file.allow")
    monkeypatch.setenv("GIT_CONFIG_VALUE_0", "always")
    (tmp_path / "home").mkdir()


def _init_with_origin(tmp_path: Path, name: str) -> Path:
    remote = tmp_path / f"{name}-origin.git"
    run_git(tmp_path, "init", "--bare", "-b", "main", str(remote))

    repo = tmp_path / name
    run_git(tmp_path, "init", "-b", "main", str(repo))
    (repo / "README.md").write_text(f"# {name}\n", encoding="utf-8")
    run_git(repo, "add", "README.md")
    run_git(repo, "commit", "-m", "Initial commit")
    run_git(repo, "remote", "add", "origin", str(remote))
    run_git(repo, "push", "-u", "origin", "main")
    return repo


@dataclass(frozen=True)
class SuperRepo:
    """A base repository with one submodule checked out at `submodule_path`."""

    root: Path
    submodule_path: str
    submodule_origin: Path

    @property
    def submodule_dir(self) -> Path:
        return self.root / self.submodule_path


@pytest.fixture
def git_repo(git_env: None, tmp_path: Path) -> Path:
    """A repository with one commit on main, tracking a bare origin."""
    return _init_with_origin(tmp_path, "solo")


@pytest.fixture
def super_repo(git_env: None, tmp_path: Path) -> SuperRepo:
    """A base repository on main with submodule `libs/core` on main.

    Both repositories track their own bare origin.
    """
    library = _init_with_origin(tmp_path, "core")
    base = _init_with_origin(tmp_path, "base")

    library_origin = tmp_path / "core-origin.git"
    run_git(base, "submodule", "add", str(library_origin), "libs/core")
    run_git(base, "commit", "-m", "Add core submodule")
    run_git(base, "push")

    submodule_dir = base / "libs" / "core"
    run_git(submodule_dir, "checkout", "main")

    assert library.is_dir()
    return SuperRepo(root=base, submodule_path="libs/core", submodule_origin=library_origin)
