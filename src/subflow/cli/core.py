"""Shared helpers for CLI commands."""

from pathlib import Path

from subflow.cli.ensure import Ensure
from subflow.core.context import SubflowContext
from subflow.core.operations import MultiRepoDriver


def discover_repo_root(ctx: SubflowContext) -> Path:
    """Base repository root for the invocation, exiting when there is none."""
    return Ensure.in_repository(ctx)


def create_driver(ctx: SubflowContext) -> MultiRepoDriver:
    return MultiRepoDriver(ctx, discover_repo_root(ctx))
