"""Parsing helpers for line-oriented git output."""

from subflow.core.git.abc import StashEntry


def parse_submodule_status(output: str) -> list[str]:
    """Extract submodule paths from `git submodule status --recursive` output.

    Each line looks like `[ +-U]<sha> <path>[ (<describe>)]`; the first
    character is a state flag that may be a space.

    >>> parse_submodule_status(" 1a2b3c frontend/ee (heads/main)\\n-4d5e6f server/ee\\n")
    ['frontend/ee', 'server/ee']
    """
    paths: list[str] = []
    for line in output.splitlines():
        if not line.strip():
            continue
        fields = line[1:].split()
        if len(fields) < 2:
            continue
        paths.append(fields[1])
    return paths


def parse_stash_list(output: str) -> list[StashEntry]:
    """Parse `git stash list` output into entries, most recent first.

    >>> parse_stash_list("stash@{0}: On main: stash-for-main\\n")
    [StashEntry(ref='stash@{0}', message='On main: stash-for-main')]
    """
    entries: list[StashEntry] = []
    for line in output.splitlines():
        ref, sep, message = line.partition(": ")
        if not sep:
            continue
        entries.append(StashEntry(ref=ref.strip(), message=message.strip()))
    return entries


def parse_ls_tree_sha(output: str) -> str | None:
    """Get the object id (third field) from a single `git ls-tree` line."""
    line = output.strip()
    if not line:
        return None
    # <mode> SP <type> SP <object> TAB <path>
    fields = line.split(maxsplit=3)
    if len(fields) < 3:
        return None
    return fields[2]


def parse_left_right_count(output: str) -> tuple[int, int] | None:
    """Parse `git rev-list --count --left-right A...B` into (left, right)."""
    fields = output.split()
    if len(fields) != 2 or not all(field.isdigit() for field in fields):
        return None
    return int(fields[0]), int(fields[1])
