"""Validation of user-supplied names and messages.

All checks run before any git command is issued.
"""

import re

from subflow.core.errors import ValidationError

MIN_COMMIT_MESSAGE_LENGTH = 3

_FORBIDDEN_REF_CHARS = frozenset("~^:?*[\\")
_WHITESPACE = re.compile(r"\s")


def _validate_ref_name(name: str, kind: str) -> str:
    if not name:
        raise ValidationError(f"{kind} name cannot be empty")
    if _WHITESPACE.search(name):
        raise ValidationError(f"{kind} name '{name}' must not contain whitespace")

    bad = sorted({ch for ch in name if ch in _FORBIDDEN_REF_CHARS})
    if bad:
        raise ValidationError(f"{kind} name '{name}' contains invalid characters: {' '.join(bad)}")
    if any(ord(ch) < 32 or ord(ch) == 127 for ch in name):
        raise ValidationError(f"{kind} name '{name}' contains control characters")

    if ".." in name:
        raise ValidationError(f"{kind} name '{name}' must not contain '..'")
    if "@{" in name or name == "@":
        raise ValidationError(f"{kind} name '{name}' must not contain '@{{' or be '@'")
    if name.startswith("-"):
        raise ValidationError(f"{kind} name '{name}' must not start with '-'")
    if name.startswith("/") or name.endswith("/") or "//" in name:
        raise ValidationError(f"{kind} name '{name}' has an empty path component")
    if name.endswith(".") or name.endswith(".lock"):
        raise ValidationError(f"{kind} name '{name}' must not end with '.' or '.lock'")
    if any(part.startswith(".") for part in name.split("/")):
        raise ValidationError(f"{kind} name '{name}' has a component starting with '.'")
    return name


def validate_branch_name(name: str) -> str:
    """Validate a branch name following git-check-ref-format rules.

    Raises:
        ValidationError: If the name is empty, contains whitespace, or contains
            characters or sequences git does not allow in refs
    """
    return _validate_ref_name(name, "Branch")


def validate_tag_name(name: str) -> str:
    """Validate a tag name (same rules as branch names)."""
    return _validate_ref_name(name, "Tag")


def validate_commit_message(message: str) -> str:
    """Return the stripped commit message.

    Raises:
        ValidationError: If the message is shorter than three characters
    """
    stripped = message.strip()
    if not stripped:
        raise ValidationError("Commit message is required")
    if len(stripped) < MIN_COMMIT_MESSAGE_LENGTH:
        raise ValidationError(
            f"Commit message must be at least {MIN_COMMIT_MESSAGE_LENGTH} characters long"
        )
    return stripped
