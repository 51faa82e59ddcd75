"""Global configuration data structures and loading.

Provides immutable global config data loaded from ~/.subflow/config.toml,
with environment variable overrides applied on top.
"""

import os
import re
import tomllib
from abc import ABC, abstractmethod
from collections.abc import Mapping
from dataclasses import dataclass, replace
from pathlib import Path

import tomlkit

ENV_VERBOSE = "SUBFLOW_VERBOSE"
ENV_DRY_RUN = "SUBFLOW_DRY_RUN"
ENV_DEFAULT_SUBMODULES = "SUBFLOW_DEFAULT_SUBMODULES"

_TRUTHY = frozenset({"1", "true", "yes", "on"})
_FALSY = frozenset({"0", "false", "no", "off"})


@dataclass(frozen=True)
class GlobalConfig:
    """Immutable global configuration data.

    Loaded once at CLI entry point and stored in SubflowContext.

    Attributes:
        verbose: Show informational progress messages
        dry_run: Print mutating git commands instead of running them
        default_submodules: Submodule paths used when live enumeration fails
    """

    verbose: bool = True
    dry_run: bool = False
    default_submodules: tuple[str, ...] = ()


class ConfigStore(ABC):
    """Abstract interface for global config persistence.

    Provides dependency injection for config access, enabling in-memory
    implementations for tests without touching the filesystem.
    """

    @abstractmethod
    def exists(self) -> bool:
        """Check if global config exists."""
        ...

    @abstractmethod
    def load(self) -> GlobalConfig:
        """Load global config, returning defaults when none is stored.

        Raises:
            ValueError: If the stored config is malformed
        """
        ...

    @abstractmethod
    def save(self, config: GlobalConfig) -> None:
        """Persist global config."""
        ...

    @abstractmethod
    def path(self) -> Path:
        """Get the path to the global config file (for messages)."""
        ...


class RealConfigStore(ConfigStore):
    """Production implementation that reads/writes ~/.subflow/config.toml."""

    def __init__(self, config_path: Path | None = None) -> None:
        self._config_path = config_path

    def exists(self) -> bool:
        return self.path().exists()

    def load(self) -> GlobalConfig:
        config_path = self.path()
        if not config_path.exists():
            return GlobalConfig()

        try:
            data = tomllib.loads(config_path.read_text(encoding="utf-8"))
        except tomllib.TOMLDecodeError as e:
            raise ValueError(f"Invalid TOML in {config_path}: {e}") from e

        submodules = data.get("default_submodules", [])
        if not isinstance(submodules, list) or not all(isinstance(s, str) for s in submodules):
            raise ValueError(f"'default_submodules' in {config_path} must be a list of strings")

        return GlobalConfig(
            verbose=bool(data.get("verbose", True)),
            dry_run=bool(data.get("dry_run", False)),
            default_submodules=tuple(submodules),
        )

    def save(self, config: GlobalConfig) -> None:
        """Save global config, keeping comments and unknown keys of an existing file."""
        config_path = self.path()
        config_path.parent.mkdir(parents=True, exist_ok=True)

        if config_path.exists():
            doc = tomlkit.parse(config_path.read_text(encoding="utf-8"))
        else:
            doc = tomlkit.document()
            doc.add(tomlkit.comment("Global subflow configuration"))

        doc["verbose"] = config.verbose
        doc["dry_run"] = config.dry_run
        doc["default_submodules"] = list(config.default_submodules)

        config_path.write_text(tomlkit.dumps(doc), encoding="utf-8")

    def path(self) -> Path:
        if self._config_path is not None:
            return self._config_path
        return Path.home() / ".subflow" / "config.toml"


class InMemoryConfigStore(ConfigStore):
    """Test implementation that stores config in memory without touching filesystem."""

    def __init__(self, config: GlobalConfig | None = None) -> None:
        """Initialize in-memory config store.

        Args:
            config: Initial config state (None = config doesn't exist)
        """
        self._config = config

    def exists(self) -> bool:
        return self._config is not None

    def load(self) -> GlobalConfig:
        if self._config is None:
            return GlobalConfig()
        return self._config

    def save(self, config: GlobalConfig) -> None:
        self._config = config

    def path(self) -> Path:
        return Path("/fake/subflow/config.toml")


def _parse_bool(name: str, value: str) -> bool:
    normalized = value.strip().lower()
    if normalized in _TRUTHY:
        return True
    if normalized in _FALSY:
        return False
    raise ValueError(f"{name} must be one of true/false/1/0/yes/no, got '{value}'")


def apply_env_overrides(
    config: GlobalConfig, environ: Mapping[str, str] | None = None
) -> GlobalConfig:
    """Return config with SUBFLOW_* environment variables applied.

    Args:
        config: Config loaded from the store
        environ: Environment to read (defaults to os.environ)

    Raises:
        ValueError: If a boolean variable holds an unrecognized value
    """
    env = os.environ if environ is None else environ

    if ENV_VERBOSE in env:
        config = replace(config, verbose=_parse_bool(ENV_VERBOSE, env[ENV_VERBOSE]))
    if ENV_DRY_RUN in env:
        config = replace(config, dry_run=_parse_bool(ENV_DRY_RUN, env[ENV_DRY_RUN]))
    if ENV_DEFAULT_SUBMODULES in env:
        paths = tuple(p for p in re.split(r"[\s,]+", env[ENV_DEFAULT_SUBMODULES]) if p)
        config = replace(config, default_submodules=paths)

    return config
