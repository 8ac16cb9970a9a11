"""Global configuration data structures and loading.

Provides immutable global config data loaded from ~/.modfleet/config.toml.
Loaded eagerly at the CLI entry point and stored on FleetContext.
"""

import os
import tomllib
from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path

import tomlkit

DEFAULT_COMMIT_MESSAGE = "Update module dependencies"
DEFAULT_PR_BODY = "Dependency versions synchronized by modfleet."


@dataclass(frozen=True)
class GlobalConfig:
    """Immutable global configuration data.

    Every field is optional in the file; CLI flags override these values.
    """

    workers: int | None = None
    commit_message: str = DEFAULT_COMMIT_MESSAGE
    pr_body: str = DEFAULT_PR_BODY
    workflow_source: Path | None = None


CONFIG_KEYS = ("workers", "commit_message", "pr_body", "workflow_source")


def parse_global_config(data: dict[str, object], source: Path) -> GlobalConfig:
    """Build a GlobalConfig from parsed TOML data.

    Raises:
        ValueError: If a field has the wrong type
    """
    workers = data.get("workers")
    if workers is not None and (not isinstance(workers, int) or workers < 1):
        raise ValueError(f"'workers' must be a positive integer in {source}")

    workflow_source = data.get("workflow_source")
    return GlobalConfig(
        workers=workers,
        commit_message=str(data.get("commit_message", DEFAULT_COMMIT_MESSAGE)),
        pr_body=str(data.get("pr_body", DEFAULT_PR_BODY)),
        workflow_source=(
            Path(str(workflow_source)).expanduser() if workflow_source is not None else None
        ),
    )


class ConfigStore(ABC):
    """Abstract interface for global config operations.

    Provides dependency injection for global config access, enabling
    in-memory implementations for tests without touching filesystem.
    """

    @abstractmethod
    def exists(self) -> bool:
        """Check if global config exists."""
        ...

    @abstractmethod
    def load(self) -> GlobalConfig:
        """Load global config.

        Raises:
            FileNotFoundError: If config doesn't exist
            ValueError: If config is malformed
        """
        ...

    @abstractmethod
    def save(self, config: GlobalConfig) -> None:
        """Save global config."""
        ...

    @abstractmethod
    def path(self) -> Path:
        """Get the path to the global config file (for error messages and debugging)."""
        ...

    def load_or_default(self) -> GlobalConfig:
        if not self.exists():
            return GlobalConfig()
        return self.load()


class FilesystemConfigStore(ConfigStore):
    """Production implementation that reads/writes ~/.modfleet/config.toml."""

    def __init__(self, config_path: Path | None = None) -> None:
        self._config_path = config_path

    def exists(self) -> bool:
        return self.path().exists()

    def load(self) -> GlobalConfig:
        config_path = self.path()

        if not config_path.exists():
            raise FileNotFoundError(f"Global config not found at {config_path}")

        try:
            data = tomllib.loads(config_path.read_text(encoding="utf-8"))
        except tomllib.TOMLDecodeError as e:
            raise ValueError(f"Invalid TOML in {config_path}: {e}") from e
        return parse_global_config(data, config_path)

    def save(self, config: GlobalConfig) -> None:
        """Save global config, preserving comments already in the file.

        Raises:
            PermissionError: If directory or file cannot be written
        """
        config_path = self.path()
        parent = config_path.parent

        if parent.exists() and not os.access(parent, os.W_OK):
            raise PermissionError(
                f"Cannot write to directory: {parent}\n"
                f"The directory exists but is not writable."
            )
        parent.mkdir(parents=True, exist_ok=True)

        if config_path.exists():
            doc = tomlkit.parse(config_path.read_text(encoding="utf-8"))
        else:
            doc = tomlkit.document()
            doc.add(tomlkit.comment("Global modfleet configuration"))

        if config.workers is not None:
            doc["workers"] = config.workers
        elif "workers" in doc:
            del doc["workers"]
        doc["commit_message"] = config.commit_message
        doc["pr_body"] = config.pr_body
        if config.workflow_source is not None:
            doc["workflow_source"] = str(config.workflow_source)
        elif "workflow_source" in doc:
            del doc["workflow_source"]

        config_path.write_text(tomlkit.dumps(doc), encoding="utf-8")

    def path(self) -> Path:
        if self._config_path is not None:
            return self._config_path
        return Path.home() / ".modfleet" / "config.toml"


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
            raise FileNotFoundError(f"Global config not found at {self.path()}")
        return self._config

    def save(self, config: GlobalConfig) -> None:
        self._config = config

    def path(self) -> Path:
        return Path("/fake/modfleet/config.toml")
