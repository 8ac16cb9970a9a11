"""Repository discovery functionality.

Finds the repositories a run operates on by walking target directories.
A directory containing `.git` is a repository and is not descended into.
"""

from abc import ABC, abstractmethod
from collections.abc import Iterator, Sequence
from pathlib import Path

from modfleet.core.errors import DiscoveryError
from modfleet.core.git.abc import Git
from modfleet.core.modules.abc import Modules
from modfleet.core.repository import Repository, derive_remote_name

SKIPPED_DIRECTORIES = frozenset({"node_modules", "vendor", "testdata"})


def split_target(target: str) -> tuple[str, str]:
    """Split an optional pinned version off a target.

    Examples:
        >>> split_target("libs/auth@v1.4.0")
        ('libs/auth', 'v1.4.0')
        >>> split_target("libs")
        ('libs', '')
    """
    path, sep, version = target.rpartition("@")
    if not sep or not path or not version or "/" in version:
        return target, ""
    return path, version


class RepoDiscovery(ABC):
    """Abstract interface for enumerating repositories."""

    @abstractmethod
    def discover(self, targets: Sequence[str]) -> list[Repository]:
        """Enumerate repositories under the given targets, in a stable order.

        Raises:
            DiscoveryError: If a target cannot be enumerated
        """
        ...


class FilesystemRepoDiscovery(RepoDiscovery):
    """Production implementation walking the filesystem."""

    def __init__(self, git: Git, modules: Modules) -> None:
        self._git = git
        self._modules = modules

    def discover(self, targets: Sequence[str]) -> list[Repository]:
        repositories: list[Repository] = []
        seen: set[Path] = set()

        for target in targets or ["."]:
            raw_path, version = split_target(target)
            root = Path(raw_path).expanduser().resolve()
            if not root.is_dir():
                raise DiscoveryError(f"Target directory does not exist: {raw_path}")

            for repo_root in self._walk(root):
                if repo_root in seen or not self._modules.has_manifest(repo_root):
                    continue
                seen.add(repo_root)
                remote_url = self._git.get_remote_url(repo_root) or ""
                repositories.append(
                    Repository(
                        path=repo_root,
                        remote_name=derive_remote_name(remote_url),
                        version=version,
                    )
                )

        return repositories

    def _walk(self, directory: Path) -> Iterator[Path]:
        if (directory / ".git").exists():
            yield directory
            return

        try:
            children = sorted(directory.iterdir())
        except OSError as e:
            raise DiscoveryError(f"Cannot list {directory}: {e}") from e

        for child in children:
            if not child.is_dir() or child.is_symlink():
                continue
            if child.name.startswith(".") or child.name in SKIPPED_DIRECTORIES:
                continue
            yield from self._walk(child)


class FakeRepoDiscovery(RepoDiscovery):
    """Test implementation returning a pre-configured repository list."""

    def __init__(
        self,
        repositories: list[Repository] | None = None,
        *,
        error: DiscoveryError | None = None,
    ) -> None:
        self._repositories = repositories or []
        self._error = error
        self._targets: list[list[str]] = []

    @property
    def targets(self) -> list[list[str]]:
        """Targets passed to each discover() call."""
        return self._targets

    def discover(self, targets: Sequence[str]) -> list[Repository]:
        self._targets.append(list(targets))
        if self._error is not None:
            raise self._error
        return list(self._repositories)
