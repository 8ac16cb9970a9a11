"""Abstract base class for module toolchain operations."""

from abc import ABC, abstractmethod
from pathlib import Path

from modfleet.core.modules.types import DependencyMode, Manifest


class Modules(ABC):
    """Abstract interface for reading and editing dependency manifests.

    All implementations (real, fake and dry-run) must implement this interface.
    The orchestration core never parses manifest files itself.
    """

    @abstractmethod
    def has_manifest(self, repo_root: Path) -> bool:
        """Check whether the repository carries a dependency manifest."""
        ...

    @abstractmethod
    def read_manifest(self, repo_root: Path, mode: DependencyMode) -> Manifest:
        """Read the module identifier and dependency set.

        Args:
            repo_root: Repository root directory
            mode: DIRECT for declared dependencies, RECURSIVE for the locked set

        Raises:
            ManifestParseError: If the manifest is malformed
        """
        ...

    @abstractmethod
    def require(self, repo_root: Path, module: str, version: str) -> bool:
        """Pin a dependency to a version.

        Returns:
            True if the manifest changed
        """
        ...

    @abstractmethod
    def replace_local(self, repo_root: Path, module: str, local_path: Path) -> bool:
        """Point a dependency at a local checkout.

        Returns:
            True if the manifest changed
        """
        ...

    @abstractmethod
    def drop_local_replacements(self, repo_root: Path) -> None:
        """Remove every local replacement added by replace_local."""
        ...

    @abstractmethod
    def run_tests(self, repo_root: Path) -> bool:
        """Run the repository's test suite.

        Returns:
            True if the tests passed
        """
        ...
