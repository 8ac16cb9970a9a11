"""No-op wrapper for module manifest operations."""

from pathlib import Path

from modfleet.cli.output import user_output
from modfleet.core.modules.abc import Modules
from modfleet.core.modules.types import DependencyMode, Manifest


class DryRunModules(Modules):
    """No-op wrapper for module manifest operations.

    Read operations are delegated to the wrapped implementation.
    Write operations print what would happen and report no change.
    """

    def __init__(self, wrapped: Modules) -> None:
        """Initialize dry-run wrapper with a real implementation.

        Args:
            wrapped: The real Modules implementation to wrap
        """
        self._wrapped = wrapped

    def has_manifest(self, repo_root: Path) -> bool:
        """Delegate read operation to wrapped implementation."""
        return self._wrapped.has_manifest(repo_root)

    def read_manifest(self, repo_root: Path, mode: DependencyMode) -> Manifest:
        """Delegate read operation to wrapped implementation."""
        return self._wrapped.read_manifest(repo_root, mode)

    def require(self, repo_root: Path, module: str, version: str) -> bool:
        user_output(f"[DRY RUN] Would update {module} to {version} in {repo_root}")
        return False

    def replace_local(self, repo_root: Path, module: str, local_path: Path) -> bool:
        user_output(f"[DRY RUN] Would replace {module} with {local_path} in {repo_root}")
        return False

    def drop_local_replacements(self, repo_root: Path) -> None:
        """No-op: nothing was replaced in dry-run mode."""
        pass

    def run_tests(self, repo_root: Path) -> bool:
        user_output(f"[DRY RUN] Would run tests in {repo_root}")
        return True
