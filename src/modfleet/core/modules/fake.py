"""Fake Modules implementation for testing.

FakeModules is an in-memory implementation that accepts pre-configured state
in its constructor. Construct instances directly with keyword arguments.
"""

from collections.abc import Callable
from pathlib import Path

from modfleet.core.errors import ManifestParseError
from modfleet.core.modules.abc import Modules
from modfleet.core.modules.types import DependencyMode, Manifest


class FakeModules(Modules):
    """In-memory fake implementation of module manifest operations.

    This class has NO public setup methods. All state is provided via constructor
    using keyword arguments with sensible defaults (empty dicts).
    """

    def __init__(
        self,
        *,
        manifests: dict[Path, Manifest] | None = None,
        recursive_manifests: dict[Path, Manifest] | None = None,
        malformed: set[Path] | None = None,
        test_results: dict[Path, bool] | None = None,
        failing_requires: set[Path] | None = None,
        failing_drops: set[Path] | None = None,
        on_require: Callable[[Path, str, str], None] | None = None,
    ) -> None:
        """Create FakeModules with pre-configured state.

        Args:
            manifests: Mapping of repo root -> Manifest returned in DIRECT mode
                (and in RECURSIVE mode when no recursive entry exists)
            recursive_manifests: Mapping of repo root -> Manifest for RECURSIVE mode
            malformed: Repo roots whose manifest raises ManifestParseError
            test_results: Mapping of repo root -> test outcome (default passes)
            failing_requires: Repo roots where require() raises RuntimeError
            failing_drops: Repo roots where drop_local_replacements() raises RuntimeError
            on_require: Hook invoked on every require() call, before it is recorded
        """
        self._manifests = manifests or {}
        self._recursive_manifests = recursive_manifests or {}
        self._malformed = malformed or set()
        self._test_results = test_results or {}
        self._failing_requires = failing_requires or set()
        self._failing_drops = failing_drops or set()
        self._on_require = on_require
        self._required: list[tuple[Path, str, str]] = []
        self._replaced: list[tuple[Path, str, Path]] = []
        self._dropped: list[Path] = []
        self._tested: list[Path] = []
        self._read_calls: list[tuple[Path, DependencyMode]] = []

    @property
    def required(self) -> list[tuple[Path, str, str]]:
        """Read-only access to (repo_root, module, version) require() calls."""
        return self._required

    @property
    def replaced(self) -> list[tuple[Path, str, Path]]:
        """Read-only access to (repo_root, module, local_path) replace_local() calls."""
        return self._replaced

    @property
    def dropped(self) -> list[Path]:
        """Repo roots passed to drop_local_replacements()."""
        return self._dropped

    @property
    def tested(self) -> list[Path]:
        """Repo roots whose tests were run."""
        return self._tested

    @property
    def read_calls(self) -> list[tuple[Path, DependencyMode]]:
        return self._read_calls

    def has_manifest(self, repo_root: Path) -> bool:
        return repo_root in self._manifests or repo_root in self._malformed

    def read_manifest(self, repo_root: Path, mode: DependencyMode) -> Manifest:
        self._read_calls.append((repo_root, mode))
        if repo_root in self._malformed:
            raise ManifestParseError(repo_root, "malformed (simulated)")
        if mode == DependencyMode.RECURSIVE and repo_root in self._recursive_manifests:
            return self._recursive_manifests[repo_root]
        if repo_root not in self._manifests:
            raise ManifestParseError(repo_root, "no manifest")
        return self._manifests[repo_root]

    def require(self, repo_root: Path, module: str, version: str) -> bool:
        if self._on_require is not None:
            self._on_require(repo_root, module, version)
        if repo_root in self._failing_requires:
            msg = f"Failed to update {module} to {version} (simulated failure)"
            raise RuntimeError(msg)
        manifest = self._manifests.get(repo_root)
        current = manifest.dependencies.get(module) if manifest is not None else None
        self._required.append((repo_root, module, version))
        return current is None or current.version != version

    def replace_local(self, repo_root: Path, module: str, local_path: Path) -> bool:
        self._replaced.append((repo_root, module, local_path))
        return True

    def drop_local_replacements(self, repo_root: Path) -> None:
        self._dropped.append(repo_root)
        if repo_root in self._failing_drops:
            msg = f"Failed to drop local replacements in {repo_root} (simulated failure)"
            raise RuntimeError(msg)

    def run_tests(self, repo_root: Path) -> bool:
        self._tested.append(repo_root)
        return self._test_results.get(repo_root, True)
