"""Production Modules implementation for Go modules.

Reads go.mod (declared dependencies) and go.sum (locked transitive set) and
edits them through the go toolchain.
"""

import logging
import subprocess
import threading
from pathlib import Path

from modfleet.core.errors import ManifestParseError
from modfleet.core.modules.abc import Modules
from modfleet.core.modules.types import DependencyMode, Manifest, merge_dependency_sets
from modfleet.core.repository import DependencySpec
from modfleet.core.subprocess import run_subprocess_with_context

logger = logging.getLogger(__name__)

GO_MOD = "go.mod"
GO_SUM = "go.sum"


def _strip_comment(line: str) -> tuple[str, str]:
    code, _, comment = line.partition("//")
    return code.strip(), comment.strip()


def parse_go_mod(content: str, path: Path) -> Manifest:
    """Parse module path and require directives from go.mod content.

    Raises:
        ManifestParseError: If no module directive is present or a require
            line is malformed
    """
    module: str | None = None
    dependencies: dict[str, DependencySpec] = {}
    block: str | None = None

    for lineno, raw in enumerate(content.splitlines(), start=1):
        code, comment = _strip_comment(raw)
        if not code:
            continue

        if block is not None:
            if code == ")":
                block = None
                continue
            if block == "require":
                _add_require(dependencies, code, comment, path, lineno)
            continue

        keyword, _, rest = code.partition(" ")
        rest = rest.strip()
        if keyword == "module":
            module = rest.strip('"')
        elif rest == "(":
            block = keyword
        elif keyword == "require":
            _add_require(dependencies, rest, comment, path, lineno)

    if block is not None:
        raise ManifestParseError(path, f"unterminated '{block}' block")
    if not module:
        raise ManifestParseError(path, "missing module directive")

    return Manifest(module=module, dependencies=dependencies)


def _add_require(
    dependencies: dict[str, DependencySpec],
    code: str,
    comment: str,
    path: Path,
    lineno: int,
) -> None:
    parts = code.split()
    if len(parts) != 2:
        raise ManifestParseError(path, f"line {lineno}: malformed require '{code}'")
    module, version = parts
    direct = comment != "indirect"
    dependencies[module] = DependencySpec(module=module, version=version, direct=direct)


def parse_go_sum(content: str, path: Path) -> dict[str, DependencySpec]:
    """Parse the locked transitive set from go.sum content.

    go.sum lists each module once or twice per version (tree hash and go.mod
    hash). Versions are listed in ascending order, so the last one wins.
    """
    resolved: dict[str, DependencySpec] = {}
    for lineno, raw in enumerate(content.splitlines(), start=1):
        line = raw.strip()
        if not line:
            continue
        parts = line.split()
        if len(parts) != 3:
            raise ManifestParseError(path, f"line {lineno}: malformed checksum line")
        module, version, _ = parts
        version = version.removesuffix("/go.mod")
        resolved[module] = DependencySpec(module=module, version=version, direct=False)
    return resolved


def _read_manifest_file(path: Path) -> str:
    try:
        return path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise ManifestParseError(path, str(e)) from e


class GoModules(Modules):
    """Production implementation using the go toolchain via subprocess."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._replacements: dict[Path, set[str]] = {}

    def has_manifest(self, repo_root: Path) -> bool:
        return (repo_root / GO_MOD).is_file()

    def read_manifest(self, repo_root: Path, mode: DependencyMode) -> Manifest:
        mod_path = repo_root / GO_MOD
        manifest = parse_go_mod(_read_manifest_file(mod_path), mod_path)
        if mode == DependencyMode.DIRECT:
            return manifest

        sum_path = repo_root / GO_SUM
        if not sum_path.exists():
            return manifest

        resolved = parse_go_sum(_read_manifest_file(sum_path), sum_path)
        return Manifest(
            module=manifest.module,
            dependencies=merge_dependency_sets(manifest.dependencies, resolved),
        )

    def require(self, repo_root: Path, module: str, version: str) -> bool:
        before = self._read_mod(repo_root)
        run_subprocess_with_context(
            ["go", "get", f"{module}@{version}"],
            operation_context=f"update {module} to {version}",
            cwd=repo_root,
        )
        return self._read_mod(repo_root) != before

    def replace_local(self, repo_root: Path, module: str, local_path: Path) -> bool:
        before = self._read_mod(repo_root)
        run_subprocess_with_context(
            ["go", "mod", "edit", f"-replace={module}={local_path}"],
            operation_context=f"replace {module} with {local_path}",
            cwd=repo_root,
        )
        with self._lock:
            self._replacements.setdefault(repo_root, set()).add(module)
        return self._read_mod(repo_root) != before

    def drop_local_replacements(self, repo_root: Path) -> None:
        with self._lock:
            modules = sorted(self._replacements.pop(repo_root, set()))
        for module in modules:
            run_subprocess_with_context(
                ["go", "mod", "edit", f"-dropreplace={module}"],
                operation_context=f"drop local replacement for {module}",
                cwd=repo_root,
            )

    def run_tests(self, repo_root: Path) -> bool:
        result = subprocess.run(
            ["go", "test", "./..."],
            cwd=repo_root,
            capture_output=True,
            text=True,
            check=False,
        )
        if result.returncode != 0:
            logger.debug("go test failed in %s:\n%s%s", repo_root, result.stdout, result.stderr)
        return result.returncode == 0

    def _read_mod(self, repo_root: Path) -> str:
        return (repo_root / GO_MOD).read_text(encoding="utf-8")
