"""Builders for in-memory fleets of repositories.

A fleet is described as a mapping of short repository names to the names of
the fleet repositories they depend on:

    repos, modules = build_fleet({"a": ["b"], "b": ["c"], "c": []})

Repositories live under FLEET_ROOT, their module identifier is
example.com/<name>, and their remote name is github.com/acme/<name>.
"""

from pathlib import Path

from modfleet.core.modules.fake import FakeModules
from modfleet.core.modules.types import Manifest
from modfleet.core.repository import DependencySpec, Repository

FLEET_ROOT = Path("/fleet")
PREVIOUS_VERSION = "v0.1.0"


def module_of(name: str) -> str:
    return f"example.com/{name}"


def path_of(name: str) -> Path:
    return FLEET_ROOT / name


def make_repo(name: str, *, version: str = "") -> Repository:
    return Repository(
        path=path_of(name),
        remote_name=f"github.com/acme/{name}",
        version=version,
    )


def make_manifest(name: str, deps: list[str], *, external: list[str] | None = None) -> Manifest:
    dependencies = {
        module_of(dep): DependencySpec(module=module_of(dep), version=PREVIOUS_VERSION, direct=True)
        for dep in deps
    }
    for module in external or []:
        dependencies[module] = DependencySpec(module=module, version="v1.0.0", direct=True)
    return Manifest(module=module_of(name), dependencies=dependencies)


def build_manifests(graph: dict[str, list[str]]) -> dict[Path, Manifest]:
    return {path_of(name): make_manifest(name, deps) for name, deps in graph.items()}


def build_fleet(
    graph: dict[str, list[str]],
    *,
    pinned: dict[str, str] | None = None,
    **modules_kwargs: object,
) -> tuple[list[Repository], FakeModules]:
    """Repositories in the dict's order (the discovery order) plus a FakeModules."""
    pinned = pinned or {}
    repos = [make_repo(name, version=pinned.get(name, "")) for name in graph]
    manifests = build_manifests(graph)
    modules = FakeModules(manifests=manifests, **modules_kwargs)  # type: ignore[arg-type]
    return repos, modules


def names(repos: object) -> list[str]:
    """Short names of an iterable of repositories, in iteration order."""
    return [repo.path.name for repo in repos]  # type: ignore[attr-defined]
