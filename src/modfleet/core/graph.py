"""Dependency graph construction and ordering.

Builds the directed graph among the repositories of one run from their
manifests and orders it into a Chain where every dependency precedes its
dependents.
"""

import heapq
import logging
from collections import deque
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from pathlib import Path

from modfleet.core.chain import Chain
from modfleet.core.errors import CycleDetected, ManifestParseError
from modfleet.core.modules.abc import Modules
from modfleet.core.modules.types import DependencyMode
from modfleet.core.repository import DependencyEdge, Repository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GraphResult:
    """Outcome of building the chain for one run."""

    chain: Chain
    dep_count: int
    edges: tuple[DependencyEdge, ...]
    warnings: tuple[str, ...]


def build_chain(
    repositories: Sequence[Repository],
    modules: Modules,
    *,
    mode: DependencyMode,
    filter_modules: Iterable[str] = (),
) -> GraphResult:
    """Read manifests and order the working set.

    Args:
        repositories: Discovered repositories, in discovery order
        modules: Manifest reader
        mode: DIRECT or RECURSIVE dependency sets
        filter_modules: When non-empty, keep only repositories that depend
            (directly or transitively) on one of these modules

    Returns:
        GraphResult whose chain is a topological order of the retained
        repositories, ties broken by discovery order

    Raises:
        CycleDetected: If the working set contains a dependency cycle
    """
    warnings: list[str] = []
    included = _load_manifests(repositories, modules, mode, warnings)
    edges = _resolve_edges(included, warnings)
    order = _topological_order(included, edges)

    wanted = frozenset(filter_modules)
    if wanted:
        retained = _dependents_of(included, edges, wanted)
        order = [repo for repo in order if repo.path in retained]

    chain = Chain(order)
    logger.debug("Built chain of %d repositories: %s", len(chain), chain)
    return GraphResult(
        chain=chain, dep_count=len(chain), edges=tuple(edges), warnings=tuple(warnings)
    )


def _load_manifests(
    repositories: Sequence[Repository],
    modules: Modules,
    mode: DependencyMode,
    warnings: list[str],
) -> list[Repository]:
    included: list[Repository] = []
    for repo in repositories:
        try:
            manifest = modules.read_manifest(repo.path, mode)
        except ManifestParseError as e:
            warnings.append(f"Skipping {repo.path}: {e.reason}")
            continue
        repo.module = manifest.module
        repo.dependencies = dict(manifest.dependencies)
        included.append(repo)
    return included


def _resolve_edges(repositories: list[Repository], warnings: list[str]) -> list[DependencyEdge]:
    by_module: dict[str, Repository] = {}
    for repo in repositories:
        existing = by_module.get(repo.module)
        if existing is not None:
            warnings.append(
                f"Module {repo.module} is provided by both {existing.path} and {repo.path}; "
                f"dependencies resolve to {existing.path}"
            )
            continue
        by_module[repo.module] = repo

    edges: list[DependencyEdge] = []
    for repo in repositories:
        for module, spec in repo.dependencies.items():
            target = by_module.get(module)
            if target is None or target.path == repo.path:
                continue
            edges.append(
                DependencyEdge(dependent=repo.path, dependency=target.path, is_direct=spec.direct)
            )
    return edges


def _topological_order(
    repositories: list[Repository], edges: list[DependencyEdge]
) -> list[Repository]:
    """Kahn's algorithm with a discovery-index heap for deterministic ties."""
    index = {repo.path: i for i, repo in enumerate(repositories)}
    dependencies: dict[Path, set[Path]] = {repo.path: set() for repo in repositories}
    dependents: dict[Path, set[Path]] = {repo.path: set() for repo in repositories}
    for edge in edges:
        dependencies[edge.dependent].add(edge.dependency)
        dependents[edge.dependency].add(edge.dependent)

    in_degree = {path: len(deps) for path, deps in dependencies.items()}
    ready = [index[path] for path, degree in in_degree.items() if degree == 0]
    heapq.heapify(ready)

    order: list[Repository] = []
    while ready:
        repo = repositories[heapq.heappop(ready)]
        order.append(repo)
        for dependent in dependents[repo.path]:
            in_degree[dependent] -= 1
            if in_degree[dependent] == 0:
                heapq.heappush(ready, index[dependent])

    if len(order) < len(repositories):
        leftover = {path for path, degree in in_degree.items() if degree > 0}
        members = _cycle_members(leftover, dependencies)
        raise CycleDetected(sorted(members, key=lambda path: index[path]))

    return order


def _cycle_members(leftover: set[Path], dependencies: dict[Path, set[Path]]) -> set[Path]:
    """Nodes among leftover that can reach themselves.

    Leftover nodes also include dependents of a cycle that are not on it; only
    the actual cycle members are reported.
    """
    members: set[Path] = set()
    for start in leftover:
        seen: set[Path] = set()
        queue = deque(dep for dep in dependencies[start] if dep in leftover)
        while queue:
            node = queue.popleft()
            if node == start:
                members.add(start)
                break
            if node in seen:
                continue
            seen.add(node)
            queue.extend(dep for dep in dependencies[node] if dep in leftover)
    return members or leftover


def _dependents_of(
    repositories: list[Repository], edges: list[DependencyEdge], wanted: frozenset[str]
) -> set[Path]:
    """Repositories depending on any wanted module, computed on the full graph."""
    dependents: dict[Path, list[Path]] = {repo.path: [] for repo in repositories}
    for edge in edges:
        dependents[edge.dependency].append(edge.dependent)

    retained: set[Path] = set()
    queue = deque(
        repo.path for repo in repositories if any(repo.depends_on(m) for m in wanted)
    )
    while queue:
        path = queue.popleft()
        if path in retained:
            continue
        retained.add(path)
        queue.extend(dependents[path])
    return retained
