"""Type definitions for module manifest operations."""

from dataclasses import dataclass, field
from enum import Enum

from modfleet.core.repository import DependencySpec


class DependencyMode(Enum):
    """Which dependency set to read from a manifest."""

    DIRECT = "direct"  # explicitly declared dependencies only
    RECURSIVE = "recursive"  # full resolved/locked transitive set


@dataclass(frozen=True)
class Manifest:
    """Dependency information read from one repository."""

    module: str
    dependencies: dict[str, DependencySpec] = field(default_factory=dict)


def merge_dependency_sets(
    declared: dict[str, DependencySpec], resolved: dict[str, DependencySpec]
) -> dict[str, DependencySpec]:
    """Combine declared and resolved dependencies into one set.

    When a module appears in both, the most-direct declaration wins: a direct
    entry beats a transitive one, and between equally direct entries the
    declared (manifest) constraint beats the resolved (lock) one.
    """
    merged = dict(resolved)
    for module, spec in declared.items():
        existing = merged.get(module)
        if existing is None or spec.direct or not existing.direct:
            merged[module] = spec
    return merged
