"""Repository entity and dependency types."""

import re
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path


class StepMarker(Enum):
    """Completed-step markers recorded on a repository during one run."""

    STASHED = "stashed"
    UPDATED = "updated"
    COMMITTED = "committed"
    PUSHED = "pushed"
    TAGGED = "tagged"
    PR_OPENED = "pr_opened"


@dataclass(frozen=True)
class DependencySpec:
    """A dependency on a module at a version constraint."""

    module: str
    version: str
    direct: bool


@dataclass(frozen=True)
class DependencyEdge:
    """dependent -> dependency, both inside the working set."""

    dependent: Path
    dependency: Path
    is_direct: bool


@dataclass
class Repository:
    """A discovered repository and its per-run status.

    Identity is the path. The module identifier and dependency set are filled
    in from the manifest during graph construction; completion markers are
    only written by pipeline steps and by shelving.
    """

    path: Path
    remote_name: str = ""
    module: str = ""
    version: str = ""  # pinned ref, "" = unpinned
    dependencies: dict[str, DependencySpec] = field(default_factory=dict)
    completed: list[StepMarker] = field(default_factory=list)

    @property
    def display_name(self) -> str:
        return self.remote_name or self.module or self.path.name

    @property
    def is_pinned(self) -> bool:
        return bool(self.version)

    def mark(self, marker: StepMarker) -> None:
        if marker not in self.completed:
            self.completed.append(marker)

    def has(self, marker: StepMarker) -> bool:
        return marker in self.completed

    def depends_on(self, module: str) -> bool:
        return module in self.dependencies


_SCHEME_RE = re.compile(r"^[a-z][a-z0-9+.-]*://", re.IGNORECASE)


def derive_remote_name(remote_url: str) -> str:
    """Turn a git remote URL into a host/owner/name identifier.

    Examples:
        >>> derive_remote_name("git@github.com:acme/lib.git")
        'github.com/acme/lib'
        >>> derive_remote_name("https://github.com/acme/lib")
        'github.com/acme/lib'
    """
    name = remote_url.strip()
    if not name:
        return ""

    name = _SCHEME_RE.sub("", name)
    if "@" in name.split("/", 1)[0]:
        name = name.split("@", 1)[1]

    # scp-like syntax: host:owner/repo
    host, sep, rest = name.partition(":")
    if sep and not rest.startswith("//") and not rest.split("/", 1)[0].isdigit():
        name = f"{host}/{rest}"

    name = name.rstrip("/")
    if name.endswith(".git"):
        name = name[: -len(".git")]
    return name
