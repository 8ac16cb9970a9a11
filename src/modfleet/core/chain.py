"""Ordered chain of repositories produced by the dependency graph builder."""

from collections.abc import Iterator, Sequence
from pathlib import Path

from modfleet.core.repository import Repository


class Chain:
    """Topologically ordered sequence of repositories.

    Dependencies always occupy earlier positions than their dependents.
    Neighbor access is index arithmetic over an owned tuple, with a
    path -> position map for O(1) lookup by identity.
    """

    def __init__(self, repositories: Sequence[Repository]) -> None:
        self._repositories = tuple(repositories)
        self._index: dict[Path, int] = {}
        for i, repo in enumerate(self._repositories):
            if repo.path in self._index:
                msg = f"Repository appears twice in chain: {repo.path}"
                raise ValueError(msg)
            self._index[repo.path] = i

    def __len__(self) -> int:
        return len(self._repositories)

    def __iter__(self) -> Iterator[Repository]:
        return iter(self._repositories)

    def __getitem__(self, index: int) -> Repository:
        return self._repositories[index]

    def __contains__(self, repo: object) -> bool:
        if not isinstance(repo, Repository):
            return False
        return repo.path in self._index

    def __repr__(self) -> str:
        names = ", ".join(repo.display_name for repo in self._repositories)
        return f"Chain([{names}])"

    @property
    def paths(self) -> list[Path]:
        return [repo.path for repo in self._repositories]

    def index_of(self, repo: Repository) -> int:
        """Zero-based position of repo. Raises KeyError if absent."""
        return self._index[repo.path]

    def position(self, repo: Repository) -> int:
        """One-based ordinal used in progress output ("( 2 / 5 )")."""
        return self._index[repo.path] + 1

    def previous(self, repo: Repository) -> Repository | None:
        i = self._index[repo.path]
        if i == 0:
            return None
        return self._repositories[i - 1]

    def next(self, repo: Repository) -> Repository | None:
        i = self._index[repo.path]
        if i + 1 >= len(self._repositories):
            return None
        return self._repositories[i + 1]

    def before(self, repo: Repository) -> list[Repository]:
        """All repositories that precede repo in the chain."""
        return list(self._repositories[: self._index[repo.path]])

    def find_module(self, module: str) -> Repository | None:
        for repo in self._repositories:
            if repo.module == module:
                return repo
        return None
