"""Fake GitHub operations for testing.

FakeGitHub is an in-memory implementation that accepts pre-configured state
in its constructor. Construct instances directly with keyword arguments.
"""

import threading
from collections.abc import Callable
from pathlib import Path

from modfleet.core.github.abc import GitHub
from modfleet.core.github.types import PullRequestRef


class FakeGitHub(GitHub):
    """In-memory fake implementation of GitHub operations.

    This class has NO public setup methods. All state is provided via constructor
    using keyword arguments with sensible defaults.
    """

    def __init__(
        self,
        *,
        failing: set[Path] | None = None,
        next_pr_number: int = 1,
        on_create: Callable[[Path, str], None] | None = None,
    ) -> None:
        """Create FakeGitHub with pre-configured state.

        Args:
            failing: Repo roots where create_pr raises RuntimeError
            next_pr_number: Number assigned to the first PR opened
            on_create: Hook invoked with (repo_root, branch) before each create_pr
        """
        self._failing = failing or set()
        self._next_pr_number = next_pr_number
        self._on_create = on_create
        self._lock = threading.Lock()
        self._created_prs: list[tuple[Path, str, str, str, str | None]] = []

    @property
    def created_prs(self) -> list[tuple[Path, str, str, str, str | None]]:
        """Read-only access to (repo_root, branch, title, body, base) for opened PRs."""
        return self._created_prs

    def create_pr(
        self,
        repo_root: Path,
        branch: str,
        title: str,
        body: str,
        base: str | None = None,
    ) -> PullRequestRef:
        if self._on_create is not None:
            self._on_create(repo_root, branch)
        if repo_root in self._failing:
            msg = f"Failed to create pull request for branch '{branch}' (simulated failure)"
            raise RuntimeError(msg)
        with self._lock:
            number = self._next_pr_number
            self._next_pr_number += 1
            self._created_prs.append((repo_root, branch, title, body, base))
        return PullRequestRef(
            number=number, url=f"https://github.com/owner/{repo_root.name}/pull/{number}"
        )
