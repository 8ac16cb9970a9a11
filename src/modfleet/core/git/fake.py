"""Fake Git operations for testing.

FakeGit is an in-memory implementation that accepts pre-configured state
in its constructor. Construct instances directly with keyword arguments.
"""

import threading
from collections.abc import Callable
from pathlib import Path

from modfleet.core.git.abc import Git


class FakeGit(Git):
    """In-memory fake implementation of git operations.

    This class has NO public setup methods. All state is provided via constructor
    using keyword arguments with sensible defaults (empty collections).
    Mutations are tracked in read-only properties for test assertions.
    """

    def __init__(
        self,
        *,
        current_branches: dict[Path, str] | None = None,
        trunk_branches: dict[Path, str] | None = None,
        branches: dict[Path, set[str]] | None = None,
        dirty: set[Path] | None = None,
        tags: dict[Path, list[str]] | None = None,
        remote_urls: dict[Path, str] | None = None,
        failing: dict[str, set[Path]] | None = None,
        on_call: Callable[[str, Path], None] | None = None,
    ) -> None:
        """Create FakeGit with pre-configured state.

        Args:
            current_branches: Mapping of repo root -> checked-out branch (default trunk)
            trunk_branches: Mapping of repo root -> trunk branch (default "main")
            branches: Mapping of repo root -> existing branch names
            dirty: Repo roots with uncommitted changes. The set is used as-is so a
                test can share it with other fakes that simulate file edits.
            tags: Mapping of repo root -> existing tags, oldest first
            remote_urls: Mapping of repo root -> origin URL
            failing: Mapping of operation name -> repo roots where it raises RuntimeError
            on_call: Hook invoked with (operation, repo_root) before each operation
        """
        self._trunk_branches = trunk_branches or {}
        self._current_branches = dict(current_branches or {})
        self._branches = {path: set(names) for path, names in (branches or {}).items()}
        self._dirty = dirty if dirty is not None else set()
        self._tags = {path: list(names) for path, names in (tags or {}).items()}
        self._remote_urls = remote_urls or {}
        self._failing = failing or {}
        self._on_call = on_call

        self._lock = threading.Lock()
        self._shelved: set[Path] = set()
        self._ahead: dict[tuple[Path, str], int] = {}
        self._commit_counts: dict[Path, int] = {}

        self._calls: list[tuple[str, Path]] = []
        self._stashed: list[Path] = []
        self._unstashed: list[Path] = []
        self._commits: list[tuple[Path, str]] = []
        self._pushed: list[tuple[Path, str]] = []
        self._created_branches: list[tuple[Path, str]] = []
        self._deleted_branches: list[tuple[Path, str]] = []
        self._checkouts: list[tuple[Path, str]] = []
        self._resets: list[tuple[Path, str]] = []
        self._created_tags: list[tuple[Path, str]] = []
        self._pushed_tags: list[tuple[Path, str]] = []

    @property
    def calls(self) -> list[tuple[str, Path]]:
        """Every (operation, repo_root) in call order."""
        return self._calls

    @property
    def stashed(self) -> list[Path]:
        """Repo roots passed to stash(), whether or not anything was shelved."""
        return self._stashed

    @property
    def unstashed(self) -> list[Path]:
        """Repo roots passed to unstash()."""
        return self._unstashed

    @property
    def commits(self) -> list[tuple[Path, str]]:
        return self._commits

    @property
    def pushed(self) -> list[tuple[Path, str]]:
        return self._pushed

    @property
    def created_branches(self) -> list[tuple[Path, str]]:
        return self._created_branches

    @property
    def deleted_branches(self) -> list[tuple[Path, str]]:
        return self._deleted_branches

    @property
    def checkouts(self) -> list[tuple[Path, str]]:
        return self._checkouts

    @property
    def resets(self) -> list[tuple[Path, str]]:
        return self._resets

    @property
    def created_tags(self) -> list[tuple[Path, str]]:
        return self._created_tags

    @property
    def pushed_tags(self) -> list[tuple[Path, str]]:
        return self._pushed_tags

    def _record(self, operation: str, repo_root: Path) -> None:
        if self._on_call is not None:
            self._on_call(operation, repo_root)
        with self._lock:
            self._calls.append((operation, repo_root))
        if repo_root in self._failing.get(operation, set()):
            msg = f"Failed to {operation} in {repo_root} (simulated failure)"
            raise RuntimeError(msg)

    def _current(self, repo_root: Path) -> str:
        return self._current_branches.get(repo_root, self.get_trunk_branch(repo_root))

    def stash(self, repo_root: Path) -> bool:
        self._record("stash", repo_root)
        with self._lock:
            self._stashed.append(repo_root)
            if repo_root not in self._dirty:
                return False
            self._dirty.discard(repo_root)
            self._shelved.add(repo_root)
            return True

    def unstash(self, repo_root: Path) -> bool:
        self._record("unstash", repo_root)
        with self._lock:
            self._unstashed.append(repo_root)
            if repo_root not in self._shelved:
                return False
            self._shelved.discard(repo_root)
            self._dirty.add(repo_root)
            return True

    def get_current_branch(self, repo_root: Path) -> str | None:
        return self._current(repo_root)

    def get_trunk_branch(self, repo_root: Path) -> str:
        return self._trunk_branches.get(repo_root, "main")

    def branch_exists(self, repo_root: Path, branch: str) -> bool:
        if branch in (self.get_trunk_branch(repo_root), self._current(repo_root)):
            return True
        return branch in self._branches.get(repo_root, set())

    def checkout_branch(self, repo_root: Path, branch: str) -> None:
        self._record("checkout", repo_root)
        if not self.branch_exists(repo_root, branch):
            msg = f"Failed to checkout branch '{branch}': no such branch"
            raise RuntimeError(msg)
        with self._lock:
            self._current_branches[repo_root] = branch
            self._checkouts.append((repo_root, branch))

    def create_branch(self, repo_root: Path, branch: str) -> None:
        self._record("create_branch", repo_root)
        with self._lock:
            self._branches.setdefault(repo_root, set()).add(branch)
            self._current_branches[repo_root] = branch
            self._ahead[(repo_root, branch)] = 0
            self._created_branches.append((repo_root, branch))

    def delete_branch(self, repo_root: Path, branch: str, *, force: bool) -> None:
        self._record("delete_branch", repo_root)
        with self._lock:
            self._branches.get(repo_root, set()).discard(branch)
            self._deleted_branches.append((repo_root, branch))

    def has_uncommitted_changes(self, repo_root: Path) -> bool:
        return repo_root in self._dirty

    def commit_all(self, repo_root: Path, message: str) -> None:
        self._record("commit", repo_root)
        with self._lock:
            self._dirty.discard(repo_root)
            key = (repo_root, self._current(repo_root))
            self._ahead[key] = self._ahead.get(key, 0) + 1
            self._commit_counts[repo_root] = self._commit_counts.get(repo_root, 0) + 1
            self._commits.append((repo_root, message))

    def commits_ahead_of(self, repo_root: Path, base: str) -> int:
        current = self._current(repo_root)
        if current == base:
            return 0
        return self._ahead.get((repo_root, current), 0)

    def push(self, repo_root: Path, branch: str) -> None:
        self._record("push", repo_root)
        with self._lock:
            self._pushed.append((repo_root, branch))

    def pull(self, repo_root: Path, *, ff_only: bool) -> None:
        self._record("pull", repo_root)

    def fetch(self, repo_root: Path) -> None:
        self._record("fetch", repo_root)

    def reset_hard(self, repo_root: Path, ref: str) -> None:
        self._record("reset", repo_root)
        with self._lock:
            self._dirty.discard(repo_root)
            self._resets.append((repo_root, ref))

    def tag(self, repo_root: Path, tag: str, message: str) -> None:
        self._record("tag", repo_root)
        with self._lock:
            self._tags.setdefault(repo_root, []).append(tag)
            self._created_tags.append((repo_root, tag))

    def push_tag(self, repo_root: Path, tag: str) -> None:
        self._record("push_tag", repo_root)
        with self._lock:
            self._pushed_tags.append((repo_root, tag))

    def latest_tag(self, repo_root: Path) -> str | None:
        tags = self._tags.get(repo_root)
        if not tags:
            return None
        return tags[-1]

    def head_commit(self, repo_root: Path) -> str:
        return f"{repo_root.name}-{self._commit_counts.get(repo_root, 0)}"

    def get_remote_url(self, repo_root: Path) -> str | None:
        return self._remote_urls.get(repo_root)
