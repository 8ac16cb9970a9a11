"""High-level git operations interface.

This module provides a clean abstraction over git subprocess calls, making the
codebase more testable and maintainable.

Architecture:
- Git: Abstract base class defining the interface
- RealGit: Production implementation using subprocess
- FakeGit: In-memory implementation for tests
- DryRunGit: Wrapper that blocks destructive operations
"""

from abc import ABC, abstractmethod
from pathlib import Path

AUTOSTASH_MESSAGE = "modfleet-autostash"


class Git(ABC):
    """Abstract interface for git operations.

    All implementations (real and fake) must implement this interface.
    This interface contains ONLY runtime operations - no test setup methods.
    """

    @abstractmethod
    def stash(self, repo_root: Path) -> bool:
        """Shelve local modifications, including untracked files.

        Returns:
            True if anything was shelved, False if the working tree was clean
        """
        ...

    @abstractmethod
    def unstash(self, repo_root: Path) -> bool:
        """Restore modifications shelved by stash().

        Only entries created by stash() are touched; a repository with nothing
        shelved is left alone.

        Returns:
            True if a shelved entry was restored
        """
        ...

    @abstractmethod
    def get_current_branch(self, repo_root: Path) -> str | None:
        """Get the currently checked-out branch (None when detached)."""
        ...

    @abstractmethod
    def get_trunk_branch(self, repo_root: Path) -> str:
        """Get the trunk branch name for the repository.

        Detects trunk by checking git's remote HEAD reference. Falls back to
        checking for existence of common trunk branch names if detection fails.
        """
        ...

    @abstractmethod
    def branch_exists(self, repo_root: Path, branch: str) -> bool:
        """Check whether a branch exists locally or on origin."""
        ...

    @abstractmethod
    def checkout_branch(self, repo_root: Path, branch: str) -> None:
        """Checkout an existing branch."""
        ...

    @abstractmethod
    def create_branch(self, repo_root: Path, branch: str) -> None:
        """Create a branch at HEAD and check it out."""
        ...

    @abstractmethod
    def delete_branch(self, repo_root: Path, branch: str, *, force: bool) -> None:
        """Delete a local branch.

        Args:
            repo_root: Repository root directory
            branch: Name of the branch to delete
            force: Use -D (force delete) instead of -d
        """
        ...

    @abstractmethod
    def has_uncommitted_changes(self, repo_root: Path) -> bool:
        """Check if the working tree has staged, modified or untracked files."""
        ...

    @abstractmethod
    def commit_all(self, repo_root: Path, message: str) -> None:
        """Stage every change and commit it."""
        ...

    @abstractmethod
    def commits_ahead_of(self, repo_root: Path, base: str) -> int:
        """Count commits on HEAD that are not on base."""
        ...

    @abstractmethod
    def push(self, repo_root: Path, branch: str) -> None:
        """Push a branch to origin and set its upstream."""
        ...

    @abstractmethod
    def pull(self, repo_root: Path, *, ff_only: bool) -> None:
        """Pull the current branch from its upstream."""
        ...

    @abstractmethod
    def fetch(self, repo_root: Path) -> None:
        """Fetch all refs and tags from origin."""
        ...

    @abstractmethod
    def reset_hard(self, repo_root: Path, ref: str) -> None:
        """Reset the working tree and index to ref."""
        ...

    @abstractmethod
    def tag(self, repo_root: Path, tag: str, message: str) -> None:
        """Create an annotated tag at HEAD."""
        ...

    @abstractmethod
    def push_tag(self, repo_root: Path, tag: str) -> None:
        """Push a single tag to origin."""
        ...

    @abstractmethod
    def latest_tag(self, repo_root: Path) -> str | None:
        """Most recent tag reachable from HEAD, or None if untagged."""
        ...

    @abstractmethod
    def head_commit(self, repo_root: Path) -> str:
        """Commit SHA at HEAD."""
        ...

    @abstractmethod
    def get_remote_url(self, repo_root: Path) -> str | None:
        """URL of the origin remote, or None if no origin is configured."""
        ...
