"""Abstract base class for GitHub operations."""

from abc import ABC, abstractmethod
from pathlib import Path

from modfleet.core.github.types import PullRequestRef


class GitHub(ABC):
    """Abstract interface for GitHub operations.

    All implementations (real and fake) must implement this interface.
    """

    @abstractmethod
    def create_pr(
        self,
        repo_root: Path,
        branch: str,
        title: str,
        body: str,
        base: str | None = None,
    ) -> PullRequestRef:
        """Open a pull request for a pushed branch.

        Args:
            repo_root: Repository root directory
            branch: Source branch for the PR
            title: PR title
            body: PR body (markdown)
            base: Target base branch (defaults to repository default branch if None)

        Returns:
            Reference to the opened pull request

        Raises:
            RuntimeError: If the pull request could not be opened
        """
        ...
