"""No-op wrapper for GitHub operations."""

from pathlib import Path

from modfleet.cli.output import user_output
from modfleet.core.github.abc import GitHub
from modfleet.core.github.types import PullRequestRef


class DryRunGitHub(GitHub):
    """No-op wrapper for GitHub operations.

    Write operations print what would happen and return a placeholder
    reference instead of executing.
    """

    def __init__(self, wrapped: GitHub) -> None:
        """Initialize dry-run wrapper with a real implementation.

        Args:
            wrapped: The real GitHub operations implementation to wrap
        """
        self._wrapped = wrapped

    def create_pr(
        self,
        repo_root: Path,
        branch: str,
        title: str,
        body: str,
        base: str | None = None,
    ) -> PullRequestRef:
        """No-op for creating a PR in dry-run mode."""
        user_output(f"[DRY RUN] Would open pull request '{title}' for {branch} ({repo_root})")
        return PullRequestRef(number=0, url="")
