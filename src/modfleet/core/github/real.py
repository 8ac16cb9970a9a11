"""Production implementation of GitHub operations."""

from pathlib import Path

from modfleet.core.github.abc import GitHub
from modfleet.core.github.types import PullRequestRef, parse_pr_url
from modfleet.core.subprocess import run_subprocess_with_context


class RealGitHub(GitHub):
    """Production implementation using gh CLI.

    All GitHub operations execute actual gh commands via subprocess.
    Authentication is owned by gh itself.
    """

    def create_pr(
        self,
        repo_root: Path,
        branch: str,
        title: str,
        body: str,
        base: str | None = None,
    ) -> PullRequestRef:
        """Create a pull request using gh CLI."""
        cmd = [
            "gh",
            "pr",
            "create",
            "--head",
            branch,
            "--title",
            title,
            "--body",
            body,
        ]

        # Add --base flag if specified
        if base is not None:
            cmd.extend(["--base", base])

        result = run_subprocess_with_context(
            cmd,
            operation_context=f"create pull request for branch '{branch}'",
            cwd=repo_root,
        )

        # gh prints the PR URL as the last line of output
        lines = [line for line in result.stdout.splitlines() if line.strip()]
        if not lines:
            msg = f"gh pr create printed no URL for branch '{branch}'"
            raise RuntimeError(msg)
        return parse_pr_url(lines[-1])
