"""No-op Git wrapper for dry-run mode.

This module provides a Git wrapper that prevents execution of destructive
operations while delegating read-only operations to the wrapped implementation.
"""

from pathlib import Path

from modfleet.cli.output import user_output
from modfleet.core.git.abc import Git


class DryRunGit(Git):
    """No-op wrapper that prevents execution of destructive operations.

    Read-only operations are delegated to the wrapped implementation.
    Shelving is delegated too: a dry run still isolates working trees so that
    scanning sees the committed state, and restores them afterwards.

    Usage:
        real_ops = RealGit()
        noop_ops = DryRunGit(real_ops)

        # Prints message instead of pushing
        noop_ops.push(repo_root, "feature")
    """

    def __init__(self, wrapped: Git) -> None:
        """Create a dry-run wrapper around a Git implementation.

        Args:
            wrapped: The Git implementation to wrap (usually RealGit or FakeGit)
        """
        self._wrapped = wrapped

    # Read-only operations: delegate to wrapped implementation

    def stash(self, repo_root: Path) -> bool:
        return self._wrapped.stash(repo_root)

    def unstash(self, repo_root: Path) -> bool:
        return self._wrapped.unstash(repo_root)

    def get_current_branch(self, repo_root: Path) -> str | None:
        return self._wrapped.get_current_branch(repo_root)

    def get_trunk_branch(self, repo_root: Path) -> str:
        return self._wrapped.get_trunk_branch(repo_root)

    def branch_exists(self, repo_root: Path, branch: str) -> bool:
        return self._wrapped.branch_exists(repo_root, branch)

    def has_uncommitted_changes(self, repo_root: Path) -> bool:
        return self._wrapped.has_uncommitted_changes(repo_root)

    def commits_ahead_of(self, repo_root: Path, base: str) -> int:
        return self._wrapped.commits_ahead_of(repo_root, base)

    def latest_tag(self, repo_root: Path) -> str | None:
        return self._wrapped.latest_tag(repo_root)

    def head_commit(self, repo_root: Path) -> str:
        return self._wrapped.head_commit(repo_root)

    def get_remote_url(self, repo_root: Path) -> str | None:
        return self._wrapped.get_remote_url(repo_root)

    # Destructive operations: print dry-run message instead of executing

    def checkout_branch(self, repo_root: Path, branch: str) -> None:
        user_output(f"[DRY RUN] Would run: git checkout {branch} ({repo_root})")

    def create_branch(self, repo_root: Path, branch: str) -> None:
        user_output(f"[DRY RUN] Would run: git checkout -b {branch} ({repo_root})")

    def delete_branch(self, repo_root: Path, branch: str, *, force: bool) -> None:
        flag = "-D" if force else "-d"
        user_output(f"[DRY RUN] Would run: git branch {flag} {branch} ({repo_root})")

    def commit_all(self, repo_root: Path, message: str) -> None:
        user_output(f'[DRY RUN] Would run: git commit -m "{message}" ({repo_root})')

    def push(self, repo_root: Path, branch: str) -> None:
        user_output(f"[DRY RUN] Would run: git push --set-upstream origin {branch} ({repo_root})")

    def pull(self, repo_root: Path, *, ff_only: bool) -> None:
        user_output(f"[DRY RUN] Would run: git pull ({repo_root})")

    def fetch(self, repo_root: Path) -> None:
        user_output(f"[DRY RUN] Would run: git fetch --tags origin ({repo_root})")

    def reset_hard(self, repo_root: Path, ref: str) -> None:
        user_output(f"[DRY RUN] Would run: git reset --hard {ref} ({repo_root})")

    def tag(self, repo_root: Path, tag: str, message: str) -> None:
        user_output(f"[DRY RUN] Would run: git tag -a {tag} ({repo_root})")

    def push_tag(self, repo_root: Path, tag: str) -> None:
        user_output(f"[DRY RUN] Would run: git push origin {tag} ({repo_root})")
