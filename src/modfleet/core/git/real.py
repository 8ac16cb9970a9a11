"""Production Git implementation using subprocess.

This module provides the real Git implementation that executes actual git
commands via subprocess.
"""

import subprocess
from pathlib import Path

from modfleet.core.git.abc import AUTOSTASH_MESSAGE, Git
from modfleet.core.subprocess import run_subprocess_with_context


class RealGit(Git):
    """Production implementation using subprocess.

    All git operations execute actual git commands via subprocess.
    """

    def stash(self, repo_root: Path) -> bool:
        """Shelve local modifications, including untracked files."""
        if not self.has_uncommitted_changes(repo_root):
            return False
        run_subprocess_with_context(
            ["git", "stash", "push", "--include-untracked", "-m", AUTOSTASH_MESSAGE],
            operation_context="stash local changes",
            cwd=repo_root,
        )
        return True

    def unstash(self, repo_root: Path) -> bool:
        """Restore modifications shelved by stash()."""
        result = run_subprocess_with_context(
            ["git", "stash", "list", "--format=%gd %s"],
            operation_context="list stashes",
            cwd=repo_root,
        )
        for line in result.stdout.splitlines():
            ref, _, subject = line.partition(" ")
            if subject.endswith(AUTOSTASH_MESSAGE):
                run_subprocess_with_context(
                    ["git", "stash", "pop", ref],
                    operation_context=f"restore stashed changes ({ref})",
                    cwd=repo_root,
                )
                return True
        return False

    def get_current_branch(self, repo_root: Path) -> str | None:
        """Get the currently checked-out branch."""
        result = subprocess.run(
            ["git", "rev-parse", "--abbrev-ref", "HEAD"],
            cwd=repo_root,
            capture_output=True,
            text=True,
            check=False,
        )
        if result.returncode != 0:
            return None

        branch = result.stdout.strip()
        if branch == "HEAD":
            return None

        return branch

    def get_trunk_branch(self, repo_root: Path) -> str:
        """Get the trunk branch name for the repository.

        Detects trunk by checking git's remote HEAD reference. Falls back to
        checking for existence of common trunk branch names if detection fails.
        """
        # 1. Try git symbolic-ref to detect default branch
        result = subprocess.run(
            ["git", "symbolic-ref", "refs/remotes/origin/HEAD"],
            cwd=repo_root,
            capture_output=True,
            text=True,
            check=False,
        )
        if result.returncode == 0:
            # Parse "refs/remotes/origin/master" -> "master"
            ref = result.stdout.strip()
            if ref.startswith("refs/remotes/origin/"):
                return ref.replace("refs/remotes/origin/", "")

        # 2. Fallback: try 'main' then 'master', use first that exists
        for candidate in ["main", "master"]:
            result = subprocess.run(
                ["git", "show-ref", "--verify", f"refs/heads/{candidate}"],
                cwd=repo_root,
                capture_output=True,
                check=False,
            )
            if result.returncode == 0:
                return candidate

        # 3. Final fallback: 'main'
        return "main"

    def branch_exists(self, repo_root: Path, branch: str) -> bool:
        for ref in (f"refs/heads/{branch}", f"refs/remotes/origin/{branch}"):
            result = subprocess.run(
                ["git", "show-ref", "--verify", "--quiet", ref],
                cwd=repo_root,
                capture_output=True,
                check=False,
            )
            if result.returncode == 0:
                return True
        return False

    def checkout_branch(self, repo_root: Path, branch: str) -> None:
        run_subprocess_with_context(
            ["git", "checkout", branch],
            operation_context=f"checkout branch '{branch}'",
            cwd=repo_root,
        )

    def create_branch(self, repo_root: Path, branch: str) -> None:
        run_subprocess_with_context(
            ["git", "checkout", "-b", branch],
            operation_context=f"create branch '{branch}'",
            cwd=repo_root,
        )

    def delete_branch(self, repo_root: Path, branch: str, *, force: bool) -> None:
        flag = "-D" if force else "-d"
        run_subprocess_with_context(
            ["git", "branch", flag, branch],
            operation_context=f"delete branch '{branch}'",
            cwd=repo_root,
        )

    def has_uncommitted_changes(self, repo_root: Path) -> bool:
        """Check if a working tree has uncommitted changes."""
        result = subprocess.run(
            ["git", "status", "--porcelain"],
            cwd=repo_root,
            capture_output=True,
            text=True,
            check=False,
        )
        if result.returncode != 0:
            return False
        return bool(result.stdout.strip())

    def commit_all(self, repo_root: Path, message: str) -> None:
        run_subprocess_with_context(
            ["git", "add", "-A"],
            operation_context="stage changes",
            cwd=repo_root,
        )
        run_subprocess_with_context(
            ["git", "commit", "-m", message],
            operation_context="commit changes",
            cwd=repo_root,
        )

    def commits_ahead_of(self, repo_root: Path, base: str) -> int:
        result = run_subprocess_with_context(
            ["git", "rev-list", "--count", f"{base}..HEAD"],
            operation_context=f"count commits ahead of '{base}'",
            cwd=repo_root,
        )
        return int(result.stdout.strip() or "0")

    def push(self, repo_root: Path, branch: str) -> None:
        run_subprocess_with_context(
            ["git", "push", "--set-upstream", "origin", branch],
            operation_context=f"push branch '{branch}'",
            cwd=repo_root,
        )

    def pull(self, repo_root: Path, *, ff_only: bool) -> None:
        cmd = ["git", "pull"]
        if ff_only:
            cmd.append("--ff-only")
        run_subprocess_with_context(cmd, operation_context="pull latest changes", cwd=repo_root)

    def fetch(self, repo_root: Path) -> None:
        run_subprocess_with_context(
            ["git", "fetch", "--tags", "origin"],
            operation_context="fetch from origin",
            cwd=repo_root,
        )

    def reset_hard(self, repo_root: Path, ref: str) -> None:
        run_subprocess_with_context(
            ["git", "reset", "--hard", ref],
            operation_context=f"reset to '{ref}'",
            cwd=repo_root,
        )

    def tag(self, repo_root: Path, tag: str, message: str) -> None:
        run_subprocess_with_context(
            ["git", "tag", "-a", tag, "-m", message],
            operation_context=f"create tag '{tag}'",
            cwd=repo_root,
        )

    def push_tag(self, repo_root: Path, tag: str) -> None:
        run_subprocess_with_context(
            ["git", "push", "origin", tag],
            operation_context=f"push tag '{tag}'",
            cwd=repo_root,
        )

    def latest_tag(self, repo_root: Path) -> str | None:
        result = subprocess.run(
            ["git", "describe", "--tags", "--abbrev=0"],
            cwd=repo_root,
            capture_output=True,
            text=True,
            check=False,
        )
        if result.returncode != 0:
            return None
        return result.stdout.strip() or None

    def head_commit(self, repo_root: Path) -> str:
        result = run_subprocess_with_context(
            ["git", "rev-parse", "HEAD"],
            operation_context="read HEAD commit",
            cwd=repo_root,
        )
        return result.stdout.strip()

    def get_remote_url(self, repo_root: Path) -> str | None:
        result = subprocess.run(
            ["git", "remote", "get-url", "origin"],
            cwd=repo_root,
            capture_output=True,
            text=True,
            check=False,
        )
        if result.returncode != 0:
            return None
        return result.stdout.strip() or None
