"""Type definitions for GitHub operations."""

from dataclasses import dataclass


@dataclass(frozen=True)
class PullRequestRef:
    """Reference to a pull request that was opened."""

    number: int
    url: str


def parse_pr_url(url: str) -> PullRequestRef:
    """Build a PullRequestRef from the URL printed by `gh pr create`.

    Format: https://github.com/owner/repo/pull/123

    Raises:
        ValueError: If the URL does not end in a PR number
    """
    stripped = url.strip().rstrip("/")
    tail = stripped.rsplit("/", 1)[-1]
    if not tail.isdigit():
        msg = f"Unexpected pull request URL: {url!r}"
        raise ValueError(msg)
    return PullRequestRef(number=int(tail), url=stripped)
