"""GitHub operations subpackage."""

from modfleet.core.github.abc import GitHub
from modfleet.core.github.dry_run import DryRunGitHub
from modfleet.core.github.fake import FakeGitHub
from modfleet.core.github.real import RealGitHub
from modfleet.core.github.types import PullRequestRef, parse_pr_url

__all__ = [
    "DryRunGitHub",
    "FakeGitHub",
    "GitHub",
    "PullRequestRef",
    "RealGitHub",
    "parse_pr_url",
]
