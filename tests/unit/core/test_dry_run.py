"""Tests for dry-run wrappers and pull request references."""

from pathlib import Path

import pytest

from modfleet.core.git.dry_run import DryRunGit
from modfleet.core.git.fake import FakeGit
from modfleet.core.github.dry_run import DryRunGitHub
from modfleet.core.github.fake import FakeGitHub
from modfleet.core.github.types import PullRequestRef, parse_pr_url

REPO = Path("/fleet/a")


def test_dry_run_git_prints_destructive_operations(capsys: pytest.CaptureFixture[str]) -> None:
    fake = FakeGit()
    git = DryRunGit(fake)

    git.commit_all(REPO, "Bump deps")
    git.push(REPO, "deps")
    git.tag(REPO, "v1.0.1", "Bump deps")

    err = capsys.readouterr().err
    assert '[DRY RUN] Would run: git commit -m "Bump deps" (/fleet/a)' in err
    assert "[DRY RUN] Would run: git push --set-upstream origin deps (/fleet/a)" in err
    assert "[DRY RUN] Would run: git tag -a v1.0.1 (/fleet/a)" in err
    assert fake.calls == []


def test_dry_run_git_delegates_reads_and_shelving() -> None:
    fake = FakeGit(dirty={REPO}, tags={REPO: ["v1.0.0"]})
    git = DryRunGit(fake)

    assert git.latest_tag(REPO) == "v1.0.0"
    assert git.stash(REPO)
    assert git.unstash(REPO)
    assert fake.stashed == [REPO]
    assert fake.unstashed == [REPO]


def test_dry_run_github_returns_placeholder(capsys: pytest.CaptureFixture[str]) -> None:
    fake = FakeGitHub()

    pr = DryRunGitHub(fake).create_pr(REPO, "deps", "Bump deps", "body", base="main")

    assert pr == PullRequestRef(number=0, url="")
    assert fake.created_prs == []
    assert "Would open pull request 'Bump deps' for deps" in capsys.readouterr().err


def test_fake_github_numbers_pull_requests() -> None:
    github = FakeGitHub(next_pr_number=7)

    first = github.create_pr(REPO, "deps", "Bump", "body", base="main")
    second = github.create_pr(Path("/fleet/b"), "deps", "Bump", "body")

    assert (first.number, second.number) == (7, 8)
    assert first.url == "https://github.com/owner/a/pull/7"
    assert github.created_prs[1] == (Path("/fleet/b"), "deps", "Bump", "body", None)


def test_parse_pr_url() -> None:
    pr = parse_pr_url("https://github.com/acme/lib/pull/42\n")

    assert pr == PullRequestRef(number=42, url="https://github.com/acme/lib/pull/42")


def test_parse_pr_url_rejects_unexpected_output() -> None:
    with pytest.raises(ValueError, match="Unexpected pull request URL"):
        parse_pr_url("Warning: 2 uncommitted changes")
