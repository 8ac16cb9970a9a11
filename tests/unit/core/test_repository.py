"""Tests for Repository markers and remote name derivation."""

from pathlib import Path

import pytest

from modfleet.core.repository import Repository, StepMarker, derive_remote_name


@pytest.mark.parametrize(
    ("url", "expected"),
    [
        ("git@github.com:acme/lib.git", "github.com/acme/lib"),
        ("https://github.com/acme/lib.git", "github.com/acme/lib"),
        ("https://github.com/acme/lib", "github.com/acme/lib"),
        ("ssh://git@github.com/acme/lib.git", "github.com/acme/lib"),
        ("https://user@gitlab.example.com/group/sub/lib/", "gitlab.example.com/group/sub/lib"),
        ("", ""),
    ],
)
def test_derive_remote_name(url: str, expected: str) -> None:
    assert derive_remote_name(url) == expected


def test_markers_are_recorded_once_in_order() -> None:
    repo = Repository(path=Path("/fleet/a"))

    repo.mark(StepMarker.UPDATED)
    repo.mark(StepMarker.COMMITTED)
    repo.mark(StepMarker.UPDATED)

    assert repo.completed == [StepMarker.UPDATED, StepMarker.COMMITTED]
    assert repo.has(StepMarker.COMMITTED)
    assert not repo.has(StepMarker.TAGGED)


def test_display_name_falls_back_to_module_then_directory() -> None:
    assert Repository(path=Path("/fleet/a"), remote_name="github.com/acme/a").display_name == (
        "github.com/acme/a"
    )
    assert Repository(path=Path("/fleet/a"), module="example.com/a").display_name == (
        "example.com/a"
    )
    assert Repository(path=Path("/fleet/a")).display_name == "a"


def test_pinned_when_version_set() -> None:
    assert Repository(path=Path("/fleet/a"), version="v1.0.0").is_pinned
    assert not Repository(path=Path("/fleet/a")).is_pinned
