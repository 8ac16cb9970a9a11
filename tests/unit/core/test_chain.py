"""Tests for Chain navigation."""

import pytest

from modfleet.core.chain import Chain
from modfleet.core.repository import Repository
from tests.test_utils.fleet import make_repo, names


def _chain(*repo_names: str) -> Chain:
    return Chain([make_repo(name) for name in repo_names])


def test_positions_are_one_based() -> None:
    chain = _chain("c", "b", "a")

    assert [chain.position(repo) for repo in chain] == [1, 2, 3]
    assert len(chain) == 3


def test_previous_and_next() -> None:
    chain = _chain("c", "b", "a")
    c, b, a = chain

    assert chain.previous(c) is None
    assert chain.previous(b) is c
    assert chain.next(b) is a
    assert chain.next(a) is None


def test_before_returns_all_earlier_repositories() -> None:
    chain = _chain("c", "b", "a")

    assert names(chain.before(chain[2])) == ["c", "b"]
    assert chain.before(chain[0]) == []


def test_lookup_is_by_path() -> None:
    chain = _chain("c", "b")

    assert make_repo("b") in chain
    assert make_repo("x") not in chain
    assert "b" not in chain
    assert chain.index_of(make_repo("b")) == 1


def test_duplicates_are_rejected() -> None:
    with pytest.raises(ValueError, match="appears twice"):
        _chain("a", "b", "a")


def test_find_module() -> None:
    repo = Repository(path=make_repo("a").path, module="example.com/a")
    chain = Chain([repo])

    assert chain.find_module("example.com/a") is repo
    assert chain.find_module("example.com/b") is None


def test_absent_repository_raises_key_error() -> None:
    chain = _chain("a")

    with pytest.raises(KeyError):
        chain.position(make_repo("b"))
