"""Tests for dependency graph construction and ordering."""

import pytest

from modfleet.core.errors import CycleDetected
from modfleet.core.graph import GraphResult, build_chain
from modfleet.core.modules.fake import FakeModules
from modfleet.core.modules.types import DependencyMode, Manifest, merge_dependency_sets
from modfleet.core.repository import DependencySpec
from tests.test_utils.fleet import (
    build_fleet,
    build_manifests,
    make_manifest,
    make_repo,
    module_of,
    names,
    path_of,
)


def _build(graph: dict[str, list[str]], filter_modules: list[str] | None = None) -> GraphResult:
    repos, modules = build_fleet(graph)
    return build_chain(
        repos, modules, mode=DependencyMode.RECURSIVE, filter_modules=filter_modules or ()
    )


def test_dependencies_precede_dependents() -> None:
    """A depends on B, B depends on C: the chain is [C, B, A]."""
    result = _build({"a": ["b"], "b": ["c"], "c": []})

    assert names(result.chain) == ["c", "b", "a"]
    assert result.dep_count == 3


def test_every_edge_points_backwards_in_chain() -> None:
    graph = {
        "api": ["auth", "log"],
        "auth": ["log", "crypto"],
        "web": ["api", "log"],
        "log": [],
        "crypto": [],
        "cli": ["api"],
    }
    result = _build(graph)

    for edge in result.edges:
        dependent = make_repo(edge.dependent.name)
        dependency = make_repo(edge.dependency.name)
        assert result.chain.index_of(dependency) < result.chain.index_of(dependent)
    assert len(result.edges) == 7


def test_ties_break_by_discovery_order() -> None:
    result = _build({"z": [], "m": [], "a": []})

    assert names(result.chain) == ["z", "m", "a"]


def test_identical_inputs_produce_identical_chains() -> None:
    graph = {"d": ["b", "c"], "c": ["a"], "b": ["a"], "a": [], "e": []}

    first = _build(graph)
    second = _build(graph)

    assert first.chain.paths == second.chain.paths
    assert names(first.chain) == ["a", "c", "b", "d", "e"]


def test_external_dependencies_are_not_nodes() -> None:
    repos = [make_repo("a"), make_repo("b")]
    modules = FakeModules(
        manifests={
            path_of("a"): make_manifest("a", ["b"], external=["golang.org/x/sync"]),
            path_of("b"): make_manifest("b", [], external=["golang.org/x/sync"]),
        }
    )

    result = build_chain(repos, modules, mode=DependencyMode.DIRECT)

    assert names(result.chain) == ["b", "a"]
    assert len(result.edges) == 1


def test_self_dependency_is_ignored() -> None:
    repos = [make_repo("a")]
    modules = FakeModules(manifests={path_of("a"): make_manifest("a", ["a"])})

    result = build_chain(repos, modules, mode=DependencyMode.DIRECT)

    assert names(result.chain) == ["a"]
    assert result.edges == ()


def test_cycle_names_every_member() -> None:
    with pytest.raises(CycleDetected) as exc_info:
        _build({"a": ["b"], "b": ["c"], "c": ["a"]})

    assert set(exc_info.value.members) == {path_of("a"), path_of("b"), path_of("c")}


def test_cycle_excludes_dependents_outside_the_cycle() -> None:
    with pytest.raises(CycleDetected) as exc_info:
        _build({"app": ["a"], "a": ["b"], "b": ["a"], "leaf": []})

    assert exc_info.value.members == [path_of("a"), path_of("b")]


def test_filter_keeps_transitive_dependents_in_order() -> None:
    graph = {
        "app": ["svc"],
        "svc": ["log"],
        "log": [],
        "tool": [],
        "other": ["tool"],
    }

    result = _build(graph, filter_modules=[module_of("log")])

    assert names(result.chain) == ["svc", "app"]
    assert result.dep_count == 2


def test_filter_includes_repositories_declaring_external_module() -> None:
    repos = [make_repo("a"), make_repo("b"), make_repo("c")]
    modules = FakeModules(
        manifests={
            path_of("a"): make_manifest("a", [], external=["golang.org/x/net"]),
            path_of("b"): make_manifest("b", ["a"]),
            path_of("c"): make_manifest("c", []),
        }
    )

    result = build_chain(
        repos, modules, mode=DependencyMode.DIRECT, filter_modules=["golang.org/x/net"]
    )

    assert names(result.chain) == ["a", "b"]


def test_filter_matching_nothing_yields_empty_chain() -> None:
    result = _build({"a": [], "b": ["a"]}, filter_modules=["example.com/unknown"])

    assert len(result.chain) == 0
    assert result.dep_count == 0


def test_malformed_manifest_excludes_only_that_repository() -> None:
    repos, _ = build_fleet({"a": [], "bad": [], "b": ["a"]})
    manifests = build_manifests({"a": [], "b": ["a"]})
    modules = FakeModules(manifests=manifests, malformed={path_of("bad")})

    result = build_chain(repos, modules, mode=DependencyMode.RECURSIVE)

    assert names(result.chain) == ["a", "b"]
    assert len(result.warnings) == 1
    assert str(path_of("bad")) in result.warnings[0]


def test_duplicate_module_warns_and_resolves_to_first() -> None:
    repos = [make_repo("a"), make_repo("a-fork"), make_repo("b")]
    modules = FakeModules(
        manifests={
            path_of("a"): make_manifest("a", []),
            path_of("a-fork"): Manifest(module=module_of("a")),
            path_of("b"): make_manifest("b", ["a"]),
        }
    )

    result = build_chain(repos, modules, mode=DependencyMode.DIRECT)

    assert any("provided by both" in warning for warning in result.warnings)
    assert [(e.dependent.name, e.dependency.name) for e in result.edges] == [("b", "a")]


def test_mode_selects_manifest_dependency_set() -> None:
    repos = [make_repo("a"), make_repo("b"), make_repo("c")]
    direct = build_manifests({"a": [], "b": ["a"], "c": []})
    recursive = {path_of("c"): make_manifest("c", ["b", "a"])}
    modules = FakeModules(manifests=direct, recursive_manifests=recursive)

    direct_result = build_chain(repos, modules, mode=DependencyMode.DIRECT)
    recursive_result = build_chain(
        [make_repo("a"), make_repo("b"), make_repo("c")], modules, mode=DependencyMode.RECURSIVE
    )

    assert len(direct_result.edges) == 1
    assert len(recursive_result.edges) == 3
    assert (path_of("c"), DependencyMode.RECURSIVE) in modules.read_calls


def test_manifest_fills_repository_module_and_dependencies() -> None:
    repos, modules = build_fleet({"a": [], "b": ["a"]})

    build_chain(repos, modules, mode=DependencyMode.DIRECT)

    assert repos[1].module == module_of("b")
    assert repos[1].depends_on(module_of("a"))


def test_merge_prefers_most_direct_declaration() -> None:
    declared = {
        "x": DependencySpec("x", "v1.2.0", direct=True),
        "y": DependencySpec("y", "v0.3.0", direct=False),
    }
    resolved = {
        "x": DependencySpec("x", "v1.1.0", direct=False),
        "y": DependencySpec("y", "v0.4.0", direct=False),
        "z": DependencySpec("z", "v2.0.0", direct=False),
    }

    merged = merge_dependency_sets(declared, resolved)

    assert merged["x"].version == "v1.2.0"
    assert merged["x"].direct
    assert merged["y"].version == "v0.3.0"
    assert merged["z"].version == "v2.0.0"


def test_merge_keeps_direct_resolved_entry_over_transitive_declaration() -> None:
    declared = {"x": DependencySpec("x", "v1.0.0", direct=False)}
    resolved = {"x": DependencySpec("x", "v1.5.0", direct=True)}

    merged = merge_dependency_sets(declared, resolved)

    assert merged["x"] == DependencySpec("x", "v1.5.0", direct=True)


def test_empty_working_set() -> None:
    result = build_chain([], FakeModules(), mode=DependencyMode.RECURSIVE)

    assert len(result.chain) == 0
    assert result.warnings == ()