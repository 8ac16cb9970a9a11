"""Tests for the version-sync pipeline run through the orchestrator."""

from collections.abc import Callable
from pathlib import Path

from modfleet.core.cancellation import CancellationToken
from modfleet.core.chain import Chain
from modfleet.core.context import FleetContext
from modfleet.core.git.fake import FakeGit
from modfleet.core.github.fake import FakeGitHub
from modfleet.core.graph import build_chain
from modfleet.core.modules.types import DependencyMode
from modfleet.core.options import Action, RunOptions
from modfleet.core.orchestrator import ActionOrchestrator
from modfleet.core.repository import StepMarker
from modfleet.core.state import OrchestrationState, Outcome
from modfleet.core.sync_pipeline import describe_sync_steps
from modfleet.core.user_feedback import FakeUserFeedback
from tests.test_utils.fleet import build_fleet, module_of, path_of

CHAIN_GRAPH = {"a": ["b"], "b": ["c"], "c": []}


class _Fleet:
    """A FakeGit/FakeModules pair where updating a dependency dirties the tree."""

    def __init__(
        self,
        graph: dict[str, list[str]],
        *,
        tags: dict[Path, list[str]] | None = None,
        git_failing: dict[str, set[Path]] | None = None,
        pinned: dict[str, str] | None = None,
        on_require: Callable[[Path, str, str], None] | None = None,
    ) -> None:
        self.dirty: set[Path] = set()
        self._extra_hook = on_require
        self.git = FakeGit(dirty=self.dirty, tags=tags, failing=git_failing)
        self.github = FakeGitHub()
        self.feedback = FakeUserFeedback()
        repos, self.modules = build_fleet(graph, pinned=pinned, on_require=self._on_require)
        self.chain: Chain = build_chain(repos, self.modules, mode=DependencyMode.RECURSIVE).chain
        self.state: OrchestrationState | None = None

    def _on_require(self, repo_root: Path, module: str, version: str) -> None:
        self.dirty.add(repo_root)
        if self._extra_hook is not None:
            self._extra_hook(repo_root, module, version)

    def run(self, token: CancellationToken | None = None, **options: object) -> OrchestrationState:
        ctx = FleetContext.for_test(
            git=self.git, github=self.github, modules=self.modules, feedback=self.feedback
        )
        run_options = RunOptions(
            action=Action.SYNC, assume_yes=True, **options  # type: ignore[arg-type]
        )
        self.state = ActionOrchestrator(ctx, run_options, token or CancellationToken()).run(
            self.chain
        )
        return self.state


def test_versions_flow_down_the_chain_in_order() -> None:
    fleet = _Fleet(CHAIN_GRAPH, tags={path_of("c"): ["v1.0.0"]})

    state = fleet.run(commit=True, tag=True)

    assert fleet.modules.required == [
        (path_of("b"), module_of("c"), "v1.0.0"),
        (path_of("a"), module_of("b"), "v0.0.1"),
    ]
    assert fleet.git.created_tags == [(path_of("b"), "v0.0.1"), (path_of("a"), "v0.0.1")]
    assert fleet.git.pushed_tags == fleet.git.created_tags
    assert state.resolved_versions == {
        module_of("c"): "v1.0.0",
        module_of("b"): "v0.0.1",
        module_of("a"): "v0.0.1",
    }
    assert state.count(Outcome.SUCCEEDED) == 3


def test_dependency_published_before_dependent_reads_it() -> None:
    observed: list[tuple[Path, dict[str, str]]] = []

    def on_require(repo_root: Path, module: str, version: str) -> None:
        observed.append((repo_root, {module: version}))

    fleet = _Fleet(CHAIN_GRAPH, tags={path_of("c"): ["v1.0.0"]}, on_require=on_require)

    fleet.run(commit=True)

    assert [path for path, _ in observed] == [path_of("b"), path_of("a")]
    # b publishes its new head commit, which a then consumes
    assert observed[1][1] == {module_of("b"): "b-1"}


def test_untagged_commit_publishes_head_commit() -> None:
    fleet = _Fleet({"a": ["b"], "b": []}, tags={path_of("b"): ["v0.9.0"]})

    state = fleet.run(commit=True)

    assert state.resolved_versions[module_of("a")] == "a-1"
    assert fleet.git.commits == [(path_of("a"), RunOptions(action=Action.SYNC).commit_message)]
    assert fleet.git.pushed == [(path_of("a"), "main")]
    assert fleet.git.created_tags == []


def test_updates_without_commit_leave_tree_dirty() -> None:
    fleet = _Fleet({"a": ["b"], "b": []}, tags={path_of("b"): ["v0.9.0"]})

    fleet.run()

    assert fleet.git.commits == []
    assert path_of("a") in fleet.dirty
    assert fleet.chain[1].completed == [StepMarker.UPDATED]


def test_step_failure_abandons_only_that_repository() -> None:
    fleet = _Fleet(
        {"a": ["b"], "b": ["c"], "c": [], "d": []},
        tags={path_of("c"): ["v1.0.0"]},
        git_failing={"push": {path_of("b")}},
    )

    state = fleet.run(commit=True, tag=True)

    failures = state.errors.step_failures
    assert [(failure.repository, failure.step) for failure in failures] == [(path_of("b"), "push")]
    assert state.outcomes[path_of("b")] == Outcome.FAILED
    assert (path_of("b"), "v0.0.1") not in fleet.git.created_tags
    # b never published a version, so a keeps its existing constraint
    assert [path for path, _, _ in fleet.modules.required] == [path_of("b")]
    assert state.outcomes[path_of("a")] == Outcome.SUCCEEDED
    assert state.outcomes[path_of("d")] == Outcome.SUCCEEDED


def test_pinned_repository_is_skipped_but_publishes_its_version() -> None:
    fleet = _Fleet(CHAIN_GRAPH, pinned={"b": "v2.5.0"})

    state = fleet.run(commit=True)

    assert state.outcomes[path_of("b")] == Outcome.SKIPPED
    assert any("v2.5.0" in notice for notice in state.notices)
    assert fleet.modules.required == [(path_of("a"), module_of("b"), "v2.5.0")]
    assert all(path != path_of("b") for path, _ in fleet.git.commits)


def test_branch_created_pull_request_opened_and_unused_branch_removed() -> None:
    fleet = _Fleet({"a": ["b"], "b": []}, tags={path_of("b"): ["v1.0.0"]})

    state = fleet.run(
        branch="deps/sync", commit=True, pull_request=True, commit_message="Bump deps\n\nBody"
    )

    assert fleet.git.created_branches == [
        (path_of("b"), "deps/sync"),
        (path_of("a"), "deps/sync"),
    ]
    # b had nothing to commit, so its branch is dropped and trunk restored
    assert fleet.git.deleted_branches == [(path_of("b"), "deps/sync")]
    assert (path_of("b"), "main") in fleet.git.checkouts
    assert fleet.git.pushed == [(path_of("a"), "deps/sync")]
    assert len(fleet.github.created_prs) == 1
    pr_path, pr_branch, pr_title, _, pr_base = fleet.github.created_prs[0]
    assert (pr_path, pr_branch, pr_title, pr_base) == (
        path_of("a"),
        "deps/sync",
        "Bump deps",
        "main",
    )
    assert fleet.chain[1].has(StepMarker.PR_OPENED)
    assert state.count(Outcome.SUCCEEDED) == 2


def test_existing_branch_is_checked_out_not_created() -> None:
    fleet = _Fleet({"a": []})
    fleet.git = FakeGit(dirty=fleet.dirty, branches={path_of("a"): {"deps"}})

    fleet.run(branch="deps")

    assert fleet.git.checkouts == [(path_of("a"), "deps")]
    assert fleet.git.created_branches == []
    assert fleet.git.deleted_branches == []


def test_set_version_tags_every_repository() -> None:
    fleet = _Fleet(CHAIN_GRAPH)

    state = fleet.run(set_version="v3.0.0", tag=True)

    assert [tag for _, tag in fleet.git.created_tags] == ["v3.0.0"] * 3
    assert fleet.modules.required == [
        (path_of("b"), module_of("c"), "v3.0.0"),
        (path_of("a"), module_of("b"), "v3.0.0"),
    ]
    assert all(repo.has(StepMarker.TAGGED) for repo in fleet.chain)
    assert state.count(Outcome.SUCCEEDED) == 3


def test_unchanged_repository_is_not_retagged() -> None:
    fleet = _Fleet({"a": []}, tags={path_of("a"): ["v1.0.0"]})

    state = fleet.run(commit=True, tag=True)

    assert fleet.git.created_tags == []
    assert state.resolved_versions == {module_of("a"): "v1.0.0"}


def test_cancellation_stops_before_next_step() -> None:
    token = CancellationToken()

    def cancel_on_require(repo_root: Path, module: str, version: str) -> None:
        token.cancel("received SIGINT")

    fleet = _Fleet(CHAIN_GRAPH, tags={path_of("c"): ["v1.0.0"]}, on_require=cancel_on_require)

    state = fleet.run(token=token, commit=True)

    # b was updated, then the run stopped before committing
    assert fleet.git.commits == []
    assert state.outcomes[path_of("b")] == Outcome.SKIPPED
    assert state.outcomes[path_of("a")] == Outcome.SKIPPED
    assert any("Stopping before commit" in line for line in fleet.feedback.lines("warning"))


def test_describe_sync_steps() -> None:
    assert describe_sync_steps(RunOptions(action=Action.SYNC)) == ["update mod files"]
    assert describe_sync_steps(
        RunOptions(action=Action.SYNC, pull_request=True, tag=True, set_version="v2.0.0")
    ) == [
        "update mod files",
        "open pull request for changes (if any)",
        "tag all dependencies v2.0.0",
    ]
