"""Version-sync pipeline for a single repository.

Steps run in a fixed order for each repository in the chain:

1. branch          checkout (or create) the target branch
2. update          merge versions published earlier in this run
3. commit          commit local changes (if --commit and the tree is dirty)
4. push            push the committed branch
5. pull-request    open a pull request (if --pr and there are new commits)
6. cleanup-branch  delete a branch created by this run that ended up unused
7. tag             tag the new version (if --tag)

The cancellation token is checked before every step. A failing step raises
StepFailure and abandons the remaining steps of that repository only.
"""

import logging
from dataclasses import dataclass
from functools import partial

from modfleet.core.chain import Chain
from modfleet.core.context import FleetContext
from modfleet.core.options import RunOptions
from modfleet.core.repository import Repository, StepMarker
from modfleet.core.state import OrchestrationState, Outcome, run_step
from modfleet.core.versioning import next_patch_version

logger = logging.getLogger(__name__)


@dataclass
class _SyncRun:
    """Branch bookkeeping for one repository's pass through the pipeline."""

    trunk: str = ""
    original_branch: str | None = None
    created_branch: str | None = None
    new_tag: str | None = None


def describe_sync_steps(options: RunOptions) -> list[str]:
    """Human-readable list of what a sync run with these options will do."""
    steps: list[str] = []
    if options.branch:
        steps.append(f"checkout (or create) branch {options.branch}")
    steps.append("update mod files")
    if options.commit:
        steps.append("commit local changes (if any)")
    if options.pull_request:
        steps.append("open pull request for changes (if any)")
    if options.tag:
        if options.set_version:
            steps.append(f"tag all dependencies {options.set_version}")
        else:
            steps.append("increment tag version (if updated)")
    return steps


class SyncPipeline:
    """Runs the sync steps for repositories of one chain, in chain order."""

    def __init__(self, ctx: FleetContext, options: RunOptions, state: OrchestrationState) -> None:
        self._ctx = ctx
        self._options = options
        self._state = state

    def run(self, chain: Chain, repo: Repository) -> Outcome:
        if repo.is_pinned:
            message = f"{repo.path}: already has version set: {repo.version}"
            self._state.notice(message)
            self._ctx.feedback.info(f"  Already has version set: {repo.version}")
            if repo.module:
                self._state.resolved_versions[repo.module] = repo.version
            return Outcome.SKIPPED

        sync = _SyncRun()
        steps = [
            ("branch", self._checkout_branch),
            ("update", self._merge_versions),
            ("commit", self._commit),
            ("push", self._push),
            ("pull-request", self._open_pull_request),
            ("cleanup-branch", self._remove_branch_if_unused),
            ("tag", self._tag),
        ]
        for name, step in steps:
            if self._state.token.cancelled:
                self._ctx.feedback.warning(
                    f"  Stopping before {name} in {repo.path}: {self._state.token.reason}"
                )
                return Outcome.SKIPPED
            logger.debug("sync step %s in %s", name, repo.path)
            run_step(repo, name, partial(step, chain, repo, sync))

        run_step(repo, "publish", partial(self._publish, repo, sync))
        return Outcome.SUCCEEDED

    def _checkout_branch(self, chain: Chain, repo: Repository, sync: _SyncRun) -> None:
        git = self._ctx.git
        sync.trunk = git.get_trunk_branch(repo.path)
        sync.original_branch = git.get_current_branch(repo.path)

        branch = self._options.branch
        if not branch or branch == sync.original_branch:
            return
        if git.branch_exists(repo.path, branch):
            git.checkout_branch(repo.path, branch)
        else:
            git.create_branch(repo.path, branch)
            sync.created_branch = branch
            self._ctx.feedback.info(f"  Created branch {branch}")

    def _merge_versions(self, chain: Chain, repo: Repository, sync: _SyncRun) -> None:
        for dependency in chain.before(repo):
            if not dependency.module or not repo.depends_on(dependency.module):
                continue
            version = self._state.resolved_versions.get(dependency.module)
            if version is None:
                continue
            if self._ctx.modules.require(repo.path, dependency.module, version):
                repo.mark(StepMarker.UPDATED)
                self._ctx.feedback.info(f"  Updated {dependency.module} to {version}")

    def _commit(self, chain: Chain, repo: Repository, sync: _SyncRun) -> None:
        if not self._options.commit:
            return
        if not self._ctx.git.has_uncommitted_changes(repo.path):
            return
        self._ctx.git.commit_all(repo.path, self._options.commit_message)
        repo.mark(StepMarker.COMMITTED)
        self._ctx.feedback.info("  Committed changes")

    def _push(self, chain: Chain, repo: Repository, sync: _SyncRun) -> None:
        if not repo.has(StepMarker.COMMITTED):
            return
        branch = self._ctx.git.get_current_branch(repo.path) or sync.trunk
        self._ctx.git.push(repo.path, branch)
        repo.mark(StepMarker.PUSHED)
        self._ctx.feedback.info(f"  Pushed {branch}")

    def _open_pull_request(self, chain: Chain, repo: Repository, sync: _SyncRun) -> None:
        if not self._options.pull_request:
            return
        git = self._ctx.git
        branch = git.get_current_branch(repo.path)
        if branch is None or branch == sync.trunk:
            self._ctx.feedback.warning(f"  Not opening a pull request from {branch or 'HEAD'}")
            return
        if git.commits_ahead_of(repo.path, sync.trunk) == 0:
            return

        pr = self._ctx.github.create_pr(
            repo.path,
            branch,
            self._options.commit_title,
            self._options.pr_body,
            base=sync.trunk,
        )
        repo.mark(StepMarker.PR_OPENED)
        self._ctx.feedback.success(f"  Opened pull request {pr.url}")

    def _remove_branch_if_unused(self, chain: Chain, repo: Repository, sync: _SyncRun) -> None:
        branch = sync.created_branch
        if branch is None:
            return
        git = self._ctx.git
        if git.commits_ahead_of(repo.path, sync.trunk) > 0:
            return
        if git.has_uncommitted_changes(repo.path):
            return
        git.checkout_branch(repo.path, sync.original_branch or sync.trunk)
        git.delete_branch(repo.path, branch, force=False)
        self._ctx.feedback.info(f"  Removed unused branch {branch}")

    def _tag(self, chain: Chain, repo: Repository, sync: _SyncRun) -> None:
        if not self._options.tag:
            return
        git = self._ctx.git
        if self._options.set_version:
            tag = self._options.set_version
        elif repo.has(StepMarker.COMMITTED):
            tag = next_patch_version(git.latest_tag(repo.path))
        else:
            return

        git.tag(repo.path, tag, self._options.commit_title or tag)
        git.push_tag(repo.path, tag)
        repo.mark(StepMarker.TAGGED)
        sync.new_tag = tag
        self._ctx.feedback.success(f"  Tagged {tag}")

    def _publish(self, repo: Repository, sync: _SyncRun) -> None:
        if not repo.module:
            return
        git = self._ctx.git
        if sync.new_tag is not None:
            version = sync.new_tag
        elif repo.has(StepMarker.COMMITTED):
            version = git.head_commit(repo.path)
        else:
            version = git.latest_tag(repo.path)
        if version:
            self._state.resolved_versions[repo.module] = version
