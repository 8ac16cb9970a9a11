"""Applies one action to every repository of a chain.

Independent actions (pull, reset, workflow) are dispatched to a bounded
thread pool. Order-coupled actions (replace, test, sync) run on the calling
thread strictly in chain order, because a repository may consume versions
published by repositories earlier in the same chain.
"""

import logging
import os
from collections.abc import Callable
from concurrent.futures import ThreadPoolExecutor, wait

from modfleet.core.cancellation import CancellationToken
from modfleet.core.chain import Chain
from modfleet.core.context import FleetContext
from modfleet.core.errors import StepFailure
from modfleet.core.git.abc import Git
from modfleet.core.options import Action, RunOptions
from modfleet.core.repository import Repository, StepMarker
from modfleet.core.state import OrchestrationState, Outcome, run_step
from modfleet.core.sync_pipeline import SyncPipeline, describe_sync_steps
from modfleet.core.workflows import install_workflows

logger = logging.getLogger(__name__)

Handler = Callable[[Chain, Repository, OrchestrationState], Outcome]


def progress_line(chain: Chain, repo: Repository) -> str:
    return f"( {chain.position(repo)} / {len(chain)} ) {repo.path}"


class ActionOrchestrator:
    """Runs RunOptions.action over a chain and returns the resulting state."""

    def __init__(self, ctx: FleetContext, options: RunOptions, token: CancellationToken) -> None:
        self._ctx = ctx
        self._options = options
        self._token = token

    def run(self, chain: Chain) -> OrchestrationState:
        state = OrchestrationState(dep_count=len(chain), token=self._token)
        action = self._options.action
        self._announce(chain)

        if action == Action.LIST:
            for repo in chain:
                if self._token.cancelled:
                    state.record(repo, Outcome.SKIPPED)
                    continue
                self._ctx.feedback.info(progress_line(chain, repo))
                state.record(repo, Outcome.SUCCEEDED)
            return state

        if action == Action.SYNC and not self._confirm_sync(chain):
            state.aborted = True
            return state

        handler = self._handler_for(action)
        if action.is_independent:
            self._run_parallel(chain, state, handler)
        else:
            self._run_sequential(chain, state, handler)
        return state

    def _announce(self, chain: Chain) -> None:
        branch = self._options.branch or "current"
        message = (
            f"Performing {self._options.action.value} on {branch} branch "
            f"for {len(chain)} repositories"
        )
        if self._options.filter_modules:
            message += f" depending on {', '.join(sorted(self._options.filter_modules))}"
        self._ctx.feedback.info(message)

    def _confirm_sync(self, chain: Chain) -> bool:
        feedback = self._ctx.feedback
        for repo in chain:
            feedback.info(f"{chain.position(repo)}) {repo.display_name}")
        feedback.info("")
        feedback.info("Sync action will:")
        for step in describe_sync_steps(self._options):
            feedback.info(f"  - {step}")

        if self._options.assume_yes:
            return True
        if feedback.confirm("Is this ok?"):
            return True
        feedback.warning("Aborted, no changes were made.")
        return False

    def _handler_for(self, action: Action) -> Handler:
        handlers: dict[Action, Handler] = {
            Action.PULL: self._pull,
            Action.RESET: self._reset,
            Action.WORKFLOW: self._workflow,
            Action.REPLACE: self._replace,
            Action.TEST: self._test,
            Action.SYNC: self._sync,
        }
        return handlers[action]

    def _run_parallel(self, chain: Chain, state: OrchestrationState, handler: Handler) -> None:
        workers = self._options.workers or os.cpu_count() or 1
        logger.debug("dispatching %d repositories to %d workers", len(chain), workers)
        with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="modfleet") as pool:
            futures = []
            for repo in chain:
                if self._token.cancelled:
                    state.record(repo, Outcome.SKIPPED)
                    continue
                futures.append(pool.submit(self._run_unit, chain, repo, state, handler))
            wait(futures)
        for future in futures:
            # re-raise unexpected worker errors
            future.result()

    def _run_sequential(self, chain: Chain, state: OrchestrationState, handler: Handler) -> None:
        for repo in chain:
            self._run_unit(chain, repo, state, handler)

    def _run_unit(
        self, chain: Chain, repo: Repository, state: OrchestrationState, handler: Handler
    ) -> None:
        if self._token.cancelled:
            state.record(repo, Outcome.SKIPPED)
            return

        self._ctx.feedback.info("")
        self._ctx.feedback.info(progress_line(chain, repo))
        try:
            outcome = handler(chain, repo, state)
        except StepFailure as e:
            state.fail(e)
            self._ctx.feedback.error(f"  Error: {e}")
            return
        state.record(repo, outcome)

    def _sync(self, chain: Chain, repo: Repository, state: OrchestrationState) -> Outcome:
        return SyncPipeline(self._ctx, self._options, state).run(chain, repo)

    def _pull(self, chain: Chain, repo: Repository, state: OrchestrationState) -> Outcome:
        if repo.is_pinned:
            state.notice(f"{repo.path}: already has version set: {repo.version}")
            self._ctx.feedback.info(f"  Already has version set: {repo.version}")
            return Outcome.SKIPPED

        git = self._ctx.git
        branch = self._options.branch
        if branch and branch != git.get_current_branch(repo.path):
            if git.branch_exists(repo.path, branch):
                run_step(repo, "checkout", lambda: git.checkout_branch(repo.path, branch))
            else:
                self._ctx.feedback.warning(f"  Branch {branch} does not exist, pulling current")
        run_step(repo, "pull", lambda: git.pull(repo.path, ff_only=True))
        self._ctx.feedback.success("  Pulled latest changes")
        return Outcome.SUCCEEDED

    def _reset(self, chain: Chain, repo: Repository, state: OrchestrationState) -> Outcome:
        git = self._ctx.git
        trunk = run_step(repo, "fetch", lambda: _fetch_trunk(git, repo))
        run_step(repo, "checkout", lambda: git.checkout_branch(repo.path, trunk))
        run_step(repo, "reset", lambda: git.reset_hard(repo.path, f"origin/{trunk}"))
        self._ctx.feedback.success(f"  Reset to origin/{trunk}")
        return Outcome.SUCCEEDED

    def _workflow(self, chain: Chain, repo: Repository, state: OrchestrationState) -> Outcome:
        source = self._options.workflow_source
        if source is None:
            raise StepFailure(repo.path, "workflow", ValueError("no workflow source configured"))

        if self._ctx.dry_run:
            self._ctx.feedback.info(f"  [DRY RUN] Would install workflows from {source}")
            return Outcome.SUCCEEDED

        changed = run_step(repo, "workflow", lambda: install_workflows(source, repo.path))
        if not changed:
            self._ctx.feedback.info("  Workflows already up to date")
            return Outcome.SUCCEEDED

        repo.mark(StepMarker.UPDATED)
        for path in changed:
            self._ctx.feedback.info(f"  Installed {path.relative_to(repo.path)}")
        if self._options.commit:
            message = self._options.commit_message
            run_step(repo, "commit", lambda: self._ctx.git.commit_all(repo.path, message))
            repo.mark(StepMarker.COMMITTED)
        return Outcome.SUCCEEDED

    def _replace(self, chain: Chain, repo: Repository, state: OrchestrationState) -> Outcome:
        modules = self._ctx.modules
        for dependency in chain.before(repo):
            if not dependency.module or not repo.depends_on(dependency.module):
                continue
            replaced = run_step(
                repo,
                "replace",
                lambda: modules.replace_local(repo.path, dependency.module, dependency.path),
            )
            if replaced:
                repo.mark(StepMarker.UPDATED)
                self._ctx.feedback.info(f"  {dependency.module} => {dependency.path}")
        return Outcome.SUCCEEDED

    def _test(self, chain: Chain, repo: Repository, state: OrchestrationState) -> Outcome:
        modules = self._ctx.modules
        primary: StepFailure | None = None
        try:
            self._replace(chain, repo, state)
            if not run_step(repo, "test", lambda: modules.run_tests(repo.path)):
                raise StepFailure(repo.path, "test", RuntimeError("tests failed"))
        except StepFailure as e:
            primary = e
            raise
        finally:
            try:
                run_step(repo, "restore", lambda: modules.drop_local_replacements(repo.path))
            except StepFailure as restore_failure:
                if primary is None:
                    raise
                # the replace or test failure stays the one reported for the unit
                state.fail(restore_failure)
                self._ctx.feedback.error(f"  Error: {restore_failure}")

        self._ctx.feedback.success("  Tests passed")
        return Outcome.SUCCEEDED


def _fetch_trunk(git: Git, repo: Repository) -> str:
    git.fetch(repo.path)
    return git.get_trunk_branch(repo.path)
