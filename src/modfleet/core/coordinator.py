"""Run lifecycle: discover, shelve, build the chain, orchestrate, restore.

ShutdownCoordinator owns the cancellation token for a run. Local changes in
every discovered repository are shelved before anything else happens and
restored exactly once when the run ends, whether it completed, failed,
was declined, or was interrupted.
"""

import logging
import signal
import threading
from collections.abc import Callable
from concurrent.futures import Future, ThreadPoolExecutor, wait
from dataclasses import dataclass, field
from pathlib import Path
from types import FrameType

from modfleet.core.cancellation import CancellationToken
from modfleet.core.chain import Chain
from modfleet.core.context import FleetContext
from modfleet.core.errors import (
    CleanupFailure,
    CycleDetected,
    DiscoveryError,
    ModfleetError,
    StepFailure,
)
from modfleet.core.graph import build_chain
from modfleet.core.options import Action, RunOptions
from modfleet.core.orchestrator import ActionOrchestrator
from modfleet.core.repository import Repository, StepMarker
from modfleet.core.state import Outcome

logger = logging.getLogger(__name__)

_POLL_INTERVAL = 0.1


@dataclass
class RunReport:
    """Everything observable about a finished run."""

    action: Action
    repositories: list[Repository] = field(default_factory=list)
    chain: Chain | None = None
    dep_count: int = 0
    errors: list[Exception] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    notices: list[str] = field(default_factory=list)
    outcomes: dict[Path, Outcome] = field(default_factory=dict)
    cleanup_failure: CleanupFailure | None = None
    fatal_error: ModfleetError | None = None
    aborted: bool = False
    cancelled: bool = False

    @property
    def step_failures(self) -> list[StepFailure]:
        return [error for error in self.errors if isinstance(error, StepFailure)]

    @property
    def exit_code(self) -> int:
        if (
            self.fatal_error is not None
            or self.cleanup_failure is not None
            or self.aborted
            or self.cancelled
            or self.step_failures
        ):
            return 1
        return 0


class ShutdownCoordinator:
    """Runs one action end to end and guarantees cleanup.

    Example:
        >>> coordinator = ShutdownCoordinator(ctx, RunOptions(action=Action.PULL))
        >>> report = coordinator.run()
        >>> raise SystemExit(report.exit_code)
    """

    def __init__(
        self,
        ctx: FleetContext,
        options: RunOptions,
        token: CancellationToken | None = None,
    ) -> None:
        self._ctx = ctx
        self._options = options
        self._token = token if token is not None else CancellationToken()

    @property
    def token(self) -> CancellationToken:
        return self._token

    def cancel(self, reason: str = "cancelled") -> bool:
        """Request a graceful stop.

        Returns:
            True only for the call that triggered cancellation
        """
        return self._token.cancel(reason)

    def start(self) -> "Future[RunReport]":
        """Submit the whole lifecycle as one background task."""
        executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="modfleet-run")
        future = executor.submit(self._lifecycle)
        executor.shutdown(wait=False)
        return future

    def run(self) -> RunReport:
        """Run to completion, including cleanup.

        When called on the main thread, SIGINT and SIGTERM cancel the run
        instead of killing the process, so shelved changes are restored.
        """
        future = self.start()
        if threading.current_thread() is not threading.main_thread():
            return future.result()

        previous = {
            sig: signal.signal(sig, self._handle_signal) for sig in (signal.SIGINT, signal.SIGTERM)
        }
        try:
            while not future.done():
                wait([future], timeout=_POLL_INTERVAL)
            return future.result()
        finally:
            for sig, handler in previous.items():
                signal.signal(sig, handler)

    def run_then(self, callback: Callable[[RunReport], None]) -> RunReport:
        report = self.run()
        callback(report)
        return report

    def _handle_signal(self, signum: int, frame: FrameType | None) -> None:
        name = signal.Signals(signum).name
        if self.cancel(f"received {name}"):
            self._ctx.feedback.warning(f"\nReceived {name}, finishing current steps...")

    def _lifecycle(self) -> RunReport:
        report = RunReport(action=self._options.action)
        try:
            self._execute(report)
        except (DiscoveryError, CycleDetected) as e:
            report.fatal_error = e
            self._ctx.feedback.error(f"Error: {e}")
        finally:
            if report.fatal_error is not None or report.step_failures:
                self._ctx.feedback.info("\nEncountered error! Cleaning...")
            else:
                self._ctx.feedback.info("\nFinishing up. Cleaning...")
            report.cleanup_failure = self._restore(report.repositories)
            report.cancelled = self._token.cancelled
        return report

    def _execute(self, report: RunReport) -> None:
        feedback = self._ctx.feedback
        targets = self._options.targets or (str(self._ctx.cwd),)
        feedback.info(f"Searching {', '.join(targets)} for git repositories...")
        report.repositories = self._ctx.discovery.discover(targets)
        feedback.info(
            f"Found {len(report.repositories)} repositories. Scanning for dependencies..."
        )

        shelved = self._shelve(report)
        if self._token.cancelled:
            return

        result = build_chain(
            shelved,
            self._ctx.modules,
            mode=self._options.mode,
            filter_modules=self._options.filter_modules,
        )
        report.chain = result.chain
        report.dep_count = result.dep_count
        report.warnings.extend(result.warnings)
        for warning in result.warnings:
            feedback.warning(warning)

        state = ActionOrchestrator(self._ctx, self._options, self._token).run(result.chain)
        report.errors.extend(state.errors.snapshot())
        report.outcomes.update(state.outcomes)
        report.notices.extend(state.notices)
        report.aborted = state.aborted

    def _shelve(self, report: RunReport) -> list[Repository]:
        """Stash local changes in every discovered repository.

        A repository whose changes cannot be shelved is left out of the run.

        Returns:
            Repositories that are safe to operate on
        """
        shelved: list[Repository] = []
        for repo in report.repositories:
            try:
                stashed = self._ctx.git.stash(repo.path)
            except RuntimeError as e:
                failure = StepFailure(repo.path, "stash", e)
                report.errors.append(failure)
                report.outcomes[repo.path] = Outcome.FAILED
                self._ctx.feedback.error(f"Error: {failure}")
                continue
            if stashed:
                repo.mark(StepMarker.STASHED)
                logger.debug("shelved local changes in %s", repo.path)
            shelved.append(repo)
        return shelved

    def _restore(self, repositories: list[Repository]) -> CleanupFailure | None:
        failed: list[Path] = []
        causes: list[BaseException] = []
        for repo in repositories:
            try:
                self._ctx.git.unstash(repo.path)
            except RuntimeError as e:
                failed.append(repo.path)
                causes.append(e)
        if not failed:
            return None
        failure = CleanupFailure(failed, causes)
        self._ctx.feedback.error(f"Error: {failure}")
        return failure
