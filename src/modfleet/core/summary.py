"""End-of-run summary derived from a RunReport."""

from dataclasses import dataclass

from modfleet.core.coordinator import RunReport
from modfleet.core.errors import CleanupFailure, ModfleetError, StepFailure
from modfleet.core.options import Action
from modfleet.core.repository import StepMarker
from modfleet.core.state import Outcome

# Markers that mean this run changed something in the repository
_CHANGE_MARKERS = frozenset(
    {
        StepMarker.UPDATED,
        StepMarker.COMMITTED,
        StepMarker.PUSHED,
        StepMarker.TAGGED,
        StepMarker.PR_OPENED,
    }
)


@dataclass(frozen=True)
class RunSummary:
    action: Action
    dep_count: int
    succeeded: int
    skipped: int
    failed: int
    failures: tuple[StepFailure, ...]
    warnings: tuple[str, ...]
    notices: tuple[str, ...]
    cleanup_failure: CleanupFailure | None
    fatal_error: ModfleetError | None
    aborted: bool
    cancelled: bool
    exit_code: int

    @property
    def ok(self) -> bool:
        return self.exit_code == 0


def summarize(report: RunReport) -> RunSummary:
    outcomes = list(report.outcomes.values())
    return RunSummary(
        action=report.action,
        dep_count=report.dep_count,
        succeeded=outcomes.count(Outcome.SUCCEEDED),
        skipped=outcomes.count(Outcome.SKIPPED),
        failed=outcomes.count(Outcome.FAILED),
        failures=tuple(report.step_failures),
        warnings=tuple(report.warnings),
        notices=tuple(report.notices),
        cleanup_failure=report.cleanup_failure,
        fatal_error=report.fatal_error,
        aborted=report.aborted,
        cancelled=report.cancelled,
        exit_code=report.exit_code,
    )


def names_to_report(report: RunReport) -> list[str]:
    """Remote names for --names-only output, in chain order.

    Every repository for `list`; otherwise only repositories this run changed.
    """
    if report.chain is None:
        return []
    return [
        repo.display_name
        for repo in report.chain
        if report.action == Action.LIST or _CHANGE_MARKERS.intersection(repo.completed)
    ]
