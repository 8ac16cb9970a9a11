"""Mutable state shared by the execution units of one orchestration run."""

import threading
from collections.abc import Callable, Iterator
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import TypeVar

from modfleet.core.cancellation import CancellationToken
from modfleet.core.errors import StepFailure
from modfleet.core.repository import Repository

# Errors raised by integrations (subprocess wrappers, file I/O, version parsing)
STEP_ERRORS = (RuntimeError, OSError, ValueError)

T = TypeVar("T")


class Outcome(Enum):
    SUCCEEDED = "succeeded"
    SKIPPED = "skipped"
    FAILED = "failed"


class ErrorLog:
    """Append-only error accumulator safe for concurrent writers."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._errors: list[Exception] = []

    def append(self, error: Exception) -> None:
        with self._lock:
            self._errors.append(error)

    def snapshot(self) -> list[Exception]:
        with self._lock:
            return list(self._errors)

    def __len__(self) -> int:
        with self._lock:
            return len(self._errors)

    def __iter__(self) -> Iterator[Exception]:
        return iter(self.snapshot())

    @property
    def step_failures(self) -> list[StepFailure]:
        return [error for error in self.snapshot() if isinstance(error, StepFailure)]


@dataclass
class OrchestrationState:
    """State of one orchestration run.

    resolved_versions maps a module identifier to the version its repository
    published earlier in this run; only sequential actions write it.
    """

    dep_count: int
    token: CancellationToken
    errors: ErrorLog = field(default_factory=ErrorLog)
    outcomes: dict[Path, Outcome] = field(default_factory=dict)
    notices: list[str] = field(default_factory=list)
    resolved_versions: dict[str, str] = field(default_factory=dict)
    aborted: bool = False
    _lock: threading.Lock = field(default_factory=threading.Lock, repr=False)

    def record(self, repo: Repository, outcome: Outcome) -> None:
        with self._lock:
            self.outcomes[repo.path] = outcome

    def notice(self, message: str) -> None:
        with self._lock:
            self.notices.append(message)

    def fail(self, failure: StepFailure) -> None:
        self.errors.append(failure)
        with self._lock:
            self.outcomes[failure.repository] = Outcome.FAILED

    def count(self, outcome: Outcome) -> int:
        with self._lock:
            return sum(1 for value in self.outcomes.values() if value == outcome)


def run_step(repo: Repository, step: str, fn: Callable[[], T]) -> T:
    """Run one pipeline step, converting integration errors into StepFailure."""
    try:
        return fn()
    except STEP_ERRORS as e:
        raise StepFailure(repo.path, step, e) from e
