"""Actions and per-run options."""

from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from modfleet.core.global_config import DEFAULT_COMMIT_MESSAGE, DEFAULT_PR_BODY
from modfleet.core.modules.types import DependencyMode


class Action(Enum):
    LIST = "list"
    PULL = "pull"
    RESET = "reset"
    WORKFLOW = "workflow"
    REPLACE = "replace"
    TEST = "test"
    SYNC = "sync"

    @property
    def is_independent(self) -> bool:
        """Whether repositories can be processed in any order, in parallel.

        Order-coupled actions read state written by earlier repositories in
        the same run and must run sequentially in chain order.
        """
        return self in (Action.PULL, Action.RESET, Action.WORKFLOW)


@dataclass(frozen=True)
class RunOptions:
    """Everything one run needs besides the context."""

    action: Action
    targets: tuple[str, ...] = ()
    mode: DependencyMode = DependencyMode.RECURSIVE
    filter_modules: frozenset[str] = frozenset()
    branch: str | None = None
    commit: bool = False
    pull_request: bool = False
    tag: bool = False
    set_version: str | None = None
    commit_message: str = DEFAULT_COMMIT_MESSAGE
    pr_body: str = DEFAULT_PR_BODY
    workflow_source: Path | None = None
    workers: int | None = None
    assume_yes: bool = False

    @property
    def commit_title(self) -> str:
        return self.commit_message.strip().splitlines()[0] if self.commit_message.strip() else ""
