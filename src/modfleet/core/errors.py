"""Error taxonomy for fleet orchestration.

Propagation rules:
- DiscoveryError and CycleDetected end a run before any action executes.
- ManifestParseError only drops the offending repository from the chain.
- StepFailure only abandons the remaining steps of one repository.
- CleanupFailure is reported on the run report, never raised to the caller.
"""

from pathlib import Path


class ModfleetError(Exception):
    """Base class for all modfleet errors."""


class DiscoveryError(ModfleetError):
    """Raised when target directories cannot be enumerated."""


class ManifestParseError(ModfleetError):
    """Raised when a repository's dependency manifest is malformed."""

    def __init__(self, path: Path, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"Could not parse manifest in {path}: {reason}")


class CycleDetected(ModfleetError):
    """Raised when the dependency graph among the working set is not a DAG."""

    def __init__(self, members: list[Path]):
        self.members = members
        names = ", ".join(str(member) for member in members)
        super().__init__(f"Dependency cycle detected between: {names}")


class StepFailure(ModfleetError):
    """One pipeline step failed for one repository."""

    def __init__(self, repository: Path, step: str, cause: BaseException):
        self.repository = repository
        self.step = step
        self.cause = cause
        super().__init__(f"{step} failed in {repository}: {cause}")


class CleanupFailure(ModfleetError):
    """Restoring shelved changes failed for one or more repositories."""

    def __init__(self, paths: list[Path], causes: list[BaseException] | None = None):
        self.paths = paths
        self.causes = causes or []
        joined = "\n  ".join(str(path) for path in paths)
        super().__init__(
            f"Failed to restore local changes in:\n  {joined}\n"
            "Check for leftover stashes with 'git stash list'."
        )
