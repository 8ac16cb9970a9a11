"""Cooperative cancellation shared by every execution unit of a run."""

import threading


class CancellationToken:
    """Write-once cancellation flag.

    Triggered by signal handlers or a manual cancel; read by pool tasks and
    pipeline steps at their checkpoints. Triggering more than once is a no-op.
    """

    def __init__(self) -> None:
        self._event = threading.Event()
        self._lock = threading.Lock()
        self._reason: str | None = None

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    @property
    def reason(self) -> str | None:
        return self._reason

    def cancel(self, reason: str = "cancelled") -> bool:
        """Set the flag.

        Returns:
            True if this call triggered cancellation, False if it was already set
        """
        with self._lock:
            if self._event.is_set():
                return False
            self._reason = reason
            self._event.set()
            return True

    def wait(self, timeout: float | None = None) -> bool:
        return self._event.wait(timeout)
