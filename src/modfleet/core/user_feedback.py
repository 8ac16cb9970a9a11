"""User-facing diagnostic output with mode awareness."""

import threading
from abc import ABC, abstractmethod

import click

from modfleet.cli.output import user_output


class UserFeedback(ABC):
    """Provides user-facing diagnostic output that's mode-aware.

    This abstraction eliminates the need to thread 'quiet' booleans through
    function signatures. Instead, orchestration code calls ctx.feedback
    methods which automatically handle output suppression based on the mode.

    Two modes:
    - Interactive: Show all diagnostics (info, success, warnings, errors)
    - Quiet: Suppress diagnostics, only show warnings and errors

    Usage:
        ctx.feedback.info("Scanning for dependencies...")
        ctx.feedback.success("✓ Tagged v1.2.4")
        ctx.feedback.error("Error: push failed")
    """

    @abstractmethod
    def info(self, message: str) -> None:
        """Show informational message (suppressed in quiet mode)."""

    @abstractmethod
    def success(self, message: str) -> None:
        """Show success message (suppressed in quiet mode)."""

    @abstractmethod
    def warning(self, message: str) -> None:
        """Show warning message (always shown)."""

    @abstractmethod
    def error(self, message: str) -> None:
        """Show error message (always shown, even in quiet mode)."""

    @abstractmethod
    def confirm(self, prompt: str) -> bool:
        """Ask a yes/no question (always asked, even in quiet mode)."""


class InteractiveFeedback(UserFeedback):
    """Feedback shown in interactive mode (all messages)."""

    def info(self, message: str) -> None:
        user_output(message)

    def success(self, message: str) -> None:
        user_output(click.style(message, fg="green"))

    def warning(self, message: str) -> None:
        user_output(click.style(message, fg="yellow"))

    def error(self, message: str) -> None:
        user_output(click.style(message, fg="red"))

    def confirm(self, prompt: str) -> bool:
        return click.confirm(prompt, default=False, err=True)


class SuppressedFeedback(UserFeedback):
    """Feedback for --quiet and --names-only runs (warnings and errors only)."""

    def info(self, message: str) -> None:
        pass

    def success(self, message: str) -> None:
        pass

    def warning(self, message: str) -> None:
        user_output(click.style(message, fg="yellow"))

    def error(self, message: str) -> None:
        user_output(click.style(message, fg="red"))

    def confirm(self, prompt: str) -> bool:
        return click.confirm(prompt, default=False, err=True)


class FakeUserFeedback(UserFeedback):
    """Records messages in memory for test assertions.

    Safe to call from pool workers.
    """

    def __init__(self, *, confirm_answer: bool = True) -> None:
        """Create FakeUserFeedback.

        Args:
            confirm_answer: Answer returned by every confirm() call
        """
        self._confirm_answer = confirm_answer
        self._lock = threading.Lock()
        self._messages: list[tuple[str, str]] = []
        self._prompts: list[str] = []

    @property
    def prompts(self) -> list[str]:
        """Prompts passed to confirm()."""
        return self._prompts

    @property
    def messages(self) -> list[tuple[str, str]]:
        """(level, message) pairs in the order they were emitted."""
        return self._messages

    def lines(self, level: str | None = None) -> list[str]:
        return [msg for lvl, msg in self._messages if level is None or lvl == level]

    def _add(self, level: str, message: str) -> None:
        with self._lock:
            self._messages.append((level, message))

    def info(self, message: str) -> None:
        self._add("info", message)

    def success(self, message: str) -> None:
        self._add("success", message)

    def warning(self, message: str) -> None:
        self._add("warning", message)

    def error(self, message: str) -> None:
        self._add("error", message)

    def confirm(self, prompt: str) -> bool:
        self._prompts.append(prompt)
        return self._confirm_answer
