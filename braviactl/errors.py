"""Error taxonomy shared by the menu, batch runner, and execution wrapper.

Setup problems (missing executable) and hard command failures propagate to the
caller; unknown tokens are recoverable and only reported.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .execution import CommandResult


class BraviaError(Exception):
    """Base class for all braviactl errors."""


class NotFoundError(BraviaError):
    """The external executable could not be located on the search path."""

    def __init__(self, program: str) -> None:
        super().__init__(f"'{program}' not found on PATH")
        self.program = program


class InvalidSelection(BraviaError):
    """A token did not resolve to any registered action."""

    def __init__(self, token: str, message: str | None = None) -> None:
        super().__init__(message or f"unknown action: {token!r}")
        self.token = token


class ExecutionError(BraviaError):
    """A subprocess exited non-zero."""

    def __init__(self, result: CommandResult, message: str | None = None) -> None:
        if message is None:
            message = f"command failed with exit code {result.exit_code}: {' '.join(result.args)}"
        super().__init__(message)
        self.result = result

    @property
    def output(self) -> str:
        return self.result.output


class TransientExecutionError(ExecutionError):
    """A failure whose output matched a transient pattern and may be retried."""

    def __init__(self, result: CommandResult, pattern: str) -> None:
        super().__init__(result, f"transient failure ({pattern!r}), exit code {result.exit_code}")
        self.pattern = pattern


class HardExecutionError(ExecutionError):
    """A failure that is not retryable, or that exhausted its retry budget."""
