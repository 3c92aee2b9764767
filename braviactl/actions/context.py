"""Execution context handed to every action handler."""

from __future__ import annotations

import sys
from collections.abc import Callable, Sequence
from dataclasses import dataclass, replace

from ..errors import InvalidSelection
from ..execution import CommandExecutor, CommandResult, RetryPolicy


def _stdout_echo(text: str) -> None:
    sys.stdout.write(text if text.endswith("\n") else text + "\n")
    sys.stdout.flush()


def _no_prompt(message: str) -> str:
    raise InvalidSelection("", f"input required ({message.strip()}) but no prompt is available")


@dataclass
class ActionContext:
    """Target, executor, and user I/O available to a running action.

    ``prompt`` asks the user for one line of free-form input. ``echo`` shows
    text to the user; batch runs swap it for a collecting callback.
    """

    executor: CommandExecutor
    retry_policy: RetryPolicy
    prompt: Callable[[str], str] = _no_prompt
    echo: Callable[[str], None] = _stdout_echo

    @property
    def target(self) -> str | None:
        return self.executor.target

    def run(self, args: Sequence[str], allow_failure: bool = False) -> CommandResult:
        """Run the external tool with this context's retry policy."""
        return self.executor.execute(args, allow_failure=allow_failure, retry_policy=self.retry_policy)

    def run_unscoped(self, args: Sequence[str], allow_failure: bool = False) -> CommandResult:
        """Run a server-level command (connect, devices, ...) without the target flag."""
        executor = replace(self.executor, target=None)
        return executor.execute(args, allow_failure=allow_failure, retry_policy=self.retry_policy)

    def shell(self, *args: str, allow_failure: bool = False) -> CommandResult:
        return self.run(["shell", *args], allow_failure=allow_failure)

    def report(self, result: CommandResult, success_message: str | None = None) -> None:
        """Echo command output, or ``success_message`` when output is empty."""
        text = result.output.strip()
        if text:
            self.echo(text)
        elif success_message and result.success:
            self.echo(success_message)


def scripted_prompt(answer: str | None) -> Callable[[str], str]:
    """Prompt that returns a pre-supplied value (batch ``token=value`` items)."""

    def prompt(message: str) -> str:
        if answer is None:
            return _no_prompt(message)
        return answer

    return prompt
