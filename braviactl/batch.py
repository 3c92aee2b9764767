"""Non-interactive execution of action tokens.

Tokens come from a single argument, a comma-separated list, or a file with one
token per line (blank lines and ``#`` comments ignored). A token may carry a
value as ``token=value``; the value answers the action's input prompt.
Items run strictly in order and each failure is recorded without stopping the
rest of the batch. The terminate token ends the batch early.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from pathlib import Path

from .actions.context import ActionContext, scripted_prompt
from .actions.registry import ActionRegistry, is_terminate_token
from .errors import BraviaError, ExecutionError, InvalidSelection
from .execution import CommandExecutor, RetryPolicy

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BatchItem:
    token: str
    value: str | None = None

    @classmethod
    def parse(cls, raw: str) -> BatchItem:
        token, sep, value = raw.strip().partition("=")
        return cls(token=token.strip(), value=value.strip() if sep else None)


@dataclass(frozen=True)
class BatchItemResult:
    token: str
    action_id: str | None
    label: str | None
    success: bool
    output: str = ""
    error: str | None = None
    duration: float = 0.0

    def to_record(self) -> dict[str, object]:
        return {
            "token": self.token,
            "id": self.action_id,
            "label": self.label,
            "success": self.success,
            "error": self.error,
            "output": self.output,
            "duration": round(self.duration, 3),
        }


@dataclass
class BatchReport:
    results: list[BatchItemResult] = field(default_factory=list)
    terminated: bool = False

    @property
    def failed(self) -> list[BatchItemResult]:
        return [result for result in self.results if not result.success]

    @property
    def exit_code(self) -> int:
        return 1 if self.failed else 0


def split_tokens(text: str) -> list[str]:
    """Split a comma-separated token list, dropping empty entries."""
    return [part.strip() for part in text.split(",") if part.strip()]


def parse_batch_lines(lines: Iterable[str]) -> list[str]:
    tokens: list[str] = []
    for line in lines:
        stripped = line.strip()
        if not stripped or stripped.startswith("#"):
            continue
        tokens.append(stripped)
    return tokens


def read_batch_file(path: Path) -> list[str]:
    return parse_batch_lines(path.read_text(encoding="utf-8").splitlines())


def run_item(
    item: BatchItem,
    registry: ActionRegistry,
    executor: CommandExecutor,
    retry_policy: RetryPolicy,
    clock: Callable[[], float] = time.monotonic,
) -> BatchItemResult:
    """Run one item, converting any ``BraviaError`` into a failed result."""
    started = clock()
    action = registry.resolve(item.token)
    if action is None:
        error = InvalidSelection(item.token)
        logger.warning("%s", error)
        return BatchItemResult(item.token, None, None, success=False, error=str(error))

    lines: list[str] = []
    ctx = ActionContext(
        executor=executor,
        retry_policy=retry_policy,
        prompt=scripted_prompt(item.value),
        echo=lines.append,
    )
    logger.info("running %s (%s)", action.id, action.label)
    try:
        action.run(ctx)
    except BraviaError as exc:
        output = "\n".join(lines)
        if isinstance(exc, ExecutionError):
            output = "\n".join(part for part in (output, exc.output.strip()) if part)
        logger.error("%s %s failed: %s", action.id, action.label, exc)
        return BatchItemResult(
            item.token,
            action.id,
            action.label,
            success=False,
            output=output,
            error=str(exc),
            duration=clock() - started,
        )
    return BatchItemResult(
        item.token,
        action.id,
        action.label,
        success=True,
        output="\n".join(lines),
        duration=clock() - started,
    )


def run_batch(
    tokens: Iterable[str],
    registry: ActionRegistry,
    executor: CommandExecutor,
    retry_policy: RetryPolicy,
    clock: Callable[[], float] = time.monotonic,
) -> BatchReport:
    report = BatchReport()
    for raw in tokens:
        item = BatchItem.parse(raw)
        if is_terminate_token(item.token):
            logger.info("terminate token reached, skipping remaining items")
            report.terminated = True
            break
        report.results.append(run_item(item, registry, executor, retry_policy, clock))
    return report
