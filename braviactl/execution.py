"""Subprocess execution wrapper with classified retry.

Runs one external command per attempt, merges stdout/stderr into a single
text blob, and retries failures whose output matches a transient pattern.
The runner, sleep, and executable lookup are injectable so retry timing and
classification can be exercised without spawning processes.
"""

from __future__ import annotations

import logging
import shutil
import subprocess
import time
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field

from .errors import HardExecutionError, NotFoundError, TransientExecutionError

logger = logging.getLogger(__name__)

DEFAULT_PROGRAM = "adb"
TARGET_FLAG = "-s"
DEFAULT_RETRY_ATTEMPTS = 2
DEFAULT_RETRY_DELAY = 1.0
DEFAULT_TRANSIENT_PATTERNS: tuple[str, ...] = (
    "device offline",
    "device unauthorized",
    "no devices/emulators found",
    "device still authorizing",
    "error: closed",
    "protocol fault",
    "connection reset",
    "failed to connect",
    "cannot connect",
    "timed out",
)

Runner = Callable[[Sequence[str]], tuple[int, str]]


@dataclass(frozen=True)
class RetryPolicy:
    """Retry budget and transient-failure classification for one call."""

    max_attempts: int = DEFAULT_RETRY_ATTEMPTS
    delay: float = DEFAULT_RETRY_DELAY
    transient_patterns: tuple[str, ...] = DEFAULT_TRANSIENT_PATTERNS

    def __post_init__(self) -> None:
        if self.max_attempts < 0:
            raise ValueError("max_attempts must be >= 0")
        if self.delay < 0:
            raise ValueError("delay must be >= 0")

    def match_transient(self, output: str) -> str | None:
        """Return the first transient pattern found in ``output``, if any."""
        folded = output.casefold()
        for pattern in self.transient_patterns:
            if pattern and pattern.casefold() in folded:
                return pattern
        return None


NO_RETRY = RetryPolicy(max_attempts=0, delay=0.0, transient_patterns=())


@dataclass(frozen=True)
class CommandResult:
    exit_code: int
    output: str
    args: tuple[str, ...] = ()
    attempts: int = 1

    @property
    def success(self) -> bool:
        return self.exit_code == 0


def run_merged(argv: Sequence[str]) -> tuple[int, str]:
    """Run ``argv`` to completion and return ``(exit_code, stdout+stderr)``."""
    proc = subprocess.run(
        list(argv),
        stdout=subprocess.PIPE,
        stderr=subprocess.STDOUT,
        stdin=subprocess.DEVNULL,
        text=True,
        errors="replace",
        check=False,
    )
    return proc.returncode, proc.stdout or ""


@dataclass
class CommandExecutor:
    """Invoke the external tool, optionally scoped to one target device."""

    program: str = DEFAULT_PROGRAM
    target: str | None = None
    default_policy: RetryPolicy = field(default_factory=RetryPolicy)
    runner: Runner = run_merged
    sleep: Callable[[float], None] = time.sleep
    which: Callable[[str], str | None] = shutil.which

    def build_argv(self, args: Sequence[str]) -> list[str]:
        argv = [self.program]
        if self.target:
            argv.extend([TARGET_FLAG, self.target])
        argv.extend(str(arg) for arg in args)
        return argv

    def ensure_available(self) -> None:
        if self.which(self.program) is None:
            raise NotFoundError(self.program)

    def execute(
        self,
        args: Sequence[str],
        allow_failure: bool = False,
        retry_policy: RetryPolicy | None = None,
    ) -> CommandResult:
        """Run the tool with ``args`` and return its result.

        Failures matching a transient pattern are retried up to
        ``retry_policy.max_attempts`` extra times with ``retry_policy.delay``
        seconds between attempts. Once retries are exhausted, or for any other
        failure, ``HardExecutionError`` is raised unless ``allow_failure`` is
        set, in which case the last failing result is returned.

        ``NotFoundError`` is raised before anything runs when the executable
        cannot be resolved; it is never retried and ignores ``allow_failure``.
        """
        policy = retry_policy if retry_policy is not None else self.default_policy
        self.ensure_available()
        argv = self.build_argv(args)

        attempts = 0
        while True:
            attempts += 1
            logger.debug("running %s (attempt %d)", argv, attempts)
            try:
                exit_code, output = self.runner(argv)
            except FileNotFoundError as exc:
                raise NotFoundError(self.program) from exc
            result = CommandResult(exit_code=exit_code, output=output, args=tuple(argv), attempts=attempts)
            if result.success:
                return result

            pattern = policy.match_transient(output)
            if pattern is not None and attempts <= policy.max_attempts:
                transient = TransientExecutionError(result, pattern)
                logger.warning("%s; retrying in %.1fs (%d/%d)", transient, policy.delay, attempts, policy.max_attempts)
                self.sleep(policy.delay)
                continue

            if pattern is not None:
                logger.error("giving up after %d attempts: %s", attempts, " ".join(argv))
            else:
                logger.info("command failed with exit code %d: %s", exit_code, " ".join(argv))
            if allow_failure:
                return result
            raise HardExecutionError(result)
