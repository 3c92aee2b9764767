"""Command-line front door for braviactl.

Parses CLI options, loads config, and builds the executor and registry.
Then either runs action tokens as a batch or launches the interactive menu.
"""

from __future__ import annotations

import argparse
import logging
import sys
from dataclasses import replace
from pathlib import Path

from . import __version__
from .actions.catalog import build_default_registry
from .batch import read_batch_file, run_batch, split_tokens
from .config import LOG_PATH, load_settings, save_default_target
from .errors import HardExecutionError, NotFoundError
from .execution import CommandExecutor
from .logging_config import resolve_level, setup_logging
from .output import FORMATS, TEXT, format_listing, format_report
from .runtime import run_menu
from .ui_theme import available_theme_names, resolve_theme

PROGRAM_NAME = "braviactl"
EXIT_USAGE = 2
EXIT_NOT_FOUND = 127
EXIT_INTERRUPTED = 130

logger = logging.getLogger(__name__)


def _nonnegative_int(value: str) -> int:
    """argparse type for integer values >= 0."""
    try:
        parsed = int(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"invalid integer value: {value!r}") from exc
    if parsed < 0:
        raise argparse.ArgumentTypeError("value must be >= 0")
    return parsed


def _nonnegative_float(value: str) -> float:
    """argparse type for durations in seconds."""
    try:
        parsed = float(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"invalid number: {value!r}") from exc
    if parsed < 0:
        raise argparse.ArgumentTypeError("value must be >= 0")
    return parsed


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog=PROGRAM_NAME,
        description="Control a Sony Bravia TV over adb from an interactive menu or in batch.",
    )
    parser.add_argument("-a", "--action", metavar="TOKENS", help="Action id or comma-separated ids to run (e.g. a1,d1).")
    parser.add_argument("-b", "--batch", metavar="FILE", type=Path, help="File with one action token per line.")
    parser.add_argument(
        "-f",
        "--format",
        choices=FORMATS,
        default=TEXT,
        help="Result format for batch runs and --list (default: text).",
    )
    parser.add_argument("-s", "--target", metavar="SERIAL", help="adb serial or host:port to control.")
    parser.add_argument("--retries", type=_nonnegative_int, default=None, help="Retries for transient adb failures.")
    parser.add_argument(
        "--retry-delay",
        type=_nonnegative_float,
        default=None,
        help="Seconds to wait between retries.",
    )
    parser.add_argument("--list", action="store_true", help="List available actions and exit.")
    parser.add_argument("--no-color", action="store_true", help="Disable color output even on TTY.")
    parser.add_argument(
        "--theme",
        default=None,
        help=f"UI theme name ({', '.join(available_theme_names())}).",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Log progress information.")
    parser.add_argument("--debug", action="store_true", help="Log every adb invocation.")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def _log_level_name(args: argparse.Namespace) -> str | None:
    if args.debug:
        return "DEBUG"
    if args.verbose:
        return "INFO"
    return None


def main(argv: list[str] | None = None) -> int:
    """Parse arguments and run batch or interactive mode; return the exit code."""
    parser = build_parser()
    args = parser.parse_args(argv)
    level = resolve_level(_log_level_name(args))

    settings = load_settings()
    policy = settings.retry_policy()
    if args.retries is not None:
        policy = replace(policy, max_attempts=args.retries)
    if args.retry_delay is not None:
        policy = replace(policy, delay=args.retry_delay)
    executor = CommandExecutor(
        program=settings.adb_path,
        target=args.target or settings.default_target,
        default_policy=policy,
    )
    registry = build_default_registry()
    color = not args.no_color and sys.stdout.isatty()

    if args.list:
        sys.stdout.write(format_listing(registry, args.format, color=color))
        return 0

    if args.action is not None or args.batch is not None:
        setup_logging(level, console=True)
        tokens: list[str] = []
        if args.action is not None:
            tokens.extend(split_tokens(args.action))
        if args.batch is not None:
            try:
                tokens.extend(read_batch_file(args.batch))
            except OSError as exc:
                sys.stderr.write(f"error: cannot read batch file {args.batch}: {exc.strerror or exc}\n")
                return EXIT_USAGE
        if not tokens:
            sys.stderr.write("error: no action tokens given\n")
            return EXIT_USAGE
        try:
            executor.ensure_available()
            report = run_batch(tokens, registry, executor, policy)
        except NotFoundError as exc:
            sys.stderr.write(f"error: {exc}\n")
            return EXIT_NOT_FOUND
        except KeyboardInterrupt:
            sys.stderr.write("interrupted\n")
            return EXIT_INTERRUPTED
        sys.stdout.write(format_report(report, args.format, color=color))
        return report.exit_code

    if not (sys.stdin.isatty() and sys.stdout.isatty()):
        sys.stderr.write("error: interactive mode needs a terminal; use --action or --batch\n")
        return EXIT_USAGE

    setup_logging(min(level, logging.INFO), console=False, log_file=LOG_PATH)
    theme = resolve_theme(args.theme or settings.theme, no_color=args.no_color)
    try:
        run_menu(
            registry,
            executor,
            policy,
            program=PROGRAM_NAME,
            version=__version__,
            theme=theme,
            save_target=save_default_target,
        )
    except NotFoundError as exc:
        logger.error("%s", exc)
        sys.stderr.write(f"error: {exc}\n")
        return EXIT_NOT_FOUND
    except HardExecutionError as exc:
        logger.error("%s", exc)
        sys.stderr.write(f"error: {exc}\n")
        if exc.output.strip():
            sys.stderr.write(exc.output.rstrip() + "\n")
        return 1
    except KeyboardInterrupt:
        return EXIT_INTERRUPTED
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
