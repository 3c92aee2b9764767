"""Batch token parsing and in-order execution with per-item failures."""

from __future__ import annotations

import tempfile
import unittest
from pathlib import Path

from braviactl.actions.registry import Action, ActionRegistry
from braviactl.batch import BatchItem, parse_batch_lines, read_batch_file, run_batch, split_tokens
from braviactl.execution import CommandExecutor, RetryPolicy


class FakeRunner:
    """Answers by subcommand; ``fail`` lists argv words that make a call fail."""

    def __init__(self, fail: tuple[str, ...] = ()) -> None:
        self.fail = fail
        self.calls: list[list[str]] = []

    def __call__(self, argv):
        self.calls.append(list(argv))
        if any(word in argv for word in self.fail):
            return 1, "error: something broke\n"
        return 0, ""


def _keyevent(code: str):
    def handler(ctx) -> None:
        ctx.report(ctx.shell("input", "keyevent", code), f"sent {code}")

    return handler


def _typed_text(ctx) -> None:
    text = ctx.prompt("Text: ")
    ctx.report(ctx.shell("input", "text", text), f"typed {text}")


def make_registry() -> ActionRegistry:
    return ActionRegistry(
        [
            Action("A1", "Home", "home", _keyevent("KEYCODE_HOME")),
            Action("B1", "Broken", "broken", _keyevent("KEYCODE_BROKEN")),
            Action("D1", "Volume up", "volume_up", _keyevent("KEYCODE_VOLUME_UP")),
            Action("G2", "Send text", "send_text", _typed_text),
        ]
    )


def make_executor(runner) -> CommandExecutor:
    return CommandExecutor(runner=runner, sleep=lambda s: None, which=lambda p: p)


def _clock():
    ticks = iter(float(n) for n in range(100))
    return lambda: next(ticks)


class ParsingTests(unittest.TestCase):
    def test_comma_list_drops_blank_entries(self) -> None:
        self.assertEqual(split_tokens(" a1, ,D1,,x "), ["a1", "D1", "x"])

    def test_file_lines_skip_blanks_and_comments(self) -> None:
        lines = ["# warm up", "", "  a1  ", "\t# indented comment", "d1"]
        self.assertEqual(parse_batch_lines(lines), ["a1", "d1"])

    def test_read_batch_file(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "steps.txt"
            path.write_text("a1\n# skip\n\nsend_text=hello\n", encoding="utf-8")
            self.assertEqual(read_batch_file(path), ["a1", "send_text=hello"])

    def test_item_value_split_on_first_equals(self) -> None:
        self.assertEqual(BatchItem.parse(" g2 = a=b "), BatchItem("g2", "a=b"))
        self.assertEqual(BatchItem.parse("a1"), BatchItem("a1", None))


class RunBatchTests(unittest.TestCase):
    def test_items_run_in_order_and_failures_do_not_stop_batch(self) -> None:
        runner = FakeRunner(fail=("KEYCODE_BROKEN",))
        report = run_batch(["a1", "b1", "d1"], make_registry(), make_executor(runner), RetryPolicy(0, 0.0))

        self.assertEqual([r.action_id for r in report.results], ["A1", "B1", "D1"])
        self.assertEqual([r.success for r in report.results], [True, False, True])
        self.assertIn("something broke", report.results[1].output)
        self.assertIsNotNone(report.results[1].error)
        self.assertEqual(len(runner.calls), 3)
        self.assertEqual(report.exit_code, 1)

    def test_all_success_exits_zero_and_collects_output(self) -> None:
        report = run_batch(["A1", "volume_up"], make_registry(), make_executor(FakeRunner()), RetryPolicy(0, 0.0))
        self.assertEqual(report.exit_code, 0)
        self.assertEqual(report.results[0].output, "sent KEYCODE_HOME")

    def test_unknown_token_is_recorded_as_failure(self) -> None:
        runner = FakeRunner()
        report = run_batch(["zz9", "a1"], make_registry(), make_executor(runner), RetryPolicy(0, 0.0))
        self.assertFalse(report.results[0].success)
        self.assertIsNone(report.results[0].action_id)
        self.assertIn("zz9", report.results[0].error)
        self.assertTrue(report.results[1].success)

    def test_terminate_token_stops_remaining_items(self) -> None:
        runner = FakeRunner()
        report = run_batch(["a1", "X", "d1"], make_registry(), make_executor(runner), RetryPolicy(0, 0.0))
        self.assertTrue(report.terminated)
        self.assertEqual(len(report.results), 1)
        self.assertEqual(len(runner.calls), 1)

    def test_value_answers_the_action_prompt(self) -> None:
        runner = FakeRunner()
        report = run_batch(["send_text=hello"], make_registry(), make_executor(runner), RetryPolicy(0, 0.0))
        self.assertTrue(report.results[0].success)
        self.assertEqual(runner.calls[0][-3:], ["input", "text", "hello"])

    def test_missing_value_fails_only_that_item(self) -> None:
        runner = FakeRunner()
        report = run_batch(["g2", "a1"], make_registry(), make_executor(runner), RetryPolicy(0, 0.0))
        self.assertFalse(report.results[0].success)
        self.assertIn("input required", report.results[0].error)
        self.assertTrue(report.results[1].success)

    def test_duration_uses_injected_clock(self) -> None:
        report = run_batch(["a1"], make_registry(), make_executor(FakeRunner()), RetryPolicy(0, 0.0), clock=_clock())
        self.assertEqual(report.results[0].duration, 1.0)
        self.assertEqual(report.results[0].to_record()["duration"], 1.0)


if __name__ == "__main__":
    unittest.main()
