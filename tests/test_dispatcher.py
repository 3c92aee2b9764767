"""Key handling across browse and filter-edit modes."""

from __future__ import annotations

import unittest

from braviactl.actions.registry import Action, ActionRegistry
from braviactl.errors import HardExecutionError, InvalidSelection, NotFoundError
from braviactl.execution import CommandExecutor, CommandResult, RetryPolicy
from braviactl.input.dispatcher import DispatcherHooks, InputDispatcher
from braviactl.input.reader import UNKNOWN_KEY
from braviactl.menu.model import Header, Item
from braviactl.runtime.state import BROWSE, FILTER_EDIT, AppState


def _action(action_id: str, label: str, handler_key: str) -> Action:
    return Action(id=action_id, label=label, handler_key=handler_key, handler=lambda ctx: None)


class FakeHooks:
    def __init__(self, answers: list[str | None] | None = None) -> None:
        self.answers = list(answers or [])
        self.ran: list[str] = []
        self.prompts: list[str] = []
        self.saved_targets: list[str | None] = []
        self.failure: Exception | None = None

    def run_action(self, action: Action) -> None:
        self.ran.append(action.id)
        if self.failure is not None:
            raise self.failure

    def prompt(self, message: str) -> str | None:
        self.prompts.append(message)
        return self.answers.pop(0) if self.answers else ""

    def save_target(self, target: str | None) -> None:
        self.saved_targets.append(target)

    def as_hooks(self) -> DispatcherHooks:
        return DispatcherHooks(run_action=self.run_action, prompt=self.prompt, save_target=self.save_target)


def make_dispatcher(answers: list[str | None] | None = None) -> tuple[InputDispatcher, FakeHooks]:
    registry = ActionRegistry(
        [
            _action("A1", "Connect", "connect"),
            _action("A2", "Disconnect", "disconnect"),
            _action("B1", "Wake up", "wake"),
            _action("D1", "Volume up", "volume_up"),
        ]
    )
    executor = CommandExecutor(which=lambda program: program, runner=lambda argv: (0, ""))
    state = AppState(registry=registry, executor=executor, retry_policy=RetryPolicy())
    fake = FakeHooks(answers)
    return InputDispatcher(state, fake.as_hooks()), fake


class BrowseTests(unittest.TestCase):
    def test_initial_cursor_rests_on_first_item(self) -> None:
        dispatcher, _ = make_dispatcher()
        state = dispatcher.state
        self.assertIsInstance(state.items[0], Header)
        self.assertEqual(state.nav.selected_index, 1)
        self.assertEqual(dispatcher.selected_action().id, "A1")

    def test_arrow_and_vim_keys_move_past_headers(self) -> None:
        dispatcher, _ = make_dispatcher()
        dispatcher.handle_key("DOWN")
        dispatcher.handle_key("j")
        self.assertEqual(dispatcher.selected_action().id, "B1")
        self.assertIsInstance(dispatcher.state.items[dispatcher.state.nav.selected_index], Item)
        dispatcher.handle_key("k")
        self.assertEqual(dispatcher.selected_action().id, "A2")
        dispatcher.handle_key("END")
        self.assertEqual(dispatcher.selected_action().id, "D1")
        dispatcher.handle_key("g")
        self.assertEqual(dispatcher.selected_action().id, "A1")

    def test_enter_runs_selected_action_and_keeps_cursor(self) -> None:
        dispatcher, fake = make_dispatcher()
        dispatcher.handle_key("DOWN")
        self.assertFalse(dispatcher.handle_key("ENTER"))
        self.assertEqual(fake.ran, ["A2"])
        self.assertEqual(dispatcher.selected_action().id, "A2")
        self.assertEqual(dispatcher.state.status_message, "Ran A2 Disconnect")

    def test_quit_keys_end_session(self) -> None:
        for key in ("q", "ESC", "CTRL_C", "CTRL_D"):
            dispatcher, _ = make_dispatcher()
            self.assertTrue(dispatcher.handle_key(key), key)

    def test_unbound_key_is_ignored(self) -> None:
        dispatcher, fake = make_dispatcher()
        self.assertFalse(dispatcher.handle_key("z"))
        self.assertEqual(fake.ran, [])

    def test_unrecognised_escape_sequence_keeps_session_open(self) -> None:
        dispatcher, fake = make_dispatcher()
        self.assertFalse(dispatcher.handle_key(UNKNOWN_KEY))
        self.assertEqual(fake.ran, [])
        self.assertEqual(dispatcher.selected_action().id, "A1")


class FilterEditTests(unittest.TestCase):
    def test_typing_does_not_filter_until_commit(self) -> None:
        dispatcher, _ = make_dispatcher()
        nav = dispatcher.state.nav
        dispatcher.handle_key("/")
        self.assertEqual(nav.mode, FILTER_EDIT)
        for ch in "disc":
            dispatcher.handle_key(ch)
        self.assertEqual(nav.filter_edit_buffer, "disc")
        self.assertEqual(nav.filter_text, "")
        self.assertEqual(len(dispatcher.state.items), 7)

        dispatcher.handle_key("ENTER")
        self.assertEqual(nav.mode, BROWSE)
        self.assertEqual(nav.filter_text, "disc")
        self.assertEqual(nav.filter_edit_buffer, "")
        self.assertEqual(len(dispatcher.state.items), 2)
        self.assertEqual(dispatcher.selected_action().id, "A2")

    def test_escape_discards_edit_and_keeps_committed_filter(self) -> None:
        dispatcher, _ = make_dispatcher()
        nav = dispatcher.state.nav
        dispatcher.handle_key("/")
        dispatcher.handle_key("v")
        dispatcher.handle_key("ENTER")
        dispatcher.handle_key("/")
        self.assertEqual(nav.filter_edit_buffer, "v")
        dispatcher.handle_key("x")
        self.assertEqual(dispatcher.handle_key("ESC"), False)
        self.assertEqual(nav.mode, BROWSE)
        self.assertEqual(nav.filter_text, "v")
        self.assertEqual(nav.filter_edit_buffer, "")

    def test_backspace_and_clear_edit_buffer(self) -> None:
        dispatcher, _ = make_dispatcher()
        nav = dispatcher.state.nav
        dispatcher.handle_key("/")
        for ch in "wake":
            dispatcher.handle_key(ch)
        dispatcher.handle_key("BACKSPACE")
        self.assertEqual(nav.filter_edit_buffer, "wak")
        dispatcher.handle_key("CTRL_U")
        self.assertEqual(nav.filter_edit_buffer, "")
        dispatcher.handle_key("BACKSPACE")
        self.assertEqual(nav.filter_edit_buffer, "")

    def test_quit_keys_are_text_while_editing(self) -> None:
        dispatcher, _ = make_dispatcher()
        dispatcher.handle_key("/")
        self.assertFalse(dispatcher.handle_key("q"))
        self.assertEqual(dispatcher.state.nav.filter_edit_buffer, "q")

    def test_unrecognised_escape_sequence_is_not_typed_or_cancel(self) -> None:
        dispatcher, _ = make_dispatcher()
        nav = dispatcher.state.nav
        dispatcher.handle_key("/")
        dispatcher.handle_key("v")
        self.assertFalse(dispatcher.handle_key(UNKNOWN_KEY))
        self.assertEqual(nav.mode, FILTER_EDIT)
        self.assertEqual(nav.filter_edit_buffer, "v")

    def test_filter_without_matches_clears_selection(self) -> None:
        dispatcher, fake = make_dispatcher()
        dispatcher.handle_key("/")
        for ch in "zzz":
            dispatcher.handle_key(ch)
        dispatcher.handle_key("ENTER")
        self.assertEqual(dispatcher.state.items, [])
        self.assertEqual(dispatcher.state.nav.selected_index, -1)
        dispatcher.handle_key("ENTER")
        self.assertEqual(fake.ran, [])


class TokenPromptTests(unittest.TestCase):
    def test_terminate_token_ends_session_in_any_case(self) -> None:
        for token in ("x", "X", " x "):
            dispatcher, fake = make_dispatcher([token])
            self.assertTrue(dispatcher.handle_key(":"))
            self.assertEqual(fake.ran, [])

    def test_terminate_token_works_after_filter_edit(self) -> None:
        dispatcher, _ = make_dispatcher()
        dispatcher.handle_key("/")
        dispatcher.handle_key("a")
        dispatcher.handle_key("ENTER")
        self.assertTrue(dispatcher.dispatch_token("X"))

    def test_token_runs_action_case_insensitively(self) -> None:
        dispatcher, fake = make_dispatcher(["d1", "WAKE"])
        self.assertFalse(dispatcher.handle_key(":"))
        self.assertFalse(dispatcher.handle_key(":"))
        self.assertEqual(fake.ran, ["D1", "B1"])

    def test_unknown_token_sets_status_and_keeps_running(self) -> None:
        dispatcher, fake = make_dispatcher(["zz9"])
        self.assertFalse(dispatcher.handle_key(":"))
        self.assertEqual(fake.ran, [])
        self.assertIn("zz9", dispatcher.state.status_message)

    def test_empty_token_does_nothing(self) -> None:
        dispatcher, fake = make_dispatcher(["  "])
        self.assertFalse(dispatcher.handle_key(":"))
        self.assertEqual(fake.ran, [])
        self.assertEqual(dispatcher.state.status_message, "")

    def test_cancelled_token_prompt_does_nothing(self) -> None:
        dispatcher, fake = make_dispatcher([None])
        self.assertFalse(dispatcher.handle_key(":"))
        self.assertEqual(fake.ran, [])
        self.assertEqual(dispatcher.state.status_message, "")


class TargetPromptTests(unittest.TestCase):
    def test_target_is_set_and_saved(self) -> None:
        dispatcher, fake = make_dispatcher(["192.168.1.20:5555"])
        dispatcher.handle_key("t")
        self.assertEqual(dispatcher.state.target, "192.168.1.20:5555")
        self.assertEqual(dispatcher.state.executor.target, "192.168.1.20:5555")
        self.assertEqual(fake.saved_targets, ["192.168.1.20:5555"])
        self.assertEqual(dispatcher.state.status_message, "Target: 192.168.1.20:5555")

    def test_empty_answer_resets_to_default_target(self) -> None:
        dispatcher, fake = make_dispatcher([""])
        dispatcher.state.target = "tv"
        dispatcher.handle_key("t")
        self.assertIsNone(dispatcher.state.target)
        self.assertEqual(fake.saved_targets, [None])
        self.assertEqual(dispatcher.state.status_message, "Target: default")

    def test_cancelled_prompt_keeps_current_target(self) -> None:
        dispatcher, fake = make_dispatcher([None])
        dispatcher.state.target = "tv"
        self.assertFalse(dispatcher.handle_key("t"))
        self.assertEqual(dispatcher.state.target, "tv")
        self.assertEqual(fake.saved_targets, [])
        self.assertEqual(dispatcher.state.status_message, "Target unchanged: tv")


class ActionFailureTests(unittest.TestCase):
    def test_hard_failure_propagates_out_of_the_menu(self) -> None:
        dispatcher, fake = make_dispatcher()
        fake.failure = HardExecutionError(CommandResult(1, "error: closed\n", ("adb", "reboot")))
        with self.assertRaises(HardExecutionError) as ctx:
            dispatcher.handle_key("ENTER")
        self.assertEqual(ctx.exception.output, "error: closed\n")
        self.assertEqual(fake.ran, ["A1"])

    def test_missing_tool_propagates_out_of_the_menu(self) -> None:
        dispatcher, fake = make_dispatcher(["b1"])
        fake.failure = NotFoundError("adb")
        with self.assertRaises(NotFoundError):
            dispatcher.handle_key(":")

    def test_invalid_selection_is_reported_and_session_continues(self) -> None:
        dispatcher, fake = make_dispatcher()
        fake.failure = InvalidSelection("Z9", "no handler for Z9")
        self.assertFalse(dispatcher.handle_key("ENTER"))
        self.assertEqual(dispatcher.state.status_message, "no handler for Z9")
        self.assertFalse(dispatcher.handle_key("j"))
        self.assertEqual(dispatcher.selected_action().id, "A2")


if __name__ == "__main__":
    unittest.main()
