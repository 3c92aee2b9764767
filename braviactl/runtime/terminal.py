"""Terminal control helpers for the menu session.

Owns raw-mode lifecycle and alternate-screen switching, plus the two ways the
menu temporarily hands the terminal back: a one-line prompt drawn on the
bottom row, and a full suspension while an action runs.
"""

from __future__ import annotations

import contextlib
import os
import shutil
import sys
import termios
import tty


class TerminalController:
    """Manage terminal mode transitions for the interactive menu."""

    def __init__(self, stdin_fd: int, stdout_fd: int) -> None:
        """Capture tty state and bind stdin/stdout file descriptors."""
        self.stdin_fd = stdin_fd
        self.stdout_fd = stdout_fd
        self._saved_tty_state = termios.tcgetattr(stdin_fd)

    def enable_tui_mode(self) -> None:
        """Enter raw alternate-screen mode with the cursor hidden."""
        tty.setraw(self.stdin_fd, termios.TCSAFLUSH)
        os.write(self.stdout_fd, b"\x1b[?1049h\x1b[?25l")

    def disable_tui_mode(self) -> None:
        """Show the cursor, restore the main screen, and restore tty state."""
        os.write(self.stdout_fd, b"\x1b[?25h\x1b[?1049l")
        termios.tcsetattr(self.stdin_fd, termios.TCSAFLUSH, self._saved_tty_state)

    @contextlib.contextmanager
    def raw_mode(self):
        """Context manager that brackets code with TUI enter/exit calls."""
        try:
            self.enable_tui_mode()
            yield
        finally:
            self.disable_tui_mode()

    @contextlib.contextmanager
    def suspended(self):
        """Leave TUI mode for the duration of the block, then re-enter it."""
        self.disable_tui_mode()
        try:
            yield
        finally:
            self.enable_tui_mode()

    def read_line(self, message: str) -> str | None:
        """Prompt for one cooked-mode line on the bottom row of the screen.

        Returns ``None`` when the prompt is cancelled with Ctrl+C or
        end-of-file, so callers can tell a cancel from an empty answer.
        """
        rows = shutil.get_terminal_size((80, 24)).lines
        termios.tcsetattr(self.stdin_fd, termios.TCSAFLUSH, self._saved_tty_state)
        os.write(self.stdout_fd, f"\x1b[{rows};1H\x1b[2K\x1b[?25h{message}".encode("utf-8", errors="replace"))
        try:
            line = sys.stdin.readline()
        except KeyboardInterrupt:
            return None
        finally:
            os.write(self.stdout_fd, b"\x1b[?25l")
            tty.setraw(self.stdin_fd, termios.TCSAFLUSH)
        if not line:
            return None
        return line.rstrip("\r\n")


def wait_for_keypress(message: str = "Press any key to return to the menu...") -> None:
    """Block until one key is pressed on a cooked terminal."""
    fd = sys.stdin.fileno()
    sys.stdout.write(f"\n{message}")
    sys.stdout.flush()
    saved = termios.tcgetattr(fd)
    try:
        tty.setcbreak(fd, termios.TCSANOW)
        os.read(fd, 1)
    finally:
        termios.tcsetattr(fd, termios.TCSAFLUSH, saved)
