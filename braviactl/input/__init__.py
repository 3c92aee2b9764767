"""Input-layer public API: key decoding and the menu key dispatcher."""

from .dispatcher import DispatcherHooks, InputDispatcher
from .key_registry import KeyBinding, KeyMap
from .reader import ESC_SEQUENCE_TIMEOUT_MS, UNKNOWN_KEY, read_key

__all__ = [
    "ESC_SEQUENCE_TIMEOUT_MS",
    "DispatcherHooks",
    "InputDispatcher",
    "KeyBinding",
    "KeyMap",
    "UNKNOWN_KEY",
    "read_key",
]
