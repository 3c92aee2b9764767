"""Built-in action table for Bravia TVs reachable over adb.

Each entry is ``(id, label, handler_key, handler)``. Handlers are thin wrappers
around ``ActionContext.run``; the menu and batch runner only ever see the
resulting ``ActionRegistry``.
"""

from __future__ import annotations

import shlex

from ..errors import InvalidSelection
from .context import ActionContext
from .registry import Action, ActionHandler, ActionRegistry

DEFAULT_ADB_PORT = 5555


def _keyevent(keycode: int | str, message: str) -> ActionHandler:
    def handler(ctx: ActionContext) -> None:
        result = ctx.shell("input", "keyevent", str(keycode))
        ctx.report(result, message)

    return handler


def _shell(*args: str) -> ActionHandler:
    def handler(ctx: ActionContext) -> None:
        ctx.report(ctx.shell(*args))

    return handler


def _launch_package(package: str, message: str) -> ActionHandler:
    def handler(ctx: ActionContext) -> None:
        result = ctx.shell("monkey", "-p", package, "-c", "android.intent.category.LAUNCHER", "1")
        ctx.report(result, message)

    return handler


def _required_input(ctx: ActionContext, message: str) -> str:
    value = ctx.prompt(message).strip()
    if not value:
        raise InvalidSelection("", f"{message.rstrip(': ')} is required")
    return value


def connect(ctx: ActionContext) -> None:
    host = ctx.target or _required_input(ctx, "TV address (host[:port]): ")
    if ":" not in host:
        host = f"{host}:{DEFAULT_ADB_PORT}"
    result = ctx.run_unscoped(["connect", host])
    ctx.report(result, f"Connected to {host}")


def disconnect(ctx: ActionContext) -> None:
    args = ["disconnect"]
    if ctx.target:
        args.append(ctx.target)
    ctx.report(ctx.run_unscoped(args, allow_failure=True), "Disconnected")


def list_devices(ctx: ActionContext) -> None:
    ctx.report(ctx.run_unscoped(["devices", "-l"]))


def restart_server(ctx: ActionContext) -> None:
    ctx.run_unscoped(["kill-server"], allow_failure=True)
    ctx.report(ctx.run_unscoped(["start-server"]), "adb server restarted")


def device_info(ctx: ActionContext) -> None:
    for prop, title in (
        ("ro.product.manufacturer", "Manufacturer"),
        ("ro.product.model", "Model"),
        ("ro.build.version.release", "Android"),
        ("ro.build.fingerprint", "Build"),
    ):
        result = ctx.shell("getprop", prop, allow_failure=True)
        ctx.echo(f"{title}: {result.output.strip() or '?'}")


def reboot(ctx: ActionContext) -> None:
    ctx.report(ctx.run(["reboot"]), "Rebooting")


def launch_app(ctx: ActionContext) -> None:
    package = _required_input(ctx, "Package name: ")
    _launch_package(package, f"Launched {package}")(ctx)


def force_stop_app(ctx: ActionContext) -> None:
    package = _required_input(ctx, "Package name: ")
    ctx.report(ctx.shell("am", "force-stop", package), f"Stopped {package}")


def send_text(ctx: ActionContext) -> None:
    text = _required_input(ctx, "Text to type: ")
    # `input text` treats spaces as argument separators.
    ctx.report(ctx.shell("input", "text", shlex.quote(text.replace(" ", "%s"))), "Text sent")


def send_keycode(ctx: ActionContext) -> None:
    keycode = _required_input(ctx, "Keycode (number or KEYCODE_*): ")
    ctx.report(ctx.shell("input", "keyevent", keycode), f"Sent {keycode}")


def open_url(ctx: ActionContext) -> None:
    url = _required_input(ctx, "URL: ")
    ctx.report(ctx.shell("am", "start", "-a", "android.intent.action.VIEW", "-d", url), f"Opened {url}")


def screenshot(ctx: ActionContext) -> None:
    remote = "/sdcard/braviactl-screen.png"
    ctx.shell("screencap", "-p", remote)
    result = ctx.run(["pull", remote, "braviactl-screen.png"])
    ctx.shell("rm", "-f", remote, allow_failure=True)
    ctx.report(result, "Saved braviactl-screen.png")


ACTION_TABLE: tuple[tuple[str, str, str, ActionHandler], ...] = (
    ("A1", "Connect", "connect", connect),
    ("A2", "Disconnect", "disconnect", disconnect),
    ("A3", "List devices", "devices", list_devices),
    ("A4", "Restart adb server", "restart_server", restart_server),
    ("A5", "Device info", "device_info", device_info),
    ("B1", "Wake up", "wake", _keyevent("KEYCODE_WAKEUP", "Wake sent")),
    ("B2", "Sleep", "sleep", _keyevent("KEYCODE_SLEEP", "Sleep sent")),
    ("B3", "Power toggle", "power", _keyevent("KEYCODE_POWER", "Power toggled")),
    ("B4", "Reboot", "reboot", reboot),
    ("C1", "Home", "home", _keyevent("KEYCODE_HOME", "Home")),
    ("C2", "Back", "back", _keyevent("KEYCODE_BACK", "Back")),
    ("C3", "Up", "dpad_up", _keyevent("KEYCODE_DPAD_UP", "Up")),
    ("C4", "Down", "dpad_down", _keyevent("KEYCODE_DPAD_DOWN", "Down")),
    ("C5", "Left", "dpad_left", _keyevent("KEYCODE_DPAD_LEFT", "Left")),
    ("C6", "Right", "dpad_right", _keyevent("KEYCODE_DPAD_RIGHT", "Right")),
    ("C7", "OK / Select", "dpad_center", _keyevent("KEYCODE_DPAD_CENTER", "OK")),
    ("C8", "Menu", "menu", _keyevent("KEYCODE_MENU", "Menu")),
    ("C9", "Guide", "guide", _keyevent("KEYCODE_GUIDE", "Guide")),
    ("C20", "Play / Pause", "play_pause", _keyevent("KEYCODE_MEDIA_PLAY_PAUSE", "Play/Pause")),
    ("C21", "Stop", "media_stop", _keyevent("KEYCODE_MEDIA_STOP", "Stop")),
    ("C22", "Next track", "media_next", _keyevent("KEYCODE_MEDIA_NEXT", "Next")),
    ("C23", "Previous track", "media_previous", _keyevent("KEYCODE_MEDIA_PREVIOUS", "Previous")),
    ("C24", "Rewind", "media_rewind", _keyevent("KEYCODE_MEDIA_REWIND", "Rewind")),
    ("C25", "Fast forward", "media_fast_forward", _keyevent("KEYCODE_MEDIA_FAST_FORWARD", "Fast forward")),
    ("D1", "Volume up", "volume_up", _keyevent("KEYCODE_VOLUME_UP", "Volume up")),
    ("D2", "Volume down", "volume_down", _keyevent("KEYCODE_VOLUME_DOWN", "Volume down")),
    ("D3", "Mute", "mute", _keyevent("KEYCODE_VOLUME_MUTE", "Mute toggled")),
    ("E1", "HDMI 1", "hdmi1", _keyevent("KEYCODE_TV_INPUT_HDMI_1", "HDMI 1")),
    ("E2", "HDMI 2", "hdmi2", _keyevent("KEYCODE_TV_INPUT_HDMI_2", "HDMI 2")),
    ("E3", "HDMI 3", "hdmi3", _keyevent("KEYCODE_TV_INPUT_HDMI_3", "HDMI 3")),
    ("E4", "HDMI 4", "hdmi4", _keyevent("KEYCODE_TV_INPUT_HDMI_4", "HDMI 4")),
    ("E5", "Cycle input", "tv_input", _keyevent("KEYCODE_TV_INPUT", "Input cycled")),
    ("F1", "Launch app by package", "launch_app", launch_app),
    ("F2", "YouTube", "youtube", _launch_package("com.google.android.youtube.tv", "YouTube")),
    ("F3", "Netflix", "netflix", _launch_package("com.netflix.ninja", "Netflix")),
    ("F4", "Force-stop app", "force_stop", force_stop_app),
    ("F5", "List installed packages", "packages", _shell("pm", "list", "packages")),
    ("F6", "Open URL", "open_url", open_url),
    ("G1", "Open Android settings", "settings", _shell("am", "start", "-a", "android.settings.SETTINGS")),
    ("G2", "Send text", "send_text", send_text),
    ("G3", "Send keycode", "send_keycode", send_keycode),
    ("G4", "Screenshot", "screenshot", screenshot),
    ("G5", "Uptime", "uptime", _shell("uptime")),
    ("G6", "Storage usage", "storage", _shell("df", "-h")),
    ("G7", "Memory info", "meminfo", _shell("cat", "/proc/meminfo")),
    ("G8", "Running processes", "processes", _shell("ps", "-A")),
)


def default_actions() -> list[Action]:
    return [Action(id=id_, label=label, handler_key=key, handler=handler) for id_, label, key, handler in ACTION_TABLE]


def build_default_registry() -> ActionRegistry:
    return ActionRegistry(default_actions())
