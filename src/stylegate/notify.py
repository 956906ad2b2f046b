"""Desktop notifications for build failures, best-effort."""

from __future__ import annotations

import subprocess
import sys

from stylegate.errors import format_plugin_error


def _run_quiet(*cmd: str) -> None:
    """Fire-and-forget subprocess, ignore failures."""
    try:
        subprocess.Popen(
            cmd,
            stdout=subprocess.DEVNULL,
            stderr=subprocess.DEVNULL,
        )
    except (FileNotFoundError, OSError):
        pass


def _escape_applescript(text: str) -> str:
    return text.replace("\\", "\\\\").replace('"', '\\"')


def show(title: str, message: str) -> None:
    """Show a toast with *title* and *message* on the current platform."""
    if sys.platform == "darwin":
        _run_quiet(
            "osascript", "-e",
            f'display notification "{_escape_applescript(message)}" '
            f'with title "{_escape_applescript(title)}"',
        )
    elif sys.platform.startswith("linux"):
        _run_quiet("notify-send", "-u", "critical", title, message)
    elif sys.platform == "win32":
        _run_quiet(
            "powershell.exe", "-Command",
            "[System.Media.SystemSounds]::Hand.Play()",
        )


class DesktopNotifier:
    """Notifier collaborator backed by the platform's toast command."""

    def __init__(self, enabled: bool = True) -> None:
        self.enabled = enabled

    def notify(self, lines: list[str], label: str) -> None:
        if self.enabled and lines:
            show(f"stylegate - {label}", "\n".join(lines))

    def on_error(self, error: BaseException, label: str) -> None:
        if self.enabled:
            show(f"stylegate - {label}", format_plugin_error(error))
