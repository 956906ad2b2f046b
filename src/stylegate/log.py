"""Console logging for build runs, colored via Rich.

Messages carry file paths and tool output, so they are escaped before they
reach Rich markup.
"""

from __future__ import annotations

from rich.console import Console
from rich.markup import escape

console = Console(highlight=False)
_err_console = Console(highlight=False, stderr=True)

_verbose = False


def set_verbose(enabled: bool) -> None:
    global _verbose
    _verbose = enabled


def _tagged(style: str, tag: str, msg: str) -> str:
    return f"[{style}]\\[{tag}][/{style}] {escape(msg)}"


def info(msg: str) -> None:
    console.print(_tagged("blue", "INFO", msg))


def success(msg: str) -> None:
    console.print(_tagged("green", "OK", msg))


def warn(msg: str) -> None:
    console.print(_tagged("yellow", "WARN", msg))


def error(msg: str) -> None:
    _err_console.print(_tagged("red", "ERROR", msg))


def debug(msg: str) -> None:
    if _verbose:
        console.print(f"[dim]\\[DEBUG] {escape(msg)}[/dim]")
