"""File I/O helpers: UTF-8 for text (config files), raw bytes for stylesheet contents."""

from __future__ import annotations

from pathlib import Path
from typing import Any

PathLike = Path | str


def _as_path(path: PathLike) -> Path:
    return path if isinstance(path, Path) else Path(path)


def read_text(path: PathLike, errors: str = "strict", **kwargs: Any) -> str:
    """Read path as text with UTF-8 encoding. Forwards extra kwargs to Path.read_text."""
    return _as_path(path).read_text(encoding="utf-8", errors=errors, **kwargs)


def write_text(path: PathLike, text: str, **kwargs: Any) -> None:
    """Write text to path with UTF-8 encoding, creating parent directories."""
    p = _as_path(path)
    p.parent.mkdir(parents=True, exist_ok=True)
    p.write_text(text, encoding="utf-8", **kwargs)


def read_bytes(path: PathLike) -> bytes:
    return _as_path(path).read_bytes()


def write_bytes(path: PathLike, data: bytes) -> None:
    """Write *data* to path, creating parent directories."""
    p = _as_path(path)
    p.parent.mkdir(parents=True, exist_ok=True)
    p.write_bytes(data)
