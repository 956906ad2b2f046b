"""Configuration defaults, env vars, and ``stylegate.json`` loading."""

from __future__ import annotations

import json
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from stylegate.errors import ConfigError
from stylegate.io_utils import read_text


CONFIG_FILENAME = "stylegate.json"

DEFAULT_SYNC_URL = "http://localhost:3000"
DEFAULT_SYNC_MATCH = "**/*.css"
DEFAULT_LINT_CONFIG = ".sass-lint.yml"

_FALSY = ("0", "false", "no", "off", "")


def _env_flag(name: str, default: bool) -> bool:
    raw = os.environ.get(name)
    if raw is None:
        return default
    return raw.strip().lower() not in _FALSY


@dataclass
class Config:
    """Settings shared by every task of one run."""

    cwd: str = ""
    sourcemaps: bool = True

    # Base compiler settings, lowest-precedence layer of the merge
    sass_settings: dict[str, Any] = field(default_factory=dict)

    # Live reload
    sync_url: str = ""
    sync_match: str = DEFAULT_SYNC_MATCH

    # Watch mode
    poll_interval: float = 0.5

    # Raw task definitions keyed by task name
    tasks: dict[str, dict[str, Any]] = field(default_factory=dict)

    config_file: str = ""

    def __post_init__(self) -> None:
        if not self.cwd:
            self.cwd = os.environ.get("STYLEGATE_CWD") or os.getcwd()
        self.sourcemaps = _env_flag("STYLEGATE_SOURCEMAPS", self.sourcemaps)
        if not self.sync_url:
            self.sync_url = os.environ.get("STYLEGATE_SYNC_URL") or DEFAULT_SYNC_URL

    @property
    def cwd_path(self) -> Path:
        return Path(self.cwd)


def find_config_file(start: Path | None = None) -> Path | None:
    """Return ``stylegate.json`` from *start* (default cwd) or its parents."""
    here = (start or Path.cwd()).resolve()
    for directory in (here, *here.parents):
        candidate = directory / CONFIG_FILENAME
        if candidate.is_file():
            return candidate
    return None


def load_config(path: Path | None = None, **overrides: Any) -> Config:
    """Build a :class:`Config` from a ``stylegate.json`` file plus keyword overrides.

    Without *path* the file is searched upwards from the working directory;
    a missing file yields the defaults. A relative ``cwd`` in the file is
    resolved against the file's directory.
    """
    if path is None:
        path = find_config_file()
    elif not path.is_file():
        raise ConfigError(f"Config file not found: {path}")

    data: dict[str, Any] = {}
    if path is not None:
        try:
            data = json.loads(read_text(path))
        except json.JSONDecodeError as exc:
            raise ConfigError(f"{path}: invalid JSON ({exc.msg} at line {exc.lineno})") from exc
        if not isinstance(data, dict):
            raise ConfigError(f"{path}: top-level value must be an object")

    kwargs: dict[str, Any] = {}
    if path is not None:
        root = path.parent.resolve()
        kwargs["cwd"] = str((root / data.get("cwd", ".")).resolve())
        kwargs["config_file"] = str(path)
    if "sourcemaps" in data:
        kwargs["sourcemaps"] = bool(data["sourcemaps"])
    sass_section = data.get("sass") or {}
    if not isinstance(sass_section, dict):
        raise ConfigError(f"{path}: 'sass' must be an object")
    kwargs["sass_settings"] = sass_section.get("settings") or {}
    for key in ("sync_url", "sync_match", "poll_interval"):
        if key in data:
            kwargs[key] = data[key]

    tasks = data.get("tasks") or {}
    if not isinstance(tasks, dict) or not all(isinstance(v, dict) for v in tasks.values()):
        raise ConfigError(f"{path}: 'tasks' must map task names to objects")
    kwargs["tasks"] = tasks

    kwargs.update({k: v for k, v in overrides.items() if v is not None})
    return Config(**kwargs)
