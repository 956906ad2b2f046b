"""Task option model built from ``stylegate.json`` task entries."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from stylegate.config import DEFAULT_LINT_CONFIG, Config
from stylegate.errors import ConfigError


@dataclass(frozen=True)
class TaskOptions:
    src: str | tuple[str, ...]
    dst: str
    cwd: Path
    settings: dict[str, Any] = field(default_factory=dict, hash=False)
    autoprefixer: dict[str, Any] | None = field(default=None, hash=False)
    lint_config: str = DEFAULT_LINT_CONFIG

    @property
    def lint_config_path(self) -> Path:
        return self.cwd / self.lint_config

    @classmethod
    def from_dict(cls, name: str, data: dict[str, Any], cfg: Config) -> TaskOptions:
        src = data.get("src")
        if isinstance(src, list):
            src = tuple(str(s) for s in src)
        if not src:
            raise ConfigError(f"task {name!r}: 'src' is required")
        dst = data.get("dst")
        if not dst:
            raise ConfigError(f"task {name!r}: 'dst' is required")
        settings = data.get("settings") or {}
        autoprefixer = data.get("autoprefixer")
        if not isinstance(settings, dict) or not (autoprefixer is None or isinstance(autoprefixer, dict)):
            raise ConfigError(f"task {name!r}: 'settings' and 'autoprefixer' must be objects")
        return cls(
            src=src,
            dst=str(dst),
            cwd=(cfg.cwd_path / data.get("cwd", ".")).resolve(),
            settings=settings,
            autoprefixer=autoprefixer,
            lint_config=str(data.get("lint_config") or DEFAULT_LINT_CONFIG),
        )
