"""PostCSS plugin adapters: one ``postcss`` CLI call per plugin, contents over stdin.

Plugin options travel through a throwaway ``postcss.config.js`` because the
CLI has no flag for them.
"""

from __future__ import annotations

import json
import tempfile
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from stylegate.errors import ProcessorError
from stylegate.files import BufferedFile
from stylegate.io_utils import write_text
from stylegate.tools.base import ToolBase


class PostcssProcessor(ToolBase):
    executable = "postcss"

    def __init__(
        self,
        plugin: str,
        options: Mapping[str, Any] | None = None,
        *,
        timeout: int | None = None,
    ) -> None:
        super().__init__(timeout=timeout)
        self.plugin = plugin
        self.options = dict(options or {})
        self.name = plugin

    def render_config(self) -> str:
        plugins = {self.plugin: self.options or {}}
        return f"module.exports = {json.dumps({'plugins': plugins}, indent=2)};\n"

    def build_cmd(self, record: BufferedFile, config_dir: Path) -> list[str]:
        return [
            self.resolve_executable(),
            "--config",
            str(config_dir),
            "--map" if record.sourcemap else "--no-map",
        ]

    def process(self, record: BufferedFile) -> BufferedFile:
        try:
            source = record.contents.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise ProcessorError(self.plugin, f"{record.path}: not valid UTF-8 (byte {exc.start})") from exc

        with tempfile.TemporaryDirectory(prefix="stylegate-postcss-") as tmp:
            config_dir = Path(tmp)
            write_text(config_dir / "postcss.config.js", self.render_config())
            result = self.run(
                self.build_cmd(record, config_dir),
                cwd=record.base,
                input_text=source,
            )
        if not result.ok:
            raise ProcessorError(self.plugin, f"{record.path}: {result.error}")
        return record.with_contents(result.stdout.encode("utf-8"))


def assets(options: Mapping[str, Any] | None = None) -> PostcssProcessor:
    return PostcssProcessor("postcss-assets", options)


def rucksack(fallbacks: bool = True) -> PostcssProcessor:
    return PostcssProcessor("rucksack-css", {"fallbacks": fallbacks})


def mqpacker() -> PostcssProcessor:
    return PostcssProcessor("css-mqpacker")


def autoprefixer(options: Mapping[str, Any] | None = None) -> PostcssProcessor:
    return PostcssProcessor("autoprefixer", options)


def cssnano(core: bool) -> PostcssProcessor:
    """Minifier; without *core* whitespace and comments are left as they are."""
    if core:
        preset: Any = "default"
    else:
        preset = ["default", {"normalizeWhitespace": False, "discardComments": False}]
    return PostcssProcessor("cssnano", {"preset": preset})
