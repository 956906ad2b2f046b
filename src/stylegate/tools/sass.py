"""Dart Sass compiler adapter (``sass`` CLI reading from stdin)."""

from __future__ import annotations

import re
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from stylegate.errors import CompileError
from stylegate.files import BufferedFile
from stylegate.settings import COMPRESSED
from stylegate.tools.base import ToolBase

_LOCATION_RE = re.compile(r"^\s*(?:-|\S+)\s+(\d+):(\d+)\s", re.MULTILINE)


def is_partial(path: Path) -> bool:
    """Sass partials (``_name.scss``) are imported by other files, never emitted."""
    return path.name.startswith("_")


class SassCompiler(ToolBase):
    name = "sass"
    executable = "sass"

    def build_cmd(self, record: BufferedFile, options: Mapping[str, Any]) -> list[str]:
        # Dart Sass has no "nested" style; expanded is its uncompressed output.
        style = "compressed" if options.get("outputStyle") == COMPRESSED else "expanded"
        cmd = [self.resolve_executable(), "--stdin", f"--style={style}"]
        if record.path.suffix == ".sass":
            cmd.append("--indented")
        load_paths = [str(record.path.parent), *options.get("includePaths", [])]
        cmd.extend(f"--load-path={p}" for p in load_paths)
        if record.sourcemap:
            cmd.extend(["--embed-source-map", "--embed-sources"])
        else:
            cmd.append("--no-source-map")
        if options.get("quiet"):
            cmd.append("--quiet")
        return cmd

    def compile(self, record: BufferedFile, options: Mapping[str, Any]) -> BufferedFile:
        target = record.path.with_suffix(".css")
        if not record.contents.strip():
            return record.with_path(target)

        try:
            source = record.contents.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise CompileError(
                f"source is not valid UTF-8 (byte {exc.start})", file_path=str(record.path)
            ) from exc

        result = self.run(self.build_cmd(record, options), cwd=record.path.parent, input_text=source)
        if not result.ok:
            raise parse_compile_error(result.error, str(record.path))
        return record.with_path(target).with_contents(result.stdout.encode("utf-8"))


def parse_compile_error(stderr: str, file_path: str) -> CompileError:
    """Build a :class:`CompileError` from Dart Sass stderr output."""
    lines = [ln for ln in stderr.splitlines() if ln.strip()]
    message = lines[0].strip() if lines else "compilation failed"
    if message.startswith("Error: "):
        message = message[len("Error: "):]

    line = column = None
    match = _LOCATION_RE.search(stderr)
    if match:
        line, column = int(match.group(1)), int(match.group(2))
    return CompileError(message, file_path=file_path, line=line, column=column)
