"""sass-lint adapter: lints one file per invocation and parses its JSON report."""

from __future__ import annotations

import json
from collections.abc import Iterable, Iterator
from pathlib import Path
from typing import Any

from stylegate.errors import PluginError
from stylegate.files import BufferedFile, FileRecord, LintResult
from stylegate.tools.base import ToolBase

PLUGIN = "sass-lint"


class SassLinter(ToolBase):
    name = PLUGIN
    executable = "sass-lint"

    def build_cmd(self, path: Path, config_file: Path | None = None) -> list[str]:
        cmd = [self.resolve_executable(), "--format", "json", "--verbose", "--no-exit"]
        if config_file is not None and config_file.is_file():
            cmd.extend(["--config", str(config_file)])
        cmd.append(str(path))
        return cmd

    def lint(self, records: Iterable[FileRecord], config_file: Path) -> Iterator[FileRecord]:
        for record in records:
            if not isinstance(record, BufferedFile):
                yield record
                continue
            result = self.run(self.build_cmd(record.path, config_file), cwd=record.base)
            if result.return_code < 0 or (result.error and not result.stdout.strip()):
                raise PluginError(PLUGIN, result.error)
            yield record.with_lint(self.parse_output(result.stdout, str(record.path)))

    @staticmethod
    def parse_output(raw: str, file_path: str) -> LintResult:
        """Turn the formatter's JSON array into a :class:`LintResult` for *file_path*.

        An empty report means the file had nothing to say.
        """
        if not raw.strip():
            return LintResult(file_path=file_path)
        try:
            reports = json.loads(raw)
        except json.JSONDecodeError as exc:
            raise PluginError(PLUGIN, f"unreadable report for {file_path}: {exc.msg}") from exc

        for report in reports if isinstance(reports, list) else []:
            if not isinstance(report, dict):
                continue
            return LintResult(
                file_path=file_path,
                error_count=int(report.get("errorCount", 0)),
                warning_count=int(report.get("warningCount", 0)),
                messages=tuple(_format_message(m) for m in report.get("messages", [])),
            )
        return LintResult(file_path=file_path)


def _format_message(message: dict[str, Any]) -> str:
    level = "error" if message.get("severity") == 2 else "warning"
    where = f"{message.get('line', 0)}:{message.get('column', 0)}"
    rule = message.get("ruleId") or ""
    suffix = f" ({rule})" if rule else ""
    return f"{where} {level} {message.get('message', '')}{suffix}"
