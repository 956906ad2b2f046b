"""Error reporting: lint summaries and pipeline errors to notifications, the run channel, or the log."""

from __future__ import annotations

import os
from pathlib import Path

from stylegate import log
from stylegate.errors import PluginError, format_error_information, format_plugin_error
from stylegate.files import BufferedFile
from stylegate.run import Invocation, RunChannel
from stylegate.tools.base import Notifier

LINT_PLUGIN = "sass-lint"


class ErrorReporter:
    def __init__(self, cwd: Path, notifier: Notifier) -> None:
        self.cwd = cwd
        self.notifier = notifier

    def display_path(self, file_path: str) -> str:
        return Path(os.path.relpath(file_path, self.cwd)).as_posix()

    def lint_lines(self, batch: list[BufferedFile]) -> list[str]:
        """One ``"N errors, M warnings in path"`` line per record, in batch order."""
        lines: list[str] = []
        for record in batch:
            result = record.lint
            if result is None:
                continue
            lines.append(
                format_error_information(
                    result.error_count,
                    result.warning_count,
                    self.display_path(result.file_path),
                )
            )
        return lines

    def report_lint(
        self,
        batch: list[BufferedFile],
        label: str,
        invocation: Invocation,
        channel: RunChannel,
    ) -> str:
        """Report a failed lint pass and return the message body.

        The message is fatal (a channel error) when *label* or a task that led
        to it was requested for this run, and an advisory log line otherwise.
        """
        lines = self.lint_lines(batch)
        body = "\n".join(lines)
        self._notify(lines, label)

        if invocation.is_current_or_parent(label):
            channel.error(PluginError(LINT_PLUGIN, f"\n{body}\n"))
        else:
            log.error(f"Error:\n{body}")
        return body

    def report_error(self, exc: BaseException, label: str) -> None:
        """Surface a compile/postprocess error caught at the pipeline boundary."""
        try:
            self.notifier.on_error(exc, label)
        except Exception as notify_exc:
            log.debug(f"notification failed: {notify_exc}")
        log.error(f"{label}\n{format_plugin_error(exc)}")

    def _notify(self, lines: list[str], label: str) -> None:
        try:
            self.notifier.notify(lines, label)
        except Exception as exc:
            log.debug(f"notification failed: {exc}")
