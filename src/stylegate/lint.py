"""Lint gate: lint the whole source set, then decide pass/fail once."""

from __future__ import annotations

from collections.abc import Iterable
from pathlib import Path

from stylegate import log
from stylegate.errors import PluginError, UnsupportedStreamError
from stylegate.files import BufferedFile, FileRecord, StreamedFile
from stylegate.reporter import LINT_PLUGIN, ErrorReporter
from stylegate.run import Invocation, RunChannel
from stylegate.tools.base import Linter


class LintGate:
    """Aggregate-then-decide lint over a streamed file set.

    Usage::

        gate = LintGate(linter, reporter)
        batch = gate.collect(records, config_file, channel)
        if batch:
            gate.report(batch, label, invocation, channel)
    """

    def __init__(self, linter: Linter, reporter: ErrorReporter) -> None:
        self.linter = linter
        self.reporter = reporter

    def collect(
        self,
        records: Iterable[FileRecord],
        config_file: Path,
        channel: RunChannel,
    ) -> list[BufferedFile] | None:
        """Lint every record and return the ones with errors, in source order.

        Empty records pass through the linter and are not counted; streamed
        records are rejected on the channel and dropped. A linter failure is
        reported on the channel and returns ``None``: an incomplete pass
        decides nothing.
        """
        batch: list[BufferedFile] = []
        try:
            for record in self.linter.lint(self._accepted(records, channel), config_file):
                if not isinstance(record, BufferedFile) or record.lint is None:
                    continue
                self._print_result(record)
                if record.lint.failed:
                    batch.append(record)
        except PluginError as exc:
            channel.error(exc)
            channel.end()
            return None
        return batch

    def report(
        self,
        batch: list[BufferedFile],
        label: str,
        invocation: Invocation,
        channel: RunChannel,
    ) -> str:
        return self.reporter.report_lint(batch, label, invocation, channel)

    @staticmethod
    def _accepted(records: Iterable[FileRecord], channel: RunChannel) -> Iterable[FileRecord]:
        for record in records:
            if isinstance(record, StreamedFile):
                channel.error(UnsupportedStreamError(LINT_PLUGIN))
                continue
            yield record

    def _print_result(self, record: BufferedFile) -> None:
        result = record.lint
        if result is None or not result.messages:
            return
        shown = self.reporter.display_path(result.file_path)
        for message in result.messages:
            log.warn(f"{shown}:{message}")
