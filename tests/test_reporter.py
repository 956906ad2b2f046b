"""Tests for stylegate.reporter: message formatting and fatal/advisory routing."""

from __future__ import annotations

from pathlib import Path
from unittest.mock import patch

from stylegate.errors import CompileError
from stylegate.files import BufferedFile, LintResult
from stylegate.reporter import ErrorReporter
from stylegate.run import Invocation, RunChannel

from conftest import FakeNotifier


def _failed(root: Path, rel: str, errors: int, warnings: int) -> BufferedFile:
    path = root / rel
    return BufferedFile(path=path, base=root).with_lint(LintResult(str(path), errors, warnings))


class TestLintMessages:
    def test_paths_are_relative_to_configured_cwd(self, tmp_path: Path):
        reporter = ErrorReporter(tmp_path, FakeNotifier())
        batch = [_failed(tmp_path, "scss/b.scss", 2, 1), _failed(tmp_path, "scss/deep/c.scss", 1, 0)]

        assert reporter.lint_lines(batch) == [
            "2 errors, 1 warning in scss/b.scss",
            "1 error, 0 warnings in scss/deep/c.scss",
        ]

    def test_records_without_result_are_skipped(self, tmp_path: Path):
        reporter = ErrorReporter(tmp_path, FakeNotifier())
        assert reporter.lint_lines([BufferedFile(path=tmp_path / "a.scss", base=tmp_path)]) == []


class TestReportLint:
    def test_current_task_is_fatal(self, tmp_path: Path):
        notifier = FakeNotifier()
        reporter = ErrorReporter(tmp_path, notifier)
        channel = RunChannel()

        body = reporter.report_lint(
            [_failed(tmp_path, "b.scss", 2, 1)], "app:lint", Invocation(requested=("app:lint",)), channel
        )

        assert body == "2 errors, 1 warning in b.scss"
        assert channel.errors[0].message == "\n2 errors, 1 warning in b.scss\n"
        assert notifier.notifications == [(["2 errors, 1 warning in b.scss"], "app:lint")]

    def test_other_invocation_is_logged_only(self, tmp_path: Path):
        notifier = FakeNotifier()
        reporter = ErrorReporter(tmp_path, notifier)
        channel = RunChannel()

        with patch("stylegate.reporter.log.error") as log_error:
            reporter.report_lint([_failed(tmp_path, "b.scss", 1, 0)], "app:lint", Invocation(), channel)

        assert not channel.failed
        log_error.assert_called_once_with("Error:\n1 error, 0 warnings in b.scss")
        assert len(notifier.notifications) == 1

    def test_notifier_failure_does_not_escape(self, tmp_path: Path):
        notifier = FakeNotifier()

        def broken(lines, label):
            raise RuntimeError("no display")

        notifier.notify = broken
        reporter = ErrorReporter(tmp_path, notifier)
        channel = RunChannel()

        reporter.report_lint(
            [_failed(tmp_path, "b.scss", 1, 0)], "app:lint", Invocation(requested=("app:lint",)), channel
        )

        assert channel.failed


class TestReportError:
    def test_notifies_and_logs_location(self, tmp_path: Path):
        notifier = FakeNotifier()
        reporter = ErrorReporter(tmp_path, notifier)
        err = CompileError("expected ;", file_path="a.scss", line=1, column=4)

        with patch("stylegate.reporter.log.error") as log_error:
            reporter.report_error(err, "app:nest")

        assert notifier.errors == [(err, "app:nest")]
        log_error.assert_called_once_with("app:nest\nsass: a.scss:1:4\nexpected ;")
