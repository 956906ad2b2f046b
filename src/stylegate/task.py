"""Stylesheet task: lint, then nested and compressed builds gated on the lint result."""

from __future__ import annotations

from collections.abc import Iterator

from stylegate import log
from stylegate.config import Config
from stylegate.errors import ConfigError, PluginError
from stylegate.files import FileRecord, read_sources
from stylegate.lint import LintGate
from stylegate.pipeline import TransformPipeline
from stylegate.reporter import LINT_PLUGIN, ErrorReporter
from stylegate.run import Invocation, RunChannel
from stylegate.tasks.model import TaskOptions
from stylegate.tools.registry import Toolchain


class StyleTask:
    """One logical stylesheet pipeline (e.g. "app styles").

    ``lint_failed`` is reset by every :meth:`lint` and read, never reset, by
    :meth:`compile`. A task instance must not run overlapping cycles.
    """

    def __init__(self, name: str, options: TaskOptions, cfg: Config, tools: Toolchain) -> None:
        self.name = name
        self.options = options
        self.cfg = cfg
        self.tools = tools
        self.lint_failed = False

        self.reporter = ErrorReporter(cfg.cwd_path, tools.notifier)
        self.gate = LintGate(tools.linter, self.reporter)
        self.pipeline = TransformPipeline(
            name, options, cfg, tools, self.reporter, gate_closed=lambda: self.lint_failed
        )

    @classmethod
    def from_config(cls, name: str, cfg: Config, tools: Toolchain) -> StyleTask:
        if name not in cfg.tasks:
            known = ", ".join(sorted(cfg.tasks)) or "none"
            raise ConfigError(f"Unknown task {name!r} (configured: {known})")
        return cls(name, TaskOptions.from_dict(name, cfg.tasks[name], cfg), cfg, tools)

    def label(self, func: str) -> str:
        return f"{self.name}:{func}"

    # ── public operations ────────────────────────────────────────

    def lint(self, invocation: Invocation, channel: RunChannel) -> bool:
        """Lint the whole source set; return ``True`` when no file has errors."""
        self.lint_failed = False
        label = self.label("lint")

        try:
            records = list(read_sources(self.options.src, self.options.cwd))
        except OSError as exc:
            channel.error(PluginError(LINT_PLUGIN, f"cannot read sources: {exc}"))
            return False

        batch = self.gate.collect(records, self.options.lint_config_path, channel)
        if batch is None:
            return False
        if batch:
            self.lint_failed = True
            self.gate.report(batch, label, invocation, channel)
            return False

        log.debug(f"{label}: {len(records)} file(s) clean")
        return True

    def nest(self, invocation: Invocation, channel: RunChannel) -> Iterator[FileRecord]:
        return self.compile(False, invocation, channel)

    def compress(self, invocation: Invocation, channel: RunChannel) -> Iterator[FileRecord]:
        return self.compile(True, invocation, channel)

    def compile(
        self,
        minified: bool,
        invocation: Invocation,
        channel: RunChannel,
    ) -> Iterator[FileRecord]:
        return self.pipeline.compile(minified, invocation, channel)
