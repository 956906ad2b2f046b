"""Toolchain: the bundle of collaborators one task's lint and build stages use."""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from typing import Any

from stylegate.config import Config
from stylegate.notify import DesktopNotifier
from stylegate.tools import postcss
from stylegate.tools.base import Compiler, Linter, Notifier, Processor, Sync, ToolBase, Writer
from stylegate.tools.browsersync import BrowserSync
from stylegate.tools.sass import SassCompiler
from stylegate.tools.sasslint import SassLinter
from stylegate.tools.writer import FileWriter


def default_postprocessors(minified: bool) -> list[Processor]:
    """Asset paths and CSS fallbacks always; media-query packing only for minified output."""
    processors: list[Processor] = [postcss.assets(), postcss.rucksack(fallbacks=True)]
    if minified:
        processors.append(postcss.mqpacker())
    return processors


@dataclass
class Toolchain:
    linter: Linter
    compiler: Compiler
    writer: Writer
    sync: Sync
    notifier: Notifier
    postprocessors: Callable[[bool], list[Processor]] = default_postprocessors
    prefixer: Callable[[Mapping[str, Any] | None], Processor] = postcss.autoprefixer
    minifier: Callable[[bool], Processor] = postcss.cssnano
    required: list[ToolBase] = field(default_factory=list)

    def missing_tools(self) -> list[str]:
        """Error messages for every required command that is not installed."""
        return [err for tool in self.required if (err := tool.check_available())]


def default_toolchain(cfg: Config, *, notifications: bool = True) -> Toolchain:
    linter = SassLinter()
    compiler = SassCompiler()
    return Toolchain(
        linter=linter,
        compiler=compiler,
        writer=FileWriter(),
        sync=BrowserSync(cfg.sync_url),
        notifier=DesktopNotifier(enabled=notifications),
        required=[linter, compiler, postcss.PostcssProcessor("postcss")],
    )
