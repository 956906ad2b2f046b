"""Shared fixtures for stylegate tests.

File handling in tests:
- Use tmp_path for source trees so tests are isolated and cleaned up.
- Collaborators are fakes that record calls into one shared ``calls`` list,
  so tests can assert on stage order across tools.
"""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import pytest

from stylegate.config import Config
from stylegate.errors import CompileError
from stylegate.files import BufferedFile, LintResult
from stylegate.io_utils import write_text
from stylegate.task import StyleTask
from stylegate.tasks.model import TaskOptions
from stylegate.tools.registry import Toolchain


class FakeLinter:
    def __init__(self, calls: list[str], results: dict[str, tuple[int, int]]) -> None:
        self.calls = calls
        self.results = results
        self.messages: dict[str, tuple[str, ...]] = {}
        self.config_files: list[Path] = []

    def lint(self, records, config_file):
        self.config_files.append(config_file)
        for record in records:
            if isinstance(record, BufferedFile):
                self.calls.append(f"lint:{record.path.name}")
                errors, warnings = self.results.get(record.path.name, (0, 0))
                messages = self.messages.get(record.path.name, ())
                record = record.with_lint(LintResult(str(record.path), errors, warnings, messages))
            yield record


class FakeCompiler:
    def __init__(self, calls: list[str]) -> None:
        self.calls = calls
        self.options: list[dict[str, Any]] = []
        self.sourcemaps: list[bool] = []
        self.fail: set[str] = set()

    def compile(self, record, options):
        self.calls.append(f"sass:{record.path.name}")
        self.options.append(dict(options))
        self.sourcemaps.append(record.sourcemap)
        if record.path.name in self.fail:
            raise CompileError("expected \";\".", file_path=str(record.path), line=2, column=13)
        return record.with_path(record.path.with_suffix(".css")).with_contents(b"/*css*/" + record.contents)


class FakeProcessor:
    def __init__(self, name: str, calls: list[str]) -> None:
        self.name = name
        self.calls = calls

    def process(self, record):
        self.calls.append(f"{self.name}:{record.path.name}")
        return record


class FakeWriter:
    def __init__(self, calls: list[str]) -> None:
        self.calls = calls

    def write(self, record, dst, cwd):
        self.calls.append(f"dest:{record.path.name}")
        root = cwd / dst
        return dataclasses.replace(record, path=root / record.relative, base=root)


class FakeSync:
    def __init__(self, calls: list[str]) -> None:
        self.calls = calls
        self.matches: list[str] = []

    def sync(self, records, match):
        self.matches.append(match)
        for record in records:
            if isinstance(record, BufferedFile):
                self.calls.append(f"sync:{record.path.name}")
            yield record


class FakeNotifier:
    def __init__(self) -> None:
        self.notifications: list[tuple[list[str], str]] = []
        self.errors: list[tuple[BaseException, str]] = []

    def notify(self, lines, label):
        self.notifications.append((list(lines), label))

    def on_error(self, error, label):
        self.errors.append((error, label))


@dataclass
class Harness:
    """A task wired to fake collaborators over a tmp_path source tree."""

    root: Path
    calls: list[str]
    linter: FakeLinter
    compiler: FakeCompiler
    writer: FakeWriter
    sync: FakeSync
    notifier: FakeNotifier
    cfg: Config
    tools: Toolchain
    factory_args: dict[str, list[Any]] = field(default_factory=dict)

    def task(self, name: str = "app", **options: Any) -> StyleTask:
        opts = TaskOptions(
            src=options.pop("src", "scss/**/*.scss"),
            dst=options.pop("dst", "css"),
            cwd=self.root,
            **options,
        )
        return StyleTask(name, opts, self.cfg, self.tools)


def _make_harness(
    root: Path,
    files: dict[str, str],
    lint_results: dict[str, tuple[int, int]] | None = None,
    **cfg_kwargs: Any,
) -> Harness:
    root = root.resolve()
    for rel, text in files.items():
        write_text(root / rel, text)

    calls: list[str] = []
    factory_args: dict[str, list[Any]] = {"postprocessors": [], "prefixer": [], "minifier": []}

    def postprocessors(minified: bool) -> list[FakeProcessor]:
        factory_args["postprocessors"].append(minified)
        names = ["postcss-assets", "rucksack-css"] + (["css-mqpacker"] if minified else [])
        return [FakeProcessor(n, calls) for n in names]

    def prefixer(options):
        factory_args["prefixer"].append(options)
        return FakeProcessor("autoprefixer", calls)

    def minifier(core: bool):
        factory_args["minifier"].append(core)
        return FakeProcessor("cssnano", calls)

    linter = FakeLinter(calls, lint_results or {})
    compiler = FakeCompiler(calls)
    writer = FakeWriter(calls)
    sync = FakeSync(calls)
    notifier = FakeNotifier()
    tools = Toolchain(
        linter=linter,
        compiler=compiler,
        writer=writer,
        sync=sync,
        notifier=notifier,
        postprocessors=postprocessors,
        prefixer=prefixer,
        minifier=minifier,
    )
    cfg_kwargs.setdefault("cwd", str(root))
    cfg = Config(**cfg_kwargs)
    return Harness(
        root=root,
        calls=calls,
        linter=linter,
        compiler=compiler,
        writer=writer,
        sync=sync,
        notifier=notifier,
        cfg=cfg,
        tools=tools,
        factory_args=factory_args,
    )


@pytest.fixture(autouse=True)
def _isolated_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for var in ("STYLEGATE_CWD", "STYLEGATE_SOURCEMAPS", "STYLEGATE_SYNC_URL"):
        monkeypatch.delenv(var, raising=False)


@pytest.fixture
def make_harness(tmp_path: Path):
    """Factory fixture: ``make_harness(files, lint_results, **config)``."""

    def _make(
        files: dict[str, str] | None = None,
        lint_results: dict[str, tuple[int, int]] | None = None,
        **cfg_kwargs: Any,
    ) -> Harness:
        return _make_harness(tmp_path, files or {}, lint_results, **cfg_kwargs)

    return _make
