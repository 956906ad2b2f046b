"""Transform pipeline: one generator chain serving nested and minified builds.

Stages pull records lazily, so a file travels compiler -> postprocessors ->
prefixer -> minifier -> rename -> write -> sync before the next one is read.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Iterator, Mapping
from typing import Any

from stylegate import log
from stylegate.config import Config
from stylegate.errors import PluginError, UnsupportedStreamError, format_plugin_error
from stylegate.files import BufferedFile, FileRecord, StreamedFile, add_suffix, read_sources
from stylegate.reporter import ErrorReporter
from stylegate.run import Invocation, RunChannel
from stylegate.settings import effective_settings
from stylegate.tasks.model import TaskOptions
from stylegate.tools.base import Processor
from stylegate.tools.registry import Toolchain
from stylegate.tools.sass import is_partial

MIN_SUFFIX = ".min"


def mode_name(minified: bool) -> str:
    return "compress" if minified else "nest"


def _map_buffered(
    records: Iterable[FileRecord],
    plugin: str,
    fn: Callable[[BufferedFile], BufferedFile | None],
) -> Iterator[FileRecord]:
    """Apply *fn* to buffered records; empty ones pass, streamed ones abort the run."""
    for record in records:
        if isinstance(record, StreamedFile):
            raise UnsupportedStreamError(plugin)
        if isinstance(record, BufferedFile):
            transformed = fn(record)
            if transformed is None:
                continue
            record = transformed
        yield record


class TransformPipeline:
    def __init__(
        self,
        name: str,
        options: TaskOptions,
        cfg: Config,
        tools: Toolchain,
        reporter: ErrorReporter,
        gate_closed: Callable[[], bool],
    ) -> None:
        self.name = name
        self.options = options
        self.cfg = cfg
        self.tools = tools
        self.reporter = reporter
        self._gate_closed = gate_closed

    def compile(
        self,
        minified: bool,
        invocation: Invocation,
        channel: RunChannel,
    ) -> Iterator[FileRecord]:
        """Return the lazily built output stream, or an empty one while lint has failed."""
        label = f"{self.name}:{mode_name(minified)}"
        if self._gate_closed():
            log.debug(f"{label}: skipped, lint failed")
            return iter(())

        settings = effective_settings(self.cfg.sass_settings, self.options.settings, minified)
        display = minified or invocation.is_requested(label)
        processors = self.tools.postprocessors(minified)
        sourcemap = self.cfg.sourcemaps and not minified

        records = read_sources(self.options.src, self.options.cwd, sourcemap=sourcemap)
        stream = self._stages(records, settings.get("sass", {}), processors, minified)
        return self._guard(stream, label, display, channel)

    def _stages(
        self,
        records: Iterable[FileRecord],
        sass_options: Mapping[str, Any],
        processors: list[Processor],
        minified: bool,
    ) -> Iterator[FileRecord]:
        compiler = self.tools.compiler

        def compile_one(record: BufferedFile) -> BufferedFile | None:
            if is_partial(record.path):
                return None
            return compiler.compile(record, sass_options)

        stream = _map_buffered(records, "sass", compile_one)
        for processor in processors:
            stream = _map_buffered(stream, processor.name, processor.process)

        prefixer = self.tools.prefixer(self.options.autoprefixer or {})
        stream = _map_buffered(stream, prefixer.name, prefixer.process)

        minifier = self.tools.minifier(minified)
        stream = _map_buffered(stream, minifier.name, minifier.process)

        suffix = MIN_SUFFIX if minified else ""
        stream = _map_buffered(stream, "rename", lambda r: r.with_path(add_suffix(r.path, suffix)))

        dst, cwd = self.options.dst, self.options.cwd
        stream = _map_buffered(stream, "dest", lambda r: self.tools.writer.write(r, dst, cwd))

        return self.tools.sync.sync(stream, self.cfg.sync_match)

    def _guard(
        self,
        stream: Iterator[FileRecord],
        label: str,
        display: bool,
        channel: RunChannel,
    ) -> Iterator[FileRecord]:
        """Stop the run at the first stage error instead of letting it escape."""
        try:
            yield from stream
        except (PluginError, OSError) as exc:
            err = exc if isinstance(exc, PluginError) else PluginError(label, str(exc))
            if display:
                self.reporter.report_error(err, label)
                channel.error(err)
            else:
                log.warn(f"{label}: {format_plugin_error(err)}")
            channel.end()
