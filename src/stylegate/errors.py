"""Error taxonomy for build runs and the message formatting shared by reporters."""

from __future__ import annotations


class StylegateError(Exception):
    """Root of every error raised by stylegate."""


class ConfigError(StylegateError):
    """Raised when ``stylegate.json`` is missing, malformed or names an unknown task."""


class PluginError(StylegateError):
    """An error raised by one pipeline stage, tagged with the plugin that raised it."""

    def __init__(self, plugin: str, message: str) -> None:
        super().__init__(message)
        self.plugin = plugin
        self.message = message

    def __str__(self) -> str:
        return f"{self.plugin}: {self.message}"


class CompileError(PluginError):
    """Stylesheet syntax error reported by the compiler."""

    def __init__(
        self,
        message: str,
        *,
        file_path: str = "",
        line: int | None = None,
        column: int | None = None,
        plugin: str = "sass",
    ) -> None:
        super().__init__(plugin, message)
        self.file_path = file_path
        self.line = line
        self.column = column

    @property
    def location(self) -> str:
        if not self.file_path:
            return ""
        if self.line is None:
            return self.file_path
        if self.column is None:
            return f"{self.file_path}:{self.line}"
        return f"{self.file_path}:{self.line}:{self.column}"


class ProcessorError(PluginError):
    """A postprocessor, prefixer or minifier failed on a file."""


class UnsupportedStreamError(PluginError):
    """A stage received streamed content; only buffered content is accepted."""

    def __init__(self, plugin: str) -> None:
        super().__init__(plugin, "Streams are not supported!")


def _plural(count: int, word: str) -> str:
    return f"{count} {word}" if count == 1 else f"{count} {word}s"


def format_error_information(error_count: int, warning_count: int, filename: str) -> str:
    """Return ``"2 errors, 1 warning in b.scss"``."""
    return f"{_plural(error_count, 'error')}, {_plural(warning_count, 'warning')} in {filename}"


def format_plugin_error(exc: BaseException) -> str:
    """Render an error for the console, with its source location when known."""
    if isinstance(exc, CompileError) and exc.location:
        return f"{exc.plugin}: {exc.location}\n{exc.message}"
    if isinstance(exc, PluginError):
        return str(exc)
    return f"{type(exc).__name__}: {exc}"
