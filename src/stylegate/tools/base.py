"""Collaborator protocols and the base class for command-line tool adapters."""

from __future__ import annotations

import shutil
import subprocess
import time
from abc import ABC, abstractmethod
from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Protocol

from stylegate import log
from stylegate.files import BufferedFile, FileRecord


# ── collaborator contracts ───────────────────────────────────────────


class Linter(Protocol):
    def lint(self, records: Iterable[FileRecord], config_file: Path) -> Iterator[FileRecord]:
        """Yield every record, buffered ones tagged with their :class:`LintResult`."""
        ...


class Compiler(Protocol):
    def compile(self, record: BufferedFile, options: Mapping[str, Any]) -> BufferedFile:
        """Return the compiled record (``.css`` path). Raises ``CompileError``."""
        ...


class Processor(Protocol):
    name: str

    def process(self, record: BufferedFile) -> BufferedFile:
        """Return the transformed record. Raises ``ProcessorError``."""
        ...


class Writer(Protocol):
    def write(self, record: BufferedFile, dst: str, cwd: Path) -> BufferedFile:
        """Write *record* under ``cwd/dst`` and return it with its new path."""
        ...


class Sync(Protocol):
    def sync(self, records: Iterable[FileRecord], match: str) -> Iterator[FileRecord]:
        """Announce written records matching *match*, yielding every record."""
        ...


class Notifier(Protocol):
    def notify(self, lines: list[str], label: str) -> None: ...

    def on_error(self, error: BaseException, label: str) -> None: ...


# ── subprocess tools ─────────────────────────────────────────────────


@dataclass
class ToolResult:
    """Uniform result from any tool invocation."""

    stdout: str = ""
    stderr: str = ""
    return_code: int = 0
    duration_ms: int = 0
    error: str = ""

    @property
    def ok(self) -> bool:
        return self.return_code == 0 and not self.error


class ToolBase(ABC):
    """A stage backed by an external command. Subclasses implement ``build_cmd``."""

    name: str = "base"
    executable: str = ""

    def __init__(self, *, timeout: int | None = None) -> None:
        self.timeout = timeout

    @abstractmethod
    def build_cmd(self, *args: Any, **kwargs: Any) -> list[str]:
        """Return the command list for one invocation."""
        ...

    def resolve_executable(self) -> str:
        # Resolved path so the child process gets an absolute path on every platform.
        return shutil.which(self.executable) or self.executable

    def check_available(self) -> str | None:
        """Return an error message if the tool is not on PATH, else None."""
        if not shutil.which(self.executable):
            return f"{self.executable} not found in PATH"
        return None

    def run(
        self,
        cmd: list[str],
        *,
        cwd: Path | None = None,
        input_text: str | None = None,
    ) -> ToolResult:
        """Run *cmd* to completion and map process failures onto :class:`ToolResult`."""
        log.debug(f"{self.name}: {' '.join(cmd)}")
        start = time.monotonic()
        try:
            proc = subprocess.run(
                cmd,
                input=input_text,
                capture_output=True,
                text=True,
                encoding="utf-8",
                errors="replace",
                cwd=cwd,
                timeout=self.timeout,
            )
        except subprocess.TimeoutExpired:
            return ToolResult(error="timeout", return_code=-1)
        except FileNotFoundError:
            return ToolResult(error=f"{cmd[0]} not found", return_code=-1)

        result = ToolResult(
            stdout=proc.stdout or "",
            stderr=proc.stderr or "",
            return_code=proc.returncode,
            duration_ms=int((time.monotonic() - start) * 1000),
        )
        if proc.returncode != 0:
            stderr = result.stderr.strip()
            result.error = stderr or f"exit code {proc.returncode}"
        return result
