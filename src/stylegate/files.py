"""File records flowing through lint and build stages, and source-set reading."""

from __future__ import annotations

import dataclasses
from collections.abc import Iterator, Sequence
from dataclasses import dataclass, field
from pathlib import Path
from typing import BinaryIO

from stylegate.io_utils import read_bytes

_GLOB_MAGIC = ("*", "?", "[")


@dataclass(frozen=True)
class LintResult:
    """Linter verdict for one file. Attached once, never changed afterwards."""

    file_path: str
    error_count: int = 0
    warning_count: int = 0
    messages: tuple[str, ...] = ()

    @property
    def failed(self) -> bool:
        return self.error_count > 0


@dataclass(frozen=True)
class EmptyFile:
    """Metadata-only record (directories). Every stage passes it through."""

    path: Path
    base: Path

    @property
    def relative(self) -> Path:
        return self.path.relative_to(self.base)


@dataclass(frozen=True)
class BufferedFile:
    path: Path
    base: Path
    contents: bytes = b""
    lint: LintResult | None = None
    sourcemap: bool = False

    @property
    def relative(self) -> Path:
        return self.path.relative_to(self.base)

    def with_contents(self, contents: bytes) -> BufferedFile:
        return dataclasses.replace(self, contents=contents)

    def with_path(self, path: Path) -> BufferedFile:
        return dataclasses.replace(self, path=path)

    def with_lint(self, result: LintResult) -> BufferedFile:
        if self.lint is not None:
            raise ValueError(f"{self.path} already carries a lint result")
        return dataclasses.replace(self, lint=result)


@dataclass(frozen=True)
class StreamedFile:
    """Content exposed as an open binary stream. No stage accepts it."""

    path: Path
    base: Path
    handle: BinaryIO | None = field(default=None, compare=False)

    @property
    def relative(self) -> Path:
        return self.path.relative_to(self.base)


FileRecord = EmptyFile | BufferedFile | StreamedFile


def glob_base(pattern: str) -> str:
    """Return the leading directory part of *pattern* that holds no glob magic.

    ``scss/**/*.scss`` -> ``scss``; ``*.scss`` -> ``""``.
    """
    parts: list[str] = []
    for part in pattern.replace("\\", "/").split("/")[:-1]:
        if any(ch in part for ch in _GLOB_MAGIC):
            break
        parts.append(part)
    return "/".join(parts)


def _expand(pattern: str, cwd: Path) -> list[Path]:
    base = glob_base(pattern)
    rest = pattern[len(base):].lstrip("/") if base else pattern
    root = cwd / base if base else cwd
    if not any(ch in rest for ch in _GLOB_MAGIC):
        candidate = root / rest
        return [candidate] if candidate.exists() else []
    return sorted(root.glob(rest))


def iter_source_paths(src: str | Sequence[str], cwd: Path) -> Iterator[tuple[Path, Path]]:
    """Yield ``(path, base)`` pairs for a glob or ordered list of globs.

    Patterns starting with ``!`` exclude matches of the earlier patterns.
    A path matched by several patterns is yielded once, at its first match.
    """
    patterns = [src] if isinstance(src, str) else list(src)
    excluded: set[Path] = set()
    for pattern in patterns:
        if pattern.startswith("!"):
            excluded.update(p.resolve() for p in _expand(pattern[1:], cwd))

    seen: set[Path] = set()
    for pattern in patterns:
        if pattern.startswith("!"):
            continue
        base = (cwd / glob_base(pattern)).resolve()
        for path in _expand(pattern, cwd):
            resolved = path.resolve()
            if resolved in seen or resolved in excluded:
                continue
            seen.add(resolved)
            yield resolved, base


def read_sources(
    src: str | Sequence[str],
    cwd: Path,
    *,
    sourcemap: bool = False,
) -> Iterator[FileRecord]:
    """Read the source set lazily, in enumeration order. Directories become :class:`EmptyFile`."""
    for path, base in iter_source_paths(src, cwd):
        if path.is_dir():
            yield EmptyFile(path=path, base=base)
            continue
        yield BufferedFile(path=path, base=base, contents=read_bytes(path), sourcemap=sourcemap)


def add_suffix(path: Path, suffix: str) -> Path:
    """Insert *suffix* before the extension: ``app.css`` + ``.min`` -> ``app.min.css``."""
    if not suffix:
        return path
    return path.with_name(f"{path.stem}{suffix}{path.suffix}")
