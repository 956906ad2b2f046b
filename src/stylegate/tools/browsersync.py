"""Live-reload through a running browser-sync server's HTTP endpoint."""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from fnmatch import fnmatch
from pathlib import PurePath
from urllib.error import URLError
from urllib.parse import quote
from urllib.request import urlopen

from stylegate import log
from stylegate.files import BufferedFile, FileRecord


def matches(path: PurePath, pattern: str) -> bool:
    """Glob match where a leading ``**/`` also matches zero directories."""
    posix = path.as_posix()
    if fnmatch(posix, pattern):
        return True
    return pattern.startswith("**/") and fnmatch(posix, pattern[3:])


class BrowserSync:
    name = "browser-sync"

    def __init__(self, url: str, *, timeout: float = 2.0) -> None:
        self.url = url.rstrip("/")
        self.timeout = timeout
        self._reachable = True

    def reload_url(self, filename: str) -> str:
        return f"{self.url}/__browser_sync__?method=reload&args={quote(filename)}"

    def reload(self, filename: str) -> None:
        if not self._reachable:
            return
        try:
            with urlopen(self.reload_url(filename), timeout=self.timeout) as resp:
                resp.read()
            log.debug(f"browser-sync reloaded {filename}")
        except (URLError, OSError) as exc:
            # No server running is the normal case outside of `watch`.
            self._reachable = False
            log.debug(f"browser-sync unreachable at {self.url}: {exc}")

    def sync(self, records: Iterable[FileRecord], match: str) -> Iterator[FileRecord]:
        for record in records:
            if isinstance(record, BufferedFile) and matches(record.relative, match):
                self.reload(record.path.name)
            yield record
