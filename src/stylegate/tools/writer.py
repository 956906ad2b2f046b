"""Destination writer."""

from __future__ import annotations

import dataclasses
from pathlib import Path

from stylegate import log
from stylegate.errors import PluginError
from stylegate.files import BufferedFile
from stylegate.io_utils import write_bytes


class FileWriter:
    name = "dest"

    def write(self, record: BufferedFile, dst: str, cwd: Path) -> BufferedFile:
        """Write under ``cwd/dst``, keeping the record's path relative to its glob base."""
        root = (cwd / dst).resolve()
        target = root / record.relative
        try:
            write_bytes(target, record.contents)
        except OSError as exc:
            raise PluginError(self.name, f"cannot write {target}: {exc.strerror or exc}") from exc
        log.debug(f"wrote {target}")
        return dataclasses.replace(record, path=target, base=root)
