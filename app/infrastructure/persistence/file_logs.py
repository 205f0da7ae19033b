from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Callable

from app.domain.entities import LogRecord
from app.domain.ports.submission_log import SubmissionLogPort
from app.domain.services import record_to_audit_line, record_to_json_line


class _AppendOnlyFile(SubmissionLogPort):
    """
    Appends one serialised line per record to a flat file.

    The parent directory is created on first write. Writes go through a
    worker thread and are serialised per instance, so lines never interleave.
    """

    serialize: Callable[[LogRecord], str]

    def __init__(self, path: str | Path) -> None:
        self._path = Path(path)
        self._lock = asyncio.Lock()

    @property
    def path(self) -> Path:
        return self._path

    def _write(self, line: str) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        with self._path.open("a", encoding="utf-8") as f:
            f.write(line)

    async def append(self, record: LogRecord) -> None:
        line = self.serialize(record)
        async with self._lock:
            await asyncio.to_thread(self._write, line)


class JsonLinesSubmissionLog(_AppendOnlyFile):
    serialize = staticmethod(record_to_json_line)


class AuditTrailLog(_AppendOnlyFile):
    serialize = staticmethod(record_to_audit_line)
