from typing import Protocol

from app.domain.entities import LogRecord


class SubmissionLogPort(Protocol):
    async def append(self, record: LogRecord) -> None:
        """Append one record. Raises OSError when the write fails."""
