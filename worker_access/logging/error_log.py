from __future__ import annotations

from datetime import UTC, datetime
from pathlib import Path

from worker_access.models.error_record import RevocationErrorRecord

"""Error log buffering for contained revocation failures.

- JSON Lines, fixed schema (see RevocationErrorRecord)
- One `logs/errors-YYYYMMDD-HHMMSS.log` (UTC) per run, created on first flush
  that actually has records
"""

__all__ = [
    "RevocationErrorRecord",
    "ErrorLogBuffer",
]

LOGS_DIR = Path("./logs")
TIMESTAMP_FMT = "%Y%m%d-%H%M%S"


class ErrorLogBuffer:
    """In-memory buffer for error records. Flush writes JSON Lines.

    No thread safety: the audit runs strictly sequentially.
    """
    def __init__(self, logs_dir: Path | None = None) -> None:
        self._records: list[RevocationErrorRecord] = []
        self._file_path: Path | None = None
        self._logs_dir = logs_dir if logs_dir is not None else LOGS_DIR

    @property
    def file_path(self) -> Path:
        if self._file_path is None:
            self._logs_dir.mkdir(parents=True, exist_ok=True)
            stamp = datetime.now(UTC).strftime(TIMESTAMP_FMT)
            self._file_path = self._logs_dir / f"errors-{stamp}.log"
        return self._file_path

    @property
    def records(self) -> list[RevocationErrorRecord]:
        return list(self._records)

    def append(self, record: RevocationErrorRecord) -> None:
        self._records.append(record)

    def __len__(self) -> int:
        return len(self._records)

    def flush(self) -> Path | None:
        """Append buffered records to the log file and clear the buffer.

        Returns None (and creates nothing) when there is nothing to write.
        """
        if not self._records:
            return None
        fp = self.file_path
        with fp.open("a", encoding="utf-8") as f:
            for r in self._records:
                f.write(r.to_json_line() + "\n")
        self._records.clear()
        return fp
