from __future__ import annotations

import json
from dataclasses import asdict, dataclass
from datetime import UTC, datetime

"""RevocationErrorRecord model for error logging.

One record per contained failure (a single file for a single worker). The JSON
shape is fixed: no keys beyond the dataclass fields are ever written.
"""

__all__ = [
    "RevocationErrorRecord",
]


@dataclass(frozen=True)
class RevocationErrorRecord:
    """Structured error record for JSON Lines logging.

    Attributes:
        timestamp: ISO8601 UTC timestamp with 'Z' suffix
        email: Worker whose access was being removed
        file_id: Drive file being processed
        error_type: Error classification in UPPER_SNAKE_CASE format
        message: Error message from the Drive API or the raised exception
    """
    timestamp: str  # ISO8601 UTC
    email: str
    file_id: str
    error_type: str  # UPPER_SNAKE
    message: str

    @staticmethod
    def create(email: str, file_id: str, error_type: str, message: str) -> RevocationErrorRecord:
        ts = datetime.now(UTC).isoformat().replace("+00:00", "Z")
        return RevocationErrorRecord(
            timestamp=ts,
            email=email,
            file_id=file_id,
            error_type=error_type,
            message=message,
        )

    def to_json_line(self) -> str:
        return json.dumps(asdict(self), ensure_ascii=False)
