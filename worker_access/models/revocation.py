from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

"""Revocation outcome models.

A WorkerRevocation is produced for every qualified worker that went through the
revoke phase, with one FileRevocation per configured file id.
"""

__all__ = [
    "PermissionStatus",
    "FileRevocation",
    "WorkerRevocation",
]


class PermissionStatus(Enum):
    """Outcome of revoking one worker's access to one file.

    - REMOVED: matching permission deleted
    - WOULD_REMOVE: matching permission found, dry run so left in place
    - NOT_FOUND: worker had no permission on the file (no-op)
    - FAILED: listing or deleting raised; logged and skipped
    """
    REMOVED = "removed"
    WOULD_REMOVE = "would_remove"
    NOT_FOUND = "not_found"
    FAILED = "failed"


@dataclass(frozen=True)
class FileRevocation:
    file_id: str
    status: PermissionStatus
    permission_id: str | None = None
    error: str | None = None


@dataclass(frozen=True)
class WorkerRevocation:
    email: str
    row_index: int
    files: list[FileRevocation] = field(default_factory=list)

    def count(self, status: PermissionStatus) -> int:
        return sum(1 for f in self.files if f.status is status)
