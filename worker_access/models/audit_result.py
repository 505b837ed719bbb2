from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from .revocation import PermissionStatus, WorkerRevocation

"""Aggregated result of one audit run, used for the SUMMARY line."""

__all__ = [
    "AuditResult",
]


@dataclass(frozen=True)
class AuditResult:
    scanned_rows: int  # data rows looked at (header excluded)
    skipped_rows: int  # too short or no email
    qualified_workers: int
    not_qualified_workers: int
    submitted_edits: int  # batchUpdate requests actually sent (0 on dry run)
    dry_run: bool
    start_time: datetime
    end_time: datetime
    elapsed_seconds: float
    revocations: list[WorkerRevocation] | None = None

    def _total(self, status: PermissionStatus) -> int:
        return sum(w.count(status) for w in self.revocations or [])

    @property
    def removed_permissions(self) -> int:
        return self._total(PermissionStatus.REMOVED)

    @property
    def would_remove_permissions(self) -> int:
        return self._total(PermissionStatus.WOULD_REMOVE)

    @property
    def missing_permissions(self) -> int:
        return self._total(PermissionStatus.NOT_FOUND)

    @property
    def failed_files(self) -> int:
        return self._total(PermissionStatus.FAILED)
