from __future__ import annotations

from dataclasses import dataclass
from datetime import date

"""Worker row models.

WorkerRow is the ephemeral view of one roster row after cell text has been
parsed. It is rebuilt on every run and never written back anywhere.
"""

__all__ = [
    "WorkerRow",
    "QualifiedWorker",
]


@dataclass(frozen=True)
class WorkerRow:
    """One roster row after parsing.

    row_index is 0-based and matches the sheet's row order (0 = header row).
    Dates that were empty or did not parse are None.
    """
    row_index: int
    email: str
    last_paid_date: date | None = None
    hire_date: date | None = None


@dataclass(frozen=True)
class QualifiedWorker:
    """A worker whose access is to be revoked and whose row will be relocated."""
    email: str
    row_index: int
