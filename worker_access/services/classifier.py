from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from datetime import datetime

from ..models.config_models import ColumnLayout
from ..models.pending_edit import FormatHighlight, PendingEdit, SetCheckbox
from ..models.worker import QualifiedWorker, WorkerRow
from .qualification import DEFAULT_DATE_FORMAT, parse_sheet_date, qualifies

"""Row classifier.

Scans the roster once (last row first), applies the qualification rule and
collects the highlight + checkbox edits for every qualifying row. Row indexes in
the returned edits are the original, pre-move indexes.
"""

__all__ = [
    "ColumnNotFoundError",
    "ClassificationResult",
    "find_column",
    "find_email_column",
    "build_worker_row",
    "classify_rows",
]

logger = logging.getLogger(__name__)


class ColumnNotFoundError(Exception):
    """Raised when a required header column cannot be located."""


@dataclass
class ClassificationResult:
    workers: list[QualifiedWorker] = field(default_factory=list)  # discovery order
    edits: list[PendingEdit] = field(default_factory=list)
    scanned_rows: int = 0
    skipped_rows: int = 0
    not_qualified: int = 0


def find_column(header: Sequence[str | None], predicate: Callable[[str], bool]) -> int | None:
    """Return the first index whose cell text satisfies predicate, else None."""
    for i, cell in enumerate(header):
        if cell is not None and predicate(cell):
            return i
    return None


def find_email_column(header: Sequence[str | None], column_span: int) -> int:
    idx = find_column(header, lambda text: "email" in text.lower())
    if idx is None or idx >= column_span:
        raise ColumnNotFoundError(
            f"Email column not found within the first {column_span} columns"
        )
    return idx


def _cell(row: Sequence[str | None], index: int) -> str:
    value = row[index] if index < len(row) else None
    return (value or "").strip()


def build_worker_row(
    row: Sequence[str | None],
    row_index: int,
    email_col: int,
    layout: ColumnLayout,
    date_format: str = DEFAULT_DATE_FORMAT,
) -> WorkerRow | None:
    """Parse one raw row. Returns None when the row has no usable email."""
    email = _cell(row, email_col)
    if not email:
        return None
    return WorkerRow(
        row_index=row_index,
        email=email,
        last_paid_date=parse_sheet_date(_cell(row, layout.last_paid), date_format),
        hire_date=parse_sheet_date(_cell(row, layout.hire_date), date_format),
    )


def classify_rows(
    rows: Sequence[Sequence[str | None]],
    layout: ColumnLayout,
    cutoff: datetime,
    date_format: str = DEFAULT_DATE_FORMAT,
) -> ClassificationResult:
    """Partition data rows into qualifying / not qualifying.

    Args:
        rows: All sheet rows including the header at index 0
        layout: Fixed column positions
        cutoff: now - lookback window
        date_format: strptime format of the date cells

    Raises:
        ColumnNotFoundError: No header row, or no email header inside column_span.
            Nothing is classified in that case.
    """
    if not rows:
        raise ColumnNotFoundError("sheet has no header row")
    email_col = find_email_column(rows[0], layout.column_span)
    logger.debug(f"email column index={email_col}")

    result = ClassificationResult()
    logger.info(f"Processing {len(rows) - 1} rows...")

    for i in range(len(rows) - 1, 0, -1):
        row = rows[i]
        result.scanned_rows += 1
        # TODO: short trailing rows with an email in an earlier column are skipped too; confirm with roster owners
        if len(row) < layout.column_span:
            logger.info(f"Skipping row {i} - insufficient columns")
            result.skipped_rows += 1
            continue

        worker = build_worker_row(row, i, email_col, layout, date_format)
        if worker is None:
            logger.info(f"Skipping row {i} - no email")
            result.skipped_rows += 1
            continue

        if qualifies(worker.last_paid_date, worker.hire_date, cutoff):
            logger.info(f"Worker qualifies (access denied): {worker.email}")
            result.workers.append(QualifiedWorker(email=worker.email, row_index=i))
            result.edits.append(FormatHighlight(row_index=i, end_column=layout.column_span))
            result.edits.append(SetCheckbox(row_index=i, column_index=layout.flag))
        else:
            logger.info(f"Worker does not qualify: {worker.email}")
            result.not_qualified += 1

    return result
