from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from typing import Any

from ..models.pending_edit import MoveRow, PendingEdit

"""Spreadsheet mutator.

Turns confirmed row indexes into cut/paste edits and submits the whole edit
sequence (highlights, checkboxes, moves) as a single batchUpdate.
"""

__all__ = [
    "build_move_edits",
    "submit_edits",
]

logger = logging.getLogger(__name__)


def build_move_edits(row_indexes: Iterable[int], start_row: int, column_span: int = 13) -> list[MoveRow]:
    """Assign archive destinations, highest source row first.

    >>> [(m.source_row_index, m.destination_row_index) for m in build_move_edits([10, 3, 7], 169)]
    [(10, 169), (7, 170), (3, 171)]
    """
    return [
        MoveRow(
            source_row_index=row_index,
            destination_row_index=start_row + offset,
            end_column=column_span,
        )
        for offset, row_index in enumerate(sorted(row_indexes, reverse=True))
    ]


def submit_edits(
    sheets: Any,
    spreadsheet_id: str,
    sheet_id: int,
    edits: Sequence[PendingEdit],
    *,
    dry_run: bool = False,
) -> int:
    """Send all edits in append order as one batchUpdate.

    Returns the number of requests sent (0 when nothing was sent).
    """
    if not edits:
        logger.info("No update requests to apply")
        return 0

    requests = [edit.to_request(sheet_id) for edit in edits]
    if dry_run:
        logger.info(f"Would apply {len(requests)} update requests (dry run)")
        return 0

    logger.info(f"Applying {len(requests)} update requests...")
    (
        sheets.spreadsheets()
        .batchUpdate(spreadsheetId=spreadsheet_id, body={"requests": requests})
        .execute()
    )
    return len(requests)
