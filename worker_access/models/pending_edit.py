from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Union

"""Pending spreadsheet edits.

Each edit kind renders to exactly one Sheets API batchUpdate request. Row indexes
are always in the pre-move coordinate space; the mutator relies on the order in
which edits were appended.
"""

__all__ = [
    "RED",
    "FormatHighlight",
    "SetCheckbox",
    "MoveRow",
    "PendingEdit",
]

RED: tuple[float, float, float] = (1.0, 0.0, 0.0)


def _grid_range(sheet_id: int, row_index: int, start_column: int, end_column: int) -> dict[str, int]:
    return {
        "sheetId": sheet_id,
        "startRowIndex": row_index,
        "endRowIndex": row_index + 1,
        "startColumnIndex": start_column,
        "endColumnIndex": end_column,
    }


@dataclass(frozen=True)
class FormatHighlight:
    """Repaint the background of one row across [start_column, end_column)."""
    row_index: int
    start_column: int = 0
    end_column: int = 13
    color: tuple[float, float, float] = RED  # (red, green, blue) in 0..1

    def to_request(self, sheet_id: int) -> dict[str, Any]:
        return {
            "repeatCell": {
                "range": _grid_range(sheet_id, self.row_index, self.start_column, self.end_column),
                "cell": {"userEnteredFormat": {"backgroundColor": dict(zip(("red", "green", "blue"), self.color))}},
                "fields": "userEnteredFormat.backgroundColor",
            }
        }


@dataclass(frozen=True)
class SetCheckbox:
    """Write a boolean into a single cell (rendered as a ticked checkbox)."""
    row_index: int
    column_index: int
    value: bool = True

    def to_request(self, sheet_id: int) -> dict[str, Any]:
        return {
            "updateCells": {
                "range": _grid_range(sheet_id, self.row_index, self.column_index, self.column_index + 1),
                "rows": [{"values": [{"userEnteredValue": {"boolValue": self.value}}]}],
                "fields": "userEnteredValue",
            }
        }


@dataclass(frozen=True)
class MoveRow:
    """Cut one row's [start_column, end_column) and paste it at destination_row_index."""
    source_row_index: int
    destination_row_index: int
    start_column: int = 0
    end_column: int = 13

    def to_request(self, sheet_id: int) -> dict[str, Any]:
        return {
            "cutPaste": {
                "source": _grid_range(sheet_id, self.source_row_index, self.start_column, self.end_column),
                "destination": {
                    "sheetId": sheet_id,
                    "rowIndex": self.destination_row_index,
                    "columnIndex": self.start_column,
                },
            }
        }


PendingEdit = Union[FormatHighlight, SetCheckbox, MoveRow]
