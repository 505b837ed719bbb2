from __future__ import annotations

from dataclasses import dataclass
from typing import Any

"""Roster sheet reader.

Keeps the one Sheets API read call here and turns the grid payload into plain
lists of formatted cell text so the classifier can stay free of API shapes.
"""

__all__ = [
    "SheetReadError",
    "SheetGrid",
    "grid_from_sheet",
    "read_roster_sheet",
]


class SheetReadError(Exception):
    """Raised when the spreadsheet has no usable sheet or grid data."""


@dataclass
class SheetGrid:
    sheet_id: int
    title: str
    rows: list[list[str | None]]  # formattedValue per cell; [] when the row has no values

    @property
    def header(self) -> list[str | None]:
        if not self.rows:
            raise SheetReadError(f"sheet '{self.title}' has no header row")
        return self.rows[0]


def _row_cells(row: dict[str, Any]) -> list[str | None]:
    return [cell.get("formattedValue") for cell in row.get("values") or []]


def grid_from_sheet(sheet: dict[str, Any]) -> SheetGrid:
    """Convert one entry of `spreadsheet.sheets` (with grid data) into a SheetGrid."""
    props = sheet.get("properties") or {}
    title = str(props.get("title", ""))
    if "sheetId" not in props:
        raise SheetReadError(f"sheet '{title}' has no sheetId")
    data = sheet.get("data") or []
    if not data:
        raise SheetReadError(f"sheet '{title}' returned no grid data")
    row_data = data[0].get("rowData") or []
    return SheetGrid(
        sheet_id=int(props["sheetId"]),
        title=title,
        rows=[_row_cells(r) for r in row_data],
    )


def read_roster_sheet(sheets: Any, spreadsheet_id: str, sheet_index: int = 0) -> SheetGrid:
    """Fetch one sheet's full grid data.

    `sheets` is a Sheets v4 service object (googleapiclient.discovery.build).
    HttpError from the API propagates; it is fatal to the run.
    """
    resp = (
        sheets.spreadsheets()
        .get(spreadsheetId=spreadsheet_id, includeGridData=True)
        .execute()
    )
    all_sheets = resp.get("sheets") or []
    if sheet_index >= len(all_sheets):
        raise SheetReadError(
            f"sheet index {sheet_index} out of range (spreadsheet has {len(all_sheets)} sheets)"
        )
    return grid_from_sheet(all_sheets[sheet_index])
