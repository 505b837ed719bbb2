from __future__ import annotations

from dataclasses import dataclass

"""Config dataclasses for the worker access audit.

These are the typed, frozen shapes produced by worker_access.config.loader.
Everything here is read once at startup and passed explicitly into the
orchestrator; nothing in the services layer reads configuration on its own.
"""

__all__ = [
    "ColumnLayout",
    "AccessConfig",
]


@dataclass(frozen=True)
class ColumnLayout:
    """Fixed 0-based column positions within the roster sheet.

    column_span doubles as the bound for the email header search and the minimum
    populated width a data row must have to be considered at all.
    """
    hire_date: int = 9  # column J
    last_paid: int = 11  # column L
    flag: int = 12  # column M (checkbox)
    column_span: int = 13  # columns A-M


@dataclass(frozen=True)
class AccessConfig:
    """Root configuration object for one audit run."""
    spreadsheet_id: str
    file_ids: tuple[str, ...]  # Drive files whose sharing is revoked
    dry_run: bool = False
    destination_start_row: int = 169  # 0-based row index of the first archive slot
    columns: ColumnLayout = ColumnLayout()
    lookback_days: int = 60
    date_format: str = "%m/%d/%Y"
    sheet_index: int = 0
    timezone: str = "UTC"
    service_account_file: str = "./service_account.json"
