# Shared pytest fixtures
from __future__ import annotations
import tempfile
from datetime import datetime
from pathlib import Path
from types import SimpleNamespace
from typing import Any, Callable

import pytest
from googleapiclient.errors import HttpError

from worker_access.logging.init import reset_logging

# 2024-03-01 - 60 days = 2024-01-01 (leap year)
FIXED_NOW = datetime(2024, 3, 1, 12, 0, 0)

HEADER = [
    "Name", "Phone", "Email Address", "Role", "Team", "Site", "Manager",
    "Start", "Notes", "Hire Date", "Rate", "Last Paid", "Removed",
]


class FakeRequest:
    """Mimics a googleapiclient HttpRequest: work happens on execute()."""

    def __init__(self, fn: Callable[[], Any]) -> None:
        self._fn = fn

    def execute(self, **kwargs: Any) -> Any:
        return self._fn()


class FakeSheets:
    """Minimal Sheets v4 service: spreadsheets().get / batchUpdate."""

    def __init__(self, payload: dict[str, Any]) -> None:
        self.payload = payload
        self.get_calls: list[dict[str, Any]] = []
        self.batch_calls: list[dict[str, Any]] = []
        self.batch_error: Exception | None = None

    def spreadsheets(self) -> FakeSheets:
        return self

    def get(self, **kwargs: Any) -> FakeRequest:
        self.get_calls.append(kwargs)
        return FakeRequest(lambda: self.payload)

    def batchUpdate(self, **kwargs: Any) -> FakeRequest:
        def run() -> dict[str, Any]:
            if self.batch_error is not None:
                raise self.batch_error
            self.batch_calls.append(kwargs)
            return {"replies": [{} for _ in kwargs["body"]["requests"]]}
        return FakeRequest(run)


class FakeDrive:
    """Minimal Drive v3 service: permissions().list / delete with optional paging."""

    def __init__(
        self,
        permissions: dict[str, list[dict[str, str]]] | None = None,
        failures: dict[str, Exception] | None = None,
        page_size: int = 100,
    ) -> None:
        self.perms = {k: list(v) for k, v in (permissions or {}).items()}
        self.failures = dict(failures or {})
        self.page_size = page_size
        self.list_calls: list[dict[str, Any]] = []
        self.deleted: list[tuple[str, str]] = []

    def permissions(self) -> FakeDrive:
        return self

    def list(self, **kwargs: Any) -> FakeRequest:
        self.list_calls.append(kwargs)

        def run() -> dict[str, Any]:
            file_id = kwargs["fileId"]
            if file_id in self.failures:
                raise self.failures[file_id]
            items = self.perms.get(file_id, [])
            start = int(kwargs.get("pageToken") or 0)
            page = items[start:start + self.page_size]
            resp: dict[str, Any] = {"permissions": page}
            if start + self.page_size < len(items):
                resp["nextPageToken"] = str(start + self.page_size)
            return resp
        return FakeRequest(run)

    def delete(self, **kwargs: Any) -> FakeRequest:
        def run() -> str:
            file_id, perm_id = kwargs["fileId"], kwargs["permissionId"]
            self.deleted.append((file_id, perm_id))
            self.perms[file_id] = [p for p in self.perms.get(file_id, []) if p["id"] != perm_id]
            return ""
        return FakeRequest(run)


def make_row(email: str | None, hire: str = "", paid: str = "", width: int = 13) -> list[str | None]:
    cells: list[str | None] = [None] * width
    cells[0] = "Worker"
    if width > 2:
        cells[2] = email
    if width > 9:
        cells[9] = hire
    if width > 11:
        cells[11] = paid
    if width > 12:
        cells[12] = "FALSE"
    return cells


def make_sheet_payload(rows: list[list[str | None]], sheet_id: int = 4242, title: str = "Roster") -> dict[str, Any]:
    row_data: list[dict[str, Any]] = []
    for r in rows:
        if not r:
            row_data.append({})
            continue
        row_data.append({"values": [({"formattedValue": v} if v is not None else {}) for v in r]})
    return {
        "spreadsheetId": "sheet-123",
        "sheets": [
            {
                "properties": {"sheetId": sheet_id, "title": title},
                "data": [{"rowData": row_data}],
            }
        ],
    }


def make_http_error(status: int = 403, message: str = "forbidden") -> HttpError:
    resp = SimpleNamespace(status=status, reason=message)
    content = ('{"error": {"code": %d, "message": "%s"}}' % (status, message)).encode("utf-8")
    return HttpError(resp, content)


@pytest.fixture(autouse=True)
def _clean_logging():
    reset_logging()
    yield
    reset_logging()


@pytest.fixture()
def temp_workdir(monkeypatch) -> Path:
    with tempfile.TemporaryDirectory() as d:
        p = Path(d)
        (p / "config").mkdir()
        (p / "logs").mkdir()
        monkeypatch.chdir(p)
        monkeypatch.delenv("SPREADSHEET_ID", raising=False)
        monkeypatch.delenv("GOOGLE_SA_FILE", raising=False)
        yield p


@pytest.fixture()
def sample_config_yaml() -> str:
    return """spreadsheet_id: sheet-123
file_ids:
  - file-a
  - file-b
dry_run: false
destination_start_row: 169
columns:
  hire_date: 9
  last_paid: 11
  flag: 12
  column_span: 13
lookback_days: 60
timezone: UTC
service_account_file: ./service_account.json
"""


@pytest.fixture()
def write_config(temp_workdir: Path, sample_config_yaml: str) -> Path:
    cfg = temp_workdir / "config" / "access.yml"
    cfg.write_text(sample_config_yaml, encoding="utf-8")
    return cfg


@pytest.fixture()
def roster_rows() -> list[list[str | None]]:
    """Header + 5 data rows; rows 1 and 4 qualify at FIXED_NOW."""
    return [
        list(HEADER),
        make_row("old.unpaid@example.com", hire="1/1/2023", paid=""),       # 1: qualifies
        make_row("recent.paid@example.com", hire="1/1/2023", paid="2/20/2024"),  # 2: paid recently
        make_row("new.hire@example.com", hire="2/1/2024", paid=""),         # 3: hired recently
        make_row("stale.paid@example.com", hire="6/15/2022", paid="10/1/2023"),  # 4: qualifies
        make_row(None, hire="1/1/2020", paid=""),                          # 5: no email
    ]


@pytest.fixture()
def fake_sheets(roster_rows) -> FakeSheets:
    return FakeSheets(make_sheet_payload(roster_rows))


@pytest.fixture()
def fake_drive() -> FakeDrive:
    return FakeDrive(
        permissions={
            "file-a": [
                {"id": "p-owner", "emailAddress": "owner@example.com"},
                {"id": "p-old", "emailAddress": "old.unpaid@example.com"},
                {"id": "p-stale", "emailAddress": "stale.paid@example.com"},
            ],
            "file-b": [
                {"id": "p-old-b", "emailAddress": "old.unpaid@example.com"},
            ],
        }
    )


@pytest.fixture()
def frozen_now(monkeypatch) -> datetime:
    """Pin the audit's reference "now" so the roster fixture classifies deterministically."""
    monkeypatch.setattr("worker_access.services.orchestrator.resolve_now", lambda cfg: FIXED_NOW)
    return FIXED_NOW
