from __future__ import annotations

import argparse
import dataclasses
import os
import sys
from pathlib import Path
from typing import Any

from dotenv import load_dotenv
from googleapiclient.errors import HttpError

from worker_access.config.loader import ConfigError, load_config
from worker_access.logging.init import log_summary, setup_logging
from worker_access.models.config_models import AccessConfig
from worker_access.services.classifier import ColumnNotFoundError, find_email_column
from worker_access.services.orchestrator import AuditError, run_audit
from worker_access.services.summary import render_summary_line
from worker_access.sheets.reader import SheetReadError, read_roster_sheet

"""CLI entrypoint.

Flow:
- Load .env (overrides process env), then config/access.yml
- Build Sheets / Drive service objects from the service-account key
- Run the audit and print the SUMMARY line

Exit codes: 0 on success (contained per-file revocation failures included),
1 on any fatal error.
"""

EXIT_SUCCESS = 0
EXIT_FATAL = 1

DEFAULT_CONFIG_PATH = Path("config/access.yml")

SCOPES = [
    "https://www.googleapis.com/auth/spreadsheets",
    "https://www.googleapis.com/auth/drive",
]


def _google_services(cfg: AccessConfig) -> tuple[Any, Any]:
    """Build Sheets v4 and Drive v3 service objects for the configured service account."""
    from google.oauth2 import service_account
    from googleapiclient.discovery import build

    key_path = Path(os.path.expanduser(cfg.service_account_file))
    if not key_path.exists():
        raise FileNotFoundError(f"Service account file not found: {key_path}")

    creds = service_account.Credentials.from_service_account_file(str(key_path), scopes=SCOPES)
    sheets = build("sheets", "v4", credentials=creds, cache_discovery=False)
    drive = build("drive", "v3", credentials=creds, cache_discovery=False)
    return sheets, drive


def _load_env_file(path: Path, override: bool = True) -> None:
    """Load .env using python-dotenv; .env values win over the existing environment."""
    if path.exists():
        load_dotenv(dotenv_path=path, override=override)


def _apply_env_overrides(cfg: AccessConfig, *, force_dry_run: bool) -> AccessConfig:
    # 環境変数 > config/access.yml
    changes: dict[str, Any] = {}
    spreadsheet_id = os.getenv("SPREADSHEET_ID")
    if spreadsheet_id:
        changes["spreadsheet_id"] = spreadsheet_id
    sa_file = os.getenv("GOOGLE_SA_FILE")
    if sa_file:
        changes["service_account_file"] = sa_file
    if force_dry_run:
        changes["dry_run"] = True
    return dataclasses.replace(cfg, **changes) if changes else cfg


def _parse_args(argv: list[str]) -> argparse.Namespace:
    p = argparse.ArgumentParser(
        description="Revoke Drive access for lapsed workers and archive their roster rows"
    )
    p.add_argument("--debug", action="store_true", help="Enable debug logging")
    p.add_argument("--dry-run", action="store_true", help="Report what would change without changing anything")
    p.add_argument("--config", type=Path, default=DEFAULT_CONFIG_PATH, help="Path to the YAML config")
    p.add_argument("--inspect-data", action="store_true", help="Print sheet header & first rows then exit")
    return p.parse_args(argv)


def _inspect_data(cfg: AccessConfig, sheets: Any) -> int:
    try:
        grid = read_roster_sheet(sheets, cfg.spreadsheet_id, cfg.sheet_index)
    except (SheetReadError, HttpError) as e:
        print(f"inspect: {e}")
        return EXIT_FATAL
    print(f"SHEET: {grid.title} id={grid.sheet_id} rows={len(grid.rows)}")
    if not grid.rows:
        print("  (empty)")
        return EXIT_SUCCESS
    print(f"  header={grid.header}")
    try:
        email_col = find_email_column(grid.header, cfg.columns.column_span)
        print(f"  email_column={email_col}")
    except ColumnNotFoundError as e:
        print(f"  email_column=<missing> ({e})")
    for i, row in enumerate(grid.rows[1:4], start=1):
        print(f"  row {i}: {row}")
    return EXIT_SUCCESS


def main(argv: list[str] | None = None) -> int:
    logger = setup_logging()

    # None のときのみ sys.argv を読む ([] はテストから明示的に渡される)
    if argv is None:
        argv = sys.argv[1:]
    args = _parse_args(argv)
    _load_env_file(Path(".env"), override=True)

    try:
        cfg = load_config(args.config)
    except ConfigError as e:
        logger.error(f"config: {e}")
        return EXIT_FATAL
    cfg = _apply_env_overrides(cfg, force_dry_run=args.dry_run)

    if args.debug:
        for h in logger.handlers:
            h.setLevel("DEBUG")
        logger.setLevel("DEBUG")
        logger.debug("debug mode enabled")

    try:
        sheets, drive = _google_services(cfg)
    except (FileNotFoundError, ValueError) as e:
        logger.error(f"credentials: {e}")
        return EXIT_FATAL
    except Exception as e:
        logger.error(f"fatal: {e}")
        return EXIT_FATAL

    if args.inspect_data:
        try:
            return _inspect_data(cfg, sheets)
        except Exception as e:
            logger.error(f"fatal: {e}")
            return EXIT_FATAL

    try:
        result = run_audit(cfg, sheets, drive)
    except AuditError as e:
        logger.error(f"audit: {e}")
        return EXIT_FATAL
    except HttpError as e:
        logger.error(f"google api: {e}")
        details = e.content.decode("utf-8", errors="replace") if isinstance(e.content, bytes) else e.content
        if details:
            logger.error(f"Details: {details}")
        return EXIT_FATAL
    except Exception as e:
        # 認証の更新失敗・通信エラーなど
        logger.error(f"fatal: {e}")
        return EXIT_FATAL

    log_summary(render_summary_line(result)[len("SUMMARY "):])
    return EXIT_SUCCESS


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
