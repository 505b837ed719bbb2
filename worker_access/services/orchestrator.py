from __future__ import annotations

import logging
from datetime import UTC, datetime
from typing import Any
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from ..logging.error_log import ErrorLogBuffer
from ..models.audit_result import AuditResult
from ..models.config_models import AccessConfig
from ..models.revocation import WorkerRevocation
from ..sheets.reader import SheetReadError, read_roster_sheet
from .classifier import ClassificationResult, ColumnNotFoundError, classify_rows
from .mutator import build_move_edits, submit_edits
from .progress import ProgressTracker
from .qualification import compute_cutoff
from .revocation import remove_drive_access

logger = logging.getLogger(__name__)

"""Service orchestration for the worker access audit.

Start -> Classify -> Revoke (per worker, per file) -> Mutate -> Done.

Strictly sequential, no branching back. Any error raised outside the per-file
revocation loop aborts the run and nothing already applied is rolled back.
"""

__all__ = [
    "AuditError",
    "resolve_now",
    "run_audit",
]


class AuditError(Exception):
    """Fatal error that aborts the whole run."""
    pass


def resolve_now(config: AccessConfig) -> datetime:
    try:
        return datetime.now(ZoneInfo(config.timezone))
    except (ZoneInfoNotFoundError, ValueError) as e:
        raise AuditError(f"unknown timezone: {config.timezone}") from e


def _classify(config: AccessConfig, sheets: Any, cutoff: datetime) -> tuple[int, ClassificationResult]:
    try:
        grid = read_roster_sheet(sheets, config.spreadsheet_id, config.sheet_index)
        classification = classify_rows(grid.rows, config.columns, cutoff, config.date_format)
    except (SheetReadError, ColumnNotFoundError) as e:
        raise AuditError(str(e)) from e
    return grid.sheet_id, classification


def _revoke_all(
    config: AccessConfig,
    drive: Any,
    classification: ClassificationResult,
    error_log: ErrorLogBuffer,
) -> list[WorkerRevocation]:
    revocations: list[WorkerRevocation] = []
    with ProgressTracker(len(classification.workers)) as progress:
        for worker in classification.workers:
            progress.start_worker(worker.email)
            logger.info(f"Removing access for: {worker.email}")
            revocations.append(
                remove_drive_access(
                    drive,
                    worker.email,
                    worker.row_index,
                    config.file_ids,
                    dry_run=config.dry_run,
                    error_log=error_log,
                )
            )
            progress.set_postfix(errors=len(error_log))
            progress.finish_worker()
    return revocations


def _flush_error_log(error_log: ErrorLogBuffer) -> None:
    try:
        path = error_log.flush()
        if path is not None:
            logger.info(f"error log written: {path}")
    except OSError as e:
        logger.warning(f"failed to write error log: {e}")


def run_audit(
    config: AccessConfig,
    sheets: Any,
    drive: Any,
    *,
    now: datetime | None = None,
    error_log: ErrorLogBuffer | None = None,
) -> AuditResult:
    """Run the three phases against the given Sheets / Drive service objects.

    Args:
        config: Static configuration read once at startup
        sheets: Sheets v4 service (googleapiclient)
        drive: Drive v3 service (googleapiclient)
        now: Reference "now" for the cutoff; defaults to the configured timezone's now
        error_log: Buffer for contained revocation failures

    Returns:
        AuditResult with the run's counters

    Raises:
        AuditError: Sheet structure problems (no grid, no email column) or bad timezone.
        HttpError: Any Sheets API failure during read or batch update.

    Buffered revocation errors are written out even when the mutate phase raises.
    """
    start_time = datetime.now(UTC)
    if error_log is None:
        error_log = ErrorLogBuffer()
    if now is None:
        now = resolve_now(config)

    logger.info("Starting worker access management process...")
    if config.dry_run:
        logger.info("dry run: no permissions will be deleted and no sheet edits applied")

    # Step 1: classify
    cutoff = compute_cutoff(now, config.lookback_days)
    logger.debug(f"cutoff={cutoff.isoformat()} lookback_days={config.lookback_days}")
    sheet_id, classification = _classify(config, sheets, cutoff)

    try:
        # Step 2: revoke; every worker that went through here is confirmed for moving
        revocations = _revoke_all(config, drive, classification, error_log)
        confirmed_rows = [r.row_index for r in revocations]

        # Step 3: move rows and submit everything as one batch
        edits = list(classification.edits)
        edits.extend(
            build_move_edits(confirmed_rows, config.destination_start_row, config.columns.column_span)
        )
        submitted = submit_edits(
            sheets, config.spreadsheet_id, sheet_id, edits, dry_run=config.dry_run
        )
    finally:
        # 失敗時もエラーログを書き出す
        _flush_error_log(error_log)

    logger.info("Process completed successfully")
    end_time = datetime.now(UTC)
    return AuditResult(
        scanned_rows=classification.scanned_rows,
        skipped_rows=classification.skipped_rows,
        qualified_workers=len(classification.workers),
        not_qualified_workers=classification.not_qualified,
        submitted_edits=submitted,
        dry_run=config.dry_run,
        start_time=start_time,
        end_time=end_time,
        elapsed_seconds=(end_time - start_time).total_seconds(),
        revocations=revocations,
    )
