from __future__ import annotations

from ..models.audit_result import AuditResult

"""SUMMARY line rendering."""


def _format_seconds(value: float) -> str:
    if value == 0:
        return "0"
    if value == int(value):
        return str(int(value))
    if value < 0.01:
        # avoid scientific notation for tiny values
        return f"{value:.6f}".rstrip("0").rstrip(".")
    return f"{value:.2f}".rstrip("0").rstrip(".")


def render_summary_line(result: AuditResult) -> str:
    """Render the SUMMARY line for one audit run.

    Format:
    SUMMARY rows={scanned} skipped={skipped} qualified={q} not_qualified={nq}
    removed={r} would_remove={w} not_found={n} failed={f} edits={e}
    dry_run={true|false} elapsed_sec={elapsed}
    """
    return (
        f"SUMMARY rows={result.scanned_rows} "
        f"skipped={result.skipped_rows} "
        f"qualified={result.qualified_workers} "
        f"not_qualified={result.not_qualified_workers} "
        f"removed={result.removed_permissions} "
        f"would_remove={result.would_remove_permissions} "
        f"not_found={result.missing_permissions} "
        f"failed={result.failed_files} "
        f"edits={result.submitted_edits} "
        f"dry_run={'true' if result.dry_run else 'false'} "
        f"elapsed_sec={_format_seconds(result.elapsed_seconds)}"
    )
