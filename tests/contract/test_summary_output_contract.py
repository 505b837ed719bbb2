from __future__ import annotations

import re
from datetime import UTC, datetime

from worker_access.models.audit_result import AuditResult
from worker_access.services.summary import render_summary_line

"""SUMMARY 行フォーマット契約テスト。"""

SUMMARY_PATTERN = re.compile(
    r"^SUMMARY\s+rows=([0-9]+)\s+skipped=([0-9]+)\s+qualified=([0-9]+)\s+"
    r"not_qualified=([0-9]+)\s+removed=([0-9]+)\s+would_remove=([0-9]+)\s+"
    r"not_found=([0-9]+)\s+failed=([0-9]+)\s+edits=([0-9]+)\s+"
    r"dry_run=(true|false)\s+elapsed_sec=([0-9]+\.?[0-9]*)$"
)


def test_summary_pattern_example_line():
    line = (
        "SUMMARY rows=5 skipped=1 qualified=2 not_qualified=2 removed=3 "
        "would_remove=0 not_found=1 failed=0 edits=6 dry_run=false elapsed_sec=0.84"
    )
    m = SUMMARY_PATTERN.match(line)
    assert m, "SUMMARY line should match contract regex"


def test_rendered_line_matches_pattern():
    now = datetime.now(UTC)
    result = AuditResult(
        scanned_rows=120,
        skipped_rows=3,
        qualified_workers=0,
        not_qualified_workers=117,
        submitted_edits=0,
        dry_run=True,
        start_time=now,
        end_time=now,
        elapsed_seconds=0.0042,
    )
    line = render_summary_line(result)
    m = SUMMARY_PATTERN.match(line)
    assert m, line
    assert m.group(10) == "true"
    assert m.group(11) == "0.0042"


def test_cli_summary_line_matches_pattern(write_config, frozen_now, fake_sheets, fake_drive, capsys):
    from unittest.mock import patch

    from worker_access.cli.__main__ import main as cli_main

    with patch("worker_access.cli.__main__._google_services", return_value=(fake_sheets, fake_drive)):
        assert cli_main([]) == 0
    lines = [ln for ln in capsys.readouterr().out.splitlines() if ln.startswith("SUMMARY ")]
    assert len(lines) == 1
    m = SUMMARY_PATTERN.match(lines[0])
    assert m, lines[0]
    assert m.groups()[:9] == ("5", "1", "2", "2", "3", "0", "1", "0", "6")
