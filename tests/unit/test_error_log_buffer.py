from __future__ import annotations
import json
from pathlib import Path
from worker_access.logging.error_log import ErrorLogBuffer, RevocationErrorRecord


def test_error_record_creation_and_json_line():
    rec = RevocationErrorRecord.create(
        email="w@example.com",
        file_id="file-a",
        error_type="HTTP_403",
        message="insufficient permissions",
    )
    data = json.loads(rec.to_json_line())
    assert data["email"] == "w@example.com"
    assert data["file_id"] == "file-a"
    assert data["error_type"] == "HTTP_403"
    assert "timestamp" in data and data["timestamp"].endswith("Z")
    assert set(data.keys()) == {"timestamp", "email", "file_id", "error_type", "message"}


def test_error_log_buffer_flush(temp_workdir: Path):
    buf = ErrorLogBuffer()
    buf.append(RevocationErrorRecord.create("a@example.com", "f1", "HTTP_404", "not found"))
    buf.append(RevocationErrorRecord.create("b@example.com", "f2", "HTTP_500", "backend"))
    path = buf.flush()
    assert path is not None and path.exists()
    assert path.parent == Path("logs")
    assert path.name.startswith("errors-") and path.suffix == ".log"
    lines = path.read_text(encoding="utf-8").strip().splitlines()
    assert len(lines) == 2
    assert len(buf) == 0


def test_error_log_buffer_empty_flush_creates_nothing(tmp_path: Path):
    logs_dir = tmp_path / "logs-empty"
    buf = ErrorLogBuffer(logs_dir=logs_dir)
    assert buf.flush() is None
    assert not logs_dir.exists()


def test_error_log_buffer_multiple_flushes(temp_workdir: Path):
    buf = ErrorLogBuffer()
    buf.append(RevocationErrorRecord.create("a@example.com", "f1", "HTTP_404", "x"))
    path = buf.flush()
    assert path is not None
    size1 = path.stat().st_size
    buf.append(RevocationErrorRecord.create("a@example.com", "f2", "HTTP_404", "y"))
    path2 = buf.flush()
    assert path == path2
    assert path2.stat().st_size > size1
