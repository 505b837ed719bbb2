"""Domain models for the worker access audit.

This package contains the dataclasses passed between the config loader, the
services layer and the CLI.
"""

from .audit_result import AuditResult
from .config_models import AccessConfig, ColumnLayout
from .error_record import RevocationErrorRecord
from .pending_edit import FormatHighlight, MoveRow, PendingEdit, SetCheckbox
from .revocation import FileRevocation, PermissionStatus, WorkerRevocation
from .worker import QualifiedWorker, WorkerRow

__all__ = [
    # Configuration models
    "AccessConfig",
    "ColumnLayout",
    # Row models
    "WorkerRow",
    "QualifiedWorker",
    # Edits
    "FormatHighlight",
    "SetCheckbox",
    "MoveRow",
    "PendingEdit",
    # Results
    "PermissionStatus",
    "FileRevocation",
    "WorkerRevocation",
    "AuditResult",
    "RevocationErrorRecord",
]
