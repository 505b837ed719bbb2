from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import Any

from googleapiclient.errors import HttpError

from ..logging.error_log import ErrorLogBuffer
from ..models.error_record import RevocationErrorRecord
from ..models.revocation import FileRevocation, PermissionStatus, WorkerRevocation

"""Drive access revocation.

For each file id: list the sharing permissions, find the one whose principal is
the worker's email, delete it. Every file is handled on its own; a failure on
one file is logged and recorded, and the loop moves on. Nothing is retried.
"""

__all__ = [
    "PERMISSION_FIELDS",
    "find_permission",
    "revoke_file_access",
    "remove_drive_access",
]

logger = logging.getLogger(__name__)

PERMISSION_FIELDS = "nextPageToken, permissions(id, emailAddress)"


def _error_type(exc: Exception) -> str:
    if isinstance(exc, HttpError):
        return f"HTTP_{exc.resp.status}"
    return type(exc).__name__.upper()


def find_permission(drive: Any, file_id: str, email: str) -> dict[str, Any] | None:
    """Return the permission entry for email on file_id, or None.

    Follows nextPageToken until the listing is exhausted. Addresses are compared
    case-insensitively.
    """
    wanted = email.casefold()
    page_token: str | None = None
    while True:
        params: dict[str, Any] = {"fileId": file_id, "fields": PERMISSION_FIELDS}
        if page_token:
            params["pageToken"] = page_token
        resp = drive.permissions().list(**params).execute()
        for perm in resp.get("permissions", []):
            if (perm.get("emailAddress") or "").casefold() == wanted:
                return perm
        page_token = resp.get("nextPageToken")
        if not page_token:
            return None


def revoke_file_access(drive: Any, email: str, file_id: str, *, dry_run: bool) -> FileRevocation:
    """Revoke one worker's access to one file. Exceptions propagate to the caller."""
    logger.info(f"Checking permissions for {email} on file {file_id}...")
    perm = find_permission(drive, file_id, email)
    if perm is None:
        logger.info(f"No access found for {email} on file {file_id}")
        return FileRevocation(file_id=file_id, status=PermissionStatus.NOT_FOUND)

    permission_id = perm["id"]
    if dry_run:
        logger.info(f"Would remove access for {email} from file {file_id}")
        return FileRevocation(
            file_id=file_id, status=PermissionStatus.WOULD_REMOVE, permission_id=permission_id
        )

    drive.permissions().delete(fileId=file_id, permissionId=permission_id).execute()
    logger.info(f"Removed access for {email} from file {file_id}")
    return FileRevocation(file_id=file_id, status=PermissionStatus.REMOVED, permission_id=permission_id)


def remove_drive_access(
    drive: Any,
    email: str,
    row_index: int,
    file_ids: Iterable[str],
    *,
    dry_run: bool = False,
    error_log: ErrorLogBuffer | None = None,
) -> WorkerRevocation:
    """Revoke email's access on every file id, isolating failures per file."""
    outcomes: list[FileRevocation] = []
    for file_id in file_ids:
        try:
            outcomes.append(revoke_file_access(drive, email, file_id, dry_run=dry_run))
        except Exception as e:
            logger.error(f"Error processing {file_id}: {e}")
            if error_log is not None:
                error_log.append(
                    RevocationErrorRecord.create(
                        email=email,
                        file_id=file_id,
                        error_type=_error_type(e),
                        message=str(e),
                    )
                )
            outcomes.append(
                FileRevocation(file_id=file_id, status=PermissionStatus.FAILED, error=str(e))
            )
    return WorkerRevocation(email=email, row_index=row_index, files=outcomes)
