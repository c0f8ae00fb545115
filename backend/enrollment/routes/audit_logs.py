"""
Audit log routes - read-only access to the administrative action log.
"""

from typing import Optional
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from enrollment.auth import Actor, require_admin
from enrollment.database import get_db
from enrollment.models.audit_log import AuditLogEntry
from enrollment.services.audit import AuditLog

router = APIRouter()


def serialize_entry(entry: AuditLogEntry) -> dict:
    return {
        "id": entry.entry_id,
        "timestamp": entry.timestamp.isoformat() if entry.timestamp else None,
        "admin_name": entry.admin_name,
        "admin_email": entry.admin_email,
        "action": entry.action,
        "student_id": entry.student_id,
        "student_name": entry.student_name,
        "details": entry.details,
    }


@router.get("/api/audit-logs")
def list_audit_logs(
    limit: Optional[int] = Query(None, ge=1, le=1000, description="Maximum entries to return"),
    db: Session = Depends(get_db),
    actor: Actor = Depends(require_admin)
):
    """Audit entries, newest first."""
    entries = AuditLog(db).list(limit)
    return {"data": [serialize_entry(e) for e in entries], "total": len(entries)}
