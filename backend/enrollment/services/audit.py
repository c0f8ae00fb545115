"""
Audit Service - append-only log of administrative actions.

Every successful add or update made by an authenticated administrator pairs
with exactly one entry here. Entries are never modified or removed and are
read newest first. Without an authenticated actor nothing is recorded.
"""

from typing import Optional
from sqlalchemy.orm import Session
from enrollment.errors import ValidationError
from enrollment.models.audit_log import AuditLogEntry, AUDIT_ACTIONS
from enrollment.logging_config import get_logger, log_with_context

logger = get_logger("audit")


def add_detail(student) -> str:
    return "Added new student with phone number {}".format(student.phone_number)


def update_detail(student) -> str:
    return "Updated student information"


class AuditLog:
    """Audit log over the audit_logs table bound to one database session."""

    def __init__(self, db: Session):
        self.db = db

    def append(self, actor, action: str, subject, detail: str,
               commit: bool = True) -> Optional[AuditLogEntry]:
        """
        Record `action` by `actor` on the `subject` student.

        `actor` needs name and email attributes; `subject` needs id and name.
        Returns the new entry, or None when there is no actor. With
        commit=False the entry is only flushed into the caller's transaction.
        """
        if actor is None:
            log_with_context(logger, "DEBUG",
                "No authenticated actor; {} not recorded".format(action),
                context={"student_id": subject.id})
            return None
        if action not in AUDIT_ACTIONS:
            raise ValidationError({"action": "Unknown audit action: {}".format(action)})

        entry = AuditLogEntry(
            admin_name=actor.name,
            admin_email=actor.email,
            action=action,
            student_id=subject.id,
            student_name=subject.name,
            details=detail or ""
        )
        self.db.add(entry)
        if commit:
            self.db.commit()
            self.db.refresh(entry)
        else:
            self.db.flush()

        log_with_context(logger, "INFO",
            "{} recorded for student {}".format(action, subject.id),
            context={"entry_id": entry.entry_id, "student_id": subject.id, "action": action})
        return entry

    def list(self, limit: Optional[int] = None):
        """Entries newest first, optionally capped at `limit`."""
        query = self.db.query(AuditLogEntry).order_by(AuditLogEntry.id.desc())
        if limit is not None:
            query = query.limit(limit)
        return query.all()
