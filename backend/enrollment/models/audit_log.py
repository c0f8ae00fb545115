"""
AuditLogEntry model - an immutable note tying an administrative mutation
to the administrator who performed it.

Rows are only ever inserted; the log is read newest first.
"""

import uuid
from datetime import datetime, timezone
from sqlalchemy import Column, Integer, Text, DateTime, String, Index
from enrollment.database import Base

ACTION_ADD = "ADD"
ACTION_UPDATE = "UPDATE"
AUDIT_ACTIONS = (ACTION_ADD, ACTION_UPDATE)


class AuditLogEntry(Base):
    """
    SQLAlchemy model for the audit_logs table.

    The integer primary key gives insertion order; entry_id is the opaque
    identifier exposed to clients. student_name is a snapshot taken at the
    time of the action and is not kept in sync with later renames.
    """
    __tablename__ = "audit_logs"

    id = Column(Integer, primary_key=True, autoincrement=True)
    entry_id = Column(String(36), nullable=False, unique=True,
                      default=lambda: str(uuid.uuid4()),
                      doc="Opaque entry identifier")
    timestamp = Column(DateTime, nullable=False, default=lambda: datetime.now(timezone.utc),
                       doc="When the action was recorded")
    admin_name = Column(Text, nullable=False)
    admin_email = Column(Text, nullable=False)
    action = Column(String(10), nullable=False, doc="ADD | UPDATE")
    student_id = Column(Integer, nullable=False,
                        doc="Subject student of the action")
    student_name = Column(Text, nullable=False,
                          doc="Student name at the time of the action")
    details = Column(Text, nullable=False, default="")

    __table_args__ = (
        Index("ix_audit_logs_student_id", "student_id"),
    )

    def __repr__(self):
        return f"<AuditLogEntry(id={self.entry_id}, action='{self.action}', student={self.student_id})>"
