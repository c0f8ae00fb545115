from enrollment.models.student import Student
from enrollment.models.audit_log import AuditLogEntry

__all__ = ["Student", "AuditLogEntry"]
