"""
Student model - represents an enrollment record tracked through its
activity lifecycle.

Each student is identified by a repository-assigned integer ID and by a
12-digit phone number that is unique across the whole record set. The
record carries its financial ledger fields and an optional scheduled
inactivation date that the lifecycle evaluator turns into an automatic
ACTIVE -> INACTIVE transition.
"""

from datetime import datetime, timezone
from sqlalchemy import Column, Integer, Text, Date, DateTime, Float, String, CheckConstraint, Index
from enrollment.database import Base

ACTIVE = "ACTIVE"
INACTIVE = "INACTIVE"
ACTIVITY_STATUSES = (ACTIVE, INACTIVE)

STUDENT_TYPES = ("JOB_SEEKER", "PAID_INTERN", "UNPAID_INTERN", "STUDENT", "LEARNER")

MONETARY_FIELDS = ("amount_paid", "due_amount", "discount", "incentives_paid")

# Columns a caller may submit on add/edit; everything else is bookkeeping.
EDITABLE_FIELDS = (
    "name", "email", "phone_number", "type",
    "amount_paid", "due_amount", "discount", "incentives_paid",
    "date_of_joining", "country", "state", "address", "government_id_proof",
    "activity_status", "inactivity_reason", "inactive_on",
)


class Student(Base):
    """
    SQLAlchemy model for the students table.

    Lifecycle statuses:
    - ACTIVE: enrolled; may carry an inactive_on date scheduling its end
    - INACTIVE: requires a non-empty inactivity_reason
    """
    __tablename__ = "students"

    id = Column(Integer, primary_key=True, autoincrement=True,
                doc="Repository-assigned student identifier")
    name = Column(Text, nullable=False)
    email = Column(Text, nullable=False)
    phone_number = Column(String(12), nullable=False, unique=True,
                          doc="Exactly 12 digits, unique across all students")
    type = Column(String(20), nullable=False,
                  doc="JOB_SEEKER | PAID_INTERN | UNPAID_INTERN | STUDENT | LEARNER")
    amount_paid = Column(Float, nullable=False, default=0)
    due_amount = Column(Float, nullable=False, default=0)
    discount = Column(Float, nullable=False, default=0)
    incentives_paid = Column(Float, nullable=False, default=0)
    date_of_joining = Column(Date, nullable=False)
    country = Column(Text, nullable=False)
    state = Column(Text, nullable=False)
    address = Column(Text, nullable=False)
    government_id_proof = Column(Text, nullable=False,
                                 doc="Reference to the government ID document")
    activity_status = Column(String(10), nullable=False, default=ACTIVE,
                             doc="ACTIVE | INACTIVE")
    inactivity_reason = Column(Text, nullable=True,
                               doc="Required whenever activity_status is INACTIVE")
    inactive_on = Column(Date, nullable=True,
                         doc="Scheduled date on which the student becomes inactive")
    created_at = Column(DateTime, default=lambda: datetime.now(timezone.utc))
    updated_at = Column(DateTime, default=lambda: datetime.now(timezone.utc),
                        onupdate=lambda: datetime.now(timezone.utc))

    __table_args__ = (
        CheckConstraint(
            "activity_status <> 'INACTIVE' OR "
            "(inactivity_reason IS NOT NULL AND inactivity_reason <> '')",
            name="ck_students_inactive_has_reason"
        ),
        Index("ix_students_activity_status", "activity_status"),
        Index("ix_students_inactive_on", "inactive_on"),
    )

    def to_candidate(self) -> dict:
        """Snapshot of the editable fields, in the shape add/update accept."""
        return {field: getattr(self, field) for field in EDITABLE_FIELDS}

    def __repr__(self):
        return f"<Student(id={self.id}, name='{self.name}', phone='{self.phone_number}', status='{self.activity_status}')>"
