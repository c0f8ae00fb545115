"""
Student Repository - the single owner of student records and their IDs.

All reads and writes of the students table go through StudentRepository.
It validates candidates against the shared rule table, enforces phone
uniqueness against every other student, and assigns IDs. It does not know
why a record changed: callers append audit entries themselves.

The uniqueness check and the write share one session transaction. The
database unique constraint on phone_number backs the check up; a violation
raised at flush or commit is rolled back and reported as the same duplicate-phone
ValidationError.
"""

import time
from typing import Optional
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from enrollment.errors import ValidationError, NotFoundError
from enrollment.models.student import Student, EDITABLE_FIELDS, ACTIVE
from enrollment.services.lifecycle import apply_reactivation, evaluate, today
from enrollment.services.validation import (
    validate_candidate, normalize_candidate, DUPLICATE_PHONE_MESSAGE
)
from enrollment.logging_config import get_logger, log_with_context

logger = get_logger("db")


class StudentRepository:
    """Repository over the students table bound to one database session."""

    def __init__(self, db: Session):
        self.db = db

    def list(self):
        """All students in insertion order."""
        return self.db.query(Student).order_by(Student.id).all()

    def get(self, student_id: int) -> Student:
        student = self.db.get(Student, student_id)
        if student is None:
            raise NotFoundError("Student {} not found".format(student_id))
        return student

    def find_by_phone(self, phone_number: str) -> Optional[Student]:
        return self.db.query(Student).filter(
            Student.phone_number == phone_number
        ).first()

    def _check_phone_unique(self, candidate: dict, exclude_id: Optional[int] = None):
        phone_number = candidate.get("phone_number")
        query = self.db.query(Student.id).filter(Student.phone_number == phone_number)
        if exclude_id is not None:
            query = query.filter(Student.id != exclude_id)
        if query.first() is not None:
            raise ValidationError({"phone_number": DUPLICATE_PHONE_MESSAGE})

    @staticmethod
    def _editable(candidate: dict) -> dict:
        """Editable fields only; a missing status means ACTIVE."""
        candidate = {field: candidate.get(field) for field in EDITABLE_FIELDS}
        if not candidate.get("activity_status"):
            candidate["activity_status"] = ACTIVE
        return candidate

    def _validate(self, candidate: dict, exclude_id: Optional[int] = None) -> dict:
        """Run the rule table, then phone uniqueness; returns column values."""
        validate_candidate(candidate)
        self._check_phone_unique(candidate, exclude_id)
        return normalize_candidate(candidate)

    def _persist(self, student: Student, commit: bool):
        try:
            if commit:
                self.db.commit()
            else:
                self.db.flush()
        except IntegrityError:
            self.db.rollback()
            # The rule table already rules out the status check constraint
            raise ValidationError({"phone_number": DUPLICATE_PHONE_MESSAGE})
        if commit:
            self.db.refresh(student)

    def add(self, candidate: dict, commit: bool = True) -> Student:
        """
        Admit a new student. Any "id" in the candidate is ignored; the
        repository assigns one.

        With commit=False the row is only flushed, so the caller can commit
        it together with its audit entry.
        """
        start_time = time.time()
        values = self._validate(self._editable(candidate))

        student = Student(**values)
        self.db.add(student)
        self._persist(student, commit)

        duration_ms = (time.time() - start_time) * 1000
        log_with_context(logger, "INFO", "Student added",
            context={"student_id": student.id},
            extra_data={"duration_ms": round(duration_ms, 2)})
        return student

    def update(self, student_id: int, candidate: dict, commit: bool = True) -> Student:
        """
        Replace the editable fields of an existing student.

        The reactivation rule is applied before validation and compares
        against the effective status, so a student past its inactive_on date
        reactivates the same way whether or not a sweep has stored the
        override yet. On any failure the stored record is left untouched.
        """
        start_time = time.time()
        student = self.get(student_id)

        previous_status = evaluate(student, today()).activity_status
        candidate = apply_reactivation(previous_status, self._editable(candidate))
        values = self._validate(candidate, exclude_id=student.id)

        for field, value in values.items():
            setattr(student, field, value)
        self._persist(student, commit)

        duration_ms = (time.time() - start_time) * 1000
        log_with_context(logger, "INFO", "Student updated",
            context={"student_id": student.id},
            extra_data={
                "duration_ms": round(duration_ms, 2),
                "status_from": previous_status,
                "status_to": student.activity_status
            })
        return student

