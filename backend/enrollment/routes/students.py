"""
Student API routes - administrator operations on student records.

Provides endpoints for:
- Listing students (runs the auto-inactivation sweep, then filters)
- Viewing a single student with its effective status
- Adding a student
- Editing a student

Each successful add/edit appends one audit entry for the acting admin, in
the same transaction as the write.
"""

import time
from datetime import date
from typing import Optional, Union
from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel, Field
from sqlalchemy.orm import Session

from enrollment.auth import Actor, require_admin
from enrollment.database import get_db
from enrollment.models.audit_log import ACTION_ADD, ACTION_UPDATE
from enrollment.models.student import Student
from enrollment.services.audit import AuditLog, add_detail, update_detail
from enrollment.services.lifecycle import evaluate, expires_in, sweep, today, SWEEP_REASON
from enrollment.services.repository import StudentRepository
from enrollment.services.search import filter_records
from enrollment.logging_config import get_logger, log_with_context

router = APIRouter()
logger = get_logger("http")


# ── Pydantic schemas ─────────────────────────────────────────

class StudentPayload(BaseModel):
    """
    Submitted student form. Types are kept loose so the shared rule table,
    not request parsing, produces the field-level messages.
    """
    name: Optional[str] = None
    email: Optional[str] = None
    phone_number: Optional[str] = Field(None, description="Exactly 12 digits")
    type: Optional[str] = Field(None, description="JOB_SEEKER | PAID_INTERN | UNPAID_INTERN | STUDENT | LEARNER")
    amount_paid: Optional[Union[float, str]] = None
    due_amount: Optional[Union[float, str]] = None
    discount: Optional[Union[float, str]] = None
    incentives_paid: Optional[Union[float, str]] = None
    date_of_joining: Optional[Union[date, str]] = None
    country: Optional[str] = None
    state: Optional[str] = None
    address: Optional[str] = None
    government_id_proof: Optional[str] = None
    activity_status: Optional[str] = Field("ACTIVE", description="ACTIVE | INACTIVE")
    inactivity_reason: Optional[str] = None
    inactive_on: Optional[Union[date, str]] = Field(None, description="Scheduled inactivation date")


def serialize_student(student: Student, on: date, reason: str = SWEEP_REASON) -> dict:
    """Serialize a Student with its effective status and expiry countdown."""
    effective = evaluate(student, on, reason)
    return {
        "id": student.id,
        "name": student.name,
        "email": student.email,
        "phone_number": student.phone_number,
        "type": student.type,
        "amount_paid": student.amount_paid,
        "due_amount": student.due_amount,
        "discount": student.discount,
        "incentives_paid": student.incentives_paid,
        "date_of_joining": student.date_of_joining.isoformat() if student.date_of_joining else None,
        "country": student.country,
        "state": student.state,
        "address": student.address,
        "government_id_proof": student.government_id_proof,
        "activity_status": effective.activity_status,
        "inactivity_reason": effective.inactivity_reason,
        "auto_inactivated": effective.auto_inactivated,
        "inactive_on": student.inactive_on.isoformat() if student.inactive_on else None,
        "expires_in": expires_in(student.inactive_on, on),
    }


@router.get("/api/students")
def list_students(
    search: Optional[str] = Query(None, description="Search name/email/phone/type"),
    db: Session = Depends(get_db),
    actor: Actor = Depends(require_admin)
):
    """List all students after applying the auto-inactivation sweep."""
    start_time = time.time()
    on = today()

    sweep(db, on)
    students = StudentRepository(db).list()
    filtered = filter_records(students, search or "")

    duration_ms = (time.time() - start_time) * 1000
    log_with_context(logger, "INFO",
        "Listed {} of {} students".format(len(filtered), len(students)),
        extra_data={"duration_ms": round(duration_ms, 2), "search": search})

    return {
        "data": [serialize_student(s, on) for s in filtered],
        "total": len(filtered)
    }


@router.get("/api/students/{student_id}")
def get_student(
    student_id: int,
    db: Session = Depends(get_db),
    actor: Actor = Depends(require_admin)
):
    """View one student."""
    student = StudentRepository(db).get(student_id)
    return serialize_student(student, today())


@router.post("/api/students", status_code=201)
def add_student(
    payload: StudentPayload,
    db: Session = Depends(get_db),
    actor: Actor = Depends(require_admin)
):
    """Add a student and record an ADD audit entry."""
    student = StudentRepository(db).add(payload.model_dump(), commit=False)
    AuditLog(db).append(actor, ACTION_ADD, student, add_detail(student), commit=False)
    db.commit()

    log_with_context(logger, "INFO", "Student {} added".format(student.id),
                     context={"student_id": student.id})
    return serialize_student(student, today())


@router.put("/api/students/{student_id}")
def edit_student(
    student_id: int,
    payload: StudentPayload,
    db: Session = Depends(get_db),
    actor: Actor = Depends(require_admin)
):
    """
    Replace a student's editable fields and record an UPDATE audit entry.

    Moving a student from INACTIVE back to ACTIVE clears its inactivity
    reason and scheduled date regardless of what was submitted.
    """
    student = StudentRepository(db).update(student_id, payload.model_dump(), commit=False)
    AuditLog(db).append(actor, ACTION_UPDATE, student, update_detail(student), commit=False)
    db.commit()

    log_with_context(logger, "INFO", "Student {} updated".format(student.id),
                     context={"student_id": student.id})
    return serialize_student(student, today())
