"""
Public search route - unauthenticated lookup of a student by phone number.

The input must be exactly 12 digits; anything else is rejected before the
repository is touched. A well-formed number with no match is a normal
"not found" result, not an error.
"""

from typing import Optional
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from enrollment.database import get_db
from enrollment.models.student import Student, ACTIVE
from enrollment.services.lifecycle import evaluate, expires_in, today, LOOKUP_REASON
from enrollment.services.repository import StudentRepository
from enrollment.services.search import validate_phone_query, NOT_FOUND_MESSAGE
from enrollment.logging_config import get_logger, log_with_context

router = APIRouter()
logger = get_logger("search")

INACTIVE_NOTICE = "Your account is currently inactive. Please contact your mentor for assistance."


def serialize_public(student: Student) -> dict:
    """The fields shown to a student looking themselves up."""
    on = today()
    effective = evaluate(student, on, LOOKUP_REASON)
    return {
        "id": student.id,
        "name": student.name,
        "phone_number": student.phone_number,
        "type": student.type,
        "date_of_joining": student.date_of_joining.isoformat() if student.date_of_joining else None,
        "activity_status": effective.activity_status,
        "inactivity_reason": effective.inactivity_reason,
        "inactive_on": student.inactive_on.isoformat() if student.inactive_on else None,
        "expires_in": expires_in(student.inactive_on, on),
        "notice": None if effective.activity_status == ACTIVE else INACTIVE_NOTICE,
    }


@router.get("/api/search")
def search_by_phone(
    phone: Optional[str] = Query(None, description="12-digit phone number"),
    db: Session = Depends(get_db)
):
    """Look up a student by phone number."""
    phone_number = validate_phone_query(phone)
    student = StudentRepository(db).find_by_phone(phone_number)

    if student is None:
        log_with_context(logger, "INFO", "Phone lookup missed")
        return {"found": False, "message": NOT_FOUND_MESSAGE, "student": None}

    log_with_context(logger, "INFO", "Phone lookup hit",
                     context={"student_id": student.id})
    return {"found": True, "message": None, "student": serialize_public(student)}
