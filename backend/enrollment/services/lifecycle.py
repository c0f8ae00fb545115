"""
Lifecycle Service - activity status rules for student records.

Implements:
1. Auto-inactivation: an ACTIVE student whose inactive_on date has been
   reached (today >= inactive_on, calendar dates only) reads as INACTIVE
   with a system-generated reason.
2. Reactivation: an edit moving INACTIVE -> ACTIVE clears the inactivity
   reason and the scheduled date, whatever the form submitted.
3. Expiry countdown: whole days until inactive_on, rendered as
   "<n> days", "Today" or "Expired".
4. Sweep: persists auto-inactivation for the whole record set. Only rows
   whose effective status differs from the stored one are written, so
   running it twice on the same day is a no-op.

evaluate() and expires_in() are pure; "today" is always passed in.
"""

import time
from dataclasses import dataclass
from datetime import date, datetime, timezone
from typing import Optional
from sqlalchemy.orm import Session
from enrollment.models.student import Student, ACTIVE, INACTIVE
from enrollment.logging_config import get_logger, log_with_context

logger = get_logger("lifecycle")

# Both reasons are shown to users and must stay verbatim.
SWEEP_REASON = "Automatically marked inactive based on scheduled date"
LOOKUP_REASON = "Automatically marked inactive due to reaching scheduled end date"


@dataclass(frozen=True)
class EffectiveStatus:
    """Status a reader perceives after applying auto-inactivation."""
    activity_status: str
    inactivity_reason: Optional[str]
    auto_inactivated: bool = False


def today() -> date:
    """Current calendar date in UTC."""
    return datetime.now(timezone.utc).date()


def evaluate(record, on: date, reason: str = SWEEP_REASON) -> EffectiveStatus:
    """
    Compute the effective status of a record as of the date `on`.

    The record is not modified. `reason` selects which system message an
    automatic inactivation carries (SWEEP_REASON or LOOKUP_REASON).
    """
    inactive_on = getattr(record, "inactive_on", None)
    if (inactive_on is not None
            and record.activity_status == ACTIVE
            and on >= inactive_on):
        return EffectiveStatus(INACTIVE, reason, auto_inactivated=True)
    return EffectiveStatus(record.activity_status, record.inactivity_reason)


def apply_reactivation(previous_status: str, candidate: dict) -> dict:
    """
    Return the candidate with the reactivation rule applied.

    Moving from INACTIVE to ACTIVE always clears inactivity_reason and
    inactive_on. Any other transition leaves the candidate as submitted.
    """
    if previous_status == INACTIVE and candidate.get("activity_status") == ACTIVE:
        candidate = dict(candidate)
        candidate["inactivity_reason"] = None
        candidate["inactive_on"] = None
    return candidate


def days_until(inactive_on: date, on: date) -> int:
    """Whole days from `on` until `inactive_on` (negative once passed)."""
    return (inactive_on - on).days


def expires_in(inactive_on: Optional[date], on: date) -> Optional[str]:
    """Display countdown for a scheduled inactivation; None if none is scheduled."""
    if inactive_on is None:
        return None
    days = days_until(inactive_on, on)
    if days < 0:
        return "Expired"
    if days == 0:
        return "Today"
    return "{} days".format(days)


def sweep(db: Session, on: date) -> int:
    """
    Persist auto-inactivation for every student due as of `on`.

    Returns the number of students written back. Students already stored as
    INACTIVE are never touched, so their manual reason is preserved.
    """
    start_time = time.time()

    due = db.query(Student).filter(
        Student.activity_status == ACTIVE,
        Student.inactive_on.isnot(None),
        Student.inactive_on <= on
    ).order_by(Student.id).all()

    changed = []
    for student in due:
        effective = evaluate(student, on, SWEEP_REASON)
        if effective.activity_status == student.activity_status:
            continue
        student.activity_status = effective.activity_status
        student.inactivity_reason = effective.inactivity_reason
        changed.append(student.id)

    if changed:
        db.commit()
        duration_ms = (time.time() - start_time) * 1000
        log_with_context(logger, "INFO",
            "Sweep marked {} student(s) inactive".format(len(changed)),
            context={"student_ids": changed, "as_of": on.isoformat()},
            extra_data={"duration_ms": round(duration_ms, 2), "changed": len(changed)})

    return len(changed)
