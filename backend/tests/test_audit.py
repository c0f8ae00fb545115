from __future__ import annotations

import pytest

from enrollment.auth import authenticate
from enrollment.errors import ValidationError
from enrollment.models.audit_log import AuditLogEntry
from enrollment.services.audit import AuditLog, add_detail, update_detail
from enrollment.services.repository import StudentRepository


@pytest.fixture
def actor():
    return authenticate("admin@example.com", "admin")


@pytest.fixture
def student(db, make_candidate):
    return StudentRepository(db).add(make_candidate())


def test_append_records_actor_and_subject(db, actor, student):
    entry = AuditLog(db).append(actor, "ADD", student, add_detail(student))

    assert entry.entry_id
    assert entry.timestamp is not None
    assert entry.admin_name == "Admin User"
    assert entry.admin_email == "admin@example.com"
    assert entry.student_id == student.id
    assert entry.student_name == "John Doe"
    assert entry.details == "Added new student with phone number 123456789012"


def test_no_actor_records_nothing(db, student):
    assert AuditLog(db).append(None, "UPDATE", student, update_detail(student)) is None
    assert db.query(AuditLogEntry).count() == 0


def test_unknown_action_rejected(db, actor, student):
    with pytest.raises(ValidationError):
        AuditLog(db).append(actor, "DELETE", student, "")


def test_list_is_newest_first(db, actor, student):
    log = AuditLog(db)
    first = log.append(actor, "ADD", student, add_detail(student))
    second = log.append(actor, "UPDATE", student, update_detail(student))
    third = log.append(actor, "UPDATE", student, update_detail(student))

    assert [e.entry_id for e in log.list()] == [third.entry_id, second.entry_id, first.entry_id]
    assert [e.entry_id for e in log.list(limit=1)] == [third.entry_id]


def test_subject_name_is_a_snapshot(db, actor, student, make_candidate):
    log = AuditLog(db)
    log.append(actor, "ADD", student, add_detail(student))
    StudentRepository(db).update(student.id, make_candidate(name="Renamed"))

    assert log.list()[0].student_name == "John Doe"


def test_authenticate_rejects_bad_password():
    assert authenticate("admin@example.com", "wrong") is None
    assert authenticate("nobody@example.com", "admin") is None
