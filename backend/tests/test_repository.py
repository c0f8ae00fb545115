from __future__ import annotations

from datetime import date, timedelta

import pytest

from enrollment.errors import ValidationError, NotFoundError
from enrollment.models.student import Student
from enrollment.services.lifecycle import today
from enrollment.services.repository import StudentRepository


@pytest.fixture
def repo(db):
    return StudentRepository(db)


def _assert_invariants(students):
    phones = [s.phone_number for s in students]
    assert len(phones) == len(set(phones))
    for s in students:
        if s.activity_status == "INACTIVE":
            assert s.inactivity_reason


def test_add_assigns_id_and_ignores_submitted_one(repo, make_candidate):
    student = repo.add(make_candidate(id=999))
    assert student.id is not None
    assert student.id != 999
    assert student.date_of_joining == date(2024, 1, 15)
    assert student.amount_paid == 5000.0


def test_add_defaults_status_to_active(repo, make_candidate):
    student = repo.add(make_candidate(activity_status=None))
    assert student.activity_status == "ACTIVE"


def test_duplicate_phone_rejected(repo, db, make_candidate):
    repo.add(make_candidate(phone_number="123456789012"))
    with pytest.raises(ValidationError) as excinfo:
        repo.add(make_candidate(name="Someone Else", phone_number="123456789012"))

    assert excinfo.value.errors == {"phone_number": "This phone number is already registered"}
    assert db.query(Student).count() == 1


def test_invalid_candidate_leaves_repository_empty(repo, db, make_candidate):
    with pytest.raises(ValidationError):
        repo.add(make_candidate(email="nope"))
    assert db.query(Student).count() == 0


def test_list_preserves_insertion_order(repo, make_candidate):
    names = ["C", "A", "B"]
    for i, name in enumerate(names):
        repo.add(make_candidate(name=name, phone_number="30000000000{}".format(i)))
    assert [s.name for s in repo.list()] == names


def test_get_missing_raises(repo):
    with pytest.raises(NotFoundError):
        repo.get(42)


def test_update_missing_raises(repo, make_candidate):
    with pytest.raises(NotFoundError):
        repo.update(42, make_candidate())


def test_update_keeps_own_phone(repo, make_candidate):
    student = repo.add(make_candidate())
    updated = repo.update(student.id, make_candidate(name="John Q. Doe"))
    assert updated.name == "John Q. Doe"
    assert updated.phone_number == "123456789012"


def test_update_phone_collision_with_other_student(repo, make_candidate):
    first = repo.add(make_candidate(phone_number="111111111111"))
    second = repo.add(make_candidate(phone_number="222222222222"))

    with pytest.raises(ValidationError) as excinfo:
        repo.update(second.id, make_candidate(phone_number=first.phone_number))

    assert "phone_number" in excinfo.value.errors
    assert repo.get(second.id).phone_number == "222222222222"


def test_inactivating_without_reason_is_rejected(repo, db, make_candidate):
    student = repo.add(make_candidate())

    candidate = student.to_candidate()
    candidate["activity_status"] = "INACTIVE"
    with pytest.raises(ValidationError) as excinfo:
        repo.update(student.id, candidate)

    assert excinfo.value.errors == {"inactivity_reason": "Reason is required when status is inactive"}
    db.expire_all()
    unchanged = repo.get(student.id)
    assert unchanged.activity_status == "ACTIVE"
    assert unchanged.inactivity_reason is None


def test_reactivation_clears_schedule_regardless_of_submission(repo, make_candidate):
    student = repo.add(make_candidate(activity_status="INACTIVE", inactivity_reason="On leave",
                                      inactive_on="2024-05-01"))

    candidate = student.to_candidate()
    candidate["activity_status"] = "ACTIVE"
    candidate["inactivity_reason"] = "should be dropped"
    candidate["inactive_on"] = "2030-01-01"
    reactivated = repo.update(student.id, candidate)

    assert reactivated.activity_status == "ACTIVE"
    assert reactivated.inactivity_reason is None
    assert reactivated.inactive_on is None


def test_reactivation_uses_effective_status_before_any_sweep(repo, make_candidate):
    yesterday = (today() - timedelta(days=1)).isoformat()
    student = repo.add(make_candidate(inactive_on=yesterday))
    assert student.activity_status == "ACTIVE"

    reactivated = repo.update(student.id, make_candidate(activity_status="ACTIVE",
                                                         inactive_on=yesterday))

    assert reactivated.activity_status == "ACTIVE"
    assert reactivated.inactivity_reason is None
    assert reactivated.inactive_on is None


def test_uncommitted_add_is_discarded_on_rollback(repo, db, make_candidate):
    student = repo.add(make_candidate(), commit=False)
    assert student.id is not None

    db.rollback()
    assert repo.list() == []


def test_find_by_phone(repo, make_candidate):
    student = repo.add(make_candidate())
    assert repo.find_by_phone("123456789012").id == student.id
    assert repo.find_by_phone("999999999999") is None


def test_invariants_hold_after_mixed_operations(repo, make_candidate):
    a = repo.add(make_candidate(phone_number="400000000001"))
    b = repo.add(make_candidate(phone_number="400000000002"))
    repo.update(a.id, make_candidate(phone_number="400000000003", activity_status="INACTIVE",
                                     inactivity_reason="Graduated"))
    with pytest.raises(ValidationError):
        repo.update(b.id, make_candidate(phone_number="400000000003"))
    with pytest.raises(ValidationError):
        repo.add(make_candidate(phone_number="400000000002"))

    _assert_invariants(repo.list())
