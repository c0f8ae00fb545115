from __future__ import annotations

from datetime import date

import pytest

from enrollment.errors import ValidationError
from enrollment.services.validation import (
    collect_errors, validate_candidate, normalize_candidate, as_number
)


def test_valid_candidate_has_no_errors(make_candidate):
    assert collect_errors(make_candidate()) == {}


@pytest.mark.parametrize("field, message", [
    ("name", "Name is required"),
    ("email", "Email is required"),
    ("phone_number", "Phone number is required"),
    ("type", "Type is required"),
    ("country", "Country is required"),
    ("state", "State is required"),
    ("address", "Address is required"),
    ("government_id_proof", "Government ID proof is required"),
    ("date_of_joining", "Date of joining is required"),
    ("amount_paid", "Amount paid is required"),
])
def test_required_fields(make_candidate, field, message):
    errors = collect_errors(make_candidate(**{field: "  "}))
    assert errors == {field: message}


def test_invalid_email(make_candidate):
    errors = collect_errors(make_candidate(email="not-an-email"))
    assert errors == {"email": "Invalid email address"}


@pytest.mark.parametrize("phone", ["12345", "1234567890123", "12345678901a", "+12345678901"])
def test_phone_must_be_twelve_digits(make_candidate, phone):
    errors = collect_errors(make_candidate(phone_number=phone))
    assert errors == {"phone_number": "Phone number must be exactly 12 digits"}


def test_unknown_type_rejected(make_candidate):
    errors = collect_errors(make_candidate(type="MENTOR"))
    assert "type" in errors


def test_negative_and_non_numeric_amounts(make_candidate):
    errors = collect_errors(make_candidate(due_amount=-1, discount="abc"))
    assert errors == {
        "due_amount": "Amount must be positive",
        "discount": "Discount must be a number",
    }


def test_negative_discount_has_its_own_message(make_candidate):
    errors = collect_errors(make_candidate(discount=-5, incentives_paid=-1))
    assert errors == {
        "discount": "Discount must be positive",
        "incentives_paid": "Amount must be positive",
    }


@pytest.mark.parametrize("value", ["inf", "-inf", "nan", "1e400", float("inf"), float("nan")])
def test_non_finite_amounts_are_not_numbers(make_candidate, value):
    assert as_number(value) is None
    errors = collect_errors(make_candidate(amount_paid=value))
    assert errors == {"amount_paid": "Amount paid must be a number"}


def test_numeric_strings_are_accepted(make_candidate):
    assert collect_errors(make_candidate(amount_paid="1200.50", incentives_paid="0")) == {}


def test_boolean_is_not_a_number():
    assert as_number(True) is None


def test_inactive_requires_reason(make_candidate):
    errors = collect_errors(make_candidate(activity_status="INACTIVE", inactivity_reason=" "))
    assert errors == {"inactivity_reason": "Reason is required when status is inactive"}


def test_inactive_with_reason_is_valid(make_candidate):
    candidate = make_candidate(activity_status="INACTIVE", inactivity_reason="Left the course")
    assert collect_errors(candidate) == {}


def test_unknown_status_rejected(make_candidate):
    errors = collect_errors(make_candidate(activity_status="PAUSED"))
    assert errors == {"activity_status": "Status must be ACTIVE or INACTIVE"}


def test_bad_dates_rejected(make_candidate):
    errors = collect_errors(make_candidate(date_of_joining="2024-13-40", inactive_on="soon"))
    assert set(errors) == {"date_of_joining", "inactive_on"}


def test_validate_candidate_raises_with_all_fields(make_candidate):
    with pytest.raises(ValidationError) as excinfo:
        validate_candidate(make_candidate(name="", email="bad"))
    assert set(excinfo.value.errors) == {"name", "email"}


def test_normalize_coerces_values(make_candidate):
    normalized = normalize_candidate(make_candidate(
        amount_paid="10", inactivity_reason="", inactive_on="2025-03-01"
    ))
    assert normalized["amount_paid"] == 10.0
    assert normalized["inactivity_reason"] is None
    assert normalized["inactive_on"] == date(2025, 3, 1)
    assert normalized["date_of_joining"] == date(2024, 1, 15)
