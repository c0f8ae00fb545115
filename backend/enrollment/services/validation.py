"""
Validation Service - declarative rule table applied to every candidate
student before the repository admits it.

Each rule is (field, predicate, message). Rules are evaluated in table
order; the first failing rule for a field supplies that field's message and
later rules for the same field are skipped, so "required" rules come before
format rules. Add and edit share this table.

Phone uniqueness is not a rule here: it needs the record set and is checked
by the repository.
"""

import math
import re
from datetime import date, datetime
from collections import namedtuple
from enrollment.errors import ValidationError
from enrollment.models.student import (
    ACTIVITY_STATUSES, INACTIVE, MONETARY_FIELDS, STUDENT_TYPES
)

EMAIL_PATTERN = re.compile(r"^[A-Z0-9._%+-]+@[A-Z0-9.-]+\.[A-Z]{2,}$", re.IGNORECASE)
PHONE_PATTERN = re.compile(r"\d{12}", re.ASCII)

PHONE_FORMAT_MESSAGE = "Phone number must be exactly 12 digits"
DUPLICATE_PHONE_MESSAGE = "This phone number is already registered"

Rule = namedtuple("Rule", ["field", "predicate", "message"])


def _present(field):
    def check(candidate):
        value = candidate.get(field)
        if value is None:
            return False
        if isinstance(value, str):
            return value.strip() != ""
        return True
    return check


def as_number(value):
    """Return value as a finite float, or None if it is not numeric."""
    if value is None or isinstance(value, bool):
        return None
    try:
        if isinstance(value, (int, float)):
            number = float(value)
        else:
            number = float(str(value).strip())
    except (ValueError, OverflowError):
        return None
    return number if math.isfinite(number) else None


def as_date(value):
    """Return value as a date (ISO strings are parsed), or None if it is not one."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        try:
            return date.fromisoformat(value.strip())
        except ValueError:
            return None
    return None


def _numeric(field):
    return lambda candidate: as_number(candidate.get(field)) is not None


def _non_negative(field):
    return lambda candidate: as_number(candidate.get(field)) >= 0


def _valid_date(field, optional=False):
    def check(candidate):
        value = candidate.get(field)
        if optional and (value is None or (isinstance(value, str) and value.strip() == "")):
            return True
        return as_date(value) is not None
    return check


def _matches(field, pattern):
    return lambda candidate: bool(pattern.fullmatch(str(candidate.get(field))))


def _one_of(field, allowed):
    return lambda candidate: candidate.get(field) in allowed


def _reason_when_inactive(candidate):
    if candidate.get("activity_status") != INACTIVE:
        return True
    return _present("inactivity_reason")(candidate)


_LABELS = {
    "amount_paid": "Amount paid",
    "due_amount": "Due amount",
    "discount": "Discount",
    "incentives_paid": "Incentives paid",
}

# Discount keeps its own wording
_NEGATIVE_MESSAGES = {"discount": "Discount must be positive"}

RULES = [
    Rule("name", _present("name"), "Name is required"),
    Rule("email", _present("email"), "Email is required"),
    Rule("email", _matches("email", EMAIL_PATTERN), "Invalid email address"),
    Rule("phone_number", _present("phone_number"), "Phone number is required"),
    Rule("phone_number", _matches("phone_number", PHONE_PATTERN), PHONE_FORMAT_MESSAGE),
    Rule("type", _present("type"), "Type is required"),
    Rule("type", _one_of("type", STUDENT_TYPES),
         "Type must be one of: {}".format(", ".join(STUDENT_TYPES))),
]

for _field in MONETARY_FIELDS:
    RULES.extend([
        Rule(_field, _present(_field), "{} is required".format(_LABELS[_field])),
        Rule(_field, _numeric(_field), "{} must be a number".format(_LABELS[_field])),
        Rule(_field, _non_negative(_field),
             _NEGATIVE_MESSAGES.get(_field, "Amount must be positive")),
    ])

RULES.extend([
    Rule("date_of_joining", _present("date_of_joining"), "Date of joining is required"),
    Rule("date_of_joining", _valid_date("date_of_joining"), "Date of joining must be a valid date"),
    Rule("country", _present("country"), "Country is required"),
    Rule("state", _present("state"), "State is required"),
    Rule("address", _present("address"), "Address is required"),
    Rule("government_id_proof", _present("government_id_proof"), "Government ID proof is required"),
    Rule("activity_status", _present("activity_status"), "Status is required"),
    Rule("activity_status", _one_of("activity_status", ACTIVITY_STATUSES),
         "Status must be ACTIVE or INACTIVE"),
    Rule("inactivity_reason", _reason_when_inactive,
         "Reason is required when status is inactive"),
    Rule("inactive_on", _valid_date("inactive_on", optional=True), "Inactive on must be a valid date"),
])


def collect_errors(candidate: dict, rules=RULES) -> dict:
    """Evaluate the rule table and return {field: message} for failing fields."""
    errors = {}
    for rule in rules:
        if rule.field in errors:
            continue
        if not rule.predicate(candidate):
            errors[rule.field] = rule.message
    return errors


def validate_candidate(candidate: dict) -> None:
    """Raise ValidationError carrying every failing field, or return None."""
    errors = collect_errors(candidate)
    if errors:
        raise ValidationError(errors)


def normalize_candidate(candidate: dict) -> dict:
    """
    Coerce an already validated candidate into column-ready values:
    monetary fields become floats, dates become date objects and blank
    optional fields become None.
    """
    normalized = dict(candidate)
    for field in MONETARY_FIELDS:
        normalized[field] = as_number(normalized.get(field))
    reason = normalized.get("inactivity_reason")
    if isinstance(reason, str) and reason.strip() == "":
        normalized["inactivity_reason"] = None
    normalized["date_of_joining"] = as_date(normalized.get("date_of_joining"))
    normalized["inactive_on"] = as_date(normalized.get("inactive_on"))
    return normalized
