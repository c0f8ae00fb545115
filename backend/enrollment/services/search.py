"""
Search Service - free-text filtering over the student record set and the
phone-number grammar for the public lookup.

filter_records holds no state: it can be re-run against any snapshot of
the repository and always returns an order-preserving subsequence.
"""

import re
from enrollment.errors import InputFormatError
from enrollment.logging_config import get_logger, log_with_context

logger = get_logger("search")

PUBLIC_PHONE_PATTERN = re.compile(r"\d{12}", re.ASCII)
INVALID_PHONE_MESSAGE = "Please enter a valid 12-digit phone number"
NOT_FOUND_MESSAGE = "No student found with this phone number"


def matches(student, query: str) -> bool:
    """
    True if a lower-cased query is a substring of the student's name,
    email or type (all lower-cased) or of the raw phone number.
    """
    return (
        query in (student.name or "").lower()
        or query in (student.email or "").lower()
        or query in (student.phone_number or "")
        or query in (student.type or "").lower()
    )


def filter_records(records, query):
    """
    Return the records matching query. Only an empty query means "no
    filter"; whitespace is matched literally like any other text.
    """
    if not query:
        return list(records)

    needle = query.lower()
    result = [student for student in records if matches(student, needle)]

    log_with_context(logger, "DEBUG",
        "Search matched {} of {} students".format(len(result), len(records)),
        context={"query": query})
    return result


def validate_phone_query(value) -> str:
    """
    Check public lookup input against the 12-digit grammar.

    Surrounding whitespace is ignored. Raises InputFormatError before any
    repository access when the input is not exactly 12 digits.
    """
    phone = (value or "").strip()
    if not PUBLIC_PHONE_PATTERN.fullmatch(phone):
        log_with_context(logger, "INFO", "Rejected malformed phone lookup",
                         extra_data={"length": len(phone)})
        raise InputFormatError(INVALID_PHONE_MESSAGE)
    return phone
