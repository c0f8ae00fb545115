"""
Error taxonomy for the record engine.

All of these are expected, recoverable conditions reported to the immediate
caller; main.py maps each to an HTTP status. A phone lookup that finds
nothing is not an error and has no class here.
"""


class EnrollmentError(Exception):
    """Base class for record engine errors."""

    status_code = 400

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(EnrollmentError):
    """A submitted record violates one or more field constraints."""

    status_code = 422

    def __init__(self, errors: dict, message: str = "Validation failed"):
        super().__init__(message)
        self.errors = dict(errors)

    def __str__(self):
        fields = ", ".join(f"{k}: {v}" for k, v in self.errors.items())
        return f"{self.message} ({fields})" if fields else self.message


class NotFoundError(EnrollmentError):
    """An operation targeted a student ID that does not exist."""

    status_code = 404


class InputFormatError(EnrollmentError):
    """Public search input failed the phone number grammar."""

    status_code = 400
