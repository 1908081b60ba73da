"""
Domain-specific exceptions for the numbering app.

All of them are raised before anything is written, so the counter and
issuance tables are untouched when one propagates.
"""


class NumberingServiceError(Exception):
    """Base exception for all numbering service errors."""
    pass


class DuplicateNumberError(NumberingServiceError):
    """Raised when a number has already been issued in its series."""
    pass


class IssuanceNotFoundError(NumberingServiceError):
    """Raised when a number was never issued in its series."""
    pass


class MissingVoidReasonError(NumberingServiceError):
    """Raised when voiding a number without giving a reason."""
    pass


class AlreadyVoidedError(NumberingServiceError):
    """Raised when voiding a number that is already void."""
    pass


class InvalidNumberError(NumberingServiceError):
    """Raised when a number is not a positive integer."""
    pass
