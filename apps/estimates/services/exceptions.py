"""
Domain-specific exceptions for the estimates app.

These exceptions represent business rule violations and should be
caught in views and converted to appropriate HTTP responses.
"""


class EstimatesServiceError(Exception):
    """Base exception for all estimates service errors."""
    pass


class EstimateNotFoundError(EstimatesServiceError):
    """Raised when an estimate does not exist."""
    pass


class PartNotFoundError(EstimatesServiceError):
    """Raised when a part does not exist on the given estimate."""
    pass


class DuplicateEstimateNumberError(EstimatesServiceError):
    """Raised when an estimate number is already taken."""
    pass


class InvalidEstimateNumberError(EstimatesServiceError):
    """Raised when an estimate number is blank."""
    pass
