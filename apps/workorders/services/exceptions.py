"""
Domain-specific exceptions for the work orders app.

These exceptions represent business rule violations and should be
caught in views and converted to appropriate HTTP responses.
"""


class WorkOrdersServiceError(Exception):
    """Base exception for all work order service errors."""
    pass


class AlreadyConvertedError(WorkOrdersServiceError):
    """Raised when converting an estimate that already has a work order."""
    pass


class WorkOrderExistsError(WorkOrdersServiceError):
    """Raised when resetting the conversion of an estimate whose work order still exists."""
    pass


class WorkOrderNotFoundError(WorkOrdersServiceError):
    """Raised when a work order does not exist."""
    pass


class NoOrderablePartsError(WorkOrdersServiceError):
    """Raised when none of the selected parts can have material ordered."""
    pass
