"""Domain-level exceptions.

All business rule violations are expressed as subclasses of DomainException
so the CLI and HTTP layers can catch them uniformly and map them to
user-friendly messages and status codes.
"""


class DomainException(Exception):
    """Base class for all domain errors."""


class ValidationError(DomainException):
    """Malformed input or a violated business rule."""


class NotFoundError(DomainException):
    """A requested entity does not exist (or is not visible to the caller)."""


class InsufficientStockError(DomainException):
    """The requested quantity exceeds the available stock of a product."""

    def __init__(self, product_name: str, requested: int, available: int) -> None:
        super().__init__(f"Insufficient stock for product: {product_name}")
        self.product_name = product_name
        self.requested = requested
        self.available = available


class IllegalTransitionError(DomainException):
    """An order status change is not permitted from its current status."""


class PermissionDeniedError(DomainException):
    """The caller is not allowed to touch this entity."""


class ConcurrencyConflictError(DomainException):
    """A concurrent write won the race; the operation may be retried."""


class InternalError(DomainException):
    """The persistence layer failed."""
