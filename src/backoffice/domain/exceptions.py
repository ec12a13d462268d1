"""Domain-level exceptions.

All business rule violations are expressed as subclasses of DomainException
so callers (CLI, HTTP adapters) can catch them uniformly.  Each kind carries
the ``status_code`` an HTTP boundary should answer with.
"""


class DomainException(Exception):
    """Base class for all domain errors."""

    status_code = 500


class ValidationError(DomainException):
    """A business rule or invariant was violated."""

    status_code = 400


class OutOfStockError(ValidationError):
    """Not enough flat or variant stock for a requested quantity."""


class ProductInactiveError(ValidationError):
    """The product exists but has been soft-disabled."""


class InvalidStatusTransitionError(ValidationError):
    """The requested status change is not allowed from the current status."""


class EntityNotFoundError(DomainException):
    """A requested entity does not exist."""

    status_code = 404


class ProductNotFoundError(EntityNotFoundError):
    """An order line references a product id that does not resolve."""


class DuplicateKeyError(DomainException):
    """A unique key (SKU, order number, customer identifier) is already taken."""

    status_code = 409


class DatabaseError(DomainException):
    """Unexpected persistence failure; the cause is never shown to callers."""
