"""Domain-level exceptions.

All business rule violations are expressed as subclasses of DomainException
so callers (the CLI, or a web controller) can catch them uniformly.  Each
class carries an ``http_status`` hint; mapping it onto a response is the
caller's job.
"""


class DomainException(Exception):
    """Base class for all domain errors."""

    http_status = 500


class ValidationError(DomainException):
    """A business rule or invariant was violated."""

    http_status = 400


class EntityNotFoundError(DomainException):
    """A requested entity does not exist."""

    http_status = 404


class InsufficientStockError(ValidationError):
    """Available stock cannot cover the requested quantity."""

    http_status = 409


class InvalidQuantityError(ValidationError):
    """A stock quantity was zero, negative or not an integer."""


class IllegalTransitionError(ValidationError):
    """The requested status is not reachable from the current one."""

    http_status = 409


class RefundNotAllowedError(IllegalTransitionError):
    """Refund requested for an order whose payment is not PAID."""


class InvalidMoneyValueError(ValidationError):
    """A monetary amount is negative or otherwise malformed."""


class DuplicateReviewError(ValidationError):
    """The user has already reviewed this product."""

    http_status = 409


class IdGenerationFailedError(DomainException):
    """No unique identifier could be produced within the retry budget."""


class UniqueConstraintViolation(DomainException):
    """Raised by repositories when a write collides with a unique key."""

    http_status = 409
