"""Domain-level exceptions.

All business rule violations are expressed as subclasses of DomainException
so the outer layers can catch them uniformly.  Each subclass carries a
stable ``kind`` tag and the HTTP-level ``status`` a request layer should
answer with; the message is always safe to show to the caller.
"""


class DomainException(Exception):
    """Base class for all domain errors."""

    kind = "ERROR"
    status = 500


class ValidationError(DomainException):
    """A business rule or invariant was violated by the caller's input."""

    kind = "INVALID_ARGUMENT"
    status = 400


class EntityNotFoundError(DomainException):
    """A requested entity does not exist."""

    kind = "NOT_FOUND"
    status = 404


class ConflictError(DomainException):
    """A uniqueness rule would be broken (item name, username, email)."""

    kind = "CONFLICT"
    status = 409


class ConcurrentModificationError(DomainException):
    """A compare-and-set loop gave up after too many lost races."""

    kind = "CONCURRENT_MODIFICATION"
    status = 409


class InsufficientStockError(DomainException):
    """A sale asked for more units than are in stock."""

    kind = "INSUFFICIENT_STOCK"
    status = 409

    def __init__(self, item_name: str, requested: int, available: int) -> None:
        super().__init__(
            f"Insufficient stock for {item_name} "
            f"(requested {requested}, {available} available)"
        )
        self.item_name = item_name
        self.requested = requested
        self.available = available


class AuthenticationError(DomainException):
    """The caller could not be identified (no credential or a bad one)."""

    kind = "UNAUTHORIZED"
    status = 401


class InvalidTokenError(AuthenticationError):
    """A session token is expired, forged or malformed.

    The message never says which of the three it was.
    """

    kind = "INVALID_TOKEN"

    def __init__(self, message: str = "Invalid or expired token") -> None:
        super().__init__(message)


class AuthorizationError(DomainException):
    """The caller is known but lacks the role the operation needs."""

    kind = "FORBIDDEN"
    status = 403
