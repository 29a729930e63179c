"""Storefront failures that have no counterpart among protean's own exceptions.

Validation problems are raised as ``protean.exceptions.ValidationError`` and
missing records as ``ObjectNotFoundError``; the classes here extend protean's
taxonomy where the HTTP layer needs more structure than a message.
"""

from protean.exceptions import InvalidOperationError, InvalidStateError, ValidationError


class StorefrontError(Exception):
    """Base class for expected failures outside protean's taxonomy."""

    def __init__(self, message: str = ""):
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return self.message


class InsufficientStock(InvalidStateError):
    """Requested quantity exceeds what is currently in stock.

    ``available`` is ``None`` when the conflict was detected by a conditional
    write and the remaining stock is not known.
    """

    def __init__(self, product_id, product_name=None, available=None, requested=None):
        self.product_id = product_id
        self.product_name = product_name
        self.available = available
        self.requested = requested

        label = f"'{product_name}'" if product_name else f"product {product_id}"
        message = f"Insufficient stock for {label}"
        if available is not None:
            message += f". Available: {available}"
            if requested is not None:
                message += f", Requested: {requested}"
        self.message = message
        super().__init__(message)


class EmptyCart(ValidationError):
    def __init__(self):
        super().__init__({"cart": ["Your cart is empty"]})


class SessionConflict(InvalidStateError):
    """The session changed in another request since it was opened here."""

    def __init__(self, message: str = "Your session was updated by another request. Please try again."):
        self.message = message
        super().__init__(message)


class Unauthenticated(StorefrontError):
    def __init__(self, message: str = "Authentication required"):
        super().__init__(message)


class Forbidden(StorefrontError):
    def __init__(self, message: str = "You are not allowed to access this resource"):
        super().__init__(message)


class InvalidStatus(InvalidOperationError):
    def __init__(self, status, allowed=None):
        self.status = status
        self.allowed = list(allowed or [])
        message = f"Invalid order status: {status!r}"
        if self.allowed:
            message += f" (expected one of: {', '.join(self.allowed)})"
        self.message = message
        super().__init__(message)


class PersistenceFailure(StorefrontError):
    """The storage layer failed; any open unit of work has been rolled back."""

    def __init__(self, message: str = "The order could not be processed. Please try again."):
        super().__init__(message)
