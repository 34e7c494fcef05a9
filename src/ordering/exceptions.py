"""Errors raised by the Ordering context beyond Protean's own.

Input problems use ``protean.exceptions.ValidationError`` and missing or
invisible orders use ``protean.exceptions.ObjectNotFoundError``. The classes
below cover the remaining outcomes the API has to tell apart.
"""


class OrderingError(Exception):
    """Base class for ordering failures that carry a client-safe message."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class AuthenticationError(OrderingError):
    """The request carries no verified identity."""

    def __init__(self, message: str = "Authentication required"):
        super().__init__(message)


class ForbiddenError(OrderingError):
    """The caller is authenticated but lacks the role the operation needs."""


class ConflictError(OrderingError):
    """The operation is inconsistent with the order's current state."""
