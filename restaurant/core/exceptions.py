"""
Domain Exceptions

Errors raised by the catalog, the order factory and the order store.
The request layer maps each class to an HTTP status code:

    InvalidInput   -> 400 (unknown meal, rejected before the store is touched)
    NotFound       -> 404 (no live order with the given id)
    StorageFailure -> 500 (backing database unreachable or rejected the call)
"""

from typing import Optional


class RestaurantError(Exception):
    """Base class for all application errors."""

    status_code: int = 500
    error: str = "Internal Server Error"

    def __init__(self, message: str, detail: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.detail = detail


class InvalidInput(RestaurantError):
    """The request referenced something that does not exist, e.g. a meal id."""

    status_code = 400
    error = "Invalid Input"


class NotFound(RestaurantError):
    """No live order matches the requested id."""

    status_code = 404
    error = "Not Found"


class StorageFailure(RestaurantError):
    """
    The order store could not complete an operation.

    Raised for connection errors and for statements rejected by the
    database. The store never retries; the failed call leaves no
    partial state behind.

    Attributes:
        operation: Store operation that failed (e.g. "add_order")
        detail: Diagnostic text from the underlying driver
    """

    status_code = 500
    error = "Storage Failure"

    def __init__(self, operation: str, detail: Optional[str] = None):
        super().__init__(f"Order store operation '{operation}' failed", detail)
        self.operation = operation
