# storefront/core/errors.py
"""
Error taxonomy shared by the cart rules, the services and the client.

Core code raises these; the HTTP boundary (storefront.main) turns each one
into a status code plus the `{success, message, error}` envelope.
"""

from fastapi import status


class StorefrontError(Exception):
    """
    Base class for every expected failure.

    Attributes:
        status_code: HTTP status the boundary should answer with.
        message: stable, human readable summary (envelope `message`).
        error: optional detail (envelope `error`).
    """

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message: str = "Internal server error"

    def __init__(self, message: str | None = None, error: str | None = None):
        self.message = message or self.default_message
        self.error = error
        super().__init__(self.message if error is None else f"{self.message}: {error}")


class InputValidationError(StorefrontError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Validation error"


class InvalidIdFormatError(StorefrontError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Invalid ID format"


class NotFoundError(StorefrontError):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Resource not found"


class InsufficientStockError(StorefrontError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Insufficient stock available"


class ServerError(StorefrontError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = "Internal server error"
