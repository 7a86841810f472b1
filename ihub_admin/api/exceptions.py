"""Custom exceptions for FastAPI application."""

from fastapi import HTTPException
from starlette.status import (
    HTTP_400_BAD_REQUEST,
    HTTP_401_UNAUTHORIZED,
    HTTP_413_REQUEST_ENTITY_TOO_LARGE,
    HTTP_500_INTERNAL_SERVER_ERROR,
)


class AdminAPIError(HTTPException):
    """Base exception for admin API errors."""
    pass


class AdminAuthRequiredError(AdminAPIError):
    def __init__(self):
        super().__init__(
            HTTP_401_UNAUTHORIZED,
            "Admin authentication required",
            headers={"WWW-Authenticate": "Bearer"},
        )


class InvalidRequestError(AdminAPIError):
    def __init__(self, message: str):
        super().__init__(HTTP_400_BAD_REQUEST, message)


class UploadTooLargeError(AdminAPIError):
    def __init__(self, limit: int):
        super().__init__(
            HTTP_413_REQUEST_ENTITY_TOO_LARGE,
            f"Backup file exceeds maximum size of {limit} bytes",
        )


class OperationFailedError(AdminAPIError):
    def __init__(self, operation: str, error: Exception):
        super().__init__(HTTP_500_INTERNAL_SERVER_ERROR, f"Failed to {operation}: {error}")
