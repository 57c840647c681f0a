"""Custom exceptions and helpers for consistent error responses."""

import json
from typing import Any, Dict, Optional


class AppError(Exception):
    """Base class for application errors."""

    def __init__(self, message: str, status_code: int = 400):
        super().__init__(message)
        self.status_code = status_code


class NotFoundError(AppError):
    """Raised when a requested resource is missing."""

    def __init__(self, message: str = "Resource not found"):
        super().__init__(message, status_code=404)


class ValidationError(AppError):
    """Raised when input validation fails."""

    def __init__(self, message: str = "Invalid input"):
        super().__init__(message, status_code=422)


class ForbiddenError(AppError):
    """Raised when the caller's role does not allow the action."""

    def __init__(self, message: str = "Not authorized"):
        super().__init__(message, status_code=403)


class ConflictError(AppError):
    """Raised when the resource is not in a state that permits the action."""

    def __init__(self, message: str = "Conflict"):
        super().__init__(message, status_code=409)


class StoreUnavailableError(AppError):
    """Raised when the backing store cannot be reached or a query fails."""

    def __init__(self, message: str = "Store unavailable", operation: Optional[str] = None):
        super().__init__(message, status_code=503)
        self.operation = operation


def to_response(error: AppError, correlation_id: Optional[str] = None) -> Dict[str, Any]:
    """Convert an AppError into a Lambda proxy integration response."""
    body: Dict[str, Any] = {"message": str(error), "status": "error"}
    if correlation_id:
        body["correlation_id"] = correlation_id
    return {
        "statusCode": error.status_code,
        "headers": {"Content-Type": "application/json"},
        "body": json.dumps(body),
    }
