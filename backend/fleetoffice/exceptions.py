"""
Application exceptions.

Services raise these; ``error_handlers`` turns them into JSON responses.
"""
from typing import Any, Dict, List, Optional


class AppError(Exception):
    """Base application error."""

    def __init__(
        self,
        message: str,
        status_code: int = 500,
        details: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.status_code = status_code
        self.details = details or {}
        super().__init__(self.message)


class NotFoundError(AppError):
    """Resource not found error (404)."""

    def __init__(self, resource: str, identifier: Any = None):
        message = f"{resource} not found"
        if identifier is not None:
            message += f": {identifier}"
        super().__init__(
            message,
            status_code=404,
            details={"resource": resource, "identifier": identifier},
        )


class DuplicateError(AppError):
    """Duplicate resource error (409)."""

    def __init__(self, resource: str, field: str, value: Any):
        message = f"{resource} with {field}='{value}' already exists"
        super().__init__(
            message,
            status_code=409,
            details={"resource": resource, "field": field, "value": value},
        )


class BusinessValidationError(AppError):
    """A business rule rejected the request (400).

    ``errors`` holds every violated rule so a form can show them all at once.
    """

    def __init__(self, message: str, errors: Optional[List[str]] = None):
        self.errors = list(errors) if errors else [message]
        super().__init__(message, status_code=400, details={"errors": self.errors})


class FileValidationError(AppError):
    """Uploaded or requested file rejected (400)."""

    def __init__(self, message: str, filename: Optional[str] = None):
        super().__init__(message, status_code=400, details={"filename": filename})


class StorageError(AppError):
    """Filesystem operation failed (500)."""

    def __init__(self, message: str, path: Optional[str] = None):
        super().__init__(message, status_code=500, details={"path": path})


def require_date_order(start, end, message: str = "End date must not precede start date") -> None:
    """Raise when both dates are set and ``end`` comes before ``start``."""

    if start is not None and end is not None and end < start:
        raise BusinessValidationError(message)
