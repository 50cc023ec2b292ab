"""
Catalog Backend - Exception Hierarchy
=======================================

What:  Application-specific exceptions and their JSON wire form.
How:   Each exception carries a message and optional context dict. Global
       exception handlers (registered in main.py) catch these and return
       JSON responses with the matching HTTP status code.
Who:   Raised by the repository, blob store and product service; caught by
       the handlers in main.py.

Exception Hierarchy:
    CatalogError (base)
    ├── NotFoundError         → 404 {"message": "Product not found"}
    ├── OperationFailedError  → 500 {"message": ..., "error": {...}}
    └── FileStorageError      → wrapped into OperationFailedError by callers

The API echoes the underlying error (class name and text) in
500 responses. There is no hardening layer in front of it.
"""

from typing import Any, Dict, Optional


def describe_error(exc: BaseException) -> Dict[str, Any]:
    """
    Serialize an exception into the object echoed to API clients.

    Example:
        >>> describe_error(ValueError("badly formed hexadecimal UUID string"))
        {'name': 'ValueError', 'message': 'badly formed hexadecimal UUID string'}
    """
    return {"name": type(exc).__name__, "message": str(exc)}


class CatalogError(Exception):
    """
    Base exception for all catalog application errors.

    Attributes:
        message:  Human-readable error description
        context:  Additional debug info (logged, not returned to the client)
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class NotFoundError(CatalogError):
    """
    Raised when an identifier has no matching document.

    HTTP:    404 Not Found
    Body:    {"message": "Product not found"}

    SQLAlchemy returns None for missing rows; the repository converts that
    None into this exception so routes never inspect lookup results.
    """

    def __init__(
        self,
        resource: str = "Product",
        resource_id: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        ctx["resource"] = resource
        if resource_id:
            ctx["resource_id"] = resource_id
        super().__init__(message=f"{resource} not found", context=ctx)
        self.resource_id = resource_id


class OperationFailedError(CatalogError):
    """
    Raised when any non-not-found failure ends a request.

    HTTP:    500 Internal Server Error

    Covers validation failures, file I/O and persistence errors alike. The
    original exception is kept in `error` and echoed to the client.

    Body shapes:
        raw=False: {"message": "Error adding product", "error": {"name": ..., "message": ...}}
        raw=True:  {"name": ..., "message": ...}
    """

    def __init__(
        self,
        message: str = "Operation failed",
        error: Optional[BaseException] = None,
        raw: bool = False,
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
        self.error = error
        self.raw = raw

    @property
    def error_detail(self) -> Dict[str, Any]:
        if self.error is None:
            return {"name": type(self).__name__, "message": self.message}
        return describe_error(self.error)

    def to_body(self) -> Dict[str, Any]:
        """Builds the JSON response body for this failure."""
        if self.raw:
            return self.error_detail
        return {"message": self.message, "error": self.error_detail}


class FileStorageError(CatalogError):
    """
    Raised when the blob store cannot write an upload.

    When:    Disk full, permission denied, directory not writable, I/O error.
    No retry is attempted; callers wrap it into OperationFailedError.
    """

    def __init__(
        self,
        message: str = "File storage operation failed",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
