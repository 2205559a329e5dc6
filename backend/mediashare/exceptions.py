"""
MediaShare Backend — Custom Exception Hierarchy
=================================================

What:  Defines application-specific exceptions for different error scenarios.
Why:   Custom exceptions enable targeted error handling with appropriate HTTP
       status codes. Global exception handlers (registered in main.py) catch
       these and return a JSON body with an `error` message.
Who:   Raised by shaping rules, services and adapters; caught by global handlers.
When:  During request processing when recoverable errors occur.

Exception Hierarchy:
    MediaShareError (base)
    ├── ValidationError          → 400 Bad Request (client can fix)
    ├── NotFoundError            → 404 Not Found
    ├── ConflictError            → 409 Conflict (duplicate id on strict create)
    ├── StoreUnavailableError    → 500 (document database fault)
    └── StorageUnavailableError  → 500 (blob storage fault)

Error bodies carry the message only; no machine-readable error codes are
exposed. Downstream faults keep the underlying fault text as their message.
"""

from typing import Any, Dict, Optional


class MediaShareError(Exception):
    """
    Base exception for all MediaShare application errors.

    Attributes:
        message:  Error description returned in the API response
        context:  Additional debug info (logged but NOT returned to client)
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class ValidationError(MediaShareError):
    """
    Raised when client input fails validation.

    When:    Missing file or title, blank comment text, rating outside 1..5.
    HTTP:    400 Bad Request
    Always raised before any store or blob I/O takes place.
    """

    def __init__(
        self,
        message: str = "Validation failed",
        field: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if field:
            ctx["field"] = field
        super().__init__(message=message, context=ctx)
        self.field = field


class NotFoundError(MediaShareError):
    """
    Raised when a requested resource does not exist.

    When:    GET /api/photos/{id} with an unknown id.
    HTTP:    404 Not Found

    Adapters return None / empty lists for missing documents; only the
    service layer turns a missing photo into this exception.
    """

    def __init__(
        self,
        resource: str = "Resource",
        resource_id: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        message = f"{resource} not found"
        ctx = context or {}
        ctx["resource"] = resource
        if resource_id:
            ctx["resource_id"] = resource_id
        super().__init__(message=message, context=ctx)


class ConflictError(MediaShareError):
    """
    Raised by a strict create when a document with the same id exists.

    HTTP:    409 Conflict
    Callers fall back to an alternate write (a fresh id) instead of letting
    this reach the client.
    """

    def __init__(
        self,
        collection: str = "collection",
        document_id: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        message = f"Document '{document_id}' already exists in {collection}"
        ctx = context or {}
        ctx["collection"] = collection
        super().__init__(message=message, context=ctx)
        self.collection = collection
        self.document_id = document_id


class StoreUnavailableError(MediaShareError):
    """
    Raised when the metadata store (document database) fails.

    When:    Network failure, bad credentials, missing configuration,
             service-side error on any create/upsert/query.
    HTTP:    500 Internal Server Error
    Message: The underlying fault text, unsanitized.
    """

    def __init__(
        self,
        message: str = "Metadata store is unavailable",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class StorageUnavailableError(MediaShareError):
    """
    Raised when the blob storage fails.

    When:    Container creation or upload fails (network, permission, config).
    HTTP:    500 Internal Server Error
    Message: The underlying fault text, unsanitized.
    """

    def __init__(
        self,
        message: str = "Blob storage is unavailable",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
