"""
DevHub Backend — Custom Exception Hierarchy
=============================================

What:  Application-specific exceptions for the failure kinds the API can report.
Why:   Each kind maps to one HTTP status code and a user-safe message, so route
       handlers never build error responses themselves.
How:   Each exception carries a message and an optional context dict.
       Global exception handlers (registered in main.py) turn them into
       structured JSON error responses.

Exception Hierarchy:
    DevHubError (base)
    ├── ValidationError          → 400 Bad Request (client can fix)
    ├── MalformedLocatorError    → 400 Bad Request (bad blob locator)
    ├── AccessDeniedError        → 403 Forbidden (bad or expired signed URL)
    ├── NotFoundError            → 404 Not Found
    └── StoreUnavailableError    → 500 Internal Server Error

"Not found" on a point lookup is NOT an exception inside the service layer:
repositories return ``ABSENT`` (see devhub.services.lookup) and only the
route layer converts it into NotFoundError.
"""

from typing import Any, Dict, Optional


class DevHubError(Exception):
    """
    Base exception for all DevHub application errors.

    Attributes:
        message:  User-facing error description (safe to return in API response)
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


class ValidationError(DevHubError):
    """
    Raised when client input fails validation, before any store call.

    When:    Missing or blank required field, out-of-range difficulty level,
             empty/oversized/non-text upload.
    HTTP:    400 Bad Request
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


class NotFoundError(DevHubError):
    """
    Raised by route handlers when a point lookup returned absence.

    HTTP:    404 Not Found
    """

    def __init__(
        self,
        resource: str = "resource",
        resource_id: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        message = f"The requested {resource} was not found"
        if resource_id:
            message = f"{resource} with ID '{resource_id}' was not found"
        ctx = context or {}
        ctx["resource"] = resource
        if resource_id:
            ctx["resource_id"] = resource_id
        super().__init__(message=message, context=ctx)


class MalformedLocatorError(DevHubError):
    """
    Raised when a blob locator is not of the form ``blob://bucket/key``.

    Only signed URL issuance raises this; delete and exists report a
    malformed locator by returning False.
    HTTP:    400 Bad Request
    """

    def __init__(
        self,
        locator: str = "",
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        ctx["locator"] = locator
        super().__init__(message="The file locator is not in a recognised format", context=ctx)
        self.locator = locator


class AccessDeniedError(DevHubError):
    """
    Raised when a signed file URL has a bad signature or has expired.

    HTTP:    403 Forbidden
    """

    def __init__(
        self,
        message: str = "This file link is invalid or has expired",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class StoreUnavailableError(DevHubError):
    """
    Raised when the document store or blob store call itself failed.

    What:    Network, auth, quota, disk or driver failure underneath a store call.
    HTTP:    500 Internal Server Error
    Nothing is retried. The message returned to the client is always generic;
    the store, operation and original error live in ``context`` and are logged
    server-side only.
    """

    def __init__(
        self,
        message: str = "A storage error occurred. Please try again later.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
