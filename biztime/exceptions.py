"""
BizTime Backend — Custom Exception Hierarchy
==============================================

What:  Application-specific exceptions for the error scenarios of the API.
How:   Each exception class carries a message and optional context dict.
       Global exception handlers (registered in main.py) catch these and
       return structured JSON error responses with the matching HTTP status.
Who:   Raised by services and the database query helper; caught by global handlers.

Exception Hierarchy:
    BizTimeError (base)
    ├── BadRequestError              → 400 Bad Request
    ├── NotFoundError                → 404 Not Found
    └── DatabaseError                → 500 Internal Server Error
        └── ConstraintViolationError → 500 Internal Server Error
"""

from typing import Any, Dict, Iterable, Optional


class BizTimeError(Exception):
    """
    Base exception for all BizTime application errors.

    Attributes:
        message:  User-facing error description (safe to return in API response)
        context:  Additional debug info (logged, returned only for 400s)
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class BadRequestError(BizTimeError):
    """
    Raised when the client sent a body or path parameter that cannot be used.

    When:    Missing body, missing/invalid required fields, a non-positive or
             non-numeric invoice amount, or an attempt to change a company code.
    HTTP:    400 Bad Request

    Example response:
        {
            "error": "bad_request",
            "message": "Invalid request: amt: Input should be greater than 0",
            "details": {"errors": [{"field": "amt", "message": "..."}]}
        }
    """

    def __init__(
        self,
        message: str = "Bad request",
        field: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if field:
            ctx["field"] = field
        super().__init__(message=message, context=ctx)
        self.field = field

    @classmethod
    def from_validation_errors(cls, errors: Iterable[Dict[str, Any]]) -> "BadRequestError":
        """
        Build a BadRequestError from FastAPI/Pydantic validation error dicts.

        Each error's `loc` is flattened into a dotted field name with the
        leading "body"/"path" segment dropped.
        """
        details = []
        for error in errors:
            loc = [str(part) for part in error.get("loc", ())]
            if loc and loc[0] in ("body", "path", "query"):
                loc = loc[1:]
            details.append({
                "field": ".".join(loc) or "body",
                "message": error.get("msg", "Invalid value"),
            })

        if not details:
            return cls(message="Invalid request")

        summary = "; ".join(f"{d['field']}: {d['message']}" for d in details)
        return cls(message=f"Invalid request: {summary}", context={"errors": details})


class NotFoundError(BizTimeError):
    """
    Raised when a lookup or mutation targets a row that does not exist.

    HTTP:    404 Not Found

    Queries return no row (not an exception) for a missing key; services
    convert that into NotFoundError with the identifying key in the message.
    """

    def __init__(
        self,
        message: str,
        resource: str = "resource",
        resource_id: Optional[Any] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        ctx["resource"] = resource
        if resource_id is not None:
            ctx["resource_id"] = str(resource_id)
        super().__init__(message=message, context=ctx)
        self.resource = resource
        self.resource_id = resource_id


class DatabaseError(BizTimeError):
    """
    Raised when a database operation fails unexpectedly.

    When:    Connection lost mid-query, driver failure, malformed statement.
    HTTP:    500 Internal Server Error

    The message returned to the client is always generic. Driver details
    (SQL text, constraint names) go to the server log only.
    """

    def __init__(
        self,
        message: str = "A database error occurred. Please try again later.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class ConstraintViolationError(DatabaseError):
    """
    Raised when the store rejects a write because of an integrity constraint.

    When:    Duplicate company code, invoice for an unknown company, deleting a
             company that still owns invoices, a CHECK constraint failure.
    HTTP:    500 Internal Server Error (error code "constraint_violation")

    The API layer does not pre-validate these cases; storage is the authority.
    """

    def __init__(
        self,
        message: str = "The request conflicts with existing data.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
