"""
Standardized error handling for EquipTrack
"""

import logging
import uuid
from typing import Any, Optional

from fastapi import HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)

ERROR_REGISTRY = {
    400: ("EQT-400", "Bad Request: General validation error", False),
    401: ("EQT-401", "Unauthorized: Invalid or expired JWT", False),
    403: ("EQT-403", "Forbidden: Record belongs to another company", False),
    404: ("EQT-404", "Not Found: Resource does not exist", True),
    429: ("EQT-429", "Too Many Requests: Rate limit exceeded", True),
    500: ("EQT-500", "Internal Server Error: Generic server failure", True),
    503: ("EQT-503", "Service Unavailable: Database unavailable", True),
}


class ValidationError(HTTPException):
    def __init__(self, detail: Any = None):
        super().__init__(status_code=400, detail=detail or ERROR_REGISTRY[400][1])


class AuthError(HTTPException):
    def __init__(self, detail: Any = None):
        super().__init__(
            status_code=401,
            detail=detail or ERROR_REGISTRY[401][1],
            headers={"WWW-Authenticate": "Bearer"}
        )


class ForbiddenError(HTTPException):
    def __init__(self, detail: Any = None):
        super().__init__(status_code=403, detail=detail or ERROR_REGISTRY[403][1])


class NotFoundError(HTTPException):
    def __init__(self, detail: Any = None):
        super().__init__(status_code=404, detail=detail or ERROR_REGISTRY[404][1])


class StoreError(HTTPException):
    """
    Database failure. The client only ever sees the generic message;
    the underlying exception text is kept on ``internal`` for logging.
    """

    def __init__(self, internal: Optional[str] = None, detail: Any = None):
        super().__init__(
            status_code=500,
            detail=detail or "Database operation failed"
        )
        self.internal = internal


async def error_handler(request: Request, exc: HTTPException):
    """Standardized error handler for all HTTP exceptions"""
    error_code, message, retryable = ERROR_REGISTRY.get(
        exc.status_code,
        (f"EQT-{exc.status_code}", "Internal Server Error", exc.status_code >= 500)
    )

    if isinstance(exc, StoreError) and exc.internal:
        logger.error(f"Store error on {request.method} {request.url.path}: {exc.internal}")

    return JSONResponse(
        status_code=exc.status_code,
        content={
            "transaction_id": str(uuid.uuid4()),
            "error_code": error_code,
            "message": exc.detail or message,
            "retryable": retryable
        },
        headers=getattr(exc, "headers", None)
    )


async def validation_error_handler(request: Request, exc: RequestValidationError):
    """Request body/query validation failures are reported as 400, not 422"""
    errors = exc.errors()
    first = errors[0] if errors else {}
    location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
    message = first.get("msg", ERROR_REGISTRY[400][1])
    if location:
        message = f"{location}: {message}"

    logger.info(f"Rejected request to {request.url.path}: {message}")

    return JSONResponse(
        status_code=400,
        content={
            "transaction_id": str(uuid.uuid4()),
            "error_code": "EQT-400",
            "message": message,
            "retryable": False
        }
    )
