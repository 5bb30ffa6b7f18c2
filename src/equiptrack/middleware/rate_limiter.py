"""
Rate limiting for EquipTrack endpoints
"""

import os
import logging
import uuid

from slowapi import Limiter
from slowapi.util import get_remote_address
from slowapi.errors import RateLimitExceeded
from fastapi import Request
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)

CERTIFICATE_NUMBER_LIMIT = "30/minute"

storage_uri = os.getenv("RATE_LIMIT_STORAGE_URI", "memory://")

limiter = Limiter(
    key_func=get_remote_address,
    default_limits=["1000/hour"],
    storage_uri=storage_uri,
    headers_enabled=True
)


async def rate_limit_handler(request: Request, exc: RateLimitExceeded) -> JSONResponse:
    """Rate limit exceeded handler with the standard EQT error body"""
    logger.warning(
        f"Rate limit exceeded: {request.client.host if request.client else 'unknown'} -> {request.url.path}"
    )

    # slowapi does not expose the configured window on the exception
    retry_after = 60 if "/generate-certificate-number" in request.url.path else 3600

    return JSONResponse(
        status_code=429,
        content={
            "transaction_id": str(uuid.uuid4()),
            "error_code": "EQT-429",
            "message": "Rate limit exceeded. Please try again later.",
            "retryable": True,
            "retry_after": str(retry_after)
        },
        headers={
            "Retry-After": str(retry_after),
            "X-RateLimit-Remaining": "0"
        }
    )
