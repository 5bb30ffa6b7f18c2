"""
Security headers middleware
"""

import logging
from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware
from typing import Callable

from ..config import settings

logger = logging.getLogger(__name__)

# JSON-only API: nothing is ever rendered, so production allows no sources at all
PRODUCTION_CSP = "default-src 'none'; frame-ancestors 'none'; base-uri 'none'"

# /docs loads Swagger UI assets inline and from a CDN
DEVELOPMENT_CSP = (
    "default-src 'self'; "
    "frame-ancestors 'none'; "
    "object-src 'none'; "
    "script-src 'self' 'unsafe-inline' https://cdn.jsdelivr.net; "
    "style-src 'self' 'unsafe-inline' https://cdn.jsdelivr.net; "
    "img-src 'self' data: https:"
)


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Add security headers to all responses"""

    async def dispatch(
        self,
        request: Request,
        call_next: Callable
    ) -> Response:
        response = await call_next(request)

        production = settings.environment == "production"
        response.headers["Content-Security-Policy"] = PRODUCTION_CSP if production else DEVELOPMENT_CSP
        response.headers["X-Frame-Options"] = "DENY"
        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"
        response.headers["Cache-Control"] = "no-store"

        if production:
            response.headers["Strict-Transport-Security"] = "max-age=31536000; includeSubDomains"

        return response
