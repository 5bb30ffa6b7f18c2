"""
FastAPI dependencies for authentication

Tokens are issued by the front-office application; this service only
verifies them and reads the user's role and company.
"""

import uuid
from datetime import datetime, timedelta, timezone
from typing import Optional
from uuid import UUID

from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jose import JWTError, jwt, ExpiredSignatureError

from .config import settings
from .schemas.auth import TokenPayload
from .utils.errors import AuthError

ALLOWED_JWT_ALGORITHMS = ("HS256",)

security = HTTPBearer(auto_error=False)


async def get_current_active_user(
    token: Optional[HTTPAuthorizationCredentials] = Depends(security)
) -> TokenPayload:
    """Validate the bearer JWT and return its claims"""
    if token is None or not token.credentials:
        raise AuthError("Not authenticated")
    return verify_token(token.credentials)


def create_access_token(data: dict, expires_delta: Optional[timedelta] = None):
    """Create JWT access token with jti"""
    to_encode = data.copy()
    if expires_delta:
        expire = datetime.now(timezone.utc) + expires_delta
    else:
        expire = datetime.now(timezone.utc) + timedelta(minutes=settings.access_token_expire_minutes)

    to_encode.update({
        "exp": expire,
        "jti": str(uuid.uuid4()),
        "iat": datetime.now(timezone.utc)
    })

    return jwt.encode(to_encode, settings.jwt_secret_key, algorithm=settings.algorithm)


def verify_token(token: str) -> TokenPayload:
    """Verify JWT token and return token data"""
    try:
        payload = jwt.decode(
            token,
            settings.jwt_secret_key,
            algorithms=list(ALLOWED_JWT_ALGORITHMS),
            options={
                "verify_signature": True,
                "verify_exp": True,
                "verify_nbf": True,
                "require_exp": True,
            },
        )
    except ExpiredSignatureError:
        raise AuthError("Token expired")
    except JWTError:
        raise AuthError("Invalid token")

    username = payload.get("sub")
    user_id = payload.get("user_id")
    exp = payload.get("exp")

    # Require all critical claims to be present and non-empty
    if not username or not user_id or not exp:
        raise AuthError("Invalid token - missing required claims")

    try:
        user_uuid = UUID(str(user_id))
    except ValueError:
        raise AuthError("Invalid token - malformed user_id")

    company_id = payload.get("company_id")
    try:
        company_uuid = UUID(str(company_id)) if company_id else None
    except ValueError:
        raise AuthError("Invalid token - malformed company_id")

    return TokenPayload(
        username=username,
        user_id=user_uuid,
        role=payload.get("role") or "user",
        company_id=company_uuid,
        jti=payload.get("jti"),
        exp=exp
    )
