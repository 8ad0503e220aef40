# 📄 File: app/shared/core/dependencies.py
# 🧭 Purpose (Layman Explanation):
# Checks the login pass (token) that comes with each request and works out which user is asking,
# so every endpoint knows whose posts and photos it may touch.
# 🧪 Purpose (Technical Summary):
# FastAPI dependencies for bearer authentication. Verifies Supabase-issued HS256 JWTs with
# python-jose against SUPABASE_JWT_SECRET and the configured audience, and exposes the
# subject claim as CurrentUser.user_id.
# 🔗 Dependencies:
# FastAPI security, python-jose, settings, exceptions
# 🔄 Connected Modules / Calls From:
# Community post and storage API endpoints

from typing import Any, Dict, Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import ExpiredSignatureError, JWTError, jwt

from app.shared.config.settings import get_settings
from app.shared.utils.logging import get_logger, user_id_var

from .exceptions import AuthenticationError

logger = get_logger(__name__)

JWT_ALGORITHM = "HS256"

# Missing credentials are reported through AuthenticationError, not FastAPI's default 403
security = HTTPBearer(auto_error=False)


class CurrentUser:
    """User information extracted from JWT token."""

    def __init__(
        self,
        user_id: str,
        email: Optional[str] = None,
        roles: Optional[list] = None,
        token_payload: Optional[Dict[str, Any]] = None
    ):
        self.user_id = user_id
        self.email = email
        self.roles = roles or ["user"]
        self.token_payload = token_payload or {}

    def __repr__(self) -> str:
        return f"CurrentUser(user_id={self.user_id!r})"


def verify_access_token(token: str) -> Dict[str, Any]:
    """
    Decode and verify a Supabase access token.

    Args:
        token: Raw bearer token

    Returns:
        Dict: Verified claims

    Raises:
        AuthenticationError: If the token is expired, malformed or has no subject
    """
    settings = get_settings()

    try:
        payload = jwt.decode(
            token,
            settings.SUPABASE_JWT_SECRET,
            algorithms=[JWT_ALGORITHM],
            audience=settings.SUPABASE_JWT_AUDIENCE,
        )
    except ExpiredSignatureError:
        raise AuthenticationError("Token has expired")
    except JWTError as e:
        logger.warning(f"JWT verification failed: {e}")
        raise AuthenticationError("Invalid authentication token")

    user_id = payload.get("sub")
    if not user_id or not isinstance(user_id, str):
        raise AuthenticationError("Token has no subject")

    return payload


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security)
) -> CurrentUser:
    """
    Get current authenticated user from the bearer token.

    Raises:
        AuthenticationError: If the token is missing or invalid
    """
    if credentials is None or not credentials.credentials:
        raise AuthenticationError("Authentication required")

    payload = verify_access_token(credentials.credentials)

    current_user = CurrentUser(
        user_id=payload["sub"],
        email=payload.get("email"),
        roles=[payload["role"]] if payload.get("role") else None,
        token_payload=payload,
    )
    user_id_var.set(current_user.user_id)

    logger.debug(f"Current user retrieved: {current_user.user_id}")
    return current_user
