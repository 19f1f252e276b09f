"""
Login and self-issued token helpers.

Staff sign in with their Supabase Auth email/password. The backend returns
the Supabase session token and, when JWT_SECRET is configured, an HS256
token of its own that backend/auth/dependencies.py also accepts.
"""

from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

import jwt
from supabase import Client

from backend.config import settings
from backend.utils.errors import AuthError
from backend.utils.logging import get_logger

logger = get_logger(__name__)

LOCAL_TOKEN_ISSUER = "keyword-suggestion-backend"


def create_access_token(
    user_id: str,
    email: Optional[str] = None,
    expires_minutes: Optional[int] = None,
) -> str:
    """
    Sign a self-issued HS256 access token.

    Raises:
        AuthError: If JWT_SECRET is not configured
    """
    if not settings.JWT_SECRET:
        raise AuthError("Self-issued tokens are disabled (JWT_SECRET is not set)")

    now = datetime.now(timezone.utc)
    lifetime = expires_minutes if expires_minutes is not None else settings.JWT_EXPIRES_MINUTES
    payload: Dict[str, Any] = {
        "sub": user_id,
        "iss": LOCAL_TOKEN_ISSUER,
        "iat": now,
        "exp": now + timedelta(minutes=lifetime),
    }
    if email:
        payload["email"] = email

    return jwt.encode(payload, settings.JWT_SECRET, algorithm="HS256")


def sign_in_with_password(supabase_client: Client, email: str, password: str) -> Dict[str, Any]:
    """
    Authenticate against Supabase Auth.

    Returns:
        Dict with user_id, email and the Supabase access_token

    Raises:
        AuthError: If Supabase rejects the credentials
    """
    try:
        response = supabase_client.auth.sign_in_with_password(
            {"email": email, "password": password}
        )
    except Exception as e:
        logger.warning(f"Login failed: {e}")
        raise AuthError("Invalid email or password") from e

    if response.user is None or response.session is None:
        logger.warning("Login returned no session")
        raise AuthError("Invalid email or password")

    logger.info(f"User signed in: user_id={response.user.id}")

    return {
        "user_id": str(response.user.id),
        "email": response.user.email,
        "access_token": response.session.access_token,
    }
