"""
FastAPI dependency functions for authentication.

These functions are used as FastAPI dependencies to verify bearer tokens
and extract the authenticated user_id.

Two token schemes are accepted:
- Supabase Auth access tokens, verified against the project's JWKS (ES256)
- Self-issued tokens signed with JWT_SECRET (HS256), see backend/auth/auth.py
"""

import logging
from dataclasses import dataclass
from typing import Annotated, Any, Dict, Literal

from fastapi import Depends, Header, HTTPException, status
from jwt import PyJWKClient, decode
from jwt.exceptions import ExpiredSignatureError, InvalidTokenError, PyJWKClientError
from supabase import Client

from backend.auth.auth import LOCAL_TOKEN_ISSUER
from backend.config import settings
from backend.db.client import get_anon_client, get_service_role_client, get_supabase_client

logger = logging.getLogger(__name__)

# Initialize JWKS client for fetching and caching Supabase's public keys
_jwks_client: PyJWKClient | None = None

TokenScheme = Literal["supabase", "local"]


@dataclass
class AuthenticatedUser:
    """
    Represents an authenticated user with their token.

    Attributes:
        user_id: The user's id from the token's 'sub' claim
        access_token: The raw bearer token
        scheme: Which verifier accepted the token
        email: The 'email' claim, if present
    """
    user_id: str
    access_token: str
    scheme: TokenScheme = "supabase"
    email: str | None = None


def get_jwks_client() -> PyJWKClient:
    """
    Get or create the JWKS client instance.

    Lazy initialization ensures we only create the client when needed.
    The client caches JWKS responses to minimize network calls.

    Raises:
        ValueError: If SUPABASE_URL is not configured
    """
    global _jwks_client

    if _jwks_client is None:
        jwks_url = settings.SUPABASE_JWKS_URL
        if not jwks_url:
            raise ValueError(
                "SUPABASE_URL is not configured. "
                "Cannot construct JWKS URL for JWT verification."
            )

        logger.info(f"Initializing JWKS client with URL: {jwks_url}")
        _jwks_client = PyJWKClient(
            jwks_url,
            cache_keys=True,
            max_cached_keys=16,
        )

    return _jwks_client


def _unauthorized(error: str, message: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail={"error": error, "message": message}
    )


def _extract_bearer_token(authorization: str | None) -> str:
    if not authorization:
        logger.warning("Missing Authorization header")
        raise _unauthorized("unauthorized", "Missing Authorization header")

    parts = authorization.split()
    if len(parts) != 2 or parts[0].lower() != "bearer":
        logger.warning("Invalid Authorization header format")
        raise _unauthorized("unauthorized", "Invalid Authorization header format")

    return parts[1]


def _decode_local_token(token: str) -> Dict[str, Any]:
    return decode(
        token,
        settings.JWT_SECRET,
        algorithms=["HS256"],
        issuer=LOCAL_TOKEN_ISSUER,
        options={"verify_signature": True, "verify_exp": True, "verify_iss": True},
    )


def _decode_supabase_token(token: str) -> Dict[str, Any]:
    signing_key = get_jwks_client().get_signing_key_from_jwt(token)
    issuer = f"{settings.SUPABASE_URL.rstrip('/')}/auth/v1"

    return decode(
        token,
        signing_key.key,
        algorithms=["ES256"],
        audience="authenticated",
        issuer=issuer,
        options={
            "verify_signature": True,
            "verify_exp": True,
            "verify_aud": True,
            "verify_iss": True,
        }
    )


def verify_bearer_token(token: str) -> AuthenticatedUser:
    """
    Verify a bearer token with whichever scheme accepts it.

    Self-issued tokens are tried first when JWT_SECRET is configured (cheap,
    no network); anything they reject falls through to Supabase JWKS.

    Raises:
        HTTPException: 401 if no scheme accepts the token
    """
    try:
        payload: Dict[str, Any] | None = None
        scheme: TokenScheme = "supabase"

        if settings.JWT_SECRET:
            try:
                payload = _decode_local_token(token)
                scheme = "local"
            except ExpiredSignatureError:
                raise
            except InvalidTokenError:
                payload = None

        if payload is None:
            payload = _decode_supabase_token(token)

        user_id = payload.get("sub")
        if not user_id:
            logger.error("Token payload missing 'sub' claim")
            raise _unauthorized("unauthorized", "Invalid token: missing user ID")

        email = payload.get("email")
        logger.info(f"Token verified successfully for user_id={user_id} (scheme={scheme})")

        return AuthenticatedUser(
            user_id=str(user_id),
            access_token=token,
            scheme=scheme,
            email=str(email) if email else None,
        )

    except HTTPException:
        raise

    except ExpiredSignatureError:
        logger.warning("Token has expired")
        raise _unauthorized("token_expired", "Authentication token has expired")

    except PyJWKClientError as e:
        logger.error(f"JWKS client error: {str(e)}")
        raise _unauthorized("jwks_error", "Unable to verify token signature")

    except InvalidTokenError as e:
        logger.warning(f"Invalid token: {str(e)}")
        raise _unauthorized("invalid_token", "Invalid authentication token")

    except Exception as e:
        logger.error(f"Unexpected error during token verification: {str(e)}")
        raise _unauthorized("unauthorized", "Token verification failed")


async def get_authenticated_user(
    authorization: Annotated[str | None, Header()] = None
) -> AuthenticatedUser:
    """
    Verify the Authorization header and return the authenticated user.

    Raises:
        HTTPException: 401 if token is missing, invalid, or expired

    Usage:
        @router.post("/facilities")
        async def create(auth_user: AuthenticatedUser = Depends(get_authenticated_user)):
            ...
    """
    token = _extract_bearer_token(authorization)
    return verify_bearer_token(token)


async def get_user_db(
    auth_user: Annotated[AuthenticatedUser, Depends(get_authenticated_user)]
) -> Client:
    """Supabase client scoped to the authenticated caller."""
    if auth_user.scheme == "local":
        return get_service_role_client()
    return get_supabase_client(auth_user.access_token)


async def get_public_db() -> Client:
    """Supabase client for public (unauthenticated) reads."""
    return get_anon_client()
