"""
Auth API endpoints.

- POST /auth/login - Sign in with Supabase Auth email/password
- GET  /auth/me    - Identity of the bearer token's user
"""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends
from supabase import Client

from backend.auth.auth import create_access_token, sign_in_with_password
from backend.auth.dependencies import AuthenticatedUser, get_authenticated_user, get_public_db
from backend.config import settings
from backend.schemas.auth import AuthMe, AuthMeResponse, LoginData, LoginRequest, LoginResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post(
    "/login",
    response_model=LoginResponse,
    summary="Sign in",
    description="""
    Sign in with a Supabase Auth email and password.

    Returns the Supabase access token. When JWT_SECRET is configured, a
    self-issued token (local_token) is returned as well; both are accepted
    as Bearer tokens by this API.
    """
)
async def login(
    request: LoginRequest,
    supabase_client: Annotated[Client, Depends(get_public_db)],
) -> LoginResponse:
    session = sign_in_with_password(supabase_client, request.email, request.password)

    local_token = None
    if settings.JWT_SECRET:
        local_token = create_access_token(session["user_id"], email=session["email"])

    return LoginResponse(
        data=LoginData(
            user_id=session["user_id"],
            email=session["email"],
            access_token=session["access_token"],
            local_token=local_token,
        )
    )


@router.get(
    "/me",
    response_model=AuthMeResponse,
    summary="Get authenticated user identity",
)
async def get_me(
    auth_user: Annotated[AuthenticatedUser, Depends(get_authenticated_user)],
) -> AuthMeResponse:
    """Return the user id, email and token scheme of the caller."""
    logger.debug(f"auth/me for user_id={auth_user.user_id}")

    return AuthMeResponse(
        data=AuthMe(
            user_id=auth_user.user_id,
            email=auth_user.email,
            scheme=auth_user.scheme,
        )
    )
