"""
Supabase client factory.

Three kinds of clients are handed out:

1. Anonymous clients (publishable anon key) for public read endpoints.
2. User clients carrying the caller's Supabase access token, so Row Level
   Security evaluates auth.uid() against the real user.
3. Service-role clients, used ONLY for requests authenticated with a
   self-issued token (Supabase cannot attach those to an RLS session).

Clients are created per request; none is cached at module level.
"""

import logging

from backend.config import settings
from supabase import Client, create_client

logger = logging.getLogger(__name__)


def get_anon_client() -> Client:
    """
    Create a Supabase client with the anon key (RLS applies as anonymous).

    Returns:
        Supabase client for unauthenticated reads.
    """
    return create_client(
        supabase_url=settings.SUPABASE_URL,
        supabase_key=settings.SUPABASE_ANON_KEY
    )


def get_supabase_client(access_token: str) -> Client:
    """
    Create an authenticated Supabase client for a specific user.

    Args:
        access_token: The user's JWT access token from Supabase Auth.
                     This is the token verified in backend/auth/dependencies.py.

    Returns:
        An authenticated Supabase client that enforces RLS.

    Example:
        >>> client = get_supabase_client(auth_user.access_token)
        >>> result = client.table("facilities").select("*").execute()
    """
    client: Client = create_client(
        supabase_url=settings.SUPABASE_URL,
        supabase_key=settings.SUPABASE_ANON_KEY
    )

    # The token contains the user_id in the 'sub' claim
    client.auth.set_session(access_token, access_token)

    logger.debug("Created authenticated Supabase client with user token (RLS enforced)")

    return client


def get_service_role_client() -> Client:
    """
    Create a Supabase client with service_role privileges.

    WARNING: This bypasses RLS. It is only used for callers whose identity
    was established by a self-issued token (see AuthenticatedUser.scheme).

    Raises:
        RuntimeError: If SUPABASE_SERVICE_ROLE_KEY is not configured.
    """
    if not settings.SUPABASE_SERVICE_ROLE_KEY:
        raise RuntimeError(
            "SUPABASE_SERVICE_ROLE_KEY is not configured; "
            "self-issued tokens cannot be used for database access."
        )

    logger.debug("Created service-role Supabase client")

    return create_client(
        supabase_url=settings.SUPABASE_URL,
        supabase_key=settings.SUPABASE_SERVICE_ROLE_KEY
    )
