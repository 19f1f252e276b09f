"""
Query execution helper.

Every Supabase query in the service layer goes through execute_query() so a
failure is always logged with context and surfaced as an UpstreamError,
never swallowed.
"""

import logging
from typing import Any

from postgrest.exceptions import APIError

from backend.utils.errors import UpstreamError

logger = logging.getLogger(__name__)


def execute_query(query: Any, context: str) -> Any:
    """
    Run a PostgREST query builder.

    Args:
        query: A Supabase query builder (anything with .execute())
        context: Short description for logs, e.g. "fetch facility 42"

    Returns:
        The Supabase APIResponse

    Raises:
        UpstreamError: If the query fails for any reason
    """
    try:
        return query.execute()
    except APIError as e:
        logger.error(f"Database error ({context}): {e.message}")
        raise UpstreamError(f"Database error while trying to {context}: {e.message}") from e
    except Exception as e:
        logger.error(f"Database request failed ({context}): {e}")
        raise UpstreamError(f"Database request failed while trying to {context}: {e}") from e
