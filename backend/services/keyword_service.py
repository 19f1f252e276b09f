"""
Keyword persistence service.

Keywords are stored one row per keyword in the `keywords` table:
    (id, facility_id, category, keyword, generation_timestamp)

and are exposed as a Keyword Set with the three fixed categories from
backend/utils/constants.py.

RULES:
1. A Keyword Set returned by this module always has all three categories
2. Keywords are trimmed; blank entries are dropped; longer than
   MAX_KEYWORD_LENGTH is a ValidationError
3. A facility's keywords are replaced wholesale, never patched. The new rows
   are inserted before the old ones are pruned, so a failed insert keeps the
   previous set and readers never see an empty set in between.
"""

import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Mapping, cast

from supabase import Client

from backend.db.query import execute_query
from backend.utils.constants import KEYWORD_CATEGORIES, KEYWORDS_TABLE, MAX_KEYWORD_LENGTH
from backend.utils.errors import UpstreamError, ValidationError

logger = logging.getLogger(__name__)

KeywordSetDict = Dict[str, List[str]]


def empty_keyword_set() -> KeywordSetDict:
    return {category: [] for category in KEYWORD_CATEGORIES}


def normalize_keyword_set(data: Mapping[str, Any]) -> KeywordSetDict:
    """
    Clean a client-supplied Keyword Set.

    Missing categories become empty lists and unknown keys are ignored.

    Raises:
        ValidationError: If a category is not a list, an entry is not a
            string, or an entry is longer than MAX_KEYWORD_LENGTH
    """
    normalized = empty_keyword_set()

    for category in KEYWORD_CATEGORIES:
        values = data.get(category)
        if values is None:
            continue
        if not isinstance(values, list):
            raise ValidationError(f"'{category}' must be a list of strings")

        for value in values:
            if not isinstance(value, str):
                raise ValidationError(f"'{category}' must contain only strings")
            keyword = value.strip()
            if not keyword:
                continue
            if len(keyword) > MAX_KEYWORD_LENGTH:
                raise ValidationError(
                    f"Keywords must be at most {MAX_KEYWORD_LENGTH} characters "
                    f"(got {len(keyword)} in '{category}')"
                )
            normalized[category].append(keyword)

    return normalized


def _rows_to_keyword_set(rows: List[Dict[str, Any]]) -> KeywordSetDict:
    keyword_set = empty_keyword_set()
    for row in rows:
        category = row.get("category")
        if category in keyword_set and row.get("keyword"):
            keyword_set[category].append(row["keyword"])
    return keyword_set


async def get_keywords(
    supabase_client: Client,
    facility_id: str,
) -> KeywordSetDict:
    """
    Fetch the Keyword Set of a facility (empty categories if none saved).

    Keywords keep their insertion order within each category.
    """
    logger.debug(f"Fetching keywords for facility {facility_id}")

    result = execute_query(
        supabase_client.table(KEYWORDS_TABLE)
        .select("*")
        .eq("facility_id", facility_id)
        .order("id"),
        f"fetch keywords of facility {facility_id}",
    )

    rows = cast(List[Dict[str, Any]], result.data or [])
    logger.info(f"Found {len(rows)} keywords for facility {facility_id}")

    return _rows_to_keyword_set(rows)


async def replace_keywords(
    supabase_client: Client,
    facility_id: str,
    keywords: Mapping[str, Any],
) -> KeywordSetDict:
    """
    Replace all keywords of a facility.

    Args:
        supabase_client: Supabase client for the caller
        facility_id: Facility the keywords belong to (existence is the
            caller's responsibility)
        keywords: New Keyword Set; normalized before writing

    Returns:
        The normalized Keyword Set that was stored

    Raises:
        ValidationError: If the Keyword Set is malformed (nothing is written)
        UpstreamError: If the insert or prune fails
    """
    keyword_set = normalize_keyword_set(keywords)

    now = datetime.now(timezone.utc).isoformat()
    rows = [
        {
            "facility_id": facility_id,
            "category": category,
            "keyword": keyword,
            "generation_timestamp": now,
        }
        for category in KEYWORD_CATEGORIES
        for keyword in keyword_set[category]
    ]

    logger.info(f"Replacing keywords of facility {facility_id} with {len(rows)} rows")

    new_ids: List[Any] = []
    if rows:
        insert_result = execute_query(
            supabase_client.table(KEYWORDS_TABLE).insert(rows),
            f"insert keywords of facility {facility_id}",
        )
        inserted = cast(List[Dict[str, Any]], insert_result.data or [])
        if len(inserted) != len(rows):
            raise UpstreamError(
                f"Failed to save keywords: expected {len(rows)} rows, got {len(inserted)}"
            )
        new_ids = [row["id"] for row in inserted]

    prune = supabase_client.table(KEYWORDS_TABLE).delete().eq("facility_id", facility_id)
    if new_ids:
        prune = prune.not_.in_("id", new_ids)
    execute_query(prune, f"prune old keywords of facility {facility_id}")

    logger.info(f"Keywords of facility {facility_id} saved")

    return keyword_set


async def delete_keywords(
    supabase_client: Client,
    facility_id: str,
) -> int:
    """
    Delete every keyword of a facility.

    Returns:
        Number of rows deleted
    """
    result = execute_query(
        supabase_client.table(KEYWORDS_TABLE).delete().eq("facility_id", facility_id),
        f"delete keywords of facility {facility_id}",
    )
    deleted = len(result.data or [])
    logger.info(f"Deleted {deleted} keywords of facility {facility_id}")
    return deleted


async def get_keyword_stats(supabase_client: Client) -> Dict[str, Any]:
    """
    Keyword totals across all facilities.

    Returns:
        {"total_count": int, "category_counts": {category: count}}
    """
    category_counts = {}
    for category in KEYWORD_CATEGORIES:
        result = execute_query(
            supabase_client.table(KEYWORDS_TABLE)
            .select("id", count="exact")
            .eq("category", category),
            f"count {category} keywords",
        )
        category_counts[category] = result.count or 0

    return {
        "total_count": sum(category_counts.values()),
        "category_counts": category_counts,
    }
