"""
Facility persistence service.

CRUD and reporting queries for the `facilities` table.

RULES:
1. facility_name is required; URLs must be well-formed (backend/utils/validators.py)
2. Update writes only the supplied fields and restamps updated_by / updated_at
3. Delete removes the facility's keyword rows first, then the facility row
4. Query failures are logged and re-raised (UpstreamError); a missing row
   is a NotFoundError
"""

import logging
from collections import Counter
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Tuple, cast

from supabase import Client

from backend.db.query import execute_query
from backend.utils.constants import FACILITIES_TABLE, KEYWORDS_TABLE
from backend.utils.errors import NotFoundError, UpstreamError
from backend.utils.validators import validate_facility_data

logger = logging.getLogger(__name__)

FACILITY_NOT_FOUND = "Facility not found"

# Columns a client may write; audit columns are set by the service
WRITABLE_FIELDS = (
    "facility_name",
    "business_type",
    "address",
    "phone",
    "business_hours",
    "closed_days",
    "official_site_url",
    "gbp_url",
    "additional_info",
)


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def _writable(data: Dict[str, Any]) -> Dict[str, Any]:
    return {key: value for key, value in data.items() if key in WRITABLE_FIELDS}


def escape_like(term: str) -> str:
    """Escape LIKE metacharacters so the term matches literally."""
    return term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def _search_filter(term: str) -> str:
    """
    Build the PostgREST or= filter for a contains match on name and address.

    Values are double-quoted so commas and parentheses in the term do not
    break the filter syntax.
    """
    pattern = f"%{escape_like(term)}%"
    quoted = '"' + pattern.replace("\\", "\\\\").replace('"', '\\"') + '"'
    return f"facility_name.ilike.{quoted},address.ilike.{quoted}"


async def create_facility(
    supabase_client: Client,
    user_id: str,
    facility_data: Dict[str, Any],
) -> Dict[str, Any]:
    """
    Create a new facility.

    Args:
        supabase_client: Supabase client for the caller
        user_id: Authenticated user id (recorded as created_by / updated_by)
        facility_data: Facility fields

    Returns:
        The created facility row

    Raises:
        ValidationError: If the data breaks a facility rule (nothing is written)
        UpstreamError: If the insert fails
    """
    validate_facility_data(facility_data)

    now = _now_iso()
    row = {
        **_writable(facility_data),
        "facility_name": facility_data["facility_name"].strip(),
        "created_by": user_id,
        "updated_by": user_id,
        "created_at": now,
        "updated_at": now,
    }

    logger.info(f"Creating facility '{row['facility_name']}' for user {user_id}")

    result = execute_query(
        supabase_client.table(FACILITIES_TABLE).insert(row),
        "create facility",
    )

    if not result.data:
        raise UpstreamError("Failed to create facility: no data returned")

    created = cast(Dict[str, Any], result.data[0])
    logger.info(f"Facility created: {created.get('id')}")

    return created


async def get_facility_by_id(
    supabase_client: Client,
    facility_id: str,
) -> Dict[str, Any]:
    """
    Fetch a single facility.

    Raises:
        NotFoundError: If no facility has this id
    """
    logger.debug(f"Fetching facility {facility_id}")

    result = execute_query(
        supabase_client.table(FACILITIES_TABLE).select("*").eq("id", facility_id),
        f"fetch facility {facility_id}",
    )

    if not result.data:
        logger.warning(f"Facility {facility_id} not found")
        raise NotFoundError(FACILITY_NOT_FOUND)

    return cast(Dict[str, Any], result.data[0])


async def update_facility(
    supabase_client: Client,
    user_id: str,
    facility_id: str,
    facility_data: Dict[str, Any],
) -> Dict[str, Any]:
    """
    Update the supplied fields of a facility.

    Args:
        facility_data: Only the fields to change (absent keys are untouched)

    Returns:
        The updated facility row

    Raises:
        ValidationError: If a supplied field breaks a facility rule
        NotFoundError: If no facility has this id
    """
    validate_facility_data(facility_data, partial=True)

    changes = _writable(facility_data)
    if "facility_name" in changes:
        changes["facility_name"] = changes["facility_name"].strip()
    changes["updated_by"] = user_id
    changes["updated_at"] = _now_iso()

    logger.info(f"Updating facility {facility_id}: fields={sorted(changes)}")

    result = execute_query(
        supabase_client.table(FACILITIES_TABLE).update(changes).eq("id", facility_id),
        f"update facility {facility_id}",
    )

    if not result.data:
        logger.warning(f"Facility {facility_id} not found for update")
        raise NotFoundError(FACILITY_NOT_FOUND)

    return cast(Dict[str, Any], result.data[0])


async def delete_facility(
    supabase_client: Client,
    facility_id: str,
) -> None:
    """
    Delete a facility and all of its keywords.

    Keyword rows are deleted first, then the facility row. The two deletes
    are separate requests.

    Raises:
        NotFoundError: If no facility has this id
    """
    await get_facility_by_id(supabase_client, facility_id)

    execute_query(
        supabase_client.table(KEYWORDS_TABLE).delete().eq("facility_id", facility_id),
        f"delete keywords of facility {facility_id}",
    )
    logger.info(f"Deleted keywords of facility {facility_id}")

    execute_query(
        supabase_client.table(FACILITIES_TABLE).delete().eq("id", facility_id),
        f"delete facility {facility_id}",
    )
    logger.info(f"Facility deleted: {facility_id}")


async def list_facilities(
    supabase_client: Client,
    limit: int = 100,
    offset: int = 0,
    business_type: Optional[str] = None,
    search: Optional[str] = None,
) -> Tuple[List[Dict[str, Any]], int]:
    """
    List facilities, newest first.

    Args:
        limit: Page size
        offset: Rows to skip
        business_type: Exact match filter
        search: Case-insensitive contains match over name and address

    Returns:
        (rows for this page, total rows matching the filters)
    """
    logger.debug(
        f"Listing facilities (limit={limit}, offset={offset}, "
        f"business_type={business_type!r}, search={search!r})"
    )

    query = supabase_client.table(FACILITIES_TABLE).select("*", count="exact")

    if business_type:
        query = query.eq("business_type", business_type)

    if search and search.strip():
        query = query.or_(_search_filter(search.strip()))

    query = query.order("created_at", desc=True).range(offset, offset + limit - 1)

    result = execute_query(query, "list facilities")

    facilities = cast(List[Dict[str, Any]], result.data or [])
    total = result.count if result.count is not None else len(facilities)

    logger.info(f"Listed {len(facilities)} facilities (total={total})")

    return facilities, total


async def _fetch_business_types(supabase_client: Client) -> List[str]:
    result = execute_query(
        supabase_client.table(FACILITIES_TABLE)
        .select("business_type")
        .not_.is_("business_type", "null"),
        "fetch business types",
    )
    rows = cast(List[Dict[str, Any]], result.data or [])
    return [row["business_type"] for row in rows if row.get("business_type")]


async def get_business_types(supabase_client: Client) -> List[str]:
    """Distinct non-empty business types, sorted."""
    business_types = sorted(set(await _fetch_business_types(supabase_client)))
    logger.info(f"Found {len(business_types)} business types")
    return business_types


async def get_facility_stats(supabase_client: Client) -> Dict[str, Any]:
    """
    Facility totals.

    The per-type breakdown is counted in memory from all non-null
    business_type values.

    Returns:
        {"total_count": int, "business_type_counts": {type: count}}
    """
    total_result = execute_query(
        supabase_client.table(FACILITIES_TABLE).select("id", count="exact"),
        "count facilities",
    )
    total = total_result.count if total_result.count is not None else len(total_result.data or [])

    counts = Counter(await _fetch_business_types(supabase_client))

    return {
        "total_count": total,
        "business_type_counts": dict(counts),
    }
