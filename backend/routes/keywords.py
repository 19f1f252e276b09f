"""
Keyword API endpoints.

- GET    /keywords/stats/summary          public
- GET    /keywords/{facility_id}          public
- PUT    /keywords/{facility_id}          auth, full replacement
- POST   /keywords/generate/{facility_id} auth, AI generation + save
- DELETE /keywords/{facility_id}          auth
"""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, Path, Request, status
from supabase import Client

from backend.auth.dependencies import (
    AuthenticatedUser,
    get_authenticated_user,
    get_public_db,
    get_user_db,
)
from backend.schemas.keywords import (
    GenerationMeta,
    KeywordDeleteResponse,
    KeywordGenerateResponse,
    KeywordSet,
    KeywordSetResponse,
    KeywordSetUpdateRequest,
    KeywordStats,
    KeywordStatsResponse,
)
from backend.services.facility_service import get_facility_by_id
from backend.services.keyword_generation_service import KeywordGenerator
from backend.services.keyword_service import (
    delete_keywords,
    get_keyword_stats,
    get_keywords,
    replace_keywords,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/keywords", tags=["keywords"])

FacilityId = Annotated[str, Path(..., description="Facility id")]


def get_keyword_generator(request: Request) -> KeywordGenerator:
    """The workflow instance built at startup (see backend/main.py lifespan)."""
    return request.app.state.keyword_generator


@router.get(
    "/stats/summary",
    response_model=KeywordStatsResponse,
    response_model_by_alias=True,
    summary="Keyword statistics",
)
async def keyword_stats(
    supabase_client: Annotated[Client, Depends(get_public_db)],
) -> KeywordStatsResponse:
    """Total keyword count and count per category."""
    stats = await get_keyword_stats(supabase_client)
    return KeywordStatsResponse(data=KeywordStats(**stats))


@router.get(
    "/{facility_id}",
    response_model=KeywordSetResponse,
    summary="Get a facility's keywords",
)
async def get_facility_keywords(
    facility_id: FacilityId,
    supabase_client: Annotated[Client, Depends(get_public_db)],
) -> KeywordSetResponse:
    await get_facility_by_id(supabase_client, facility_id)
    keywords = await get_keywords(supabase_client, facility_id)
    return KeywordSetResponse(data=KeywordSet(**keywords))


@router.put(
    "/{facility_id}",
    response_model=KeywordSetResponse,
    summary="Replace a facility's keywords",
    description="""
    Replace all keywords of a facility with the supplied set.

    - Omitted categories are stored as empty
    - Keywords are trimmed; blank entries are dropped
    - A keyword longer than 100 characters is rejected (400) and nothing is written
    """
)
async def update_facility_keywords(
    facility_id: FacilityId,
    request: KeywordSetUpdateRequest,
    auth_user: Annotated[AuthenticatedUser, Depends(get_authenticated_user)],
    supabase_client: Annotated[Client, Depends(get_user_db)],
) -> KeywordSetResponse:
    logger.info(f"Replacing keywords of facility {facility_id} for user {auth_user.user_id}")

    await get_facility_by_id(supabase_client, facility_id)
    keywords = await replace_keywords(supabase_client, facility_id, request.model_dump())

    return KeywordSetResponse(data=KeywordSet(**keywords))


@router.post(
    "/generate/{facility_id}",
    response_model=KeywordGenerateResponse,
    status_code=status.HTTP_200_OK,
    summary="Generate keywords with AI",
    description="""
    Generate keywords for a facility and save them, replacing existing ones.

    Flow:
    1. Load the facility (404 if missing)
    2. Crawl its Google Business Profile and website when set
    3. Ask the model for keywords
    4. If any step from 3 fails, fall back to the static keyword table

    meta.source is "ai" or "fallback"; meta.error_category names the
    failure that caused a fallback.
    """
)
async def generate_facility_keywords(
    facility_id: FacilityId,
    auth_user: Annotated[AuthenticatedUser, Depends(get_authenticated_user)],
    supabase_client: Annotated[Client, Depends(get_user_db)],
    generator: Annotated[KeywordGenerator, Depends(get_keyword_generator)],
) -> KeywordGenerateResponse:
    logger.info(f"Keyword generation requested for facility {facility_id} by user {auth_user.user_id}")

    facility = await get_facility_by_id(supabase_client, facility_id)
    result = await generator.generate(facility)

    keywords = await replace_keywords(supabase_client, facility_id, result.keywords)

    logger.info(f"Keywords generated for facility {facility_id} (source={result.source})")

    return KeywordGenerateResponse(
        data=KeywordSet(**keywords),
        meta=GenerationMeta(source=result.source, error_category=result.error_category),
    )


@router.delete(
    "/{facility_id}",
    response_model=KeywordDeleteResponse,
    summary="Delete a facility's keywords",
)
async def delete_facility_keywords(
    facility_id: FacilityId,
    auth_user: Annotated[AuthenticatedUser, Depends(get_authenticated_user)],
    supabase_client: Annotated[Client, Depends(get_user_db)],
) -> KeywordDeleteResponse:
    logger.info(f"Deleting keywords of facility {facility_id} for user {auth_user.user_id}")

    deleted = await delete_keywords(supabase_client, facility_id)

    return KeywordDeleteResponse(message=f"Deleted {deleted} keywords")
