"""
Facility CRUD API endpoints.

Read endpoints are public; create/update/delete require a Bearer token.
Service errors (ValidationError, NotFoundError, UpstreamError) propagate to
the handlers registered in backend/main.py, which map them to 400/404/500.

Static paths (/business-types/list, /stats/summary) are declared before
/{facility_id} so they are not captured by it.
"""

import logging
from typing import Annotated, Optional

from fastapi import APIRouter, Depends, Path, Query, status
from supabase import Client

from backend.auth.dependencies import (
    AuthenticatedUser,
    get_authenticated_user,
    get_public_db,
    get_user_db,
)
from backend.schemas.facilities import (
    BusinessTypesResponse,
    Facility,
    FacilityCreateRequest,
    FacilityDeleteResponse,
    FacilityListMeta,
    FacilityListResponse,
    FacilityResponse,
    FacilityStats,
    FacilityStatsResponse,
    FacilityUpdateRequest,
)
from backend.services.facility_service import (
    create_facility,
    delete_facility,
    get_business_types,
    get_facility_by_id,
    get_facility_stats,
    list_facilities,
    update_facility,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/facilities", tags=["facilities"])

FacilityId = Annotated[str, Path(..., description="Facility id")]


@router.get(
    "",
    response_model=FacilityListResponse,
    status_code=status.HTTP_200_OK,
    summary="List facilities",
    description="""
    List registered facilities, newest first.

    Filters:
    - business_type: exact match
    - search: case-insensitive partial match on facility name or address
    """
)
async def list_facilities_endpoint(
    supabase_client: Annotated[Client, Depends(get_public_db)],
    limit: int = Query(100, ge=1, le=1000, description="Maximum number of facilities to return"),
    offset: int = Query(0, ge=0, description="Number of facilities to skip"),
    business_type: Optional[str] = Query(None, description="Filter by business type"),
    search: Optional[str] = Query(None, description="Search facility name and address"),
) -> FacilityListResponse:
    """List facilities with pagination and filters."""
    facilities, total = await list_facilities(
        supabase_client,
        limit=limit,
        offset=offset,
        business_type=business_type,
        search=search,
    )

    return FacilityListResponse(
        data=[Facility(**row) for row in facilities],
        meta=FacilityListMeta(total=total, limit=limit, offset=offset),
    )


@router.get(
    "/business-types/list",
    response_model=BusinessTypesResponse,
    summary="List distinct business types",
)
async def list_business_types(
    supabase_client: Annotated[Client, Depends(get_public_db)],
) -> BusinessTypesResponse:
    business_types = await get_business_types(supabase_client)
    return BusinessTypesResponse(data=business_types)


@router.get(
    "/stats/summary",
    response_model=FacilityStatsResponse,
    response_model_by_alias=True,
    summary="Facility statistics",
)
async def facility_stats(
    supabase_client: Annotated[Client, Depends(get_public_db)],
) -> FacilityStatsResponse:
    """Total facility count and count per business type."""
    stats = await get_facility_stats(supabase_client)
    return FacilityStatsResponse(data=FacilityStats(**stats))


@router.get(
    "/{facility_id}",
    response_model=FacilityResponse,
    summary="Get facility details",
)
async def get_facility(
    facility_id: FacilityId,
    supabase_client: Annotated[Client, Depends(get_public_db)],
) -> FacilityResponse:
    facility = await get_facility_by_id(supabase_client, facility_id)
    return FacilityResponse(data=Facility(**facility))


@router.post(
    "",
    response_model=FacilityResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Register a facility",
    description="""
    Register a new facility.

    Security:
    - Requires valid Authorization Bearer token
    - created_by / updated_by are taken from the token, never from the body
    """
)
async def create_facility_endpoint(
    request: FacilityCreateRequest,
    auth_user: Annotated[AuthenticatedUser, Depends(get_authenticated_user)],
    supabase_client: Annotated[Client, Depends(get_user_db)],
) -> FacilityResponse:
    """Create a facility for the authenticated user."""
    logger.info(f"Creating facility for user {auth_user.user_id}")

    facility = await create_facility(
        supabase_client,
        auth_user.user_id,
        request.model_dump(exclude_none=True),
    )

    return FacilityResponse(data=Facility(**facility))


@router.put(
    "/{facility_id}",
    response_model=FacilityResponse,
    summary="Update a facility",
    description="Update the supplied fields of a facility. Omitted fields are left unchanged.",
)
async def update_facility_endpoint(
    facility_id: FacilityId,
    request: FacilityUpdateRequest,
    auth_user: Annotated[AuthenticatedUser, Depends(get_authenticated_user)],
    supabase_client: Annotated[Client, Depends(get_user_db)],
) -> FacilityResponse:
    logger.info(f"Updating facility {facility_id} for user {auth_user.user_id}")

    facility = await update_facility(
        supabase_client,
        auth_user.user_id,
        facility_id,
        request.model_dump(exclude_unset=True),
    )

    return FacilityResponse(data=Facility(**facility))


@router.delete(
    "/{facility_id}",
    response_model=FacilityDeleteResponse,
    summary="Delete a facility",
    description="Delete a facility together with all of its keywords.",
)
async def delete_facility_endpoint(
    facility_id: FacilityId,
    auth_user: Annotated[AuthenticatedUser, Depends(get_authenticated_user)],
    supabase_client: Annotated[Client, Depends(get_user_db)],
) -> FacilityDeleteResponse:
    logger.info(f"Deleting facility {facility_id} for user {auth_user.user_id}")

    await delete_facility(supabase_client, facility_id)

    return FacilityDeleteResponse(message="Facility deleted")
