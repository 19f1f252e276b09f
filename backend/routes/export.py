"""
Keyword export endpoints.

- GET /export/csv/{facility_id}   public, CSV attachment
- GET /export/json/{facility_id}  public, JSON attachment
- GET /export/stats               auth, facility and keyword totals

The facility and its keywords are fetched before any output is built, so a
missing facility or a database failure returns the JSON error envelope
instead of a partial file.
"""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, Path
from fastapi.responses import JSONResponse, Response
from supabase import Client

from backend.auth.dependencies import (
    AuthenticatedUser,
    get_authenticated_user,
    get_public_db,
    get_user_db,
)
from backend.schemas.export import ExportStats, ExportStatsResponse
from backend.schemas.facilities import FacilityStats
from backend.schemas.keywords import KeywordStats
from backend.services.export_service import build_csv, build_json_export, export_filename
from backend.services.facility_service import get_facility_by_id, get_facility_stats
from backend.services.keyword_service import get_keyword_stats, get_keywords

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/export", tags=["export"])

FacilityId = Annotated[str, Path(..., description="Facility id")]


def _attachment(filename: str) -> dict:
    return {"Content-Disposition": f'attachment; filename="{filename}"'}


@router.get(
    "/csv/{facility_id}",
    summary="Export keywords as CSV",
    response_class=Response,
    responses={200: {"content": {"text/csv": {}}}},
)
async def export_csv(
    facility_id: FacilityId,
    supabase_client: Annotated[Client, Depends(get_public_db)],
) -> Response:
    """CSV with header 施設名,業種,住所,カテゴリ,キーワード and one row per keyword."""
    facility = await get_facility_by_id(supabase_client, facility_id)
    keywords = await get_keywords(supabase_client, facility_id)

    content = build_csv(facility, keywords)
    logger.info(f"Exported keywords of facility {facility_id} as CSV")

    return Response(
        content=content,
        media_type="text/csv; charset=utf-8",
        headers=_attachment(export_filename(facility_id, "csv")),
    )


@router.get(
    "/json/{facility_id}",
    summary="Export keywords as JSON",
)
async def export_json(
    facility_id: FacilityId,
    supabase_client: Annotated[Client, Depends(get_public_db)],
) -> JSONResponse:
    facility = await get_facility_by_id(supabase_client, facility_id)
    keywords = await get_keywords(supabase_client, facility_id)

    logger.info(f"Exported keywords of facility {facility_id} as JSON")

    return JSONResponse(
        content=build_json_export(facility, keywords),
        headers=_attachment(export_filename(facility_id, "json")),
    )


@router.get(
    "/stats",
    response_model=ExportStatsResponse,
    response_model_by_alias=True,
    summary="Facility and keyword statistics",
)
async def export_stats(
    auth_user: Annotated[AuthenticatedUser, Depends(get_authenticated_user)],
    supabase_client: Annotated[Client, Depends(get_user_db)],
) -> ExportStatsResponse:
    facility_stats = await get_facility_stats(supabase_client)
    keyword_stats = await get_keyword_stats(supabase_client)

    logger.info(f"Export statistics fetched by user {auth_user.user_id}")

    return ExportStatsResponse(
        data=ExportStats(
            facilities=FacilityStats(**facility_stats),
            keywords=KeywordStats(**keyword_stats),
        )
    )
