"""
Pydantic schemas for export endpoints.

CSV and JSON exports are file attachments and have no response model; only
the statistics summary is a regular JSON envelope.
"""

from pydantic import BaseModel

from backend.schemas.facilities import FacilityStats
from backend.schemas.keywords import KeywordStats


class ExportStats(BaseModel):
    facilities: FacilityStats
    keywords: KeywordStats


class ExportStatsResponse(BaseModel):
    success: bool = True
    data: ExportStats
