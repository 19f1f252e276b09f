"""
Pydantic schemas for facility CRUD endpoints.

These models define the request/response contracts for facility management.
A facility is a registered business (restaurant, hotel, salon, ...) that
keywords are generated for.
"""

from typing import Dict, List, Optional, Union

from pydantic import BaseModel, Field, field_validator

from backend.utils.validators import FIELD_MAX_LENGTHS, is_valid_phone, is_valid_url


class _FacilityFields(BaseModel):
    """Optional facility attributes shared by create and update requests."""

    business_type: Optional[str] = Field(
        None,
        description="Free-text business category",
        max_length=FIELD_MAX_LENGTHS["business_type"],
        examples=["レストラン", "restaurant", "美容室"]
    )
    address: Optional[str] = Field(
        None,
        description="Postal address",
        max_length=FIELD_MAX_LENGTHS["address"],
        examples=["東京都渋谷区神南1-2-3"]
    )
    phone: Optional[str] = Field(
        None,
        description="Phone number (digits, '-', '+', spaces, parentheses)",
        max_length=FIELD_MAX_LENGTHS["phone"],
        examples=["03-1234-5678"]
    )
    business_hours: Optional[str] = Field(
        None,
        description="Business hours",
        max_length=FIELD_MAX_LENGTHS["business_hours"],
        examples=["11:00-22:00"]
    )
    closed_days: Optional[str] = Field(
        None,
        description="Regular closing days",
        max_length=FIELD_MAX_LENGTHS["closed_days"],
        examples=["月曜日"]
    )
    official_site_url: Optional[str] = Field(
        None,
        description="Official website URL",
        max_length=FIELD_MAX_LENGTHS["official_site_url"],
        examples=["https://example.com"]
    )
    gbp_url: Optional[str] = Field(
        None,
        description="Google Business Profile URL",
        max_length=FIELD_MAX_LENGTHS["gbp_url"],
        examples=["https://maps.google.com/?cid=123"]
    )
    additional_info: Optional[str] = Field(
        None,
        description="Free-text notes passed to keyword generation",
        max_length=FIELD_MAX_LENGTHS["additional_info"],
    )

    @field_validator("official_site_url", "gbp_url")
    @classmethod
    def validate_url(cls, v: Optional[str]) -> Optional[str]:
        """Empty strings clear the field; anything else must be an http(s) URL."""
        if v is None or v.strip() == "":
            return None
        v = v.strip()
        if not is_valid_url(v):
            raise ValueError("must be a well-formed http(s) URL")
        return v

    @field_validator("phone")
    @classmethod
    def validate_phone(cls, v: Optional[str]) -> Optional[str]:
        if v and not is_valid_phone(v):
            raise ValueError("phone number format is invalid")
        return v


class FacilityCreateRequest(_FacilityFields):
    """Request to register a new facility."""

    facility_name: str = Field(
        ...,
        description="Facility name (required)",
        min_length=1,
        max_length=FIELD_MAX_LENGTHS["facility_name"],
        examples=["Sample Diner"]
    )

    @field_validator("facility_name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("facility_name must not be blank")
        return v.strip()


class FacilityUpdateRequest(_FacilityFields):
    """
    Request to update a facility.

    Only supplied fields are written; omitted fields keep their value.
    """

    facility_name: Optional[str] = Field(
        None,
        description="Facility name",
        min_length=1,
        max_length=FIELD_MAX_LENGTHS["facility_name"],
    )

    @field_validator("facility_name")
    @classmethod
    def validate_name(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and not v.strip():
            raise ValueError("facility_name must not be blank")
        return v.strip() if v is not None else None


class Facility(BaseModel):
    """A facility row as stored in Supabase."""

    id: Union[int, str] = Field(..., description="Facility id (store-assigned)")
    facility_name: str = Field(..., description="Facility name")
    business_type: Optional[str] = None
    address: Optional[str] = None
    phone: Optional[str] = None
    business_hours: Optional[str] = None
    closed_days: Optional[str] = None
    official_site_url: Optional[str] = None
    gbp_url: Optional[str] = None
    additional_info: Optional[str] = None
    created_by: Optional[str] = None
    updated_by: Optional[str] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None


class FacilityListMeta(BaseModel):
    total: int = Field(..., description="Total rows matching the filters")
    limit: int
    offset: int


class FacilityResponse(BaseModel):
    success: bool = True
    data: Facility


class FacilityListResponse(BaseModel):
    success: bool = True
    data: List[Facility]
    meta: FacilityListMeta


class FacilityDeleteResponse(BaseModel):
    success: bool = True
    message: str = Field(..., examples=["Facility deleted"])


class BusinessTypesResponse(BaseModel):
    success: bool = True
    data: List[str]


class FacilityStats(BaseModel):
    """Facility counts; serialized with camelCase keys."""

    total_count: int = Field(..., serialization_alias="totalCount")
    business_type_counts: Dict[str, int] = Field(
        ...,
        serialization_alias="businessTypeCounts",
        description="Number of facilities per distinct business_type"
    )


class FacilityStatsResponse(BaseModel):
    success: bool = True
    data: FacilityStats
