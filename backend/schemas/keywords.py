"""
Pydantic schemas for keyword endpoints.

A Keyword Set always carries the three fixed categories:
- menu_service: menu items and services
- environment_facility: environment, equipment and amenities
- recommended_scene: recommended usage scenes
"""

from typing import Annotated, Dict, List, Literal, Optional

from pydantic import BaseModel, Field, StringConstraints

from backend.utils.constants import MAX_KEYWORD_LENGTH

KeywordText = Annotated[
    str,
    StringConstraints(strip_whitespace=True, max_length=MAX_KEYWORD_LENGTH),
]

GenerationSource = Literal["ai", "fallback"]


class KeywordSet(BaseModel):
    """Keywords for one facility, grouped by category."""

    menu_service: List[str] = Field(default_factory=list, description="Menu / service keywords")
    environment_facility: List[str] = Field(
        default_factory=list,
        description="Environment / facility keywords"
    )
    recommended_scene: List[str] = Field(
        default_factory=list,
        description="Recommended usage scene keywords"
    )

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "menu_service": ["ランチセット", "テイクアウト"],
                    "environment_facility": ["個室あり", "Wi-Fi完備"],
                    "recommended_scene": ["家族での食事", "女子会"]
                }
            ]
        }
    }


class KeywordSetUpdateRequest(BaseModel):
    """
    Full replacement of a facility's keywords.

    Omitted categories are treated as empty lists. Each keyword is trimmed
    and must be at most 100 characters; blank entries are dropped.
    """

    menu_service: List[KeywordText] = Field(default_factory=list)
    environment_facility: List[KeywordText] = Field(default_factory=list)
    recommended_scene: List[KeywordText] = Field(default_factory=list)


class KeywordSetResponse(BaseModel):
    success: bool = True
    data: KeywordSet


class GenerationMeta(BaseModel):
    source: GenerationSource = Field(..., description="'ai' or 'fallback'")
    error_category: Optional[str] = Field(
        None,
        description="Classified failure that triggered the fallback, if any"
    )


class KeywordGenerateResponse(BaseModel):
    success: bool = True
    data: KeywordSet
    meta: GenerationMeta


class KeywordDeleteResponse(BaseModel):
    success: bool = True
    message: str


class KeywordStats(BaseModel):
    total_count: int = Field(..., serialization_alias="totalCount")
    category_counts: Dict[str, int] = Field(..., serialization_alias="categoryCounts")


class KeywordStatsResponse(BaseModel):
    success: bool = True
    data: KeywordStats
