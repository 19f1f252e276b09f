"""
Keyword Generation Prompt Templates

Contains the system prompt and user prompt builder for keyword generation.

Architecture:
- Pattern: single LLM call, JSON requested in the prompt and parsed from text
- Model: Gemini (GEMINI_MODEL)
- Input: facility attributes + optional crawl text (website, business profile)
- Output: JSON object with menu_service / environment_facility / recommended_scene
"""

from typing import Any, Mapping, Optional

from backend.agents.keywords.types import CrawlResult

# Crawled page content is cut to this many characters per source
MAX_CRAWL_CONTENT_CHARS = 3000

MIN_KEYWORDS_PER_CATEGORY = 10
MAX_KEYWORDS_PER_CATEGORY = 15

KEYWORD_SYSTEM_PROMPT = """You are an SEO/MEO keyword specialist for local businesses.

<role>
Given information about one facility (restaurant, hotel, salon, clinic, shop...),
you propose search keywords that real customers would type into Google Search
and Google Maps when looking for a place like it.
</role>

<rules>
- Base every keyword on the facility information and crawled content provided.
  Never invent services, menu items or amenities that are not supported by it,
  except generic ones that are typical for the business type.
- Prefer concrete, natural search phrases over single generic words.
- Include local intent (area names) where the address supports it.
- Include points that differentiate the facility from competitors.
</rules>

<output_format>
Return ONLY a JSON object. No markdown code blocks, no explanatory text.
</output_format>
"""


def _section(title: str, crawl: Optional[CrawlResult]) -> str:
    if crawl is None or crawl.is_empty():
        return ""

    content = crawl.content[:MAX_CRAWL_CONTENT_CHARS]
    return (
        f"<{title}>\n"
        f"Title: {crawl.title}\n"
        f"Description: {crawl.description}\n"
        f"Content: {content}\n"
        f"</{title}>\n"
    )


def _value(facility: Mapping[str, Any], key: str) -> str:
    value = facility.get(key)
    return str(value).strip() if value else ""


def build_keyword_user_prompt(
    facility: Mapping[str, Any],
    website: Optional[CrawlResult] = None,
    business_profile: Optional[CrawlResult] = None,
    language: str = "Japanese",
) -> str:
    """
    Build the user prompt for keyword generation.

    Args:
        facility: Facility row (only known attribute keys are read)
        website: Crawl result of the official website, if any
        business_profile: Crawl result of the Google Business Profile, if any
        language: Language the keywords must be written in

    Returns:
        Formatted user prompt string
    """
    facility_block = f"""<facility>
Name: {_value(facility, "facility_name")}
Business type: {_value(facility, "business_type")}
Address: {_value(facility, "address")}
Phone: {_value(facility, "phone")}
Business hours: {_value(facility, "business_hours")}
Closed days: {_value(facility, "closed_days")}
Official website: {_value(facility, "official_site_url")}
Google Business Profile: {_value(facility, "gbp_url")}
Additional info: {_value(facility, "additional_info")}
</facility>
"""

    crawl_block = _section("business_profile", business_profile) + _section("website", website)
    if crawl_block:
        crawl_block = f"<crawled_content>\n{crawl_block}</crawled_content>\n"

    count = f"{MIN_KEYWORDS_PER_CATEGORY}-{MAX_KEYWORDS_PER_CATEGORY}"

    return f"""Generate SEO/MEO keywords for the following facility.

{facility_block}
{crawl_block}
<task>
Return keywords in three categories, {count} keywords each:
1. menu_service: menu items, services and plans offered
2. environment_facility: environment, equipment, amenities and access
3. recommended_scene: recommended usage scenes and occasions

Write every keyword in {language}. Keep each keyword short (under 30 characters).
</task>

<output_schema>
{{
  "menu_service": ["keyword", "..."],
  "environment_facility": ["keyword", "..."],
  "recommended_scene": ["keyword", "..."]
}}
</output_schema>
"""
