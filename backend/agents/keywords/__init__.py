"""
Keyword generation agent.

Prompt construction, response parsing and the static fallback table used
by backend/services/keyword_generation_service.py.
"""

from backend.agents.keywords.fallback import generate_fallback_keywords
from backend.agents.keywords.parser import (
    KeywordParseError,
    extract_json_object,
    parse_keyword_response,
)
from backend.agents.keywords.prompts import KEYWORD_SYSTEM_PROMPT, build_keyword_user_prompt
from backend.agents.keywords.types import CrawlResult, GenerationResult

__all__ = [
    "CrawlResult",
    "GenerationResult",
    "KEYWORD_SYSTEM_PROMPT",
    "KeywordParseError",
    "build_keyword_user_prompt",
    "extract_json_object",
    "generate_fallback_keywords",
    "parse_keyword_response",
]
