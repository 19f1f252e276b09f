"""
Parsing of the model's keyword response.

The model is asked for a bare JSON object but in practice may wrap it in a
```json fence, prefix it with prose, or leave trailing commas. This module
extracts the first JSON object from the text and validates its shape.
"""

import json
import logging
import re
from typing import Any, Dict, List

from pydantic import BaseModel, ConfigDict
from pydantic import ValidationError as PydanticValidationError

from backend.utils.constants import KEYWORD_CATEGORIES, MAX_KEYWORD_LENGTH

logger = logging.getLogger(__name__)

_FENCE = re.compile(r"```(?:json|JSON)?\s*(.*?)```", re.DOTALL)
_TRAILING_COMMA = re.compile(r",\s*([}\]])")


class KeywordParseError(ValueError):
    """Model output could not be turned into a Keyword Set."""


class _KeywordResponse(BaseModel):
    model_config = ConfigDict(extra="ignore")

    menu_service: List[Any]
    environment_facility: List[Any]
    recommended_scene: List[Any]


def _candidates(text: str) -> List[str]:
    candidates = [match.strip() for match in _FENCE.findall(text)]
    candidates.append(text)
    return candidates


def _decode_first_object(text: str) -> Dict[str, Any]:
    decoder = json.JSONDecoder()
    start = text.find("{")

    while start != -1:
        for source in (text[start:], _TRAILING_COMMA.sub(r"\1", text[start:])):
            try:
                value, _ = decoder.raw_decode(source)
            except json.JSONDecodeError:
                continue
            if isinstance(value, dict):
                return value
        start = text.find("{", start + 1)

    raise KeywordParseError("No JSON object found in model response")


def extract_json_object(text: str) -> Dict[str, Any]:
    """
    Return the first JSON object found in text.

    Fenced code blocks are tried before the raw text.

    Raises:
        KeywordParseError: If the text holds no decodable JSON object
    """
    if not text or not text.strip():
        raise KeywordParseError("Empty model response")

    for candidate in _candidates(text):
        try:
            return _decode_first_object(candidate)
        except KeywordParseError:
            continue

    raise KeywordParseError("No JSON object found in model response")


def _clean(values: List[Any]) -> List[str]:
    cleaned = []
    for value in values:
        if not isinstance(value, str):
            continue
        keyword = value.strip()
        if keyword and len(keyword) <= MAX_KEYWORD_LENGTH:
            cleaned.append(keyword)
    return cleaned


def parse_keyword_response(text: str) -> Dict[str, List[str]]:
    """
    Parse model output into a Keyword Set.

    Each category must be present and be a list. Entries that are not
    strings, blank after trimming, or too long are dropped.

    Raises:
        KeywordParseError: On undecodable JSON, a missing or non-list
            category, or when no usable keyword remains
    """
    data = extract_json_object(text)

    try:
        response = _KeywordResponse.model_validate(data)
    except PydanticValidationError as e:
        raise KeywordParseError(f"Invalid keyword JSON shape: {e.error_count()} errors") from e

    keywords = {category: _clean(getattr(response, category)) for category in KEYWORD_CATEGORIES}

    dropped = sum(len(getattr(response, c)) - len(keywords[c]) for c in KEYWORD_CATEGORIES)
    if dropped:
        logger.debug(f"Dropped {dropped} unusable keyword entries from model response")

    if not any(keywords.values()):
        raise KeywordParseError("Model response contained no usable keywords")

    return keywords
