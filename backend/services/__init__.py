"""
Service layer for the keyword suggestion backend.

- facility_service / keyword_service: Supabase persistence
- keyword_generation_service: crawl -> prompt -> Gemini -> parse -> fallback
- crawl_client / text_generation_client: vendor API clients
- error_classifier: failure categories and retry with backoff
- export_service: CSV / JSON export payloads

Services act as the glue between routes (HTTP layer) and agents/database.
"""

from .export_service import build_csv, build_json_export
from .facility_service import (
    create_facility,
    delete_facility,
    get_business_types,
    get_facility_by_id,
    get_facility_stats,
    list_facilities,
    update_facility,
)
from .keyword_generation_service import KeywordGenerator, build_keyword_generator
from .keyword_service import (
    delete_keywords,
    get_keyword_stats,
    get_keywords,
    normalize_keyword_set,
    replace_keywords,
)

__all__ = [
    "KeywordGenerator",
    "build_csv",
    "build_json_export",
    "build_keyword_generator",
    "create_facility",
    "delete_facility",
    "delete_keywords",
    "get_business_types",
    "get_facility_by_id",
    "get_facility_stats",
    "get_keyword_stats",
    "get_keywords",
    "list_facilities",
    "normalize_keyword_set",
    "replace_keywords",
    "update_facility",
]
