"""
Keyword export builders (CSV and JSON).

Both builders are pure: the route fetches the facility and its keywords and
only then builds the payload, so a failed fetch never yields a partial file.
"""

import csv
import io
from typing import Any, Dict, List, Mapping

from backend.utils.constants import CATEGORY_LABELS, KEYWORD_CATEGORIES

CSV_HEADER = ["施設名", "業種", "住所", "カテゴリ", "キーワード"]

# Facility fields included in the JSON export
JSON_EXPORT_FIELDS = (
    "id",
    "facility_name",
    "business_type",
    "address",
    "phone",
    "business_hours",
    "closed_days",
    "official_site_url",
    "gbp_url",
    "additional_info",
)


def build_csv(facility: Mapping[str, Any], keywords: Mapping[str, List[str]]) -> str:
    """
    One header row, then one row per keyword.

    Rows are grouped by category in the fixed category order and carry the
    category's display label.
    """
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerow(CSV_HEADER)

    name = facility.get("facility_name") or ""
    business_type = facility.get("business_type") or ""
    address = facility.get("address") or ""

    for category in KEYWORD_CATEGORIES:
        for keyword in keywords.get(category, []):
            writer.writerow([name, business_type, address, CATEGORY_LABELS[category], keyword])

    return buffer.getvalue()


def build_json_export(
    facility: Mapping[str, Any],
    keywords: Mapping[str, List[str]],
) -> Dict[str, Any]:
    return {
        "facility": {field: facility.get(field) for field in JSON_EXPORT_FIELDS},
        "keywords": {category: list(keywords.get(category, [])) for category in KEYWORD_CATEGORIES},
    }


def export_filename(facility_id: Any, extension: str) -> str:
    return f"keywords_{facility_id}.{extension}"
