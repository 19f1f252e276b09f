"""
Field-level validation rules for facility records.

Shared by the Pydantic request schemas and the facility service so that a
facility written through either path obeys the same limits.
"""

import re
from typing import Any, Dict, Mapping
from urllib.parse import urlparse

from backend.utils.errors import ValidationError

# Maximum lengths (characters) per facility field
FIELD_MAX_LENGTHS: Dict[str, int] = {
    "facility_name": 100,
    "business_type": 50,
    "address": 200,
    "phone": 20,
    "business_hours": 200,
    "closed_days": 100,
    "official_site_url": 255,
    "gbp_url": 255,
    "additional_info": 1000,
}

FIELD_LABELS: Dict[str, str] = {
    "facility_name": "Facility name",
    "business_type": "Business type",
    "address": "Address",
    "phone": "Phone number",
    "business_hours": "Business hours",
    "closed_days": "Closed days",
    "official_site_url": "Official site URL",
    "gbp_url": "Business profile URL",
    "additional_info": "Additional info",
}

URL_FIELDS = ("official_site_url", "gbp_url")

_PHONE_PATTERN = re.compile(r"^[0-9\-+\s()]*$")


def is_valid_url(value: str) -> bool:
    """True for absolute http(s) URLs with a host."""
    try:
        parsed = urlparse(value)
    except ValueError:
        return False
    return parsed.scheme in ("http", "https") and bool(parsed.netloc)


def is_valid_phone(value: str) -> bool:
    return bool(_PHONE_PATTERN.match(value))


def validate_facility_data(data: Mapping[str, Any], *, partial: bool = False) -> None:
    """
    Check facility fields against the domain rules.

    Args:
        data: Facility fields (create payload, or the supplied subset on update)
        partial: When True, facility_name is only checked if present

    Raises:
        ValidationError: On the first rule that fails
    """
    if not partial or "facility_name" in data:
        name = data.get("facility_name")
        if not isinstance(name, str) or not name.strip():
            raise ValidationError("Facility name is required")

    for field, max_length in FIELD_MAX_LENGTHS.items():
        value = data.get(field)
        if value is None:
            continue
        if not isinstance(value, str):
            raise ValidationError(f"{FIELD_LABELS[field]} must be a string")
        if len(value) > max_length:
            raise ValidationError(
                f"{FIELD_LABELS[field]} must be at most {max_length} characters"
            )

    phone = data.get("phone")
    if phone and not is_valid_phone(phone):
        raise ValidationError("Phone number format is invalid")

    for field in URL_FIELDS:
        value = data.get(field)
        if value and not is_valid_url(value):
            raise ValidationError(f"{FIELD_LABELS[field]} is not a valid URL")
