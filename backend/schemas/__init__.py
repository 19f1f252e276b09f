"""
Pydantic schemas for API request and response validation.

Responses use the {success, data[, meta]} envelope; errors use
{success: false, error, message} (see backend/main.py).
"""
