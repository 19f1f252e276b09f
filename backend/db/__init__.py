"""
Database access layer for the keyword suggestion backend.

All persistence goes through Supabase (PostgREST). Tables used:
- facilities: one row per registered facility
- keywords: one row per (facility_id, category, keyword)

DO NOT define table schemas, migrations, or RLS policies here.
"""

from .client import get_anon_client, get_service_role_client, get_supabase_client

__all__ = ["get_anon_client", "get_service_role_client", "get_supabase_client"]
