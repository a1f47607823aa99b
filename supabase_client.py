# 📦 supabase_client.py

from functools import lru_cache

import structlog
from supabase import Client, create_client

from settings import get_settings

log = structlog.get_logger()


class SupabaseNotConfigured(RuntimeError):
    """Raised when the Supabase URL or keys are missing."""


@lru_cache
def get_service_client() -> Client:
    """Service-role client used for profile reads (bypasses row-level security)."""
    settings = get_settings()
    if not settings.supabase_url or not settings.supabase_service_role_key:
        raise SupabaseNotConfigured("Supabase service role not configured")
    log.info("Creating Supabase service client", url=settings.supabase_url)
    return create_client(settings.supabase_url, settings.supabase_service_role_key)


@lru_cache
def get_anon_client() -> Client:
    """Anon client used to validate end-user access tokens."""
    settings = get_settings()
    if not settings.supabase_url or not settings.supabase_anon_key:
        raise SupabaseNotConfigured("Supabase not configured")
    return create_client(settings.supabase_url, settings.supabase_anon_key)
