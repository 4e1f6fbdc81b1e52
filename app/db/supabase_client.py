"""
Shared Supabase client for the documents tables and the storage bucket.

Server routes and the CLI need to read and write every row, so the service
role key is used when configured (it bypasses RLS); the anon key is the
fallback. The client is created lazily, once per process.
"""

import logging
import threading

from supabase import create_client, Client

from app.config import Settings, get_settings

logger = logging.getLogger(__name__)

_client: Client | None = None
_lock = threading.Lock()


def _build_client(settings: Settings) -> Client:
    if settings.supabase_service_role_key:
        key, role = settings.supabase_service_role_key, "service_role"
    else:
        key, role = settings.supabase_key, "anon"

    try:
        client = create_client(settings.supabase_url, key)
    except Exception as e:
        raise ValueError(f"Failed to create Supabase client: {str(e)}") from e

    logger.info(f"Supabase client initialized with {role} key")
    return client


def get_supabase_client() -> Client:
    """
    Return the process-wide Supabase client, creating it on first use.

    Raises:
        ValueError: If settings are invalid or the client cannot be created
    """
    global _client
    if _client is None:
        with _lock:
            if _client is None:
                _client = _build_client(get_settings())
    return _client


def reset_supabase_client() -> None:
    """Drop the cached client so the next call re-reads settings."""
    global _client
    with _lock:
        _client = None
