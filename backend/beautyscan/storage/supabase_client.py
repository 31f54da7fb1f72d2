"""
Lazily created Supabase client shared by the stores.
"""
import logging
from typing import Optional

from supabase import create_client, Client

from beautyscan.config import get_supabase_key, get_supabase_url

logger = logging.getLogger(__name__)

_client: Optional[Client] = None


def get_supabase_client() -> Client:
    global _client
    if _client is None:
        url = get_supabase_url()
        key = get_supabase_key()
        if not url or not key:
            raise RuntimeError("Missing SUPABASE_URL or SUPABASE_SERVICE_ROLE_KEY")
        _client = create_client(url, key)
        logger.info("SUPABASE client created url=%s", url)
    return _client


def reset_supabase_client() -> None:
    """Drop the cached client (e.g. for tests)."""
    global _client
    _client = None
