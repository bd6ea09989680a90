"""
Table Companion - Supabase Client

Thread-safe singleton factory for the Supabase client, plus a retry helper
for transient connection drops.
"""

import logging
import time
from functools import lru_cache
from typing import Any, Callable, TypeVar

from httpx import RemoteProtocolError
from supabase import Client, create_client

from src.config.settings import get_settings

logger = logging.getLogger(__name__)

R = TypeVar("R")

RETRY_DELAY = 0.3


@lru_cache(maxsize=1)
def get_supabase_client() -> Client:
    """Create and cache a Supabase client instance."""
    settings = get_settings()
    return create_client(settings.supabase_url, settings.supabase_anon_key)


def with_retry(fn: Callable[..., R], *args: Any, retries: int = 2, **kwargs: Any) -> R:
    """Call *fn* with simple retry on transient connection errors.

    The cached client is cleared between attempts so the next manager
    created gets a fresh connection.
    """
    for attempt in range(retries + 1):
        try:
            return fn(*args, **kwargs)
        except (RemoteProtocolError, ConnectionError, OSError) as exc:
            if attempt == retries:
                raise
            logger.warning(
                "Transient database error (%s), retry %d/%d",
                type(exc).__name__, attempt + 1, retries,
            )
            get_supabase_client.cache_clear()
            time.sleep(RETRY_DELAY)
    raise AssertionError("unreachable")
