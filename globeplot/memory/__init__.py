"""
Storage layer for refresh timestamps.

The refresh store is the only state this service keeps; events are
owned by the caller.
"""

import logging
from typing import Optional

from globeplot.memory.refresh_store import InMemoryRefreshStore, RefreshStore, SupabaseRefreshStore
from globeplot.utils.config import settings

logger = logging.getLogger(__name__)

# Global store instance
_refresh_store: Optional[RefreshStore] = None


def get_refresh_store() -> RefreshStore:
    """
    Return the shared refresh store, creating it on first use.

    Uses Supabase when it is configured, otherwise a process-local store
    (timestamps then only survive as long as the process).
    """
    global _refresh_store

    if _refresh_store is None:
        if settings.supabase_url and settings.supabase_key:
            _refresh_store = SupabaseRefreshStore()
            logger.info("Using Supabase refresh store")
        else:
            _refresh_store = InMemoryRefreshStore()
            logger.warning("Supabase not configured, refresh cooldowns are process-local")
    return _refresh_store


def set_refresh_store(store: Optional[RefreshStore]) -> None:
    """Replace the shared store (None resets to lazy creation)."""
    global _refresh_store
    _refresh_store = store


__all__ = [
    "RefreshStore",
    "InMemoryRefreshStore",
    "SupabaseRefreshStore",
    "get_refresh_store",
    "set_refresh_store",
]
