"""Per-user last-refresh timestamp stores."""

import logging
import threading
from typing import Any, Dict, Optional, Protocol

from supabase import create_client, Client

from globeplot.utils.config import settings
from globeplot.utils.exceptions import ConfigurationError, StoreError, TransientError
from globeplot.utils.retry import retry_with_exponential_backoff

logger = logging.getLogger(__name__)


class RefreshStore(Protocol):
    """Where the last coordinate refresh per user is remembered."""

    def get(self, user_id: str) -> Optional[float]:
        """Epoch seconds of the user's last refresh, or None."""
        ...

    def set(self, user_id: str, timestamp: float) -> None:
        """Record a refresh; the last writer wins."""
        ...


class InMemoryRefreshStore:
    """Process-local store, used in development and tests."""

    def __init__(self):
        self._timestamps: Dict[str, float] = {}
        self._lock = threading.Lock()

    def get(self, user_id: str) -> Optional[float]:
        with self._lock:
            return self._timestamps.get(user_id)

    def set(self, user_id: str, timestamp: float) -> None:
        with self._lock:
            self._timestamps[user_id] = timestamp


class SupabaseRefreshStore:
    """
    Supabase-backed store, shared across browser tabs and sessions.

    Expects a ``user_refresh`` table with a unique ``user_id`` text column
    and a ``last_refresh_ms`` bigint column (epoch milliseconds).
    """

    def __init__(
        self,
        supabase_url: Optional[str] = None,
        supabase_key: Optional[str] = None,
        table: str = "user_refresh",
        client: Optional[Any] = None,
    ):
        """
        Args:
            supabase_url: Supabase project URL (defaults to settings)
            supabase_key: Supabase API key (defaults to settings)
            table: Table holding the timestamps
            client: Pre-built Supabase client (skips ``connect``)
        """
        self.supabase_url = supabase_url or settings.supabase_url
        self.supabase_key = supabase_key or settings.supabase_key
        self.table = table
        self.client: Optional[Client] = client

    @retry_with_exponential_backoff(max_attempts=3, base_delay=1.0)
    def connect(self) -> bool:
        """
        Create the Supabase client.

        Raises:
            ConfigurationError: If URL or key is missing
            TransientError: If the client cannot be created (retried)
        """
        if not self.supabase_url or not self.supabase_key:
            raise ConfigurationError("Supabase URL and key are required for the refresh store")
        try:
            self.client = create_client(self.supabase_url, self.supabase_key)
        except Exception as e:
            raise TransientError(f"Failed to connect to Supabase: {e}") from e
        logger.info("Connected refresh store to Supabase")
        return True

    def _table(self):
        if self.client is None:
            self.connect()
        return self.client.table(self.table)

    def get(self, user_id: str) -> Optional[float]:
        try:
            response = (
                self._table()
                .select("last_refresh_ms")
                .eq("user_id", user_id)
                .limit(1)
                .execute()
            )
        except (ConfigurationError, TransientError):
            raise
        except Exception as e:
            raise StoreError(f"Failed to read refresh timestamp: {e}", context={"user_id": user_id}) from e

        rows = response.data or []
        if not rows or rows[0].get("last_refresh_ms") is None:
            return None
        return rows[0]["last_refresh_ms"] / 1000.0

    def set(self, user_id: str, timestamp: float) -> None:
        try:
            (
                self._table()
                .upsert({"user_id": user_id, "last_refresh_ms": int(timestamp * 1000)}, on_conflict="user_id")
                .execute()
            )
        except (ConfigurationError, TransientError):
            raise
        except Exception as e:
            raise StoreError(f"Failed to write refresh timestamp: {e}", context={"user_id": user_id}) from e
        logger.debug(f"Stored refresh timestamp for user {user_id}")
