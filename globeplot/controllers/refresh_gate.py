"""
Cooldown gate around the bulk coordinate refresh.

A forced re-geocode of every event location is expensive, so each user
may trigger it at most once per cooldown window. The window is derived
from the stored last-refresh timestamp on every check, never from an
accumulated countdown, so it can be recomputed from scratch at any time.

Manual refreshes and the automatic "geocode missing coordinates" pass
both rewrite the event list; they are serialized through one lock.
"""

import asyncio
import time
from typing import Callable, List, Optional

from globeplot.memory.refresh_store import RefreshStore
from globeplot.schemas.events import Event
from globeplot.schemas.map import CooldownStatus
from globeplot.tools.coordinates import count_events_missing_coordinates
from globeplot.tools.geocoding import Geocoder, enrich_events_with_geolocations
from globeplot.utils.config import settings
from globeplot.utils.exceptions import RefreshCooldownError, ValidationError
from globeplot.utils.logger import get_logger

logger = get_logger(__name__)


def format_remaining(seconds: float) -> str:
    """Format remaining seconds as "Xm YYs" (floored)."""
    total = int(max(0.0, seconds))
    minutes, secs = divmod(total, 60)
    return f"{minutes}m {secs:02d}s"


def cooldown_status(ends_at: Optional[float], now: float) -> CooldownStatus:
    """
    Derive cooldown state from the end of the window.

    Args:
        ends_at: Epoch seconds when the cooldown ends, or None
        now: Current epoch seconds

    Returns:
        CooldownStatus; not on cooldown at or after ``ends_at``
    """
    if ends_at is None:
        return CooldownStatus()
    remaining = ends_at - now
    if remaining <= 0:
        return CooldownStatus()
    return CooldownStatus(
        on_cooldown=True,
        remaining_seconds=remaining,
        remaining=format_remaining(remaining),
        ends_at=ends_at,
    )


class RefreshCountdown:
    """Once-per-second cooldown ticker for live UI feedback."""

    def __init__(
        self,
        ends_at: float,
        on_tick: Callable[[CooldownStatus], None],
        clock: Callable[[], float] = time.time,
        interval: float = 1.0,
    ):
        self.ends_at = ends_at
        self.on_tick = on_tick
        self.clock = clock
        self.interval = interval
        self._task: Optional[asyncio.Task] = None

    def status(self) -> CooldownStatus:
        return cooldown_status(self.ends_at, self.clock())

    async def run(self) -> None:
        """Tick until the cooldown is over; the last tick reports it as ended."""
        while True:
            status = self.status()
            self.on_tick(status)
            if not status.on_cooldown:
                return
            await asyncio.sleep(self.interval)

    def start(self) -> asyncio.Task:
        """Schedule the ticker on the running loop."""
        self.stop()
        self._task = asyncio.get_running_loop().create_task(self.run())
        return self._task

    def stop(self) -> None:
        if self._task is not None and not self._task.done():
            self._task.cancel()
        self._task = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()


class GeocodeRefreshGate:
    """Per-user cooldown around the forced bulk re-geocode."""

    def __init__(
        self,
        store: RefreshStore,
        geocoder: Geocoder,
        cooldown_seconds: Optional[float] = None,
        clock: Callable[[], float] = time.time,
    ):
        """
        Args:
            store: Last-refresh timestamp store
            geocoder: Geocoding service used for the refresh
            cooldown_seconds: Window length (defaults to settings)
            clock: Returns current epoch seconds
        """
        self.store = store
        self.geocoder = geocoder
        self.cooldown_seconds = (
            cooldown_seconds if cooldown_seconds is not None else settings.refresh_cooldown_seconds
        )
        self.clock = clock
        self._mutation_lock = asyncio.Lock()

    @property
    def mutation_in_progress(self) -> bool:
        return self._mutation_lock.locked()

    def check_cooldown(self, user_id: Optional[str]) -> CooldownStatus:
        """
        Report whether ``user_id`` is inside the cooldown window.

        Args:
            user_id: User to check; no user means no cooldown

        Returns:
            CooldownStatus with remaining time
        """
        if not user_id:
            return CooldownStatus()
        last_refresh = self.store.get(user_id)
        if last_refresh is None:
            return CooldownStatus()
        return cooldown_status(last_refresh + self.cooldown_seconds, self.clock())

    def _reject_if_cooling_down(self, user_id: str) -> None:
        status = self.check_cooldown(user_id)
        if status.on_cooldown:
            logger.info(
                "refresh_rejected",
                user_id=user_id,
                remaining_seconds=round(status.remaining_seconds, 3),
            )
            raise RefreshCooldownError(status.remaining_seconds, status.remaining)

    async def request_refresh(self, user_id: str, events: List[Event]) -> List[Event]:
        """
        Re-geocode every event location, unless the user is cooling down.

        The new timestamp is written even when geocoding fails, so a
        failing provider cannot be hammered.

        Args:
            user_id: Requesting user
            events: Current events (not mutated)

        Returns:
            Updated copies of the events

        Raises:
            ValidationError: If no user id is given
            RefreshCooldownError: If the cooldown window is still open
            GeocodingError: If the provider failed for any location; the
                timestamp has been written and the cooldown runs
        """
        if not user_id:
            raise ValidationError("A signed-in user is required to refresh coordinates")

        self._reject_if_cooling_down(user_id)

        async with self._mutation_lock:
            # another refresh may have finished while we waited
            self._reject_if_cooling_down(user_id)
            logger.info("refresh_started", user_id=user_id, events=len(events))
            try:
                updated = await asyncio.to_thread(
                    enrich_events_with_geolocations, events, self.geocoder, True, True
                )
            finally:
                self.store.set(user_id, self.clock())

        logger.info("refresh_completed", user_id=user_id, events=len(updated))
        return updated

    async def auto_geocode(self, events: List[Event]) -> List[Event]:
        """
        Geocode only locations that are still missing coordinates.

        Skipped while another bulk mutation holds the lock; that pass
        already covers the same events.

        Returns:
            Updated copies, or ``events`` itself when nothing was done
        """
        missing = count_events_missing_coordinates(events)
        if missing == 0:
            logger.debug("auto_geocode_skipped", reason="nothing_missing")
            return events
        if self._mutation_lock.locked():
            logger.info("auto_geocode_skipped", reason="mutation_in_progress", missing=missing)
            return events

        async with self._mutation_lock:
            logger.info("auto_geocode_started", missing=missing)
            return await asyncio.to_thread(
                enrich_events_with_geolocations, events, self.geocoder, False
            )

    def countdown(
        self,
        user_id: str,
        on_tick: Callable[[CooldownStatus], None],
    ) -> Optional[RefreshCountdown]:
        """
        Start a live countdown for a user on cooldown.

        Must be called from a running event loop.

        Returns:
            The running RefreshCountdown, or None when not on cooldown
        """
        status = self.check_cooldown(user_id)
        if not status.on_cooldown:
            return None
        ticker = RefreshCountdown(status.ends_at, on_tick, clock=self.clock)
        ticker.start()
        return ticker
