"""
API routes for map compilation and the coordinate refresh
"""
import logging
from functools import lru_cache
from fastapi import APIRouter, Depends, HTTPException

from globeplot.controllers.refresh_gate import GeocodeRefreshGate
from globeplot.memory import get_refresh_store
from globeplot.schemas import (
    CompiledMap,
    CompileMapRequest,
    CooldownStatus,
    RefreshRequest,
    RefreshResponse,
    dump_events,
)
from globeplot.tools.geo import compile_map
from globeplot.tools.geocoding import MapboxGeocoder
from globeplot.utils.exceptions import (
    ConfigurationError,
    GeocodingError,
    RefreshCooldownError,
    StoreError,
    ValidationError,
)
from globeplot.utils.logger import bind_request_context, clear_request_context

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/map", tags=["map"])


@lru_cache(maxsize=1)
def get_refresh_gate() -> GeocodeRefreshGate:
    """Shared refresh gate (overridable in tests via dependency_overrides)"""
    return GeocodeRefreshGate(store=get_refresh_store(), geocoder=MapboxGeocoder())


@router.post("/compile", response_model=CompiledMap)
async def compile_events(request: CompileMapRequest):
    """
    Compile events into point features, route features and a marker index.
    """
    return compile_map(request.events)


@router.get("/cooldown/{user_id}", response_model=CooldownStatus)
async def get_cooldown(user_id: str, gate: GeocodeRefreshGate = Depends(get_refresh_gate)):
    """
    Report whether the user may refresh coordinates right now
    """
    try:
        return gate.check_cooldown(user_id)
    except StoreError as e:
        logger.error(f"Cooldown lookup failed for {user_id}: {e.message}")
        raise HTTPException(status_code=503, detail="Refresh store unavailable")


@router.post("/refresh/{user_id}", response_model=RefreshResponse)
async def refresh_coordinates(
    user_id: str,
    request: RefreshRequest,
    gate: GeocodeRefreshGate = Depends(get_refresh_gate),
):
    """
    Re-geocode every event location and recompile the map.

    Rejected with 429 while the user's cooldown is running.
    """
    bind_request_context(user_id=user_id)
    try:
        updated = await gate.request_refresh(user_id, request.events)
    except RefreshCooldownError as e:
        raise HTTPException(
            status_code=429,
            detail={
                "error": e.message,
                "remaining": e.remaining,
                "remaining_seconds": e.remaining_seconds,
            },
        )
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=e.message)
    except ConfigurationError as e:
        logger.error(f"Refresh misconfigured: {e.message}")
        raise HTTPException(status_code=503, detail=e.message)
    except GeocodingError as e:
        logger.warning(f"Refresh for {user_id} failed: {e.message}")
        raise HTTPException(status_code=502, detail="Failed to refresh coordinates for all locations.")
    except StoreError as e:
        logger.error(f"Refresh store failed for {user_id}: {e.message}")
        raise HTTPException(status_code=503, detail="Refresh store unavailable")
    finally:
        clear_request_context()

    logger.info(f"Coordinates refreshed for {len(updated)} events (user {user_id})")
    return {
        "events": dump_events(updated),
        "map": compile_map(updated),
    }
