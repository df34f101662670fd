"""
Pydantic schemas for the GlobePlot map core
"""
from .events import (
    GeoPoint,
    Location,
    Endpoint,
    TravelEvent,
    AccommodationEvent,
    ExperienceEvent,
    MealEvent,
    Event,
    parse_events,
    dump_events,
)
from .map import Coordinate, PositionedEvent, MarkerIndex, RouteSegment, CompiledMap, CooldownStatus
from .geocode import GeocodeRequest, BatchGeocodeItem, GeocodeResult, BatchGeocodeResult
from .requests import CompileMapRequest, RefreshRequest, RefreshResponse

__all__ = [
    # Event models
    "GeoPoint",
    "Location",
    "Endpoint",
    "TravelEvent",
    "AccommodationEvent",
    "ExperienceEvent",
    "MealEvent",
    "Event",
    "parse_events",
    "dump_events",
    # Derived map models
    "Coordinate",
    "PositionedEvent",
    "MarkerIndex",
    "RouteSegment",
    "CompiledMap",
    "CooldownStatus",
    # Geocoding models
    "GeocodeRequest",
    "BatchGeocodeItem",
    "GeocodeResult",
    "BatchGeocodeResult",
    # API models
    "CompileMapRequest",
    "RefreshRequest",
    "RefreshResponse",
]
