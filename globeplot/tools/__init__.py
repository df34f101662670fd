"""
Tools package for the map core.

This package contains the pure building blocks for:
- Coordinate extraction per event category
- Point feature compilation with cluster fan-out
- Chronological route construction
- Distance calculations
- Forward geocoding and event enrichment
- Popup content
"""

from .coordinates import (
    get_mappable_coordinates,
    has_mappable_coordinates,
    count_events_missing_coordinates,
    location_for_event,
)
from .distance import haversine_distance, distance_between
from .geo import build_point_features, compile_map, feature_collection
from .route_builder import build_route_segments, route_features, parse_start
from .geocoding import MapboxGeocoder, enrich_events_with_geolocations
from .popup import build_popup_content

__all__ = [
    "get_mappable_coordinates",
    "has_mappable_coordinates",
    "count_events_missing_coordinates",
    "location_for_event",
    "haversine_distance",
    "distance_between",
    "build_point_features",
    "compile_map",
    "feature_collection",
    "build_route_segments",
    "route_features",
    "parse_start",
    "MapboxGeocoder",
    "enrich_events_with_geolocations",
    "build_popup_content",
]
