"""
Geographic data tools.

This module compiles itinerary events into GeoJSON for map visualization:
- Point features for each event with a resolvable coordinate
- Radial offsets for events that share the exact same coordinate
- A marker index used for camera fitting and focus synchronization
- LineString route features (see ``route_builder``)
"""

import logging
import math
from typing import Any, Dict, List, Optional, Tuple

from globeplot.schemas.events import Event
from globeplot.schemas.map import CompiledMap, Coordinate, MarkerIndex
from globeplot.tools.coordinates import get_mappable_coordinates, location_labels
from globeplot.tools.route_builder import build_route_segments, route_features
from globeplot.utils.config import settings

logger = logging.getLogger(__name__)


def coordinate_key(coordinates: Coordinate, precision: Optional[int] = None) -> str:
    """
    Grouping key for a coordinate.

    Six decimals treats points ~11 cm apart as identical. Adding 0.0
    folds -0.0 into 0.0 so both sides of the meridian share a key.

    Args:
        coordinates: (lng, lat) pair
        precision: Decimal places, defaults to settings

    Returns:
        Key string like "2.294500,48.858400"
    """
    if precision is None:
        precision = settings.coordinate_precision
    lng = round(coordinates[0], precision) + 0.0
    lat = round(coordinates[1], precision) + 0.0
    return f"{lng:.{precision}f},{lat:.{precision}f}"


def offset_coordinates(base: Coordinate, index: int, group_size: int, radius: float) -> Coordinate:
    """
    Position of member ``index`` on a circle around a shared base coordinate.

    Args:
        base: Shared (lng, lat) of the group
        index: Zero-based position of the member in input order
        group_size: Number of members in the group
        radius: Offset radius in degrees

    Returns:
        Offset (lng, lat)
    """
    angle = (index * 2 * math.pi) / group_size
    return (
        base[0] + radius * math.cos(angle),
        base[1] + radius * math.sin(angle),
    )


def _point_feature(event: Event, coordinates: Coordinate, clustered: bool) -> Dict[str, Any]:
    location_name, city, country = location_labels(event)
    return {
        "type": "Feature",
        "id": event.id,
        "geometry": {
            "type": "Point",
            "coordinates": [coordinates[0], coordinates[1]],  # GeoJSON uses [lon, lat]
        },
        "properties": {
            "id": event.id,
            "title": event.title,
            "category": event.category,
            "type": event.type,
            "sprite": f"{event.category}/{event.type}",
            "spriteId": f"styled-{event.category}-{event.type}",
            "locationName": location_name,
            "city": city,
            "country": country,
            "start": event.start,
            "end": event.end,
            "clustered": clustered,
        },
    }


def build_point_features(
    events: List[Event],
    offset_radius: Optional[float] = None,
) -> Tuple[List[Dict[str, Any]], MarkerIndex]:
    """
    Generate point features and the marker index from itinerary events.

    Events without an id or without a resolvable coordinate are skipped.
    Events sharing a coordinate key are fanned out on a small circle so
    that every marker stays clickable; singletons keep their coordinate.

    Args:
        events: Itinerary events in display order
        offset_radius: Fan-out radius in degrees, defaults to settings

    Returns:
        Tuple of (point features, marker index)
    """
    if offset_radius is None:
        offset_radius = settings.cluster_offset_radius

    # dicts keep first-seen order, which keeps output deterministic
    groups: Dict[str, List[Tuple[Event, Coordinate]]] = {}
    skipped = 0
    for event in events:
        if not event.id:
            skipped += 1
            continue
        coordinates = get_mappable_coordinates(event)
        if coordinates is None:
            skipped += 1
            continue
        groups.setdefault(coordinate_key(coordinates), []).append((event, coordinates))

    features: List[Dict[str, Any]] = []
    index = MarkerIndex()

    for group in groups.values():
        if len(group) == 1:
            event, coordinates = group[0]
            index.coordinates_by_event_id[event.id] = coordinates
            index.all_coordinates.append(coordinates)
            features.append(_point_feature(event, coordinates, clustered=False))
            continue

        base = group[0][1]
        for member_idx, (event, _) in enumerate(group):
            coordinates = offset_coordinates(base, member_idx, len(group), offset_radius)
            index.clustered_event_ids.add(event.id)
            index.coordinates_by_event_id[event.id] = coordinates
            index.all_coordinates.append(coordinates)
            features.append(_point_feature(event, coordinates, clustered=True))

    if skipped:
        logger.debug(f"Skipped {skipped} events without mappable coordinates")
    return features, index


def compile_map(events: List[Event]) -> CompiledMap:
    """
    Compile an event list into everything the map needs.

    Pure and re-entrant: the same event list always yields identical
    features and marker index.

    Args:
        events: Itinerary events

    Returns:
        CompiledMap with point features, route features, marker index and bounds
    """
    point_features, marker_index = build_point_features(events)
    segments = build_route_segments(events, marker_index)
    lines = route_features(segments)

    logger.info(
        f"Compiled map with {len(point_features)} points, {len(lines)} route segments, "
        f"{len(marker_index.clustered_event_ids)} clustered events"
    )
    return CompiledMap(
        point_features=point_features,
        route_features=lines,
        marker_index=marker_index,
        bounds=marker_index.bounds(),
    )


def feature_collection(features: List[Dict[str, Any]]) -> Dict[str, Any]:
    """Wrap features in a GeoJSON FeatureCollection."""
    return {
        "type": "FeatureCollection",
        "features": features,
    }
