"""
Chronological route construction.

Positioned events with a parsable start time are ordered by that time
and joined pairwise into a simple, non-branching path.
"""

import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from globeplot.schemas.events import Event
from globeplot.schemas.map import MarkerIndex, PositionedEvent, RouteSegment
from globeplot.tools.distance import distance_between

logger = logging.getLogger(__name__)

ROUTE_COLORS = {
    "travel": "#1d4ed8",
    "accommodation": "#7e22ce",
    "experience": "#047857",
    "meal": "#c2410c",
}
DEFAULT_ROUTE_COLOR = "#374151"


def parse_start(value: Any) -> Optional[datetime]:
    """
    Parse an event start into an aware datetime.

    Accepts ISO-8601 dates and datetimes, with or without offset or a
    trailing ``Z``. Naive values are taken as UTC.

    Args:
        value: Raw start value from the event

    Returns:
        Timezone-aware datetime, or None if missing or unparsable
    """
    if not isinstance(value, str) or not value.strip():
        return None
    text = value.strip()
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def positioned_events(events: List[Event], marker_index: MarkerIndex) -> List[PositionedEvent]:
    """
    Join events with their final marker coordinates, keeping input order.

    Events absent from the marker index are dropped; the start is parsed
    but may be None.
    """
    positioned: List[PositionedEvent] = []
    for event in events:
        coordinates = marker_index.coordinates_for(event.id)
        if coordinates is None:
            continue
        positioned.append(
            PositionedEvent(
                event_id=event.id,
                coordinates=coordinates,
                category=event.category,
                clustered=marker_index.is_clustered(event.id),
                start=parse_start(event.start),
            )
        )
    return positioned


def build_route_segments(events: List[Event], marker_index: MarkerIndex) -> List[RouteSegment]:
    """
    Order positioned events by start time and connect neighbours.

    The sort is stable, so events with equal starts keep input order.
    Each segment is tagged with the category of its earlier endpoint.

    Args:
        events: Itinerary events (source of start times and categories)
        marker_index: Final coordinates from the feature compiler

    Returns:
        ``max(0, k - 1)`` segments for ``k`` dated, positioned events
    """
    dated = [p for p in positioned_events(events, marker_index) if p.start is not None]
    ordered = sorted(dated, key=lambda p: p.start)

    segments: List[RouteSegment] = []
    for source, target in zip(ordered, ordered[1:]):
        segments.append(
            RouteSegment(
                source=source,
                target=target,
                category=source.category,
                distance_km=round(distance_between(source.coordinates, target.coordinates), 3),
            )
        )

    logger.debug(f"Built {len(segments)} route segments from {len(dated)} dated events")
    return segments


def route_features(segments: List[RouteSegment]) -> List[Dict[str, Any]]:
    """
    Convert route segments to two-point LineString features.

    Args:
        segments: Ordered route segments

    Returns:
        GeoJSON LineString features in segment order
    """
    features = []
    for segment in segments:
        features.append({
            "type": "Feature",
            "geometry": {
                "type": "LineString",
                "coordinates": [
                    [segment.source.coordinates[0], segment.source.coordinates[1]],
                    [segment.target.coordinates[0], segment.target.coordinates[1]],
                ],
            },
            "properties": {
                "category": segment.category,
                "sourceId": segment.source.event_id,
                "targetId": segment.target.event_id,
                "distanceKm": segment.distance_km,
                "stroke": ROUTE_COLORS.get(segment.category, DEFAULT_ROUTE_COLOR),
            },
        })
    return features
