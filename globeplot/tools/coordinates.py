"""
Coordinate extraction for itinerary events.

Each category keeps its representative place in a different slot:
travel uses the departure location, accommodation the check-in
location, experiences and meals their own location.
"""

import logging
import math
from typing import List, Optional, Tuple

from globeplot.schemas.events import Event, Location
from globeplot.schemas.map import Coordinate

logger = logging.getLogger(__name__)


def location_for_event(event: Event) -> Optional[Location]:
    """
    Select the location sub-structure that represents an event on the map.

    Args:
        event: Any event variant

    Returns:
        The representative Location, or None if the slot is empty
    """
    if event.category == "travel":
        return event.departure.location if event.departure else None
    if event.category == "accommodation":
        return event.check_in.location if event.check_in else None
    return event.location


def _finite(value) -> bool:
    # bool is an int subclass but never a coordinate
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return math.isfinite(value)


def get_mappable_coordinates(event: Event) -> Optional[Coordinate]:
    """
    Resolve the (longitude, latitude) pair for an event.

    ``0, 0`` is a valid point; missing, NaN or infinite components are not.

    Args:
        event: Any event variant

    Returns:
        (lng, lat) tuple, or None if the event cannot be placed
    """
    location = location_for_event(event)
    if location is None or location.geolocation is None:
        return None

    geo = location.geolocation
    if not (_finite(geo.lng) and _finite(geo.lat)):
        logger.debug(f"Event {event.id} has a non-finite geolocation, skipping")
        return None
    return float(geo.lng), float(geo.lat)


def has_mappable_coordinates(event: Event) -> bool:
    """Whether the event can be placed on the map."""
    return get_mappable_coordinates(event) is not None


def count_events_missing_coordinates(events: List[Event]) -> int:
    """Count events that cannot be placed yet (no geolocation, or a partial or non-finite one)."""
    return sum(1 for event in events if not has_mappable_coordinates(event))


def location_labels(event: Event) -> Tuple[str, str, str]:
    """
    Display metadata for an event's marker.

    Returns:
        Tuple of (location name, city, country), empty strings when unknown
    """
    location = location_for_event(event)
    city = (location.city if location else None) or ""
    country = (location.country if location else None) or ""

    if event.category == "travel":
        name = (location.name if location else "") or ", ".join(p for p in (city, country) if p)
    elif event.category == "accommodation":
        name = event.place_name or (location.name if location else "") or ""
    else:
        name = (location.name if location else "") or ""
    return name, city, country
