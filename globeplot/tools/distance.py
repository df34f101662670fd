"""
Distance calculation tool.

Great-circle distances used for route segment labels and for deciding
whether the camera is already close enough to a focused event.
"""

import math

from globeplot.schemas.map import Coordinate

# Earth radius in kilometers
EARTH_RADIUS_KM = 6371.0


def haversine_distance(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """
    Calculate the great circle distance between two points on Earth.

    Args:
        lat1: Latitude of first point
        lon1: Longitude of first point
        lat2: Latitude of second point
        lon2: Longitude of second point

    Returns:
        Distance in kilometers
    """
    lat1_rad = math.radians(lat1)
    lon1_rad = math.radians(lon1)
    lat2_rad = math.radians(lat2)
    lon2_rad = math.radians(lon2)

    dlat = lat2_rad - lat1_rad
    dlon = lon2_rad - lon1_rad

    a = math.sin(dlat / 2)**2 + math.cos(lat1_rad) * math.cos(lat2_rad) * math.sin(dlon / 2)**2
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))

    return EARTH_RADIUS_KM * c


def distance_between(a: Coordinate, b: Coordinate) -> float:
    """
    Distance in kilometers between two (lng, lat) map coordinates.

    Args:
        a: First coordinate, GeoJSON order
        b: Second coordinate, GeoJSON order

    Returns:
        Distance in kilometers
    """
    return haversine_distance(a[1], a[0], b[1], b[0])


def distance_between_m(a: Coordinate, b: Coordinate) -> float:
    """Distance in meters between two (lng, lat) map coordinates."""
    return distance_between(a, b) * 1000.0
