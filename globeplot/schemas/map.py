"""
Pydantic schemas for derived map structures.

None of these are persisted; they are recomputed from the event list on
every compilation and only keep identity through the event id.
"""
from datetime import datetime
from typing import Any, Dict, List, Optional, Set, Tuple
from pydantic import BaseModel, Field, field_serializer

# (longitude, latitude), GeoJSON order
Coordinate = Tuple[float, float]
Bounds = Tuple[Coordinate, Coordinate]


class PositionedEvent(BaseModel):
    """An event with its final (possibly offset) coordinate."""
    event_id: str
    coordinates: Coordinate
    category: str
    clustered: bool = False
    start: Optional[datetime] = None


class MarkerIndex(BaseModel):
    """Lookup from event id to rendered coordinate plus cluster membership."""
    coordinates_by_event_id: Dict[str, Coordinate] = {}
    clustered_event_ids: Set[str] = set()
    all_coordinates: List[Coordinate] = []

    @field_serializer("clustered_event_ids")
    def _serialize_clustered(self, ids: Set[str]) -> List[str]:
        return sorted(ids)

    def coordinates_for(self, event_id: str) -> Optional[Coordinate]:
        return self.coordinates_by_event_id.get(event_id)

    def is_clustered(self, event_id: str) -> bool:
        return event_id in self.clustered_event_ids

    def bounds(self) -> Optional[Bounds]:
        """South-west and north-east corners of all coordinates, or None."""
        if not self.all_coordinates:
            return None
        lngs = [c[0] for c in self.all_coordinates]
        lats = [c[1] for c in self.all_coordinates]
        return (min(lngs), min(lats)), (max(lngs), max(lats))


class RouteSegment(BaseModel):
    """Directed hop between two chronologically adjacent positioned events."""
    source: PositionedEvent
    target: PositionedEvent
    category: str = Field(..., description="Category used for line styling")
    distance_km: float = 0.0


class CompiledMap(BaseModel):
    """Everything the rendering surface needs for one event list."""
    point_features: List[Dict[str, Any]]
    route_features: List[Dict[str, Any]]
    marker_index: MarkerIndex
    bounds: Optional[Bounds] = None


class CooldownStatus(BaseModel):
    """Refresh cooldown state for one user."""
    on_cooldown: bool = False
    remaining_seconds: float = 0.0
    remaining: str = ""
    ends_at: Optional[float] = Field(default=None, description="Epoch seconds")
