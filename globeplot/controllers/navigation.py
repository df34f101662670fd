"""Previous/next stepping through mappable events in chronological order."""

from typing import List, Optional

from globeplot.schemas.events import Event
from globeplot.tools.coordinates import has_mappable_coordinates
from globeplot.tools.route_builder import parse_start


class EventNavigator:
    """Cycles focus through the events that can be shown on the map."""

    def __init__(self, events: List[Event]):
        mappable = [e for e in events if has_mappable_coordinates(e)]
        dated = [e for e in mappable if parse_start(e.start) is not None]
        undated = [e for e in mappable if parse_start(e.start) is None]
        # undated events go last, both groups keep input order on ties
        self.events: List[Event] = sorted(dated, key=lambda e: parse_start(e.start)) + undated

    def __len__(self) -> int:
        return len(self.events)

    def index_of(self, event_id: Optional[str]) -> Optional[int]:
        if event_id is None:
            return None
        for idx, event in enumerate(self.events):
            if event.id == event_id:
                return idx
        return None

    def next_event_id(self, current_id: Optional[str]) -> Optional[str]:
        """Event after ``current_id``, wrapping; the first one if nothing is focused."""
        if not self.events:
            return None
        idx = self.index_of(current_id)
        next_idx = 0 if idx is None else (idx + 1) % len(self.events)
        return self.events[next_idx].id

    def previous_event_id(self, current_id: Optional[str]) -> Optional[str]:
        """Event before ``current_id``, wrapping; the last one if nothing is focused."""
        if not self.events:
            return None
        idx = self.index_of(current_id)
        prev_idx = len(self.events) - 1 if idx is None else (idx - 1) % len(self.events)
        return self.events[prev_idx].id
