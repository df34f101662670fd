"""
State definitions for map view synchronization.

This module defines the focus/popup state owned by a ViewSyncController
and the rendering surface protocol it drives.
"""

from typing import Any, Callable, Dict, Literal, Optional, Protocol, TypedDict

from globeplot.schemas.map import Bounds, Coordinate

ViewState = Literal["idle", "flying", "popup_open"]

IDLE: ViewState = "idle"
FLYING: ViewState = "flying"
POPUP_OPEN: ViewState = "popup_open"


class FocusState(TypedDict):
    """What the map view is currently directed at."""
    view_state: ViewState
    focused_event_id: Optional[str]
    popup_open: bool
    popup_event_id: Optional[str]
    popup_coordinates: Optional[Coordinate]
    flight_target: Optional[Coordinate]  # set only while flying
    generation: int  # bumped on every flight request


def initial_focus_state() -> FocusState:
    return {
        "view_state": IDLE,
        "focused_event_id": None,
        "popup_open": False,
        "popup_event_id": None,
        "popup_coordinates": None,
        "flight_target": None,
        "generation": 0,
    }


class FlightHandle(Protocol):
    """Completion signal of one camera move, e.g. an asyncio.Future.

    ``remove_done_callback`` is optional; stale completions are also
    rejected by generation.
    """

    def add_done_callback(self, fn: Callable[[Any], None]) -> None:
        ...

    def remove_done_callback(self, fn: Callable[[Any], None]) -> int:
        ...

    def cancelled(self) -> bool:
        ...

    def exception(self) -> Optional[BaseException]:
        ...


class RenderingSurface(Protocol):
    """The interactive map. Decides how to render; the controller decides when."""

    def get_center(self) -> Coordinate:
        ...

    def get_zoom(self) -> float:
        ...

    def fly_to(self, center: Coordinate, zoom: float, essential: bool = True) -> FlightHandle:
        """Start a camera move; the handle completes once, when the move ends."""
        ...

    def fit_bounds(self, bounds: Bounds, padding: int, max_zoom: float) -> None:
        ...

    def show_popup(self, coordinates: Coordinate, content: Dict[str, Any]) -> None:
        ...

    def close_popup(self) -> None:
        ...

    def set_data(self, source_id: str, data: Dict[str, Any]) -> None:
        """Replace a GeoJSON source ("events" or "routes")."""
        ...
