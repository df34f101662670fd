"""
Camera and popup synchronization for one map view.

The controller is a small state machine over ``idle``, ``flying`` and
``popup_open``. It is driven by ``sync_focus`` whenever the focused event
or the underlying data changes, and by completion signals of camera
moves. Each flight is keyed by a generation counter: a completion whose
generation is no longer current is ignored, so a popup never opens for a
target the user already navigated away from.
"""

import functools
import logging
from typing import Any, Callable, List, Optional

from globeplot.controllers.state import (
    FLYING,
    IDLE,
    POPUP_OPEN,
    FlightHandle,
    FocusState,
    RenderingSurface,
    initial_focus_state,
)
from globeplot.schemas.events import Event
from globeplot.schemas.map import CompiledMap, Coordinate, MarkerIndex
from globeplot.tools.coordinates import get_mappable_coordinates
from globeplot.tools.distance import distance_between_m
from globeplot.tools.geo import feature_collection
from globeplot.tools.popup import build_popup_content
from globeplot.utils.config import settings

logger = logging.getLogger(__name__)

DEFAULT_CENTER: Coordinate = (-74.5, 40.0)  # roughly the centre of the US
DEFAULT_ZOOM = 1.0
INITIAL_FIT_PADDING = 50
VIEW_ALL_PADDING = 80


class ViewSyncController:
    """Keeps one map view's camera and popup consistent with the focused event."""

    def __init__(
        self,
        surface: RenderingSurface,
        on_focus_change: Optional[Callable[[Optional[str]], None]] = None,
    ):
        """
        Args:
            surface: The map this controller drives
            on_focus_change: Called when the controller itself changes focus
                (always to None: unresolvable target, popup closed, view all)
        """
        self.surface = surface
        self.on_focus_change = on_focus_change
        self.state: FocusState = initial_focus_state()
        self._flight: Optional[FlightHandle] = None
        self._flight_callback: Optional[Callable[[Any], None]] = None
        self._flight_event_id: Optional[str] = None
        self._initial_fit_done = False

    @property
    def view_state(self) -> str:
        return self.state["view_state"]

    @property
    def focused_event_id(self) -> Optional[str]:
        return self.state["focused_event_id"]

    def snapshot(self) -> FocusState:
        """Copy of the current focus state."""
        return dict(self.state)

    # ------------------------------------------------------------------
    # Driving function
    # ------------------------------------------------------------------

    def sync_focus(
        self,
        focused_event_id: Optional[str],
        marker_index: MarkerIndex,
        events: List[Event],
    ) -> None:
        """
        Reconcile camera and popup with the focused event.

        Args:
            focused_event_id: Event to focus, or None to clear focus
            marker_index: Current marker index (final, possibly offset coordinates)
            events: Current event list
        """
        self.state["focused_event_id"] = focused_event_id

        if focused_event_id is None:
            self._cancel_flight()
            self._close_popup()
            self.state["view_state"] = IDLE
            return

        event = next((e for e in events if e.id == focused_event_id), None)
        if event is None:
            logger.debug(f"Focused event {focused_event_id} no longer exists")
            self._drop_focus()
            return

        coordinates = marker_index.coordinates_for(focused_event_id)
        clustered = marker_index.is_clustered(focused_event_id) if coordinates else False
        if coordinates is None:
            # marker index may lag behind a just-geocoded event
            coordinates = get_mappable_coordinates(event)
        if coordinates is None:
            logger.debug(f"Focused event {focused_event_id} has no coordinates")
            self._drop_focus()
            return

        target_zoom = settings.cluster_focus_zoom if clustered else settings.focus_zoom

        if (
            self.state["view_state"] == POPUP_OPEN
            and self.state["popup_event_id"] == focused_event_id
            and self.state["popup_coordinates"] == coordinates
        ):
            return
        if (
            self.state["view_state"] == FLYING
            and self._flight_event_id == focused_event_id
            and self.state["flight_target"] == coordinates
        ):
            return

        self._cancel_flight()
        self._close_popup()

        if self._is_positioned_for(coordinates, target_zoom):
            self._open_popup(event, coordinates)
        else:
            self._fly(event, coordinates, target_zoom)

    # ------------------------------------------------------------------
    # Other inputs
    # ------------------------------------------------------------------

    def on_popup_closed(self) -> None:
        """The user dismissed the popup on the surface."""
        if not self.state["popup_open"]:
            return
        self._reset_popup()
        self.state["view_state"] = IDLE
        self._set_focus(None)

    def render(self, compiled: CompiledMap) -> None:
        """Push freshly compiled features to the surface."""
        self.surface.set_data("events", feature_collection(compiled.point_features))
        self.surface.set_data("routes", feature_collection(compiled.route_features))
        self.fit_initial(compiled.marker_index)

    def fit_initial(self, marker_index: MarkerIndex) -> None:
        """Fit the camera to all markers once, unless something is focused."""
        if self._initial_fit_done:
            return
        bounds = marker_index.bounds()
        if bounds is None:
            return
        self._initial_fit_done = True
        if self.state["focused_event_id"] is None:
            self.surface.fit_bounds(bounds, padding=INITIAL_FIT_PADDING, max_zoom=settings.max_fit_zoom)

    def view_all(self, marker_index: MarkerIndex) -> None:
        """Clear focus and show every marker (or the default view)."""
        self._cancel_flight()
        self._close_popup()
        self.state["view_state"] = IDLE
        self._set_focus(None)

        bounds = marker_index.bounds()
        if bounds is not None:
            self.surface.fit_bounds(bounds, padding=VIEW_ALL_PADDING, max_zoom=settings.max_fit_zoom)
        else:
            self.surface.fly_to(DEFAULT_CENTER, DEFAULT_ZOOM, essential=True)

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _is_positioned_for(self, coordinates: Coordinate, target_zoom: float) -> bool:
        center = self.surface.get_center()
        zoom = self.surface.get_zoom()
        return (
            distance_between_m(center, coordinates) < settings.focus_distance_tolerance_m
            and abs(zoom - target_zoom) < settings.focus_zoom_tolerance
        )

    def _fly(self, event: Event, coordinates: Coordinate, zoom: float) -> None:
        self.state["generation"] += 1
        generation = self.state["generation"]

        self.state["view_state"] = FLYING
        self.state["flight_target"] = coordinates
        self._flight_event_id = event.id

        handle = self.surface.fly_to(coordinates, zoom, essential=True)
        callback = functools.partial(self._on_flight_done, generation, event, coordinates)
        self._flight = handle
        self._flight_callback = callback
        handle.add_done_callback(callback)

    def _on_flight_done(
        self,
        generation: int,
        event: Event,
        coordinates: Coordinate,
        handle: FlightHandle,
    ) -> None:
        if (
            generation != self.state["generation"]
            or self.state["view_state"] != FLYING
            or self.state["focused_event_id"] != event.id
        ):
            logger.debug(f"Discarding stale flight completion for {event.id}")
            return

        self._flight = None
        self._flight_callback = None
        self._flight_event_id = None
        self.state["flight_target"] = None

        if handle.cancelled():
            self.state["view_state"] = IDLE
            return
        error = handle.exception()
        if error is not None:
            logger.warning(f"Camera move to {event.id} failed: {error}")
            self.state["view_state"] = IDLE
            return

        self._open_popup(event, coordinates)

    def _cancel_flight(self) -> None:
        """Stop listening for the pending flight; the animation itself is left alone."""
        if self._flight is None:
            return
        remove = getattr(self._flight, "remove_done_callback", None)
        if remove is not None and self._flight_callback is not None:
            remove(self._flight_callback)
        self._flight = None
        self._flight_callback = None
        self._flight_event_id = None
        self.state["flight_target"] = None
        self.state["generation"] += 1
        if self.state["view_state"] == FLYING:
            self.state["view_state"] = IDLE

    def _open_popup(self, event: Event, coordinates: Coordinate) -> None:
        self.surface.show_popup(coordinates, build_popup_content(event))
        self.state["popup_open"] = True
        self.state["popup_event_id"] = event.id
        self.state["popup_coordinates"] = coordinates
        self.state["view_state"] = POPUP_OPEN

    def _close_popup(self) -> None:
        if not self.state["popup_open"]:
            return
        self.surface.close_popup()
        self._reset_popup()
        if self.state["view_state"] == POPUP_OPEN:
            self.state["view_state"] = IDLE

    def _reset_popup(self) -> None:
        self.state["popup_open"] = False
        self.state["popup_event_id"] = None
        self.state["popup_coordinates"] = None

    def _drop_focus(self) -> None:
        self._cancel_flight()
        self._close_popup()
        self.state["view_state"] = IDLE
        self._set_focus(None)

    def _set_focus(self, event_id: Optional[str]) -> None:
        changed = self.state["focused_event_id"] != event_id
        self.state["focused_event_id"] = event_id
        if changed and self.on_focus_change is not None:
            self.on_focus_change(event_id)
