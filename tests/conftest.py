"""
Global fixtures for the GlobePlot test suite.
"""
from typing import Any, Callable, Dict, List, Optional

import pytest

from globeplot.schemas import GeocodeResult, parse_events
from globeplot.schemas.map import Coordinate


def make_event(
    event_id: str,
    category: str = "experience",
    lng: Optional[float] = None,
    lat: Optional[float] = None,
    start: Optional[str] = None,
    name: str = "",
    city: Optional[str] = None,
    country: Optional[str] = None,
    **extra: Any,
):
    """Build one event of any category with its representative location set."""
    location: Dict[str, Any] = {"name": name, "city": city, "country": country}
    if lng is not None or lat is not None:
        location["geolocation"] = {"lat": lat, "lng": lng}

    raw: Dict[str, Any] = {"id": event_id, "category": category, "title": f"Event {event_id}", "start": start}
    if category == "travel":
        raw["departure"] = {"date": start, "location": location}
    elif category == "accommodation":
        raw["checkIn"] = {"date": start, "location": location}
    else:
        raw["location"] = location
    raw.update(extra)
    return parse_events([raw])[0]


@pytest.fixture
def event_factory() -> Callable[..., Any]:
    """Factory building typed events from a few fields."""
    return make_event


class FakeFlight:
    """Future-like camera move that completes only when the test says so."""

    def __init__(self):
        self._callbacks: List[Callable] = []
        self._done = False
        self._cancelled = False
        self._error: Optional[BaseException] = None

    def add_done_callback(self, fn: Callable) -> None:
        if self._done:
            fn(self)
        else:
            self._callbacks.append(fn)

    def remove_done_callback(self, fn: Callable) -> int:
        before = len(self._callbacks)
        self._callbacks = [cb for cb in self._callbacks if cb is not fn]
        return before - len(self._callbacks)

    def cancelled(self) -> bool:
        return self._cancelled

    def exception(self) -> Optional[BaseException]:
        return self._error

    def _finish(self) -> None:
        self._done = True
        callbacks, self._callbacks = self._callbacks, []
        for cb in callbacks:
            cb(self)

    def resolve(self) -> None:
        self._finish()

    def cancel(self) -> None:
        self._cancelled = True
        self._finish()

    def fail(self, error: BaseException) -> None:
        self._error = error
        self._finish()


class LeakyFlight(FakeFlight):
    """A handle that keeps firing callbacks even after they were removed."""

    def remove_done_callback(self, fn: Callable) -> int:
        return 0


class FakeSurface:
    """Records every command the controller issues."""

    def __init__(self, center: Coordinate = (0.0, 0.0), zoom: float = 2.0, flight_cls=FakeFlight):
        self.center = center
        self.zoom = zoom
        self.flight_cls = flight_cls
        self.flights: List[Dict[str, Any]] = []
        self.popups: List[Dict[str, Any]] = []
        self.closed_popups = 0
        self.fits: List[Dict[str, Any]] = []
        self.data: Dict[str, Dict[str, Any]] = {}

    def get_center(self) -> Coordinate:
        return self.center

    def get_zoom(self) -> float:
        return self.zoom

    def fly_to(self, center, zoom, essential=True):
        handle = self.flight_cls()
        self.flights.append({"center": center, "zoom": zoom, "essential": essential, "handle": handle})
        return handle

    def fit_bounds(self, bounds, padding, max_zoom) -> None:
        self.fits.append({"bounds": bounds, "padding": padding, "max_zoom": max_zoom})

    def show_popup(self, coordinates, content) -> None:
        self.popups.append({"coordinates": coordinates, "content": content})

    def close_popup(self) -> None:
        self.closed_popups += 1

    def set_data(self, source_id, data) -> None:
        self.data[source_id] = data


@pytest.fixture
def surface() -> FakeSurface:
    return FakeSurface()


class FakeClock:
    """Manually advanced epoch clock."""

    def __init__(self, now: float = 0.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock(1_700_000_000.0)


class FakeGeocoder:
    """Geocoder returning canned results keyed by place name."""

    def __init__(self, results: Optional[Dict[str, Optional[GeocodeResult]]] = None, error: Exception = None):
        self.results = results or {}
        self.error = error
        self.calls: List[Dict[str, Any]] = []

    def geocode(self, name=None, city=None, country=None, query=None):
        self.calls.append({"name": name, "city": city, "country": country})
        if self.error is not None:
            raise self.error
        return self.results.get(name)


@pytest.fixture
def fake_geocoder() -> FakeGeocoder:
    return FakeGeocoder()
