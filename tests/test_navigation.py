"""
Tests for previous/next event stepping.
"""
from globeplot.controllers.navigation import EventNavigator


def _navigator(event_factory):
    return EventNavigator([
        event_factory("c", lng=3, lat=3, start="2024-01-03"),
        event_factory("nogeo", name="Nowhere", start="2024-01-01"),
        event_factory("undated", lng=9, lat=9),
        event_factory("a", lng=1, lat=1, start="2024-01-01"),
        event_factory("b", lng=2, lat=2, start="2024-01-02"),
    ])


def test_only_mappable_events_in_chronological_order(event_factory):
    navigator = _navigator(event_factory)

    assert [e.id for e in navigator.events] == ["a", "b", "c", "undated"]
    assert len(navigator) == 4


def test_next_and_previous_wrap_around(event_factory):
    navigator = _navigator(event_factory)

    assert navigator.next_event_id("b") == "c"
    assert navigator.next_event_id("undated") == "a"
    assert navigator.previous_event_id("a") == "undated"
    assert navigator.previous_event_id("c") == "b"


def test_without_focus_starts_at_either_end(event_factory):
    navigator = _navigator(event_factory)

    assert navigator.next_event_id(None) == "a"
    assert navigator.previous_event_id(None) == "undated"
    assert navigator.next_event_id("nogeo") == "a"


def test_empty_navigator():
    navigator = EventNavigator([])

    assert navigator.next_event_id(None) is None
    assert navigator.previous_event_id("x") is None
    assert navigator.index_of(None) is None
