"""
Tests for chronological route construction.
"""
import itertools
from datetime import datetime, timezone

import pytest

from globeplot.tools.geo import build_point_features
from globeplot.tools.route_builder import (
    DEFAULT_ROUTE_COLOR,
    ROUTE_COLORS,
    build_route_segments,
    parse_start,
    route_features,
)


def _segments(events):
    _, index = build_point_features(events)
    return build_route_segments(events, index)


def _pairs(segments):
    return [(s.source.event_id, s.target.event_id) for s in segments]


@pytest.mark.parametrize("order", list(itertools.permutations(range(3))))
def test_segments_follow_start_time_for_any_input_order(event_factory, order):
    base = [
        event_factory("jan3", lng=3, lat=3, start="2024-01-03"),
        event_factory("jan1", lng=1, lat=1, start="2024-01-01"),
        event_factory("jan2", lng=2, lat=2, start="2024-01-02"),
    ]
    events = [base[i] for i in order]

    assert _pairs(_segments(events)) == [("jan1", "jan2"), ("jan2", "jan3")]


def test_segment_count_is_one_less_than_dated_events(event_factory):
    events = [event_factory(f"e{i}", lng=i, lat=i, start=f"2024-02-{i + 1:02d}") for i in range(6)]
    assert len(_segments(events)) == 5


def test_source_start_never_after_target_start(event_factory):
    starts = ["2024-03-05T10:00:00Z", "2024-03-01T08:00:00+02:00", "2024-03-01T07:00:00Z", "2024-03-04"]
    events = [event_factory(f"e{i}", lng=i, lat=0, start=s) for i, s in enumerate(starts)]

    for segment in _segments(events):
        assert segment.source.start <= segment.target.start


def test_undated_and_unmappable_events_are_excluded(event_factory):
    events = [
        event_factory("a", lng=0, lat=0, start="2024-01-01"),
        event_factory("undated", lng=5, lat=5),
        event_factory("garbage", lng=6, lat=6, start="next tuesday"),
        event_factory("nogeo", name="Nowhere", start="2024-01-02"),
        event_factory("b", lng=1, lat=1, start="2024-01-03"),
    ]

    assert _pairs(_segments(events)) == [("a", "b")]


def test_fewer_than_two_dated_events_yield_no_segments(event_factory):
    assert _segments([]) == []
    assert _segments([event_factory("solo", lng=1, lat=1, start="2024-01-01")]) == []


def test_equal_starts_keep_input_order(event_factory):
    events = [
        event_factory("first", lng=0, lat=0, start="2024-01-01T09:00:00Z"),
        event_factory("second", lng=1, lat=1, start="2024-01-01T09:00:00Z"),
    ]
    assert _pairs(_segments(events)) == [("first", "second")]


def test_segment_is_tagged_with_earlier_category(event_factory):
    events = [
        event_factory("hotel", category="accommodation", lng=0, lat=0, start="2024-01-01T15:00:00Z"),
        event_factory("dinner", category="meal", lng=0.01, lat=0.01, start="2024-01-01T19:00:00Z"),
    ]

    segments = _segments(events)
    assert segments[0].category == "accommodation"

    feature = route_features(segments)[0]
    assert feature["properties"]["stroke"] == ROUTE_COLORS["accommodation"]


def test_segments_connect_final_offset_coordinates(event_factory):
    events = [
        event_factory("a", lng=0, lat=0, start="2024-01-01"),
        event_factory("b", lng=0, lat=0, start="2024-01-02"),
    ]
    features, index = build_point_features(events)
    line = route_features(build_route_segments(events, index))[0]

    assert line["geometry"]["type"] == "LineString"
    assert line["geometry"]["coordinates"] == [list(index.coordinates_for("a")), list(index.coordinates_for("b"))]
    assert line["properties"]["sourceId"] == "a"
    assert line["properties"]["targetId"] == "b"


def test_unknown_category_gets_default_color():
    assert ROUTE_COLORS.get("other", DEFAULT_ROUTE_COLOR) == DEFAULT_ROUTE_COLOR


@pytest.mark.parametrize("value,expected", [
    ("2024-01-03", datetime(2024, 1, 3, tzinfo=timezone.utc)),
    ("2024-01-03T09:30:00Z", datetime(2024, 1, 3, 9, 30, tzinfo=timezone.utc)),
    ("2024-01-03T09:30:00+00:00", datetime(2024, 1, 3, 9, 30, tzinfo=timezone.utc)),
])
def test_parse_start_accepts_iso_forms(value, expected):
    assert parse_start(value) == expected


@pytest.mark.parametrize("value", [None, "", "   ", "not a date", 12345])
def test_parse_start_rejects_garbage(value):
    assert parse_start(value) is None
