"""
Tests for point feature compilation, cluster fan-out and the marker index.
"""
import json
import math

from globeplot.tools.distance import distance_between
from globeplot.tools.geo import (
    build_point_features,
    compile_map,
    coordinate_key,
    feature_collection,
    offset_coordinates,
)
from globeplot.utils.config import settings


def _coords_by_id(features):
    return {f["id"]: tuple(f["geometry"]["coordinates"]) for f in features}


def test_colocated_events_are_fanned_out(event_factory):
    events = [
        event_factory("A", lng=0, lat=0),
        event_factory("B", lng=0, lat=0),
        event_factory("C", lng=1, lat=1),
    ]

    features, index = build_point_features(events)
    coords = _coords_by_id(features)

    assert len(features) == 3
    assert coords["A"] != coords["B"]
    radius = settings.cluster_offset_radius
    for event_id in ("A", "B"):
        lng, lat = coords[event_id]
        assert math.hypot(lng, lat) <= radius + 1e-12
    assert coords["C"] == (1.0, 1.0)
    assert index.clustered_event_ids == {"A", "B"}


def test_cluster_membership_is_complete(event_factory):
    events = [event_factory(f"e{i}", lng=2.2945, lat=48.8584) for i in range(5)]
    events.append(event_factory("solo", lng=2.35, lat=48.85))

    features, index = build_point_features(events)

    assert index.clustered_event_ids == {f"e{i}" for i in range(5)}
    clustered_flags = {f["id"]: f["properties"]["clustered"] for f in features}
    assert clustered_flags["solo"] is False
    assert all(clustered_flags[f"e{i}"] for i in range(5))
    # every member gets a distinct marker
    assert len({index.coordinates_for(f"e{i}") for i in range(5)}) == 5


def test_unmappable_events_are_skipped_not_lost(event_factory):
    events = [
        event_factory("ok", lng=10, lat=20),
        event_factory("nogeo", name="Somewhere"),
        event_factory("nan", lng=float("nan"), lat=1),
    ]

    features, index = build_point_features(events)

    assert [f["id"] for f in features] == ["ok"]
    assert set(index.coordinates_by_event_id) == {"ok"}


def test_every_mappable_event_has_exactly_one_feature(event_factory):
    events = [event_factory(f"e{i}", lng=i % 3, lat=0) for i in range(9)]

    features, index = build_point_features(events)

    ids = [f["id"] for f in features]
    assert sorted(ids) == sorted(e.id for e in events)
    assert len(index.all_coordinates) == len(events)


def test_compilation_is_deterministic(event_factory):
    events = [
        event_factory("A", lng=5, lat=5, start="2024-01-02"),
        event_factory("B", lng=5, lat=5, start="2024-01-01"),
        event_factory("C", lng=6, lat=6, start="2024-01-03"),
    ]

    first = compile_map(events).model_dump(mode="json")
    second = compile_map(events).model_dump(mode="json")

    assert json.dumps(first, sort_keys=True) == json.dumps(second, sort_keys=True)


def test_point_feature_properties(event_factory):
    event = event_factory("m1", category="meal", lng=2.3, lat=48.8, name="Le Comptoir", city="Paris",
                          country="France", start="2024-05-01T19:00:00Z", type="restaurant")

    features, _ = build_point_features([event])
    props = features[0]["properties"]

    assert features[0]["geometry"] == {"type": "Point", "coordinates": [2.3, 48.8]}
    assert props["category"] == "meal"
    assert props["sprite"] == "meal/restaurant"
    assert props["spriteId"] == "styled-meal-restaurant"
    assert props["locationName"] == "Le Comptoir"
    assert props["city"] == "Paris"
    assert props["start"] == "2024-05-01T19:00:00Z"


def test_coordinate_key_folds_negative_zero():
    assert coordinate_key((-0.0, 0.0)) == coordinate_key((0.0, -0.0))
    assert coordinate_key((1.0000001, 2.0)) == coordinate_key((1.0, 2.0))
    assert coordinate_key((1.00001, 2.0)) != coordinate_key((1.0, 2.0))


def test_offset_coordinates_stay_on_circle():
    base = (10.0, 20.0)
    points = [offset_coordinates(base, i, 4, 0.001) for i in range(4)]

    assert len(set(points)) == 4
    for lng, lat in points:
        assert math.isclose(math.hypot(lng - base[0], lat - base[1]), 0.001)


def test_compile_map_bounds_and_routes(event_factory):
    events = [
        event_factory("a", lng=-10, lat=-5, start="2024-01-01"),
        event_factory("b", lng=20, lat=15, start="2024-01-02"),
    ]

    compiled = compile_map(events)

    assert compiled.bounds == ((-10.0, -5.0), (20.0, 15.0))
    assert len(compiled.route_features) == 1
    assert compiled.route_features[0]["properties"]["distanceKm"] == round(
        distance_between((-10.0, -5.0), (20.0, 15.0)), 3
    )


def test_compile_map_empty():
    compiled = compile_map([])
    assert compiled.point_features == []
    assert compiled.route_features == []
    assert compiled.bounds is None


def test_feature_collection_wraps_features():
    assert feature_collection([]) == {"type": "FeatureCollection", "features": []}
