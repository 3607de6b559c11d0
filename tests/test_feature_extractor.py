import copy
import math

from Mission_Converter.feature_extractor import (
    SHAPE_FEATURE_COLLECTION, SHAPE_FLAT_POINTS, SHAPE_MISSION_SET, SHAPE_UNRECOGNIZED,
    classify_input, normalize, resolve_portal_coordinates, portal_placeholder_title,
    feature_coordinates, feature_title, is_present
)


def test_feature_collection_passthrough():
    feature = {"type": "Feature", "properties": {},
               "geometry": {"type": "Point", "coordinates": [174.77, -41.29]}}
    raw = {"type": "FeatureCollection", "features": [feature]}

    assert normalize(raw) == [feature]


def test_feature_collection_wins_over_missions():
    raw = {"type": "FeatureCollection", "features": [],
           "missions": [{"portals": [{"location": {"lat": 1, "lng": 2}}]}]}
    assert classify_input(raw) == SHAPE_FEATURE_COLLECTION
    assert normalize(raw) == []


def test_flat_point_list():
    raw = [{"lat": -41.29, "lng": 174.77, "title": "A"}, {"lat": -41.30, "lng": 174.78}]
    features = normalize(raw)

    assert len(features) == 2
    assert feature_title(features[0]) == "A"
    assert features[1]["properties"]["title"] == ""
    assert feature_coordinates(features[1]) == (174.78, -41.30)


def test_flat_point_list_uses_name_and_keeps_incomplete_points():
    raw = [{"lat": 1.0, "lng": 2.0, "name": "Named"}, {"title": "No coords"}, None]
    features = normalize(raw)

    assert [feature_title(f) for f in features] == ["Named", "No coords", ""]
    assert features[1]["geometry"]["coordinates"] == [None, None]
    assert feature_coordinates(features[1]) is None


def test_list_without_numeric_lat_is_unrecognized():
    assert classify_input([{"lat": "1.0", "lng": 2}]) == SHAPE_UNRECOGNIZED
    assert classify_input([None]) == SHAPE_UNRECOGNIZED
    assert classify_input([]) == SHAPE_UNRECOGNIZED
    assert normalize([{"lat": True, "lng": 2}]) == []


def test_nested_missions_drop_portals_without_coordinates():
    raw = {"missions": [{"portals": [
        {"location": {"latitude": -41.29, "longitude": 174.77}},
        {"location": {"lat": -41.30, "lng": 174.78}, "title": "Named"},
        {},
    ]}]}
    features = normalize(raw)

    assert classify_input(raw) == SHAPE_MISSION_SET
    assert [feature_title(f) for f in features] == ["Portal 1-1", "Named"]
    assert feature_coordinates(features[0]) == (174.77, -41.29)


def test_nested_geometry_point():
    raw = {"missions": [{"portals": [
        {"geometry": {"type": "Point", "coordinates": [174.77, -41.29]}},
    ]}]}
    assert feature_coordinates(normalize(raw)[0]) == (174.77, -41.29)


def test_geometry_must_be_point_with_numeric_coordinates():
    assert resolve_portal_coordinates({"geometry": {"type": "LineString", "coordinates": [1, 2]}}) is None
    assert resolve_portal_coordinates({"geometry": {"type": "Point", "coordinates": ["1", 2]}}) is None
    assert resolve_portal_coordinates({"geometry": {"type": "Point", "coordinates": [1]}}) is None


def test_location_takes_priority_over_geometry():
    portal = {"location": {"latitude": 10, "longitude": 20},
              "geometry": {"type": "Point", "coordinates": [99, 88]}}
    assert resolve_portal_coordinates(portal) == (20, 10)


def test_geometry_used_when_location_is_unusable():
    portal = {"location": {"latitude": "10"},
              "geometry": {"type": "Point", "coordinates": [99, 88]}}
    assert resolve_portal_coordinates(portal) == (99, 88)


def test_nan_is_accepted_as_a_number():
    coords = resolve_portal_coordinates({"location": {"lat": float("nan"), "lng": 1.0}})
    assert coords is not None
    assert math.isnan(coords[1])


def test_unrecognized_inputs_yield_empty_list():
    for raw in (None, {}, 0, 3.5, "text", True, {"missions": "nope"}, {"missions": None}):
        assert normalize(raw) == []
    assert normalize() == []


def test_malformed_missions_and_portals_are_treated_as_empty():
    raw = {"missions": [
        None,
        {"portals": {"title": "not a list"}},
        {"portals": [None, 5, {"title": "ok", "location": {"lat": 1, "lng": 2}}]},
    ]}
    features = normalize(raw)

    assert len(features) == 1
    assert feature_title(features[0]) == "ok"


def test_row_major_order_with_placeholders():
    raw = {"missions": [
        {"portals": [{"location": {"lat": 0, "lng": 0}}, {}, {"location": {"lat": 0, "lng": 1}}]},
        {"portals": [{"location": {"lat": 1, "lng": 0}}, {"location": {"lat": 1, "lng": 1}}]},
    ]}
    titles = [feature_title(f) for f in normalize(raw)]
    assert titles == ["Portal 1-1", "Portal 1-3", "Portal 2-1", "Portal 2-2"]


def test_placeholder_title_is_one_based():
    assert portal_placeholder_title(0, 0) == "Portal 1-1"
    assert portal_placeholder_title(2, 9) == "Portal 3-10"


def test_normalize_is_idempotent_and_does_not_mutate(mission_set):
    before = copy.deepcopy(mission_set)
    first = normalize(mission_set)
    second = normalize(mission_set)

    assert first == second
    assert mission_set == before
    assert len(first) == 3


def test_debug_reports_skipped_portals(mission_set, capsys):
    normalize(mission_set, debug=True)
    out = capsys.readouterr().out
    assert "Skipped 1 portal(s)" in out


def test_empty_location_still_counts_as_the_source():
    portal = {"location": {}, "geometry": {"latitude": 1.0, "longitude": 2.0}}
    assert resolve_portal_coordinates(portal) is None

    portal = {"location": [], "geometry": {"type": "Point", "coordinates": [2.0, 1.0]}}
    assert resolve_portal_coordinates(portal) == (2.0, 1.0)


def test_falsy_location_falls_through_to_geometry():
    for location in (None, 0, "", False, float("nan")):
        portal = {"location": location, "geometry": {"latitude": 1.0, "longitude": 2.0}}
        assert resolve_portal_coordinates(portal) == (2.0, 1.0)


def test_is_present():
    assert is_present({}) and is_present([]) and is_present(-1.5) and is_present("x")
    assert not any(is_present(v) for v in (None, False, 0, 0.0, "", float("nan")))
