import pytest

from geojson_featureset.parsers.accumulator import FeatureAccumulator
from geojson_featureset.parsers.state_machine import ParseState, ParseStateMachine
from geojson_featureset.transcoder import Transcoder


@pytest.fixture
def emitted():
    return []


@pytest.fixture
def machine(emitted):
    return ParseStateMachine(FeatureAccumulator(emitted), Transcoder("utf-8"))


def feed(machine, events):
    for event in events:
        if isinstance(event, tuple):
            machine.handle(*event)
        else:
            machine.handle(event, None)


def enter_feature(machine):
    feed(machine, [("map_key", "features"), "start_array", "start_map"])
    assert machine.state is ParseState.IN_FEATURES


def test_starts_outside(machine):
    assert machine.state is ParseState.OUTSIDE


@pytest.mark.parametrize(
    "key, expected",
    [
        ("features", ParseState.IN_FEATURES),
        ("geometry", ParseState.OUTSIDE),
        ("properties", ParseState.OUTSIDE),
        ("coordinates", ParseState.OUTSIDE),
        ("type", ParseState.OUTSIDE),
        ("bbox", ParseState.OUTSIDE),
    ],
)
def test_key_transitions_from_outside(machine, key, expected):
    machine.key(key)
    assert machine.state is expected


@pytest.mark.parametrize(
    "key, expected",
    [
        ("features", ParseState.IN_FEATURES),
        ("geometry", ParseState.IN_GEOMETRY),
        ("properties", ParseState.IN_PROPERTIES),
        ("coordinates", ParseState.IN_COORDINATES),
        ("type", ParseState.IN_FEATURES),
        ("id", ParseState.IN_FEATURES),
    ],
)
def test_key_transitions_inside_features(machine, key, expected):
    enter_feature(machine)
    machine.key(key)
    assert machine.state is expected


def test_foreign_member_with_properties_does_not_start_a_feature(machine, emitted):
    feed(
        machine,
        [
            "start_map",
            ("map_key", "features"),
            "start_array",
            "end_array",
            ("map_key", "crs"),
            "start_map",
            ("map_key", "type"),
            ("string", "name"),
            ("map_key", "properties"),
            "start_map",
            ("map_key", "name"),
            ("string", "EPSG:4326"),
            "end_map",
            "end_map",
            "end_map",
        ],
    )
    assert machine.state is ParseState.OUTSIDE
    assert emitted == []


def test_type_only_matters_inside_geometry(machine):
    machine.key("features")
    machine.key("type")
    assert machine.state is ParseState.IN_FEATURES
    machine.key("geometry")
    machine.key("type")
    assert machine.state is ParseState.IN_TYPE


def test_keys_inside_properties_are_property_names(machine):
    enter_feature(machine)
    feed(machine, [("map_key", "properties"), "start_map"])
    for name in ("geometry", "features", "type", "coordinates"):
        machine.key(name)
        assert machine.state is ParseState.IN_PROPERTIES
        assert machine.property_name == name


def test_close_properties_and_geometry_return_to_feature(machine):
    enter_feature(machine)
    feed(machine, [("map_key", "properties"), "start_map", "end_map"])
    assert machine.state is ParseState.IN_FEATURE
    feed(machine, [("map_key", "geometry"), "start_map", "end_map"])
    assert machine.state is ParseState.IN_FEATURE


def test_close_feature_emits_and_returns_to_features(machine, emitted):
    enter_feature(machine)
    feed(machine, [("map_key", "properties"), "start_map", ("map_key", "a"), ("string", "x"), "end_map", "end_map"])
    assert machine.state is ParseState.IN_FEATURES
    assert len(emitted) == 1
    assert emitted[0].id == 1
    assert emitted[0]["a"] == "x"


def test_close_object_elsewhere_is_a_no_op(machine, emitted):
    machine.end_object()
    assert machine.state is ParseState.OUTSIDE
    machine.key("features")
    machine.end_object()
    assert machine.state is ParseState.IN_FEATURES
    machine.key("geometry")
    machine.key("type")
    machine.end_object()
    assert machine.state is ParseState.IN_TYPE
    assert emitted == []


def test_type_after_coordinates_leaves_geometry_open(machine, emitted):
    enter_feature(machine)
    feed(
        machine,
        [
            ("map_key", "geometry"),
            "start_map",
            ("map_key", "coordinates"),
            "start_array",
            ("number", 1.0),
            ("number", 2.0),
            "end_array",
            ("map_key", "type"),
            ("string", "Point"),
            "end_map",
        ],
    )
    assert machine.state is ParseState.IN_TYPE
    machine.end_object()
    assert machine.state is ParseState.IN_TYPE
    assert emitted == []
    assert machine.accumulator.geometry.coords == (1.0, 2.0)
    assert machine.accumulator.declared_type == "Point"


def test_end_of_features_array_goes_outside(machine):
    feed(machine, [("map_key", "features"), "start_array", "end_array"])
    assert machine.state is ParseState.OUTSIDE


def test_nested_coordinate_arrays_commit_on_outermost_close(machine):
    enter_feature(machine)
    feed(
        machine,
        [
            ("map_key", "geometry"),
            "start_map",
            ("map_key", "type"),
            ("string", "Polygon"),
            ("map_key", "coordinates"),
            "start_array",
            "start_array",
            "start_array",
            ("number", 4.0),
            ("number", 5.0),
            "end_array",
            "start_array",
            ("number", 6.0),
            ("number", 7.0),
            "end_array",
            "end_array",
        ],
    )
    assert machine.state is ParseState.IN_COORDINATES
    assert machine.accumulator.geometry.coords == (0.0, 0.0)
    machine.end_array()
    assert machine.state is ParseState.IN_GEOMETRY
    assert machine.accumulator.geometry.coords == (4.0, 5.0)
    assert machine.accumulator.declared_type == "Polygon"


def test_non_numbers_in_coordinates_are_ignored(machine):
    enter_feature(machine)
    feed(
        machine,
        [("map_key", "coordinates"), "start_array", ("boolean", True), ("null", None), ("number", 1), ("string", "2"), ("number", 3), "end_array"],
    )
    assert machine.accumulator.geometry.coords == (1.0, 3.0)


def test_scalars_outside_meaningful_states_are_ignored(machine, emitted):
    feed(machine, [("map_key", "features"), ("number", 1.0), ("string", "x"), ("map_key", "id"), ("number", 3)])
    assert machine.accumulator.properties == {}
    assert machine.accumulator.coordinates.values == []


def test_declared_type_ignores_non_strings(machine):
    enter_feature(machine)
    feed(machine, [("map_key", "geometry"), ("map_key", "type"), ("number", 1)])
    assert machine.accumulator.declared_type is None


def test_strings_are_transcoded(machine):
    enter_feature(machine)
    feed(machine, [("map_key", "properties"), "start_map", ("map_key", "name"), ("string", "Cafe\u0301")])
    assert machine.accumulator.properties["name"] == "Caf\u00e9"


def test_nested_property_containers_are_skipped(machine):
    enter_feature(machine)
    feed(
        machine,
        [
            ("map_key", "properties"),
            "start_map",
            ("map_key", "outer"),
            "start_map",
            ("map_key", "inner"),
            ("number", 1),
            "end_map",
            ("map_key", "list"),
            "start_array",
            ("string", "a"),
            "end_array",
            ("map_key", "kept"),
            ("boolean", False),
        ],
    )
    assert machine.state is ParseState.IN_PROPERTIES
    assert machine.accumulator.properties == {"kept": False}
    machine.end_object()
    assert machine.state is ParseState.IN_FEATURE


def test_null_properties_return_to_feature(machine):
    enter_feature(machine)
    feed(machine, [("map_key", "properties"), ("null", None)])
    assert machine.state is ParseState.IN_FEATURE
    assert machine.accumulator.properties == {}


def test_unknown_event_raises(machine):
    with pytest.raises(KeyError):
        machine.handle("start_tuple", None)
