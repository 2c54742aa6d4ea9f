from urllib.parse import parse_qsl

from weekend.schemas.search import Coordinate, SearchState
from weekend.services.url_state import from_query_params, to_query_params, to_query_string


def test_round_trip_defaults():
    state = SearchState()
    assert from_query_params(to_query_params(state)) == state


def test_round_trip_every_field():
    state = SearchState(
        metric="time",
        distance="2.5",
        distance_unit="m",
        time="30",
        mode="driving",
        gourmet=False,
        sightseeing=True,
        details=["cafe", "restaurant-ramen", "temple"],
        sort_by="name",
        sort_dir="desc",
        use_bbox=True,
        fav_only=True,
        page=3,
        center=Coordinate(lat=35.681236, lon=139.767125),
        zoom=15,
    )
    assert from_query_params(to_query_params(state)) == state


def test_round_trip_through_query_string():
    state = SearchState(details=["park", "garden"], page=2, center=Coordinate(lat=-33.5, lon=151.25))
    params = dict(parse_qsl(to_query_string(state)))
    assert from_query_params(params) == state


def test_blank_budget_text_round_trips():
    state = SearchState(distance="", time="")
    params = to_query_params(state)
    assert params["distance"] == ""
    assert params["time"] == ""
    assert from_query_params(params) == state
    assert from_query_params(dict(parse_qsl(to_query_string(state), keep_blank_values=True))) == state


def test_url_keys_and_flags():
    params = to_query_params(SearchState(gourmet=True, sightseeing=False, details=["zoo"], zoom=12))
    assert params["gourmet"] == "1"
    assert params["sight"] == "0"
    assert params["details"] == "zoo"
    assert params["distanceUnit"] == "km"
    assert params["sortBy"] == "auto"
    assert params["z"] == "12"
    assert params["bbox"] == "0"
    assert params["favOnly"] == "0"


def test_empty_values_are_omitted():
    params = to_query_params(SearchState())
    assert "details" not in params
    assert "center" not in params
    assert "z" not in params


def test_center_is_serialized_with_six_decimals():
    params = to_query_params(SearchState(center=Coordinate(lat=35.1234567, lon=139.7654321)))
    assert params["center"] == "35.123457,139.765432"


def test_invalid_values_fall_back_to_defaults():
    state = from_query_params(
        {"metric": "altitude", "page": "0", "center": "north,pole", "z": "99", "sortDir": "up", "mode": "walking"}
    )
    assert state.metric == "distance"
    assert state.page == 1
    assert state.center is None
    assert state.zoom is None
    assert state.sort_dir == "asc"


def test_unknown_keys_are_ignored():
    state = from_query_params({"utm_source": "x", "time": "45"})
    assert state.time == "45"


def test_raw_budget_text_is_preserved():
    state = from_query_params({"distance": "abc"})
    assert state.distance == "abc"
