from urllib.parse import parse_qs, urlparse

from weekend.schemas.search import Coordinate
from weekend.services.navigation import directions_url, travel_mode_for


def test_directions_url():
    url = directions_url(Coordinate(lat=35.68, lon=139.76), Coordinate(lat=35.66, lon=139.70), "driving")
    parsed = urlparse(url)
    params = parse_qs(parsed.query)

    assert parsed.netloc == "www.google.com"
    assert parsed.path == "/maps/dir/"
    assert params == {
        "api": ["1"],
        "origin": ["35.68,139.76"],
        "destination": ["35.66,139.7"],
        "travelmode": ["driving"],
    }


def test_travel_mode_follows_time_metric():
    assert travel_mode_for("time", "driving") == "driving"
    assert travel_mode_for("distance", "driving") == "walking"
