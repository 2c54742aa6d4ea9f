from urllib.parse import urlencode

from weekend.config import settings
from weekend.schemas.search import Coordinate


def travel_mode_for(metric: str, mode: str) -> str:
    """Google Maps travel mode: the chosen mode for time searches, walking otherwise."""
    return mode if metric == "time" else "walking"


def directions_url(origin: Coordinate, destination: Coordinate, mode: str = "walking") -> str:
    params = {
        "api": "1",
        "origin": f"{origin.lat},{origin.lon}",
        "destination": f"{destination.lat},{destination.lon}",
        "travelmode": mode,
    }
    return f"{settings.directions_url}?{urlencode(params)}"
