"""Serialize search parameters to and from shareable URL query parameters."""
import logging
from collections.abc import Mapping
from urllib.parse import urlencode

from pydantic import ValidationError

from weekend.schemas.search import Coordinate, SearchState

logger = logging.getLogger(__name__)

# SearchState field -> URL key
URL_KEYS = {
    "metric": "metric",
    "distance": "distance",
    "distance_unit": "distanceUnit",
    "time": "time",
    "mode": "mode",
    "gourmet": "gourmet",
    "sightseeing": "sight",
    "details": "details",
    "sort_by": "sortBy",
    "sort_dir": "sortDir",
    "use_bbox": "bbox",
    "fav_only": "favOnly",
    "page": "page",
    "center": "center",
    "zoom": "z",
}

FLAG_FIELDS = {"gourmet", "sightseeing", "use_bbox", "fav_only"}

# Free-text budget fields; a blank value is kept so it does not restore as the default.
TEXT_FIELDS = {"distance", "time"}


def _encode(field: str, value: object) -> str | None:
    if value is None:
        return None
    if field in TEXT_FIELDS:
        return str(value)
    if field in FLAG_FIELDS:
        return "1" if value else "0"
    if field == "details":
        return ",".join(value) or None
    if field == "center":
        return f"{value.lat:.6f},{value.lon:.6f}"
    text = str(value)
    return text or None


def to_query_params(state: SearchState) -> dict[str, str]:
    params: dict[str, str] = {}
    for field, key in URL_KEYS.items():
        encoded = _encode(field, getattr(state, field))
        if encoded is not None:
            params[key] = encoded
    return params


def to_query_string(state: SearchState) -> str:
    return urlencode(to_query_params(state))


def _parse_center(text: str) -> Coordinate | None:
    parts = text.split(",")
    if len(parts) != 2:
        return None
    try:
        return Coordinate(lat=float(parts[0]), lon=float(parts[1]))
    except ValueError:
        return None


def _decode(field: str, text: str) -> object:
    if field in FLAG_FIELDS:
        return text == "1"
    if field == "details":
        return [d for d in text.split(",") if d]
    if field == "center":
        return _parse_center(text)
    return text


def from_query_params(params: Mapping[str, str]) -> SearchState:
    """Rebuild a SearchState; unknown keys are ignored and bad values fall back to defaults."""
    values: dict[str, object] = {}
    for field, key in URL_KEYS.items():
        if key not in params:
            continue
        decoded = _decode(field, params[key])
        if decoded is None:
            continue
        try:
            SearchState(**{field: decoded})
        except ValidationError:
            logger.debug("Ignoring invalid URL parameter %s=%r", key, params[key])
            continue
        values[field] = decoded
    return SearchState(**values)
