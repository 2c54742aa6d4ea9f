import logging
from dataclasses import dataclass, field
from enum import Enum

import httpx
from pydantic import ValidationError

from weekend.config import settings
from weekend.schemas.search import (
    AreaSpec,
    BoundingBox,
    CategorySelection,
    Coordinate,
    RadiusArea,
    RawElement,
)
from weekend.services.budget import clamp_radius

logger = logging.getLogger(__name__)

SERVER_TIMEOUT_S = 25
MAX_ELEMENTS = 120

WORSHIP = '["amenity"="place_of_worship"]'

# Tag predicates per fine-grained category.
DETAIL_FILTERS = {
    "cafe": '["amenity"="cafe"]',
    "restaurant-ramen": '["amenity"="restaurant"]["cuisine"~"ramen",i]',
    "restaurant-sushi": '["amenity"="restaurant"]["cuisine"~"sushi",i]',
    "fast_food": '["amenity"="fast_food"]',
    "bar": '["amenity"="bar"]',
    "pub": '["amenity"="pub"]',
    "bakery": '["shop"="bakery"]',
    "park": '["leisure"="park"]',
    "garden": '["leisure"="garden"]',
    "museum": '["tourism"="museum"]',
    "gallery": '["tourism"="gallery"]',
    "viewpoint": '["tourism"="viewpoint"]',
    "attraction": '["tourism"="attraction"]',
    "theme_park": '["tourism"="theme_park"]',
    "zoo": '["tourism"="zoo"]',
    "aquarium": '["tourism"="aquarium"]',
    "historic": '["historic"]',
    "temple": WORSHIP + '["religion"="buddhist"]',
    "shrine": WORSHIP + '["religion"="shinto"]',
    "church": WORSHIP + '["religion"~"christian|catholic",i]',
}

GOURMET_FILTERS = ['["amenity"~"restaurant|cafe|fast_food|bar|pub"]']
SIGHTSEEING_FILTERS = [
    '["tourism"~"attraction|museum|artwork|viewpoint|gallery|theme_park|zoo|aquarium"]',
    '["leisure"~"park|garden"]',
    '["historic"]',
]


class OverpassError(Exception):
    pass


def radius_area(origin: Coordinate, meters: float) -> RadiusArea:
    return RadiusArea(center=origin, meters=clamp_radius(meters))


def _area_filter(area: AreaSpec) -> str:
    if isinstance(area, BoundingBox):
        return f"({area.south},{area.west},{area.north},{area.east})"
    return f"(around:{area.meters},{area.center.lat},{area.center.lon})"


def _tag_filters(categories: CategorySelection) -> list[str]:
    # Any fine-grained selection replaces the coarse pair entirely.
    details = [d for d in categories.details if d in DETAIL_FILTERS]
    if details:
        return [DETAIL_FILTERS[d] for d in details]

    filters: list[str] = []
    if categories.gourmet:
        filters.extend(GOURMET_FILTERS)
    if categories.sightseeing:
        filters.extend(SIGHTSEEING_FILTERS)
    return filters


def build_query(area: AreaSpec, categories: CategorySelection) -> str | None:
    """Build an Overpass QL query, or None when no category yields a clause."""
    filters = _tag_filters(categories)
    if not filters:
        return None

    bounds = _area_filter(area)
    clauses = "\n".join(f"  nwr{tag_filter}{bounds};" for tag_filter in filters)
    return f"""[out:json][timeout:{SERVER_TIMEOUT_S}];
(
{clauses}
);
out center {MAX_ELEMENTS};
"""


class FailoverState(str, Enum):
    IDLE = "idle"
    TRYING = "trying"
    SUCCESS = "success"
    EXHAUSTED = "exhausted"


@dataclass
class FailoverRun:
    """Walks an ordered endpoint list, advancing on each failure."""

    endpoints: list[str]
    state: FailoverState = FailoverState.IDLE
    index: int = -1
    last_error: Exception | None = None
    failures: list[tuple[str, str]] = field(default_factory=list)

    @property
    def current(self) -> str:
        return self.endpoints[self.index]

    def advance(self) -> bool:
        """Move to the next endpoint. Returns False once the list is exhausted."""
        if self.index + 1 >= len(self.endpoints):
            self.state = FailoverState.EXHAUSTED
            return False
        self.index += 1
        self.state = FailoverState.TRYING
        return True

    def fail(self, error: Exception) -> None:
        self.last_error = error
        self.failures.append((self.current, str(error) or type(error).__name__))
        logger.warning("Overpass endpoint failed: %s (%s)", self.current, self.failures[-1][1])

    def succeed(self) -> None:
        self.state = FailoverState.SUCCESS


async def _post_query(
    url: str, query: str, timeout: float, client: httpx.AsyncClient | None
) -> httpx.Response:
    if client is not None:
        return await client.post(url, data={"data": query}, timeout=timeout)
    async with httpx.AsyncClient(timeout=timeout) as own_client:
        return await own_client.post(url, data={"data": query})


async def fetch_elements(
    query: str,
    endpoints: list[str] | None = None,
    client: httpx.AsyncClient | None = None,
    timeout: float | None = None,
) -> list[RawElement]:
    """POST the query to each endpoint in turn until one answers.

    Attempts are sequential. If every endpoint fails, OverpassError carries the
    last underlying error only.
    """
    run = FailoverRun(endpoints=list(endpoints if endpoints is not None else settings.overpass_urls))
    timeout = timeout if timeout is not None else settings.overpass_timeout

    while run.advance():
        try:
            resp = await _post_query(run.current, query, timeout, client)
            if resp.status_code != 200:
                raise OverpassError(f"Overpass error {resp.status_code}")
            data = resp.json()
        except httpx.TimeoutException:
            run.fail(OverpassError(f"Overpass timeout after {timeout:g}s"))
            continue
        except (httpx.HTTPError, OverpassError, ValueError) as e:
            run.fail(e)
            continue

        run.succeed()
        elements = (data.get("elements") or []) if isinstance(data, dict) else []
        return _parse_elements(elements)

    if run.last_error is None:
        raise OverpassError("No Overpass endpoints configured")
    raise OverpassError(str(run.last_error)) from run.last_error


def _is_record(element: object) -> bool:
    return isinstance(element, dict) and isinstance(element.get("id"), int)


def _parse_elements(elements: object) -> list[RawElement]:
    if not isinstance(elements, list):
        return []
    parsed = []
    for el in elements:
        if not _is_record(el):
            continue
        try:
            parsed.append(RawElement.model_validate(el))
        except ValidationError as e:
            logger.debug("Skipping malformed Overpass element %s: %s", el.get("id"), e)
    return parsed
