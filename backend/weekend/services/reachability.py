import logging

import httpx

from weekend.schemas.search import POI, Coordinate
from weekend.services import osrm_client
from weekend.services.budget import speed_for
from weekend.utils.geo import haversine_m

logger = logging.getLogger(__name__)

REFINE_LIMIT = 100


def estimate_heuristic(pois: list[POI], origin: Coordinate, mode: str) -> list[POI]:
    """Straight-line distance and constant-speed ETA for every POI."""
    speed = speed_for(mode)
    estimated = []
    for poi in pois:
        distance = haversine_m(origin.lat, origin.lon, poi.lat, poi.lon)
        estimated.append(
            poi.model_copy(update={"distance_m": distance, "heuristic_eta_min": distance / speed})
        )
    return estimated


async def refine_etas(
    pois: list[POI],
    origin: Coordinate,
    mode: str,
    client: httpx.AsyncClient | None = None,
) -> list[POI]:
    """Attach network travel times to the first REFINE_LIMIT POIs.

    Best effort: any failure leaves every POI with its heuristic ETA only.
    """
    head = pois[:REFINE_LIMIT]
    if not head:
        return pois

    try:
        minutes = await osrm_client.table_durations(
            origin, [Coordinate(lat=p.lat, lon=p.lon) for p in head], mode, client=client
        )
    except (osrm_client.OsrmError, httpx.HTTPError) as e:
        logger.warning("OSRM failed, falling back to heuristic ETAs: %s", e)
        return pois

    refined = [
        poi.model_copy(update={"refined_eta_min": m}) if m is not None else poi
        for poi, m in zip(head, minutes)
    ]
    return refined + pois[REFINE_LIMIT:]


async def estimate(
    pois: list[POI],
    origin: Coordinate,
    mode: str,
    client: httpx.AsyncClient | None = None,
) -> list[POI]:
    return await refine_etas(estimate_heuristic(pois, origin, mode), origin, mode, client=client)
