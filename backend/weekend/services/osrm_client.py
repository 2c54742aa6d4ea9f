import math

import httpx

from weekend.config import settings
from weekend.schemas.search import Coordinate


class OsrmError(Exception):
    pass


# OSRM profile names per travel mode.
PROFILES = {
    "walking": "foot",
    "driving": "driving",
}

# Destinations per table request; the public demo server rejects large batches.
CHUNK_SIZE = 80


def _coords_path(origin: Coordinate, destinations: list[Coordinate]) -> str:
    points = [origin, *destinations]
    return ";".join(f"{p.lon},{p.lat}" for p in points)


def _to_minutes(seconds: object) -> float | None:
    if isinstance(seconds, bool) or not isinstance(seconds, (int, float)):
        return None
    if not math.isfinite(seconds):
        return None
    return seconds / 60


async def _get_table(
    url: str, timeout: float, client: httpx.AsyncClient | None
) -> httpx.Response:
    params = {"sources": "0", "annotations": "duration"}
    if client is not None:
        return await client.get(url, params=params, timeout=timeout)
    async with httpx.AsyncClient(timeout=timeout) as own_client:
        return await own_client.get(url, params=params)


async def table_durations(
    origin: Coordinate,
    destinations: list[Coordinate],
    mode: str = "walking",
    client: httpx.AsyncClient | None = None,
) -> list[float | None]:
    """
    Travel time in minutes from origin to each destination.
    Chunks are requested one after another; cells OSRM cannot route are None.
    """
    profile = PROFILES.get(mode, "foot")
    results: list[float | None] = [None] * len(destinations)

    for start in range(0, len(destinations), CHUNK_SIZE):
        chunk = destinations[start : start + CHUNK_SIZE]
        url = f"{settings.osrm_url}/table/v1/{profile}/{_coords_path(origin, chunk)}"
        resp = await _get_table(url, settings.osrm_timeout, client)

        if resp.status_code != 200:
            raise OsrmError(f"OSRM error {resp.status_code}: {resp.text[:200]}")

        try:
            data = resp.json()
        except ValueError as e:
            raise OsrmError(f"OSRM returned invalid JSON: {e}") from e

        if not isinstance(data, dict):
            raise OsrmError("OSRM returned an unexpected payload")
        rows = data.get("durations") or [[]]
        if not isinstance(rows, list) or not isinstance(rows[0] or [], list):
            raise OsrmError("OSRM returned a malformed durations table")
        row = rows[0] or []
        # Column 0 is the origin itself.
        for offset in range(len(chunk)):
            cell = row[offset + 1] if offset + 1 < len(row) else None
            results[start + offset] = _to_minutes(cell)

    return results
