import logging

from fastapi import APIRouter, Depends, HTTPException, Query, Request
from sqlalchemy.ext.asyncio import AsyncSession

from weekend.database import get_db
from weekend.schemas.favorite import FavoriteCreate, FavoriteResponse
from weekend.schemas.search import (
    BoundingBox,
    Coordinate,
    PageResponse,
    PoiResult,
    ResultPage,
    SearchRequest,
    SearchResponse,
    SearchState,
    ThumbnailRequest,
    ThumbnailResponse,
)
from weekend.services import favorites
from weekend.services.navigation import directions_url, travel_mode_for
from weekend.services.search import SearchSession, SearchStatus
from weekend.services.thumbnails import thumbnail_for
from weekend.services.url_state import from_query_params
from weekend.utils.geo import meters_to_human, minutes_to_human

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1")


def _page_response(page: ResultPage, origin: Coordinate, state: SearchState) -> PageResponse:
    mode = travel_mode_for(state.metric, state.mode)
    items = []
    for poi in page.items:
        items.append(
            PoiResult(
                **poi.model_dump(exclude={"eta_min"}),
                distance_text=meters_to_human(poi.distance_m) if poi.distance_m is not None else None,
                eta_text=minutes_to_human(poi.eta_min) if poi.eta_min is not None else None,
                directions_url=directions_url(origin, Coordinate(lat=poi.lat, lon=poi.lon), mode),
            )
        )
    return PageResponse(
        page=page.page,
        total_pages=page.total_pages,
        total=page.total,
        has_prev=page.has_prev,
        has_next=page.has_next,
        items=items,
    )


async def _run_search(req: SearchRequest, db: AsyncSession) -> SearchResponse:
    fav_ids = await favorites.favorite_ids(db) if req.fav_only else set()
    session = SearchSession()
    outcome = await session.search(req, favorite_ids=fav_ids)

    if outcome.status in (SearchStatus.INVALID, SearchStatus.NO_CRITERIA):
        raise HTTPException(status_code=400, detail=outcome.message)
    if outcome.status == SearchStatus.FAILED:
        raise HTTPException(status_code=502, detail=outcome.message)

    return SearchResponse(
        status=outcome.status.value,
        message=outcome.message,
        notices=outcome.notices,
        found=outcome.found,
        page=_page_response(outcome.page, session.origin, session.state),
        state=session.state,
        share_query=session.share_query(),
    )


@router.post("/search", response_model=SearchResponse)
async def search(req: SearchRequest, db: AsyncSession = Depends(get_db)):
    try:
        return await _run_search(req, db)
    except HTTPException:
        raise
    except Exception as e:
        logger.exception("Search failed")
        raise HTTPException(status_code=500, detail=str(e))


@router.get("/search", response_model=SearchResponse)
async def restore_search(
    request: Request,
    lat: float | None = Query(None, ge=-90, le=90),
    lon: float | None = Query(None, ge=-180, le=180),
    south: float | None = Query(None, ge=-90, le=90),
    west: float | None = Query(None, ge=-180, le=180),
    north: float | None = Query(None, ge=-90, le=90),
    east: float | None = Query(None, ge=-180, le=180),
    db: AsyncSession = Depends(get_db),
):
    """Re-run a search from shareable URL parameters.

    Map bounds for `bbox=1` come from `south`, `west`, `north` and `east`;
    without all four the search falls back to the budget radius with a notice.
    """
    state = from_query_params(request.query_params)
    origin = Coordinate(lat=lat, lon=lon) if lat is not None and lon is not None else None
    edges = (south, west, north, east)
    bounds = None
    if all(v is not None for v in edges):
        bounds = BoundingBox(south=south, west=west, north=north, east=east)
    req = SearchRequest(**state.model_dump(), origin=origin, bounds=bounds)
    try:
        return await _run_search(req, db)
    except HTTPException:
        raise
    except Exception as e:
        logger.exception("Restoring search failed")
        raise HTTPException(status_code=500, detail=str(e))


@router.get("/favorites", response_model=list[FavoriteResponse])
async def list_favorites(db: AsyncSession = Depends(get_db)):
    return await favorites.list_favorites(db)


@router.post("/favorites", response_model=FavoriteResponse)
async def add_favorite(req: FavoriteCreate, db: AsyncSession = Depends(get_db)):
    return await favorites.add_favorite(db, req)


@router.delete("/favorites/{poi_id:path}")
async def delete_favorite(poi_id: str, db: AsyncSession = Depends(get_db)):
    if not await favorites.remove_favorite(db, poi_id):
        raise HTTPException(status_code=404, detail="Favorite not found")
    return {"ok": True}


@router.post("/thumbnail", response_model=ThumbnailResponse)
async def thumbnail(req: ThumbnailRequest):
    return {"url": await thumbnail_for(req.tags)}
