"""Search orchestration: one user-triggered search end to end.

A SearchSession owns the mutable pipeline state (last parameters, estimated
POIs, ranked list, page). Each search that reaches the network gets its own
CancelToken and cancels the previous one; a superseded search discards its
results. State is only written after the last await.
"""
import logging
from collections.abc import Collection
from dataclasses import dataclass, field
from enum import Enum

import httpx

from weekend.schemas.search import (
    POI,
    Budget,
    Coordinate,
    ResultPage,
    SearchRequest,
    SearchState,
)
from weekend.services import overpass_client, reachability, ranking
from weekend.services.budget import BudgetError, search_radius, translate_budget
from weekend.services.normalizer import normalize_elements
from weekend.services.url_state import to_query_string

logger = logging.getLogger(__name__)

MSG_NO_CATEGORY = "Select at least one category."
MSG_NO_ORIGIN = "No location available. Allow location access or move the map."
MSG_NO_CRITERIA = "Not enough search criteria."
MSG_FAILED = "An error occurred while searching. Please try again later."
MSG_MAP_CENTER = "Current location unavailable; searching from the map center."
MSG_NO_BOUNDS = "Map bounds unavailable; searching within the budget radius instead."


class SearchStatus(str, Enum):
    OK = "ok"
    INVALID = "invalid"
    NO_CRITERIA = "no_criteria"
    FAILED = "failed"
    CANCELLED = "cancelled"


class SearchCancelled(Exception):
    pass


class CancelToken:
    def __init__(self) -> None:
        self.cancelled = False

    def cancel(self) -> None:
        self.cancelled = True

    def raise_if_cancelled(self) -> None:
        if self.cancelled:
            raise SearchCancelled()


@dataclass
class SearchOutcome:
    status: SearchStatus
    message: str
    notices: list[str] = field(default_factory=list)
    found: int = 0
    page: ResultPage | None = None

    @property
    def ok(self) -> bool:
        return self.status == SearchStatus.OK


class SearchSession:
    def __init__(
        self,
        client: httpx.AsyncClient | None = None,
        endpoints: list[str] | None = None,
    ) -> None:
        self.client = client
        self.endpoints = endpoints
        self.state: SearchState | None = None
        self.origin: Coordinate | None = None
        self.budget: Budget | None = None
        self.reachable: list[POI] = []
        self.items: list[POI] = []
        self.page: ResultPage | None = None
        self._token: CancelToken | None = None

    def _new_token(self) -> CancelToken:
        if self._token is not None:
            self._token.cancel()
        self._token = CancelToken()
        return self._token

    async def search(
        self, request: SearchRequest, favorite_ids: Collection[str] = ()
    ) -> SearchOutcome:
        notices: list[str] = []

        origin = request.origin
        if origin is None:
            if request.center is None:
                return SearchOutcome(SearchStatus.INVALID, MSG_NO_ORIGIN)
            origin = request.center
            notices.append(MSG_MAP_CENTER)

        categories = request.categories
        if categories.is_empty:
            return SearchOutcome(SearchStatus.INVALID, MSG_NO_CATEGORY, notices)

        try:
            budget = translate_budget(
                request.metric, request.distance, request.distance_unit, request.time, request.mode
            )
        except BudgetError as e:
            return SearchOutcome(SearchStatus.INVALID, str(e), notices)

        if request.use_bbox and request.bounds is not None:
            area = request.bounds
        else:
            if request.use_bbox:
                notices.append(MSG_NO_BOUNDS)
            area = overpass_client.radius_area(origin, search_radius(budget))

        query = overpass_client.build_query(area, categories)
        if query is None:
            return SearchOutcome(SearchStatus.NO_CRITERIA, MSG_NO_CRITERIA, notices)

        token = self._new_token()

        try:
            elements = await overpass_client.fetch_elements(
                query, endpoints=self.endpoints, client=self.client
            )
            token.raise_if_cancelled()
            pois = normalize_elements(elements)
            pois = await reachability.estimate(pois, origin, request.mode, client=self.client)
            token.raise_if_cancelled()
        except SearchCancelled:
            logger.info("Discarding results of a superseded search")
            return SearchOutcome(SearchStatus.CANCELLED, "Superseded by a newer search", notices)
        except overpass_client.OverpassError as e:
            if token.cancelled:
                return SearchOutcome(SearchStatus.CANCELLED, "Superseded by a newer search", notices)
            # Previous results are kept on provider exhaustion.
            logger.warning("Search failed, all Overpass endpoints exhausted: %s", e)
            return SearchOutcome(SearchStatus.FAILED, MSG_FAILED, notices)

        reachable = ranking.within_budget(pois, budget)
        state = SearchState(**request.model_dump(include=set(SearchState.model_fields)))

        self.origin = origin
        self.budget = budget
        self.reachable = reachable
        self.state = state
        page = self._render(favorite_ids)

        return SearchOutcome(
            SearchStatus.OK,
            f"Found {len(self.items)} spots",
            notices,
            found=len(self.items),
            page=page,
        )

    def _render(self, favorite_ids: Collection[str] = ()) -> ResultPage:
        state = self.state
        self.items = ranking.rank(
            self.reachable,
            self.budget,
            sort_by=state.sort_by,
            sort_dir=state.sort_dir,
            fav_only=state.fav_only,
            favorite_ids=favorite_ids,
        )
        self.page = ranking.paginate(self.items, state.page)
        state.page = self.page.page
        return self.page

    def _require_results(self) -> SearchState:
        if self.state is None:
            raise RuntimeError("No search has completed yet")
        return self.state

    def resort(self, sort_by: str, sort_dir: str = "asc", favorite_ids: Collection[str] = ()) -> ResultPage:
        """Re-sort the current results client-side and go back to page 1."""
        state = self._require_results()
        self.state = state.model_copy(update={"sort_by": sort_by, "sort_dir": sort_dir, "page": 1})
        return self._render(favorite_ids)

    def goto_page(self, page: int) -> ResultPage:
        state = self._require_results()
        self.page = ranking.paginate(self.items, page)
        self.state = state.model_copy(update={"page": self.page.page})
        return self.page

    def set_favorites_only(self, fav_only: bool, favorite_ids: Collection[str] = ()) -> ResultPage:
        state = self._require_results()
        self.state = state.model_copy(update={"fav_only": fav_only, "page": 1})
        return self._render(favorite_ids)

    def share_query(self) -> str | None:
        if self.state is None:
            return None
        return to_query_string(self.state)
