import math
from collections.abc import Collection

from weekend.schemas.search import POI, Budget, ResultPage, TimeBudget

PAGE_SIZE = 20
MAX_RESULTS = 200


def within_budget(pois: list[POI], budget: Budget) -> list[POI]:
    if isinstance(budget, TimeBudget):
        return [p for p in pois if p.eta_min is not None and p.eta_min <= budget.minutes]
    return [p for p in pois if p.distance_m is not None and p.distance_m <= budget.meters]


def favorites_only(pois: list[POI], favorite_ids: Collection[str]) -> list[POI]:
    return [p for p in pois if p.id in favorite_ids]


def resolve_sort_key(sort_by: str, metric: str) -> str:
    if sort_by == "auto":
        return "distance" if metric == "distance" else "time"
    return sort_by


def _or_inf(value: float | None) -> float:
    return math.inf if value is None else value


SORT_KEYS = {
    "distance": lambda p: _or_inf(p.distance_m),
    "time": lambda p: _or_inf(p.eta_min),
    "name": lambda p: (p.name or "").lower(),
    "category": lambda p: p.categories[0] if p.categories else "",
}


def sort_pois(pois: list[POI], sort_by: str = "auto", sort_dir: str = "asc", metric: str = "distance") -> list[POI]:
    key = SORT_KEYS.get(resolve_sort_key(sort_by, metric))
    if key is None:
        return list(pois)
    return sorted(pois, key=key, reverse=sort_dir == "desc")


def rank(
    pois: list[POI],
    budget: Budget,
    sort_by: str = "auto",
    sort_dir: str = "asc",
    fav_only: bool = False,
    favorite_ids: Collection[str] = (),
) -> list[POI]:
    """Budget filter, optional favorites filter, sort, then cap the result size."""
    items = within_budget(pois, budget)
    if fav_only:
        items = favorites_only(items, favorite_ids)
    return sort_pois(items, sort_by, sort_dir, budget.kind)[:MAX_RESULTS]


def total_pages(total: int, page_size: int = PAGE_SIZE) -> int:
    return max(1, math.ceil(total / page_size))


def paginate(items: list[POI], page: int = 1, page_size: int = PAGE_SIZE) -> ResultPage:
    pages = total_pages(len(items), page_size)
    page = min(max(page, 1), pages)
    start = (page - 1) * page_size
    return ResultPage(
        page=page,
        total_pages=pages,
        total=len(items),
        items=items[start : start + page_size],
    )
