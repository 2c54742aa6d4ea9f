from typing import Annotated, Literal, Union

from pydantic import BaseModel, Field, computed_field

Metric = Literal["distance", "time"]
TravelMode = Literal["walking", "driving"]
DistanceUnit = Literal["m", "km"]
SortKey = Literal["auto", "distance", "time", "name", "category"]
SortDir = Literal["asc", "desc"]


class Coordinate(BaseModel):
    lat: float = Field(..., ge=-90, le=90)
    lon: float = Field(..., ge=-180, le=180)


class DistanceBudget(BaseModel):
    kind: Literal["distance"] = "distance"
    meters: float = Field(..., gt=0)

    @property
    def limit(self) -> float:
        return self.meters


class TimeBudget(BaseModel):
    kind: Literal["time"] = "time"
    minutes: float = Field(..., gt=0)
    mode: TravelMode = "walking"

    @property
    def limit(self) -> float:
        return self.minutes


Budget = Annotated[Union[DistanceBudget, TimeBudget], Field(discriminator="kind")]


class RadiusArea(BaseModel):
    kind: Literal["radius"] = "radius"
    center: Coordinate
    meters: int


class BoundingBox(BaseModel):
    kind: Literal["bbox"] = "bbox"
    south: float = Field(..., ge=-90, le=90)
    west: float = Field(..., ge=-180, le=180)
    north: float = Field(..., ge=-90, le=90)
    east: float = Field(..., ge=-180, le=180)


AreaSpec = Annotated[Union[RadiusArea, BoundingBox], Field(discriminator="kind")]


class CategorySelection(BaseModel):
    gourmet: bool = True
    sightseeing: bool = True
    details: list[str] = Field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not (self.details or self.gourmet or self.sightseeing)


class RawElement(BaseModel):
    """One record of an Overpass `elements` array."""

    type: str | None = None
    id: int
    lat: float | None = None
    lon: float | None = None
    center: Coordinate | None = None
    tags: dict[str, str] = Field(default_factory=dict)

    model_config = {"extra": "ignore", "coerce_numbers_to_str": True}


class POI(BaseModel):
    id: str
    name: str
    lat: float
    lon: float
    tags: dict[str, str] = Field(default_factory=dict)
    categories: list[str] = Field(default_factory=list)
    distance_m: float | None = None
    heuristic_eta_min: float | None = None
    refined_eta_min: float | None = None

    @computed_field
    @property
    def eta_min(self) -> float | None:
        if self.refined_eta_min is not None:
            return self.refined_eta_min
        return self.heuristic_eta_min


class ResultPage(BaseModel):
    page: int
    total_pages: int
    total: int
    items: list[POI]

    @computed_field
    @property
    def has_prev(self) -> bool:
        return self.page > 1

    @computed_field
    @property
    def has_next(self) -> bool:
        return self.page < self.total_pages


class SearchState(BaseModel):
    """User-facing search parameters, as carried in a shareable URL.

    `distance` and `time` hold the text the user typed; they are parsed by the
    budget translator when a search runs.
    """

    metric: Metric = "distance"
    distance: str = "1"
    distance_unit: DistanceUnit = "km"
    time: str = "15"
    mode: TravelMode = "walking"
    gourmet: bool = True
    sightseeing: bool = True
    details: list[str] = Field(default_factory=list)
    sort_by: SortKey = "auto"
    sort_dir: SortDir = "asc"
    use_bbox: bool = False
    fav_only: bool = False
    page: int = Field(1, ge=1)
    center: Coordinate | None = None
    zoom: int | None = Field(None, ge=0, le=22)

    model_config = {"coerce_numbers_to_str": True}

    @property
    def categories(self) -> CategorySelection:
        return CategorySelection(
            gourmet=self.gourmet, sightseeing=self.sightseeing, details=self.details
        )


class SearchRequest(SearchState):
    origin: Coordinate | None = Field(None, description="User position; map center is used when absent")
    bounds: BoundingBox | None = Field(None, description="Visible map bounds, used when use_bbox is set")


class PoiResult(POI):
    distance_text: str | None = None
    eta_text: str | None = None
    directions_url: str | None = None


class PageResponse(BaseModel):
    page: int
    total_pages: int
    total: int
    has_prev: bool
    has_next: bool
    items: list[PoiResult]


class SearchResponse(BaseModel):
    status: str
    message: str
    notices: list[str] = Field(default_factory=list)
    found: int = 0
    page: PageResponse | None = None
    state: SearchState
    share_query: str | None = None


class ThumbnailRequest(BaseModel):
    tags: dict[str, str] = Field(default_factory=dict)


class ThumbnailResponse(BaseModel):
    url: str | None
