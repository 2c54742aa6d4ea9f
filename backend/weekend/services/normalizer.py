from weekend.config import settings
from weekend.schemas.search import POI, RawElement

UNKNOWN_NAME = "unknown"


def prefer_name(tags: dict[str, str], language: str | None = None) -> str | None:
    language = language or settings.name_language
    for key in (f"name:{language}", "name", "name:en", "brand", "operator"):
        if tags.get(key):
            return tags[key]
    return None


def fallback_name(tags: dict[str, str]) -> str:
    for key in ("amenity", "tourism", "leisure"):
        if tags.get(key):
            return tags[key]
    if "historic" in tags:
        return "historic"
    return UNKNOWN_NAME


def categories_of(tags: dict[str, str]) -> list[str]:
    cats = [tags[key] for key in ("amenity", "tourism", "leisure") if tags.get(key)]
    if "historic" in tags:
        cats.append("historic")
    return cats


def poi_id(element: RawElement) -> str:
    if element.type:
        return f"{element.type}/{element.id}"
    return str(element.id)


def normalize_element(element: RawElement, language: str | None = None) -> POI | None:
    """Map a raw Overpass element to a POI; None when it has no usable coordinate."""
    lat, lon = element.lat, element.lon
    if (lat is None or lon is None) and element.center is not None:
        lat, lon = element.center.lat, element.center.lon
    if lat is None or lon is None:
        return None

    tags = element.tags
    return POI(
        id=poi_id(element),
        name=prefer_name(tags, language) or fallback_name(tags),
        lat=lat,
        lon=lon,
        tags=tags,
        categories=categories_of(tags),
    )


def normalize_elements(elements: list[RawElement], language: str | None = None) -> list[POI]:
    pois = []
    for element in elements:
        poi = normalize_element(element, language)
        if poi is not None:
            pois.append(poi)
    return pois
