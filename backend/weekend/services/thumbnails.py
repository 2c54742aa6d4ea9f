import logging
from urllib.parse import quote

import httpx

from weekend.config import settings

logger = logging.getLogger(__name__)

WIKIPEDIA_SUMMARY_URL = "https://{lang}.wikipedia.org/api/rest_v1/page/summary/{title}"
WIKIDATA_ENTITY_URL = "https://www.wikidata.org/wiki/Special:EntityData/{qid}.json"
COMMONS_FILE_URL = "https://commons.wikimedia.org/wiki/Special:FilePath/{filename}?width=120"


async def _get_json(url: str, client: httpx.AsyncClient | None) -> dict | None:
    if client is not None:
        resp = await client.get(url, timeout=settings.thumbnail_timeout)
    else:
        async with httpx.AsyncClient(timeout=settings.thumbnail_timeout) as own_client:
            resp = await own_client.get(url)
    if resp.status_code != 200:
        return None
    return resp.json()


async def _from_wikipedia(tag: str, client: httpx.AsyncClient | None) -> str | None:
    # Tag format is "<lang>:<title>", e.g. "ja:浅草寺".
    if ":" not in tag:
        return None
    lang, title = tag.split(":", 1)
    url = WIKIPEDIA_SUMMARY_URL.format(lang=lang, title=quote(title.replace(" ", "_"), safe=""))
    data = await _get_json(url, client)
    if not data:
        return None
    return (data.get("thumbnail") or {}).get("source")


async def _from_wikidata(qid: str, client: httpx.AsyncClient | None) -> str | None:
    data = await _get_json(WIKIDATA_ENTITY_URL.format(qid=qid), client)
    if not data:
        return None
    entity = data.get("entities", {}).get(qid, {})
    try:
        image = entity["claims"]["P18"][0]["mainsnak"]["datavalue"]["value"]
    except (KeyError, IndexError, TypeError):
        return None
    return COMMONS_FILE_URL.format(filename=quote(image.replace(" ", "_"), safe=""))


async def thumbnail_for(tags: dict[str, str], client: httpx.AsyncClient | None = None) -> str | None:
    """Image URL for a POI from its wikipedia/wikidata tags, or None."""
    try:
        src = None
        if tags.get("wikipedia"):
            src = await _from_wikipedia(tags["wikipedia"], client)
        if not src and tags.get("wikidata"):
            src = await _from_wikidata(tags["wikidata"], client)
        return src
    except (httpx.HTTPError, ValueError) as e:
        logger.debug("Thumbnail lookup failed: %s", e)
        return None
