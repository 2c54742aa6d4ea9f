import os

os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")

import httpx
import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from weekend.database import Base
from weekend.models.favorite import Favorite  # noqa: F401  registers the table
from weekend.schemas.search import POI

OVERPASS_A = "https://overpass-a.test/api/interpreter"
OVERPASS_B = "https://overpass-b.test/api/interpreter"
OVERPASS_C = "https://overpass-c.test/api/interpreter"

# Tokyo Station
ORIGIN = {"lat": 35.681236, "lon": 139.767125}


def make_poi(poi_id, name="Spot", distance=None, eta=None, refined=None, categories=None, lat=35.68, lon=139.76):
    return POI(
        id=str(poi_id),
        name=name,
        lat=lat,
        lon=lon,
        categories=categories or [],
        distance_m=distance,
        heuristic_eta_min=eta,
        refined_eta_min=refined,
    )


def element(el_id, lat=35.682, lon=139.768, tags=None, el_type="node"):
    return {"type": el_type, "id": el_id, "lat": lat, "lon": lon, "tags": tags or {"amenity": "cafe", "name": f"Cafe {el_id}"}}


def mock_client(handler) -> httpx.AsyncClient:
    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


@pytest.fixture
def endpoints():
    return [OVERPASS_A, OVERPASS_B, OVERPASS_C]


@pytest_asyncio.fixture
async def db_sessionmaker():
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield async_sessionmaker(engine, expire_on_commit=False)
    await engine.dispose()


@pytest_asyncio.fixture
async def db(db_sessionmaker):
    async with db_sessionmaker() as session:
        yield session
