from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from weekend.models.favorite import Favorite
from weekend.schemas.favorite import FavoriteCreate


async def list_favorites(db: AsyncSession) -> list[Favorite]:
    result = await db.execute(select(Favorite).order_by(Favorite.created_at.desc()))
    return list(result.scalars().all())


async def favorite_ids(db: AsyncSession) -> set[str]:
    result = await db.execute(select(Favorite.poi_id))
    return set(result.scalars().all())


async def is_favorite(db: AsyncSession, poi_id: str) -> bool:
    return await db.get(Favorite, poi_id) is not None


async def add_favorite(db: AsyncSession, fav: FavoriteCreate) -> Favorite:
    existing = await db.get(Favorite, fav.id)
    if existing:
        return existing
    favorite = Favorite(poi_id=fav.id, name=fav.name, lat=fav.lat, lon=fav.lon)
    db.add(favorite)
    await db.commit()
    await db.refresh(favorite)
    return favorite


async def remove_favorite(db: AsyncSession, poi_id: str) -> bool:
    favorite = await db.get(Favorite, poi_id)
    if not favorite:
        return False
    await db.delete(favorite)
    await db.commit()
    return True


async def toggle_favorite(db: AsyncSession, fav: FavoriteCreate) -> bool:
    """Add the POI if absent, remove it otherwise. Returns the new state."""
    if await remove_favorite(db, fav.id):
        return False
    await add_favorite(db, fav)
    return True
