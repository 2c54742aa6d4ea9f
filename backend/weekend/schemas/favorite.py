from datetime import datetime

from pydantic import BaseModel, Field


class FavoriteCreate(BaseModel):
    id: str = Field(..., min_length=1, max_length=64)
    name: str = Field(..., max_length=255)
    lat: float = Field(..., ge=-90, le=90)
    lon: float = Field(..., ge=-180, le=180)


class FavoriteResponse(BaseModel):
    id: str = Field(..., validation_alias="poi_id")
    name: str
    lat: float
    lon: float
    created_at: datetime | None = None

    model_config = {"from_attributes": True}
