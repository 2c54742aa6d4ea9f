from datetime import datetime

from sqlalchemy import Column, DateTime, Float, String

from weekend.database import Base


class Favorite(Base):
    __tablename__ = "favorites"

    poi_id = Column(String(64), primary_key=True)  # e.g. "node/123456"
    name = Column(String(255), nullable=False)
    lat = Column(Float, nullable=False)
    lon = Column(Float, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow)
