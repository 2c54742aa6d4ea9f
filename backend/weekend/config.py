from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    database_url: str = "postgresql+asyncpg://weekend:weekend@db:5432/weekend"
    overpass_urls: list[str] = [
        "https://overpass-api.de/api/interpreter",
        "https://overpass.kumi.systems/api/interpreter",
        "https://lz4.overpass-api.de/api/interpreter",
    ]
    overpass_timeout: float = 12.0
    osrm_url: str = "https://router.project-osrm.org"
    osrm_timeout: float = 15.0
    thumbnail_timeout: float = 8.0
    name_language: str = "ja"
    directions_url: str = "https://www.google.com/maps/dir/"
    log_level: str = "INFO"

    model_config = {"env_file": ".env"}


settings = Settings()
