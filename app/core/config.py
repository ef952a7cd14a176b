from pydantic_settings import BaseSettings
import os

class Settings(BaseSettings):
    DATABASE_URL: str = os.getenv(
        "DATABASE_URL",
        "sqlite:///./hackathon.db"
    )
    DEBUG: bool = os.getenv("DEBUG", "True") == "True"

    # Ephemeral cache
    CACHE_DEFAULT_TTL_SECONDS: float = 60.0
    CACHE_SWEEP_INTERVAL_SECONDS: float = 300.0

    PAGINATION_MAX_LIMIT: int = 100

    class Config:
        env_file = ".env"

settings = Settings()
