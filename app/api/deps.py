"""
Dependency injection for API endpoints.
"""
from typing import Generator

from fastapi import Request

from app.core.database import SessionLocal
from app.services.ephemeral_cache import EphemeralCache
from app.services.leaderboard_service import LeaderboardService


def get_db() -> Generator:
    """
    Database dependency that ensures proper session cleanup.
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def get_cache(request: Request) -> EphemeralCache:
    """The cache built by the application lifespan."""
    return request.app.state.cache


def get_leaderboard_service(request: Request) -> LeaderboardService:
    return request.app.state.leaderboard_service
