"""
Router registration for the hackathon API.
"""
from fastapi import FastAPI

from app.api import events, leaderboard, profiles, system


def include_routers(app: FastAPI) -> None:
    """Include all API routers with the FastAPI application."""
    app.include_router(leaderboard.router, prefix="/api/v1", tags=["leaderboard"])
    app.include_router(events.router, prefix="/api/v1", tags=["events"])
    app.include_router(profiles.router, prefix="/api/v1", tags=["profiles"])
    app.include_router(system.router, prefix="/api/v1", tags=["system"])
