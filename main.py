"""
Backend API for hackathon events, participants and leaderboards.
"""
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from app.api.router import include_routers
from app.core.config import settings
from app.core.exception_handlers import register_exception_handlers
from app.core.startup import initialize_database, shutdown_database, start_cache, stop_cache
from app.services.leaderboard_service import LeaderboardService

# Configure logging
logging.basicConfig(
    level=logging.INFO if not settings.DEBUG else logging.DEBUG,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


# Lifespan context manager for startup/shutdown events
@asynccontextmanager
async def lifespan(app: FastAPI):
    """Handle application lifecycle events."""
    # Startup
    logger.info("Starting Hackathon API...")
    initialize_database()
    app.state.cache = start_cache()
    app.state.leaderboard_service = LeaderboardService(cache=app.state.cache)

    yield

    # Shutdown
    logger.info("Shutting down Hackathon API...")
    stop_cache(app.state.cache)
    shutdown_database()


# Create FastAPI application
app = FastAPI(
    title="Hackathon API",
    description="""
    Backend API for hackathon events, participant profiles and live leaderboards.
    """,
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json",
    lifespan=lifespan
)

# Register exception handlers
register_exception_handlers(app)


# Include routers
include_routers(app)

# CLI entry point
if __name__ == "__main__":
    import uvicorn

    # Development server configuration
    uvicorn.run(
        "main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.DEBUG,
        log_level="debug" if settings.DEBUG else "info",
        access_log=True
    )
