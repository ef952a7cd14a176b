"""
Application startup and shutdown logic for the hackathon API.
"""
import logging
from sqlalchemy import text

from app.core.config import settings
from app.core.database import engine, Base
from app.services.ephemeral_cache import EphemeralCache

logger = logging.getLogger(__name__)


def initialize_database() -> None:
    """Initialize database tables and warm up connection pool."""
    # Register models on Base.metadata before create_all
    from app.models import event, leaderboard_entry, profile  # noqa: F401

    try:
        # Create database tables
        Base.metadata.create_all(bind=engine)
        logger.info("Database tables created/verified")

        # Warm up the connection pool
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
        logger.info("Database connection pool initialized")

    except Exception as e:
        logger.error(f"Failed to initialize database: {e}")
        raise


def shutdown_database() -> None:
    """Clean up database connections."""
    try:
        engine.dispose()
        logger.info("Database connections closed")
    except Exception as e:
        logger.error(f"Error during database shutdown: {e}")
        # Don't re-raise during shutdown


def start_cache() -> EphemeralCache:
    """Build the process-wide read cache and start its expiry sweep."""
    cache = EphemeralCache(default_ttl=settings.CACHE_DEFAULT_TTL_SECONDS)
    cache.start_sweeper(settings.CACHE_SWEEP_INTERVAL_SECONDS)
    logger.info(
        f"Cache started (default ttl={settings.CACHE_DEFAULT_TTL_SECONDS}s, "
        f"sweep every {settings.CACHE_SWEEP_INTERVAL_SECONDS}s)"
    )
    return cache


def stop_cache(cache: EphemeralCache) -> None:
    """Stop the sweep thread and drop cached entries."""
    try:
        cache.stop_sweeper()
        cache.clear()
        logger.info("Cache stopped")
    except Exception as e:
        logger.error(f"Error during cache shutdown: {e}")
