"""
Cache key builders and time-to-live settings for list-style read endpoints.
"""
from typing import Optional

DEFAULT_PAGE = 1
DEFAULT_LIMIT = 20


class CacheKeys:
    """Key builders so that writers and readers agree on key layout."""

    @staticmethod
    def events(status: Optional[str] = None, page: Optional[int] = None,
               limit: Optional[int] = None) -> str:
        return f"events:list:{status or 'all'}:{page or DEFAULT_PAGE}:{limit or DEFAULT_LIMIT}"

    @staticmethod
    def event(event_id: str) -> str:
        return f"event:{event_id}"

    @staticmethod
    def leaderboard(event_id: str) -> str:
        return f"leaderboard:{event_id}"


class CacheTTL:
    """Time-to-live per resource, in seconds."""
    EVENTS = 2 * 60
    LEADERBOARD = 30  # scores update frequently during an event
