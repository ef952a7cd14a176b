"""System-level API endpoints."""
from typing import Any, Dict

from fastapi import APIRouter, Depends

from app.api.deps import get_cache
from app.services.ephemeral_cache import EphemeralCache

router = APIRouter(tags=["system"])


@router.get("/health")
def health() -> Dict[str, bool]:
    """Simple readiness check."""
    return {"ok": True}


@router.get("/health/cache")
def cache_stats(cache: EphemeralCache = Depends(get_cache)) -> Dict[str, Any]:
    return cache.get_stats()
