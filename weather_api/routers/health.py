"""
Health check endpoints for the API.
"""
from fastapi import APIRouter, Depends
from typing import Dict, Any
from datetime import datetime, timezone

from weather_api.config import settings
from weather_api.dependencies import get_cache_store
from weather_api.domain.ports import CacheStore

router = APIRouter()

@router.get("/health")
async def health_check() -> Dict[str, Any]:
    """
    Basic health check endpoint.
    Returns API status and version information.
    """
    return {
        "status": "healthy",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "version": settings.VERSION,
        "environment": settings.ENVIRONMENT,
        "debug": settings.DEBUG,
    }

@router.get("/health/cache")
async def cache_health(
    store: CacheStore = Depends(get_cache_store)
) -> Dict[str, Any]:
    """
    Check cache store health.
    Reports the backend in use and whether it is reachable.
    """
    backend = getattr(store, "backend", type(store).__name__)
    reachable = await store.ping()
    return {
        "status": "healthy" if reachable else "unhealthy",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "backend": backend,
        "reachable": reachable,
    }
