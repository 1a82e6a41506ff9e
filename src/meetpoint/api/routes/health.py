"""Health endpoints."""

from __future__ import annotations

from fastapi import APIRouter, status

router = APIRouter(tags=["health"])


@router.get("/health", status_code=status.HTTP_200_OK)
def health_root() -> dict:
    """Simple health check endpoint that doesn't require any dependencies."""
    return {"status": "ok"}


@router.get("/health/cache", status_code=status.HTTP_200_OK)
def health_cache() -> dict:
    """Report which path cache backend is in use and whether it answers."""
    from ...services.midpoint.service import get_path_cache

    try:
        cache = get_path_cache()
        ping = getattr(cache, "ping", None)
        healthy = ping() if ping is not None else True
        return {"service": "path_cache", "backend": cache.name, "healthy": healthy}
    except Exception as e:
        return {"service": "path_cache", "healthy": False, "error": str(e)}
