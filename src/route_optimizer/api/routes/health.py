"""Health endpoints."""

from __future__ import annotations

from datetime import datetime, timezone

from fastapi import APIRouter, status

from ...config import settings

router = APIRouter(tags=["health"])


@router.get("/health", status_code=status.HTTP_200_OK)
def health_root() -> dict:
    """Simple health check endpoint that doesn't require any dependencies."""
    return {
        "status": "OK",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "service": settings.app_name,
    }


@router.get("/health/distance-provider", status_code=status.HTTP_200_OK)
def health_distance_provider() -> dict:
    """Report the active distance strategy and, for Google, whether the API answers."""
    from ...services.distance import get_matrix_provider
    from ...services.distance.google import GoogleMatrixProvider
    from ...services.distance.google_client import check_health

    try:
        provider = get_matrix_provider()
    except ValueError as exc:
        return {"provider": None, "healthy": False, "error": str(exc)}

    if isinstance(provider, GoogleMatrixProvider):
        return {"provider": provider.name, "healthy": check_health(provider.client)}
    return {"provider": provider.name, "healthy": True}
