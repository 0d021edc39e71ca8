"""Route optimization endpoints."""

from __future__ import annotations

import logging

from fastapi import APIRouter, HTTPException, status

from ...schemas.routing import OptimizeRouteRequest, OptimizeRouteResponse
from ...services.routing.optimizer import TooManyViaPointsError
from ...services.routing.service import optimize_route

router = APIRouter(tags=["routes"])


@router.post(
    "/optimize-route",
    response_model=OptimizeRouteResponse,
    response_model_exclude_none=True,
    status_code=status.HTTP_200_OK,
)
def optimize(payload: OptimizeRouteRequest) -> OptimizeRouteResponse:
    try:
        return optimize_route(payload)
    except TooManyViaPointsError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    except Exception as exc:
        logging.exception(f"Error optimizing route: {exc}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to optimize route: {str(exc)}",
        ) from exc
