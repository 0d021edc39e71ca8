"""Route optimization orchestration service."""

from __future__ import annotations

import logging
from dataclasses import asdict
from datetime import datetime, timezone

from ...config import settings
from ...schemas.routing import (
    OptimizationMetadataModel,
    OptimizeRouteRequest,
    OptimizeRouteResponse,
    PenaltiesModel,
    ScheduledStopModel,
)
from .cache import ResultCache, build_cache_key, get_result_cache
from .models import OptimizationResult, ScheduledStop
from .optimizer import RouteOptimizer

logger = logging.getLogger(__name__)


def _stop_model(stop: ScheduledStop) -> ScheduledStopModel:
    return ScheduledStopModel(
        latitude=stop.location.latitude,
        longitude=stop.location.longitude,
        id=stop.location.id,
        sequence_number=stop.sequence_number,
        arrival_time=stop.arrival_time,
        waiting_time_minutes=stop.waiting_time_minutes,
    )


def result_to_response(result: OptimizationResult) -> OptimizeRouteResponse:
    return OptimizeRouteResponse(
        optimized_route=[_stop_model(stop) for stop in result.optimized_route],
        original_route=[_stop_model(stop) for stop in result.original_route],
        total_distance_km=result.total_distance_km,
        total_time_minutes=result.total_time_minutes,
        time_saved_minutes=result.time_saved_minutes,
        distance_saved_km=result.distance_saved_km,
        optimization_applied=result.optimization_applied,
        penalties=PenaltiesModel(**asdict(result.penalties)) if result.penalties else None,
        metadata=OptimizationMetadataModel(**asdict(result.metadata)),
    )


def optimize_route(
    payload: OptimizeRouteRequest,
    *,
    cache: ResultCache | None = None,
    optimizer: RouteOptimizer | None = None,
) -> OptimizeRouteResponse:
    """Serve a cached result for the same input, or optimize and cache it."""
    if cache is None:
        cache = get_result_cache()
    cache_key = build_cache_key(payload, settings.cache_key_scope)

    cached = cache.get(cache_key)
    if cached is not None:
        logger.info(f"Cache hit for route {cache_key}")
        return cached.model_copy(update={"cached": True})

    if optimizer is None:
        optimizer = RouteOptimizer()
    result = optimizer.optimize(
        pickup=payload.pickup.to_domain(),
        via_points=[point.to_domain() for point in payload.via_points],
        destination=payload.destination.to_domain(),
        pickup_time=payload.pickup_time or datetime.now(timezone.utc),
        time_windows={stop_id: window.to_domain() for stop_id, window in payload.time_windows.items()},
    )

    response = result_to_response(result)
    cache.set(cache_key, response)
    return response.model_copy(update={"cached": False})
