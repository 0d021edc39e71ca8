"""Exhaustive stop-order optimization under soft time windows.

Pickup and destination stay fixed; every ordering of the via points is
simulated against a single distance/time matrix and the lowest-scoring one
wins. The score is travel time plus waiting time plus weighted penalties for
arriving early (waiting) or late.
"""

from __future__ import annotations

import logging
from datetime import datetime, timedelta
from typing import Mapping, Sequence, TypeVar

from ...config import settings
from ...models.domain import Location, TimeWindow, ensure_utc
from ..distance import DistanceMatrix, MatrixProvider, get_matrix_provider
from .models import (
    OptimizationMetadata,
    OptimizationResult,
    RouteDetails,
    RoutePenalties,
    ScheduledStop,
)

logger = logging.getLogger(__name__)

# Lateness weighs five times more than waiting.
WAITING_PENALTY_FACTOR = 2.0
LATENESS_PENALTY_FACTOR = 10.0

T = TypeVar("T")


class TooManyViaPointsError(ValueError):
    """Raised when the via-point count would make the exhaustive search impractical."""

    def __init__(self, count: int, limit: int) -> None:
        super().__init__(
            f"{count} via points exceeds the limit of {limit}; "
            f"exhaustive search would evaluate {count}! orderings."
        )
        self.count = count
        self.limit = limit


def permutations(items: Sequence[T]) -> list[list[T]]:
    """Every ordering of ``items``, each element taking a turn as the head."""
    if len(items) == 0:
        return [[]]
    if len(items) == 1:
        return [list(items)]

    result: list[list[T]] = []
    for index, head in enumerate(items):
        remaining = [*items[:index], *items[index + 1 :]]
        for tail in permutations(remaining):
            result.append([head, *tail])
    return result


def _minutes_between(later: datetime, earlier: datetime) -> float:
    return (later - earlier).total_seconds() / 60.0


def score_route(
    route: Sequence[int],
    stops: Sequence[Location],
    matrix: DistanceMatrix,
    start_time: datetime,
    time_windows: Mapping[str, TimeWindow],
) -> RouteDetails:
    """Simulate driving ``route`` (indices into ``stops``) from ``start_time``.

    Arriving before a window's earliest bound idles the vehicle until it opens
    and costs ``2 x`` the waiting minutes. Arriving after the latest bound
    costs ``10 x`` the late minutes; the clock is not reset. Windows are keyed
    by stop id, or ``stop_<position>`` for stops without one.
    """
    current_time = start_time
    total_time = 0.0
    total_distance = 0.0
    penalties = 0.0
    arrival_times = [current_time]
    waiting_minutes = [0.0]

    for position in range(1, len(route)):
        segment = matrix[route[position - 1]][route[position]]
        current_time = current_time + timedelta(minutes=segment.time_minutes)
        total_time += segment.time_minutes
        total_distance += segment.distance_km

        stop = stops[route[position]]
        window = time_windows.get(stop.id or f"stop_{position}")
        waiting = 0.0
        if window is not None:
            if current_time < window.earliest:
                waiting = _minutes_between(window.earliest, current_time)
                penalties += waiting * WAITING_PENALTY_FACTOR
                current_time = window.earliest
                total_time += waiting
            elif current_time > window.latest:
                late = _minutes_between(current_time, window.latest)
                penalties += late * LATENESS_PENALTY_FACTOR

        arrival_times.append(current_time)
        waiting_minutes.append(waiting)

    return RouteDetails(
        stop_indices=list(route),
        arrival_times=arrival_times,
        waiting_minutes=waiting_minutes,
        total_distance_km=round(total_distance, 2),
        total_time_minutes=round(total_time, 2),
        penalties=round(penalties, 2),
        score=total_time + penalties,
    )


def _schedule(stops: Sequence[Location], details: RouteDetails, *, with_waiting: bool) -> list[ScheduledStop]:
    return [
        ScheduledStop(
            location=stops[stop_index],
            sequence_number=sequence,
            arrival_time=details.arrival_times[sequence],
            waiting_time_minutes=details.waiting_minutes[sequence] if with_waiting else None,
        )
        for sequence, stop_index in enumerate(details.stop_indices)
    ]


class RouteOptimizer:
    def __init__(
        self,
        provider: MatrixProvider | None = None,
        max_via_points: int | None = None,
    ) -> None:
        self.provider = provider or get_matrix_provider()
        self.max_via_points = max_via_points if max_via_points is not None else settings.max_via_points

    def optimize(
        self,
        pickup: Location,
        via_points: Sequence[Location],
        destination: Location,
        pickup_time: datetime,
        time_windows: Mapping[str, TimeWindow] | None = None,
    ) -> OptimizationResult:
        start_time = ensure_utc(pickup_time)
        windows = {
            stop_id: TimeWindow(earliest=ensure_utc(window.earliest), latest=ensure_utc(window.latest))
            for stop_id, window in (time_windows or {}).items()
        }

        if not via_points:
            return self._direct_route(pickup, destination, start_time)

        if len(via_points) > self.max_via_points:
            raise TooManyViaPointsError(len(via_points), self.max_via_points)

        stops = [pickup, *via_points, destination]
        last = len(stops) - 1

        logger.info(f"Calculating distance matrix for {len(stops)} stops using {self.provider.name}")
        matrix = self.provider.get_matrix(stops)

        orderings = permutations(list(range(1, last)))
        logger.info(f"Evaluating {len(orderings)} route permutations")

        best: RouteDetails | None = None
        for ordering in orderings:
            details = score_route([0, *ordering, last], stops, matrix, start_time, windows)
            if best is None or details.score < best.score:
                best = details

        original = score_route(list(range(len(stops))), stops, matrix, start_time, windows)
        logger.debug(f"Best score {best.score:.2f} vs original score {original.score:.2f}")

        return OptimizationResult(
            optimized_route=_schedule(stops, best, with_waiting=True),
            original_route=_schedule(stops, original, with_waiting=False),
            total_distance_km=best.total_distance_km,
            total_time_minutes=best.total_time_minutes,
            time_saved_minutes=round(original.total_time_minutes - best.total_time_minutes, 2),
            distance_saved_km=round(original.total_distance_km - best.total_distance_km, 2),
            optimization_applied=True,
            penalties=RoutePenalties(optimized=best.penalties, original=original.penalties),
            metadata=OptimizationMetadata(
                permutations_evaluated=len(orderings),
                pickup_time=start_time,
                optimization_score=round(best.score, 2),
                original_score=round(original.score, 2),
            ),
        )

    def _direct_route(self, pickup: Location, destination: Location, start_time: datetime) -> OptimizationResult:
        segment = self.provider.distance(pickup, destination)
        arrival = start_time + timedelta(minutes=segment.time_minutes)
        route = [
            ScheduledStop(location=pickup, sequence_number=0, arrival_time=start_time, waiting_time_minutes=0.0),
            ScheduledStop(location=destination, sequence_number=1, arrival_time=arrival, waiting_time_minutes=0.0),
        ]
        return OptimizationResult(
            optimized_route=route,
            original_route=[
                ScheduledStop(location=stop.location, sequence_number=stop.sequence_number, arrival_time=stop.arrival_time)
                for stop in route
            ],
            total_distance_km=segment.distance_km,
            total_time_minutes=segment.time_minutes,
            time_saved_minutes=0.0,
            distance_saved_km=0.0,
            optimization_applied=False,
            penalties=None,
            metadata=OptimizationMetadata(permutations_evaluated=0, pickup_time=start_time),
        )
