"""Routing domain models."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import List, Optional

from ...models.domain import Location


@dataclass(slots=True)
class RouteDetails:
    """Outcome of simulating one stop ordering."""

    stop_indices: List[int]
    arrival_times: List[datetime]
    waiting_minutes: List[float]
    total_distance_km: float
    total_time_minutes: float
    penalties: float
    score: float


@dataclass(slots=True)
class ScheduledStop:
    location: Location
    sequence_number: int
    arrival_time: datetime
    waiting_time_minutes: Optional[float] = None


@dataclass(slots=True)
class RoutePenalties:
    optimized: float
    original: float


@dataclass(slots=True)
class OptimizationMetadata:
    permutations_evaluated: int
    pickup_time: datetime
    optimization_score: Optional[float] = None
    original_score: Optional[float] = None


@dataclass(slots=True)
class OptimizationResult:
    optimized_route: List[ScheduledStop]
    original_route: List[ScheduledStop]
    total_distance_km: float
    total_time_minutes: float
    time_saved_minutes: float
    distance_saved_km: float
    optimization_applied: bool
    penalties: Optional[RoutePenalties]
    metadata: OptimizationMetadata
