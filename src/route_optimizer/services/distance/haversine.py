"""Great-circle distance matrix with a constant average speed."""

from __future__ import annotations

from typing import Sequence

from ...config import settings
from ...models.domain import Location
from ..geospatial import haversine_km, minutes_at_speed
from .base import ZERO_CELL, DistanceCell, DistanceMatrix, MatrixProvider


class HaversineMatrixProvider(MatrixProvider):
    """Deterministic estimate used alone or as the fallback for precise providers."""

    name = "haversine"

    def __init__(self, average_speed_kmh: float | None = None) -> None:
        self.average_speed_kmh = average_speed_kmh if average_speed_kmh is not None else settings.average_speed_kmh
        if self.average_speed_kmh <= 0:
            raise ValueError("average_speed_kmh must be positive.")

    def raw_cell(self, origin: Location, destination: Location) -> DistanceCell:
        """Unrounded estimate, used to patch single cells of a precise matrix."""
        distance_km = haversine_km(origin.latitude, origin.longitude, destination.latitude, destination.longitude)
        return DistanceCell(
            distance_km=distance_km,
            time_minutes=minutes_at_speed(distance_km, self.average_speed_kmh),
        )

    def cell(self, origin: Location, destination: Location) -> DistanceCell:
        raw = self.raw_cell(origin, destination)
        return DistanceCell(distance_km=round(raw.distance_km, 2), time_minutes=round(raw.time_minutes, 2))

    def get_matrix(self, stops: Sequence[Location]) -> DistanceMatrix:
        return [
            [ZERO_CELL if i == j else self.cell(origin, destination) for j, destination in enumerate(stops)]
            for i, origin in enumerate(stops)
        ]
