"""Base classes for distance matrix strategies."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import List, Sequence

from ...models.domain import Location


@dataclass(slots=True, frozen=True)
class DistanceCell:
    distance_km: float
    time_minutes: float


ZERO_CELL = DistanceCell(distance_km=0.0, time_minutes=0.0)

DistanceMatrix = List[List[DistanceCell]]


class MatrixProvider(ABC):
    """Contract for distance/time matrix strategies.

    ``get_matrix`` returns a square matrix whose indices follow ``stops``;
    diagonal cells are always zero.
    """

    name: str = "base"

    @abstractmethod
    def get_matrix(self, stops: Sequence[Location]) -> DistanceMatrix:
        raise NotImplementedError

    def distance(self, origin: Location, destination: Location) -> DistanceCell:
        """Single pair lookup, resolved through a 2x2 matrix call."""
        return self.get_matrix([origin, destination])[0][1]
