"""Google Distance Matrix strategy with haversine fallback."""

from __future__ import annotations

import logging
from typing import Sequence

import httpx

from ...models.domain import Location
from .base import ZERO_CELL, DistanceCell, DistanceMatrix, MatrixProvider
from .google_client import GoogleMapsClient, GoogleMapsError
from .haversine import HaversineMatrixProvider

logger = logging.getLogger(__name__)


class GoogleMatrixProvider(MatrixProvider):
    """Precise travel distances and times from one batched Google request.

    A failed request falls back to the haversine estimate for the whole
    matrix. An unroutable pair inside a successful response falls back for
    that cell only.
    """

    name = "google"

    def __init__(
        self,
        client: GoogleMapsClient | None = None,
        fallback: HaversineMatrixProvider | None = None,
    ) -> None:
        self.client = client or GoogleMapsClient()
        self.fallback = fallback or HaversineMatrixProvider()

    def get_matrix(self, stops: Sequence[Location]) -> DistanceMatrix:
        if not stops:
            return []
        try:
            data = self.client.distance_matrix([stop.coordinates for stop in stops])
            return self._build_matrix(stops, data["rows"])
        except (httpx.HTTPError, GoogleMapsError, KeyError, IndexError, TypeError, ValueError) as exc:
            logger.warning(f"Google Distance Matrix failed, falling back to haversine: {exc}")
            return self.fallback.get_matrix(stops)

    def _build_matrix(self, stops: Sequence[Location], rows: list[dict]) -> DistanceMatrix:
        matrix: DistanceMatrix = []
        fallback_cells = 0
        for i, origin in enumerate(stops):
            elements = rows[i]["elements"]
            row: list[DistanceCell] = []
            for j, destination in enumerate(stops):
                if i == j:
                    row.append(ZERO_CELL)
                    continue
                element = elements[j]
                if element.get("status") == "OK":
                    row.append(
                        DistanceCell(
                            distance_km=element["distance"]["value"] / 1000,
                            time_minutes=element["duration"]["value"] / 60,
                        )
                    )
                else:
                    fallback_cells += 1
                    row.append(self.fallback.raw_cell(origin, destination))
            matrix.append(row)

        if fallback_cells:
            logger.warning(
                f"Google Distance Matrix could not route {fallback_cells} pair(s); used haversine for those cells"
            )
        return matrix
