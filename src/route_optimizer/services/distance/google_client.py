"""HTTP client for the Google Distance Matrix API."""

from __future__ import annotations

import logging
from typing import Sequence

import httpx

from ...config import settings

logger = logging.getLogger(__name__)


class GoogleMapsError(Exception):
    """Raised when the Distance Matrix API answers with a non-OK status."""


class GoogleMapsClient:
    def __init__(
        self,
        api_key: str | None = None,
        base_url: str | None = None,
        mode: str | None = None,
        timeout: float | None = None,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self.api_key = api_key or settings.google_maps_api_key
        if not self.api_key:
            raise ValueError("Google Maps API key is not configured.")
        self.base_url = base_url or settings.google_maps_base_url
        self.mode = mode or settings.google_maps_mode
        self.timeout = timeout if timeout is not None else settings.google_request_timeout_seconds
        self._transport = transport

    def _get_client(self) -> httpx.Client:
        return httpx.Client(timeout=httpx.Timeout(self.timeout), transport=self._transport)

    def distance_matrix(self, coordinates: Sequence[tuple[float, float]]) -> dict:
        """Request the full origins x destinations matrix for ``coordinates``.

        Every coordinate is used as both an origin and a destination, so the
        response rows and elements line up with the input order.

        Returns:
            The decoded response body. ``rows[i]["elements"][j]`` carries its own
            ``status`` plus ``distance.value`` (meters) and ``duration.value``
            (seconds) when that status is ``OK``.

        Raises:
            httpx.HTTPError: on transport failures, timeouts and non-2xx responses.
            GoogleMapsError: when the top-level status is not ``OK`` or the rows
                do not match the requested coordinates.
        """
        if len(coordinates) < 1:
            raise ValueError("At least one coordinate is required for a distance matrix.")

        locations = "|".join(f"{lat},{lon}" for lat, lon in coordinates)
        params = {
            "origins": locations,
            "destinations": locations,
            "key": self.api_key,
            "mode": self.mode,
        }

        with self._get_client() as client:
            response = client.get(self.base_url, params=params)
            response.raise_for_status()
            data = response.json()

        status = data.get("status")
        if status != "OK":
            message = data.get("error_message") or "no error message"
            raise GoogleMapsError(f"Google Distance Matrix error: {status} ({message})")

        rows = data.get("rows") or []
        if len(rows) != len(coordinates):
            raise GoogleMapsError(
                f"Google Distance Matrix returned {len(rows)} rows for {len(coordinates)} origins."
            )
        logger.debug(f"Google Distance Matrix returned {len(rows)}x{len(rows)} elements")
        return data


def check_health(client: GoogleMapsClient | None = None) -> bool:
    """Issue a minimal 1x1 matrix request to confirm the API key works."""
    try:
        client = client or GoogleMapsClient()
        client.distance_matrix([(52.517037, 13.388860)])
        return True
    except (httpx.HTTPError, GoogleMapsError, ValueError):
        return False
