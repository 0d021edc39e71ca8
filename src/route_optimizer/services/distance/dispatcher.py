"""Factory for the configured distance matrix strategy."""

from __future__ import annotations

import logging

from ...config import Settings, settings
from .base import MatrixProvider
from .google import GoogleMatrixProvider
from .google_client import GoogleMapsClient
from .haversine import HaversineMatrixProvider

logger = logging.getLogger(__name__)


def get_matrix_provider(config: Settings | None = None) -> MatrixProvider:
    config = config or settings
    fallback = HaversineMatrixProvider(average_speed_kmh=config.average_speed_kmh)
    if not config.use_google_api:
        return fallback
    if not config.google_maps_api_key:
        logger.warning("Google API requested but no API key is configured, using haversine estimates")
        return fallback
    client = GoogleMapsClient(
        api_key=config.google_maps_api_key,
        base_url=config.google_maps_base_url,
        mode=config.google_maps_mode,
        timeout=config.google_request_timeout_seconds,
    )
    return GoogleMatrixProvider(client=client, fallback=fallback)
