"""Application configuration and settings management."""

from typing import Any, Literal, Optional

import json
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Runtime configuration loaded from environment variables or defaults."""

    model_config = SettingsConfigDict(
        env_prefix="ROUTE_OPT_",
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
    )

    app_name: str = "Route Optimizer API"
    api_prefix: str = "/api"
    host: str = "0.0.0.0"
    port: int = Field(default=3000, ge=1, le=65535)
    log_level: str = Field(default="INFO", description="Root log level for the service.")

    use_google_api: bool = Field(
        default=False,
        description="Use the Google Distance Matrix API instead of the haversine estimate.",
    )
    google_maps_api_key: Optional[str] = Field(default=None, description="Google Maps API key.")
    google_maps_base_url: str = Field(
        default="https://maps.googleapis.com/maps/api/distancematrix/json",
        description="Distance Matrix endpoint.",
    )
    google_maps_mode: Literal["driving", "walking", "bicycling", "transit"] = Field(default="driving")
    google_request_timeout_seconds: float = Field(default=10.0, gt=0.0)
    average_speed_kmh: float = Field(
        default=30.0,
        gt=0.0,
        description="Constant speed used to turn great-circle distance into travel time.",
    )

    max_via_points: int = Field(
        default=8,
        ge=0,
        description="Largest via-point count accepted by the exhaustive search (n! candidates).",
    )

    cache_ttl_seconds: int = Field(default=3600, ge=0)
    cache_max_entries: int = Field(default=1024, ge=1)
    cache_key_scope: Literal["full", "locations"] = Field(
        default="full",
        description=(
            "'full' keys cached results on locations plus pickup time and time windows; "
            "'locations' keys on coordinates only."
        ),
    )

    frontend_allowed_origins: tuple[str, ...] = Field(
        default=("*",),
        description="Permitted web origins for browser clients (CORS).",
    )

    @field_validator("frontend_allowed_origins", mode="before")
    @classmethod
    def _parse_str_tuple_from_env(cls, value: Any) -> tuple[str, ...]:
        """Parse string tuple from environment variable (comma-separated or JSON array)."""
        if isinstance(value, tuple):
            return value
        if isinstance(value, list):
            return tuple(str(item) for item in value)
        if isinstance(value, str):
            try:
                parsed = json.loads(value)
                if isinstance(parsed, list):
                    return tuple(str(item) for item in parsed)
            except (json.JSONDecodeError, TypeError):
                pass
            if "," in value:
                return tuple(item.strip() for item in value.split(",") if item.strip())
            if value.strip():
                return (value.strip(),)
        return tuple()


settings = Settings()
