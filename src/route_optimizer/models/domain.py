"""Domain models for stops and their arrival windows."""

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional


@dataclass(slots=True, frozen=True)
class Location:
    """A geographic stop. ``id`` only keys time-window lookups."""

    latitude: float
    longitude: float
    id: Optional[str] = None

    @property
    def coordinates(self) -> tuple[float, float]:
        return (self.latitude, self.longitude)


@dataclass(slots=True, frozen=True)
class TimeWindow:
    """Soft arrival constraint for a stop."""

    earliest: datetime
    latest: datetime


def ensure_utc(value: datetime) -> datetime:
    """Treat naive timestamps as UTC so they compare with aware ones."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)
