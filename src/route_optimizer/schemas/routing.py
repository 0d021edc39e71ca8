"""Route optimization request/response schemas."""

from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator, model_validator
from pydantic.alias_generators import to_camel

from ..models.domain import Location, TimeWindow, ensure_utc


class CamelModel(BaseModel):
    """Serialized with camelCase keys; accepts snake_case too."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class LocationModel(CamelModel):
    latitude: float = Field(..., ge=-90, le=90)
    longitude: float = Field(..., ge=-180, le=180)
    id: Optional[str] = Field(default=None, description="Stop identifier used to look up its time window.")

    @field_validator("id", mode="before")
    @classmethod
    def _stringify_id(cls, value: Any) -> Any:
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return str(value)
        return value

    def to_domain(self) -> Location:
        return Location(latitude=self.latitude, longitude=self.longitude, id=self.id)


class TimeWindowModel(CamelModel):
    earliest: datetime
    latest: datetime

    @model_validator(mode="after")
    def _check_order(self) -> "TimeWindowModel":
        if ensure_utc(self.earliest) > ensure_utc(self.latest):
            raise ValueError("earliest must not be after latest")
        return self

    def to_domain(self) -> TimeWindow:
        return TimeWindow(earliest=ensure_utc(self.earliest), latest=ensure_utc(self.latest))


class OptimizeRouteRequest(CamelModel):
    pickup: LocationModel
    via_points: List[LocationModel] = Field(default_factory=list)
    destination: LocationModel
    pickup_time: Optional[datetime] = Field(
        default=None,
        description="Departure time from the pickup. Defaults to the time of the request.",
    )
    time_windows: Dict[str, TimeWindowModel] = Field(
        default_factory=dict,
        description="Arrival windows keyed by stop id (or stop_<position> for stops without one).",
    )

    @field_validator("via_points", "time_windows", mode="before")
    @classmethod
    def _none_as_empty(cls, value: Any, info: ValidationInfo) -> Any:
        if value is None:
            return [] if info.field_name == "via_points" else {}
        return value


class ScheduledStopModel(LocationModel):
    sequence_number: int
    arrival_time: datetime
    waiting_time_minutes: Optional[float] = None


class PenaltiesModel(CamelModel):
    optimized: float
    original: float


class OptimizationMetadataModel(CamelModel):
    permutations_evaluated: int
    pickup_time: datetime
    optimization_score: Optional[float] = None
    original_score: Optional[float] = None


class OptimizeRouteResponse(CamelModel):
    optimized_route: List[ScheduledStopModel]
    original_route: List[ScheduledStopModel]
    total_distance_km: float
    total_time_minutes: float
    time_saved_minutes: float
    distance_saved_km: float
    optimization_applied: bool
    penalties: Optional[PenaltiesModel] = None
    metadata: OptimizationMetadataModel
    cached: bool = False
