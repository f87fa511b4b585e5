"""
Traffic index and commute comparison models
"""

from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import ConfigDict, Field, model_validator

from trafficindex.core.models import CamelModel, utc_now


class CorridorResult(CamelModel):
    """Outcome of one corridor query: an increase or an error, never both"""

    model_config = ConfigDict(frozen=True)

    name: str = Field(description="Corridor name")
    increase_pct: Optional[float] = Field(None, description="Traffic-induced increase in percent")
    error: Optional[str] = Field(None, description="Failure reason")

    @model_validator(mode="after")
    def check_exactly_one(self) -> "CorridorResult":
        if (self.increase_pct is None) == (self.error is None):
            raise ValueError("CorridorResult needs exactly one of increase_pct or error")
        return self

    @property
    def ok(self) -> bool:
        return self.error is None


class TrafficIndexSnapshot(CamelModel):
    """City-wide congestion index computed from all corridors"""

    model_config = ConfigDict(frozen=True)

    index: int = Field(description="Congestion index", ge=1, le=99)
    avg_increase_pct: int = Field(description="Mean increase over successful corridors")
    routes: List[CorridorResult] = Field(description="Per-corridor detail, failures included")
    updated_at: datetime = Field(default_factory=utc_now, description="When computed")

    def to_payload(self) -> Dict[str, Any]:
        """JSON-ready dict; each corridor shows only its own shape"""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class RouteModeResult(CamelModel):
    """Travel time comparison for one mode"""

    mode: str = Field(description="Travel mode")
    now_minutes: Optional[int] = Field(None, description="Current travel time in minutes")
    typical_minutes: Optional[int] = Field(None, description="Typical travel time in minutes")
    distance_km: Optional[float] = Field(None, description="Distance in kilometres")
    polyline: Optional[str] = Field(None, description="Encoded overview polyline")
    warning: Optional[str] = Field(None, description="Advisory such as toll roads")
    diff_to_fastest_minutes: Optional[int] = Field(None, description="Minutes slower than the fastest mode")
    delta_pct_vs_typical: Optional[int] = Field(None, description="Percent change vs typical time")


class CommuteResponse(CamelModel):
    """Ranked mode comparison for a single trip"""

    routes: List[RouteModeResult] = Field(default_factory=list)
    fastest_mode: Optional[str] = Field(None, description="Mode with the lowest current time")
    generated_at: datetime = Field(default_factory=utc_now)

    def to_payload(self) -> Dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)
