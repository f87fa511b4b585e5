"""
Normalised routing results

These models are the only shape the aggregator and comparator see; the
provider's nested response schema stays inside the client.
"""

from typing import Optional

from pydantic import BaseModel, Field


class LegData(BaseModel):
    """Primary leg of a single directions query"""

    duration_seconds: Optional[int] = Field(None, description="Typical (free-flow) duration in seconds")
    duration_in_traffic_seconds: Optional[int] = Field(
        None, description="Traffic-aware duration in seconds"
    )
    distance_meters: Optional[int] = Field(None, description="Leg distance in meters")
    polyline: Optional[str] = Field(None, description="Encoded overview polyline")
    has_toll: bool = Field(False, description="Whether any step mentions a toll road")
    traffic_reported: bool = Field(
        False,
        description="False when no traffic-aware duration was returned and the typical duration was substituted",
    )


class LegTiming(BaseModel):
    """Typical vs. traffic-aware timing of a corridor"""

    normal_seconds: int = Field(description="Typical duration in seconds", gt=0)
    in_traffic_seconds: int = Field(description="Traffic-aware duration in seconds", gt=0)

    @property
    def ratio(self) -> float:
        return self.in_traffic_seconds / self.normal_seconds

    @property
    def increase_pct(self) -> float:
        """Percentage by which traffic lengthens the trip"""
        return (self.ratio - 1) * 100
