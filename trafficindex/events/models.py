"""
Event listing models
"""

from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import Field

from trafficindex.core.models import CamelModel, utc_now


class EventItem(CamelModel):
    """Event as listed to clients"""

    title: str
    lat: float
    lng: float
    start: datetime
    end: datetime
    venue: str
    start_iso: str = Field(alias="startISO", description="Start in UTC ISO-8601")
    end_iso: str = Field(alias="endISO", description="End in UTC ISO-8601")
    distance_km: Optional[float] = Field(None, description="Distance from the query point")


class EventsResponse(CamelModel):
    """Events split into currently affecting traffic and still to come"""

    active: List[EventItem] = Field(default_factory=list)
    upcoming: List[EventItem] = Field(default_factory=list)
    generated_at: datetime = Field(default_factory=utc_now)

    def to_payload(self) -> Dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)
