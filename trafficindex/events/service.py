"""
Event service: which configured events currently or soon affect traffic
"""

import logging
import math
from datetime import datetime, timedelta, timezone
from typing import Callable, List, Optional

from trafficindex.core.models import Event, GeoPoint, utc_now

from .models import EventItem, EventsResponse

EARTH_RADIUS_KM = 6371.0088


def haversine_km(a: GeoPoint, b: GeoPoint) -> float:
    """Great-circle distance between two points in kilometres"""
    lat1, lng1, lat2, lng2 = map(math.radians, (a.lat, a.lng, b.lat, b.lng))
    h = (
        math.sin((lat2 - lat1) / 2) ** 2
        + math.cos(lat1) * math.cos(lat2) * math.sin((lng2 - lng1) / 2) ** 2
    )
    return 2 * EARTH_RADIUS_KM * math.asin(math.sqrt(h))


def _iso_utc(value: datetime) -> str:
    return value.astimezone(timezone.utc).isoformat().replace("+00:00", "Z")


class EventService:
    """
    Classifies configured events relative to the current time

    An event is active from `lead` before its start until `tail` after its end;
    crowds build up before kick-off and disperse afterwards.
    """

    def __init__(
        self,
        events: List[Event],
        lead: timedelta = timedelta(hours=2),
        tail: timedelta = timedelta(hours=1),
        now: Callable[[], datetime] = utc_now,
    ):
        self.events = list(events)
        self.lead = lead
        self.tail = tail
        self.now = now
        self.logger = logging.getLogger(__name__)

    def is_active(self, event: Event, at: datetime) -> bool:
        return event.start - self.lead <= at <= event.end + self.tail

    def upcoming(
        self,
        at: Optional[datetime] = None,
        near: Optional[GeoPoint] = None,
        radius_km: Optional[float] = None,
    ) -> EventsResponse:
        """
        List active and upcoming events

        Args:
            at: Reference time (defaults to now)
            near: Optional point to measure distance from
            radius_km: With `near`, only events within this distance are returned

        Returns:
            EventsResponse ordered by start time
        """
        at = at or self.now()
        if at.tzinfo is None:
            at = at.replace(tzinfo=timezone.utc)

        active = []
        upcoming = []
        for event in sorted(self.events, key=lambda e: e.start):
            distance = None
            if near is not None:
                distance = round(haversine_km(near, GeoPoint(lat=event.lat, lng=event.lng)), 2)
                if radius_km is not None and distance > radius_km:
                    continue

            item = EventItem(
                **event.model_dump(),
                start_iso=_iso_utc(event.start),
                end_iso=_iso_utc(event.end),
                distance_km=distance,
            )
            if self.is_active(event, at):
                active.append(item)
            elif event.start > at:
                upcoming.append(item)

        self.logger.debug(f"Events at {at.isoformat()}: {len(active)} active, {len(upcoming)} upcoming")
        return EventsResponse(active=active, upcoming=upcoming, generated_at=at)
