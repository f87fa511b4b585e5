"""
Event-driven traffic peak warnings
"""

from .models import EventItem, EventsResponse
from .service import EventService, haversine_km

__all__ = ["EventService", "EventItem", "EventsResponse", "haversine_km"]
