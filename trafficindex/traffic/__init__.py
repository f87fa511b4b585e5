"""
Traffic index aggregation and commute comparison
"""

from .commute_service import CommuteService, parse_modes
from .index_service import TrafficIndexService, compute_index
from .models import CommuteResponse, CorridorResult, RouteModeResult, TrafficIndexSnapshot

__all__ = [
    "TrafficIndexService",
    "CommuteService",
    "compute_index",
    "parse_modes",
    "CorridorResult",
    "TrafficIndexSnapshot",
    "RouteModeResult",
    "CommuteResponse",
]
