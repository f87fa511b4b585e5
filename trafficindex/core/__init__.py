"""
Core data models, errors and execution helpers for TrafficIndex
"""

from .cache import TTLCache
from .errors import (
    BadRequestError,
    MissingDataError,
    NoDataError,
    TrafficIndexError,
    UpstreamError,
)
from .join import JoinStrategy, join, run_fail_fast, run_settled
from .models import CamelModel, Corridor, Event, GeoPoint, TravelMode, round_half_up, utc_now

__all__ = [
    # Models
    "CamelModel",
    "Corridor",
    "Event",
    "GeoPoint",
    "TravelMode",
    "round_half_up",
    "utc_now",
    # Errors
    "TrafficIndexError",
    "UpstreamError",
    "MissingDataError",
    "NoDataError",
    "BadRequestError",
    # Execution
    "TTLCache",
    "JoinStrategy",
    "join",
    "run_fail_fast",
    "run_settled",
]
