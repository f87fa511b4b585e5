"""
TrafficIndex: City-wide Congestion Index & Commute Comparison

Derives a bounded traffic congestion index from a set of reference corridors
and compares travel modes for a single trip, using a third-party directions
provider as the only source of timing data.
"""

__version__ = "0.1.0"

from .core.errors import (
    BadRequestError,
    MissingDataError,
    NoDataError,
    TrafficIndexError,
    UpstreamError,
)
from .core.models import Corridor, GeoPoint, TravelMode

__all__ = [
    "Corridor",
    "GeoPoint",
    "TravelMode",
    "TrafficIndexError",
    "UpstreamError",
    "MissingDataError",
    "NoDataError",
    "BadRequestError",
]
