"""
Directions provider integration
"""

from .client import DirectionsClient
from .models import LegData, LegTiming

__all__ = ["DirectionsClient", "LegData", "LegTiming"]
