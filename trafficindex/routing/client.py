"""
Google Directions API client
"""

import logging
import os
from datetime import datetime
from typing import Any, Dict, Optional, Union

import httpx
from pydantic import ValidationError

from trafficindex.core.errors import MissingDataError, UpstreamError
from trafficindex.core.models import GeoPoint, TravelMode

from .models import LegData, LegTiming

Location = Union[GeoPoint, str]
Departure = Union[str, datetime]

DEFAULT_TIMEOUT = 10.0


class DirectionsClient:
    """
    Async client for the Google Directions API
    Issues one origin→destination query per call and normalises the primary leg
    """

    BASE_URL = "https://maps.googleapis.com/maps/api/directions/json"

    def __init__(
        self,
        api_key: Optional[str] = None,
        timeout: float = DEFAULT_TIMEOUT,
        base_url: Optional[str] = None,
    ):
        self.api_key = api_key or os.getenv("GOOGLE_MAPS_SERVER_KEY")
        self.base_url = base_url or self.BASE_URL
        self.timeout = timeout
        self.logger = logging.getLogger(__name__)

        if not self.api_key:
            raise ValueError("Google Maps API key required. Set GOOGLE_MAPS_SERVER_KEY")

    @staticmethod
    def format_location(location: Location) -> str:
        """Render a location as the provider expects it"""
        return str(location)

    @staticmethod
    def format_departure(departure: Departure) -> str:
        """'now' passes through; datetimes become epoch seconds"""
        if isinstance(departure, datetime):
            return str(int(departure.timestamp()))
        return str(departure)

    def build_params(
        self,
        origin: Location,
        destination: Location,
        mode: str = TravelMode.DRIVING.value,
        departure: Departure = "now",
    ) -> Dict[str, str]:
        """Build query parameters for a directions request"""
        mode = mode.value if isinstance(mode, TravelMode) else str(mode)
        params = {
            "origin": self.format_location(origin),
            "destination": self.format_location(destination),
            "mode": mode,
            "key": self.api_key,
        }

        # Traffic-aware durations are only returned for driving with a departure time;
        # transit schedules depend on the departure time too
        if mode == TravelMode.DRIVING.value:
            params["departure_time"] = self.format_departure(departure)
            params["traffic_model"] = "best_guess"
        elif mode == TravelMode.TRANSIT.value:
            params["departure_time"] = self.format_departure(departure)

        return params

    async def fetch_leg(
        self,
        origin: Location,
        destination: Location,
        mode: str = TravelMode.DRIVING.value,
        departure: Departure = "now",
    ) -> LegData:
        """
        Query directions and return the first leg of the first route

        Args:
            origin: GeoPoint or free-form location string
            destination: GeoPoint or free-form location string
            mode: Travel mode (driving, transit, walking, bicycling, ...)
            departure: "now" or a departure datetime

        Returns:
            Normalised LegData

        Raises:
            UpstreamError: On transport failure or when no route is returned
        """
        params = self.build_params(origin, destination, mode, departure)

        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.get(self.base_url, params=params)
                response.raise_for_status()
                data = response.json()
        except httpx.HTTPError as e:
            self.logger.error(f"HTTP error fetching directions ({params['mode']}): {e}")
            raise UpstreamError(f"Directions request failed: {e}") from e
        except ValueError as e:
            self.logger.error(f"Invalid JSON from directions provider: {e}")
            raise UpstreamError("Directions response is not valid JSON") from e

        try:
            return self._parse_leg(data, params["mode"])
        except (KeyError, AttributeError, TypeError, ValidationError) as e:
            self.logger.error(f"Error parsing directions response ({params['mode']}): {e}")
            raise UpstreamError(f"Malformed directions response: {e}") from e

    def _parse_leg(self, data: Dict[str, Any], mode: str) -> LegData:
        """Extract the primary route's first leg from a provider response"""
        routes = data.get("routes") or []
        if not routes:
            message = data.get("error_message") or "route not found"
            self.logger.warning(f"No route returned ({mode}): {message}")
            raise UpstreamError(message)

        route = routes[0]
        legs = route.get("legs") or []
        if not legs:
            raise UpstreamError("route not found")
        leg = legs[0]

        duration = (leg.get("duration") or {}).get("value")
        in_traffic = (leg.get("duration_in_traffic") or {}).get("value")
        distance = (leg.get("distance") or {}).get("value")
        polyline = (route.get("overview_polyline") or {}).get("points")

        traffic_reported = bool(in_traffic)
        if not traffic_reported:
            if mode == TravelMode.DRIVING.value:
                self.logger.debug("No duration_in_traffic returned; using typical duration")
            in_traffic = duration

        has_toll = any(
            "Toll" in (step.get("html_instructions") or "")
            for step in leg.get("steps") or []
        )

        return LegData(
            duration_seconds=duration or None,
            duration_in_traffic_seconds=in_traffic or None,
            distance_meters=distance or None,
            polyline=polyline or None,
            has_toll=has_toll,
            traffic_reported=traffic_reported,
        )

    async def fetch_leg_timing(self, origin: Location, destination: Location) -> LegTiming:
        """
        Driving timing for a corridor, departing now

        Raises:
            UpstreamError: When no route is returned
            MissingDataError: When duration fields are absent or zero
        """
        leg = await self.fetch_leg(origin, destination, TravelMode.DRIVING.value, "now")

        normal = leg.duration_seconds
        in_traffic = leg.duration_in_traffic_seconds
        if not normal or not in_traffic or normal <= 0 or in_traffic <= 0:
            raise MissingDataError("duration fields missing")

        return LegTiming(normal_seconds=normal, in_traffic_seconds=in_traffic)
