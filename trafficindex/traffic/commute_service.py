"""
Commute comparison across travel modes
"""

import logging
from datetime import datetime
from typing import Callable, List, Optional, Sequence, Union

from trafficindex.core.errors import BadRequestError
from trafficindex.core.join import JoinStrategy, join
from trafficindex.core.models import GeoPoint, TravelMode, round_half_up, utc_now
from trafficindex.routing.client import DirectionsClient
from trafficindex.routing.models import LegData

from .models import CommuteResponse, RouteModeResult

DEFAULT_MODES = "driving,transit,walking"
TOLL_WARNING = "Toll roads may apply"


def parse_modes(modes: Union[str, Sequence[str], None]) -> List[str]:
    """
    Normalise a mode list

    Accepts "driving, Transit" style strings or sequences. Entries are trimmed and
    lower-cased; unknown modes are kept and left for the provider to reject.
    """
    if modes is None:
        modes = DEFAULT_MODES
    if isinstance(modes, str):
        modes = modes.split(",")
    return [m.strip().lower() for m in modes if m and m.strip()]


def seconds_to_minutes(seconds: Optional[int]) -> Optional[int]:
    return round_half_up(seconds / 60) if seconds else None


def build_mode_result(mode: str, leg: LegData) -> RouteModeResult:
    """Convert a leg into minutes for one mode (ranking fields left empty)"""
    typical = leg.duration_seconds
    if mode == TravelMode.DRIVING.value:
        now = leg.duration_in_traffic_seconds or typical
    else:
        now = typical

    return RouteModeResult(
        mode=mode,
        now_minutes=seconds_to_minutes(now),
        typical_minutes=seconds_to_minutes(typical),
        distance_km=leg.distance_meters / 1000 if leg.distance_meters else None,
        polyline=leg.polyline,
        warning=TOLL_WARNING if leg.has_toll else None,
    )


def rank_modes(results: List[RouteModeResult]) -> CommuteResponse:
    """
    Pick the fastest mode and fill in the relative fields

    Ties keep the first mode in input order. Modes without a current time are
    not ranked and get no difference to the fastest.
    """
    timed = [r for r in results if r.now_minutes is not None]
    fastest = min(timed, key=lambda r: r.now_minutes) if timed else None

    enriched = []
    for r in results:
        diff = None
        if fastest is not None and r.now_minutes is not None:
            diff = r.now_minutes - fastest.now_minutes

        delta = None
        if r.now_minutes is not None and r.typical_minutes:
            delta = round_half_up(((r.now_minutes / r.typical_minutes) - 1) * 100)

        enriched.append(r.model_copy(update={
            "diff_to_fastest_minutes": diff,
            "delta_pct_vs_typical": delta,
        }))

    return CommuteResponse(
        routes=enriched,
        fastest_mode=fastest.mode if fastest else None,
    )


class CommuteService:
    """
    Service comparing travel modes for one origin/destination pair
    Stateless; every request queries the provider afresh
    """

    def __init__(
        self,
        client: DirectionsClient,
        default_modes: Union[str, Sequence[str]] = DEFAULT_MODES,
        now: Callable[[], datetime] = utc_now,
    ):
        self.client = client
        self.default_modes = parse_modes(default_modes)
        self.now = now
        self.logger = logging.getLogger(__name__)

    async def compare(
        self,
        origin: Union[GeoPoint, str, None],
        destination: Union[GeoPoint, str, None],
        modes: Union[str, Sequence[str], None] = None,
    ) -> CommuteResponse:
        """
        Compare travel modes between two points

        Modes are fetched one after another; a failure for any mode aborts the
        whole comparison, since a ranking with a missing mode would mislead.

        Args:
            origin: GeoPoint or "lat,lng" string
            destination: GeoPoint or "lat,lng" string
            modes: Comma-separated string or list of modes (defaults to the service default)

        Returns:
            CommuteResponse with per-mode results in input order

        Raises:
            BadRequestError: If origin or destination is missing
            UpstreamError: If any mode query fails
        """
        if not origin or not destination:
            raise BadRequestError("from and to are required, e.g. 41.0,29.0")

        # An empty mode list falls back to the defaults rather than comparing nothing
        mode_list = parse_modes(modes) if modes is not None else []
        if not mode_list:
            mode_list = list(self.default_modes)

        factories = [
            (lambda m=mode: self.client.fetch_leg(origin, destination, m, "now"))
            for mode in mode_list
        ]
        legs = await join(factories, JoinStrategy.FAIL_FAST)

        results = [build_mode_result(mode, leg) for mode, leg in zip(mode_list, legs)]
        response = rank_modes(results)
        response = response.model_copy(update={"generated_at": self.now()})

        self.logger.info(
            f"Compared {len(mode_list)} modes {origin} -> {destination}; fastest: {response.fastest_mode}"
        )
        return response
