"""
Traffic index aggregation over reference corridors
"""

import asyncio
import logging
import math
from datetime import datetime
from typing import Callable, List, Optional, Sequence, Tuple

from trafficindex.core.cache import TTLCache
from trafficindex.core.errors import NoDataError
from trafficindex.core.join import JoinStrategy, join
from trafficindex.core.models import Corridor, round_half_up, utc_now
from trafficindex.routing.client import DirectionsClient

from .models import CorridorResult, TrafficIndexSnapshot

INDEX_CACHE_KEY = "index"
DEFAULT_INDEX_TTL = 30.0
INDEX_MIN = 1
INDEX_MAX = 99


def compute_index(results: Sequence[CorridorResult]) -> Tuple[int, float]:
    """
    Combine corridor results into a bounded congestion index

    Failed corridors are excluded from the average rather than counted as zero.

    Args:
        results: Per-corridor outcomes

    Returns:
        (index, average increase in percent)

    Raises:
        NoDataError: If no corridor succeeded
    """
    ok = [r for r in results if r.ok]
    if not ok:
        raise NoDataError("No routes computed")

    avg_increase = sum(r.increase_pct for r in ok) / len(ok)

    raw = 1 + avg_increase
    if math.isnan(raw):
        return INDEX_MIN, avg_increase

    clamped = min(INDEX_MAX, max(INDEX_MIN, raw))
    return round_half_up(clamped), avg_increase


class TrafficIndexService:
    """
    Service computing the city-wide traffic index
    Fans out one driving query per corridor and caches the snapshot briefly
    """

    def __init__(
        self,
        client: DirectionsClient,
        corridors: List[Corridor],
        cache: Optional[TTLCache] = None,
        coalesce_refresh: bool = False,
        now: Callable[[], datetime] = utc_now,
    ):
        self.client = client
        self.corridors = list(corridors)
        self.cache = cache if cache is not None else TTLCache(DEFAULT_INDEX_TTL)
        self.coalesce_refresh = coalesce_refresh
        self.now = now
        self.logger = logging.getLogger(__name__)
        self._refresh_lock = asyncio.Lock()

    async def get_index(self) -> TrafficIndexSnapshot:
        """
        Return the cached snapshot or compute a new one

        Without coalesce_refresh, concurrent callers that find the cache stale
        each trigger their own fan-out.

        Raises:
            NoDataError: If every corridor failed; nothing is cached
        """
        cached = self.cache.get(INDEX_CACHE_KEY)
        if cached is not None:
            return cached

        if not self.coalesce_refresh:
            return await self._refresh()

        async with self._refresh_lock:
            # Another caller may have refreshed while we waited
            cached = self.cache.get(INDEX_CACHE_KEY)
            if cached is not None:
                return cached
            return await self._refresh()

    def invalidate(self) -> None:
        self.cache.invalidate(INDEX_CACHE_KEY)

    async def _refresh(self) -> TrafficIndexSnapshot:
        results = await self.fetch_corridor_results()

        try:
            index, avg_increase = compute_index(results)
        except NoDataError:
            self.logger.error(f"Traffic index failed: all {len(results)} corridors errored")
            raise

        snapshot = TrafficIndexSnapshot(
            index=index,
            avg_increase_pct=round_half_up(avg_increase) if math.isfinite(avg_increase) else 0,
            routes=results,
            updated_at=self.now(),
        )
        self.cache.set(INDEX_CACHE_KEY, snapshot)

        failed = sum(1 for r in results if not r.ok)
        self.logger.info(
            f"Traffic index {snapshot.index} (avg +{snapshot.avg_increase_pct}%, "
            f"{len(results) - failed}/{len(results)} corridors)"
        )
        return snapshot

    async def fetch_corridor_results(self) -> List[CorridorResult]:
        """Query every corridor concurrently; failures are captured per corridor"""
        factories = [
            (lambda c=corridor: self.client.fetch_leg_timing(c.from_, c.to))
            for corridor in self.corridors
        ]
        outcomes = await join(factories, JoinStrategy.SETTLE_ALL)

        results = []
        for corridor, outcome in zip(self.corridors, outcomes):
            if isinstance(outcome, BaseException):
                self.logger.warning(f"Corridor '{corridor.name}' failed: {outcome}")
                results.append(CorridorResult(name=corridor.name, error=str(outcome) or type(outcome).__name__))
            else:
                results.append(CorridorResult(name=corridor.name, increase_pct=outcome.increase_pct))
        return results
