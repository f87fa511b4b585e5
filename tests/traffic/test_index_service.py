"""
Tests for the traffic index service
"""

import asyncio
from datetime import datetime, timedelta, timezone
from unittest.mock import AsyncMock, Mock

import pytest

from trafficindex.core.cache import TTLCache
from trafficindex.core.errors import MissingDataError, NoDataError, UpstreamError
from trafficindex.core.models import Corridor, GeoPoint
from trafficindex.routing.client import DirectionsClient
from trafficindex.routing.models import LegTiming
from trafficindex.traffic.index_service import TrafficIndexService, compute_index
from trafficindex.traffic.models import CorridorResult


class FakeClock:
    """Manually advanced monotonic clock"""

    def __init__(self):
        self.value = 0.0

    def __call__(self):
        return self.value

    def advance(self, seconds):
        self.value += seconds


class FakeNow:
    """Wall clock returning a new timestamp on every call"""

    def __init__(self):
        self.current = datetime(2025, 9, 1, 8, 0, tzinfo=timezone.utc)

    def __call__(self):
        self.current += timedelta(seconds=1)
        return self.current


def make_corridors(count):
    return [
        Corridor(
            name=f"corridor-{i}",
            from_=GeoPoint(lat=41.0, lng=28.0 + i / 10),
            to=GeoPoint(lat=41.1, lng=29.0),
        )
        for i in range(count)
    ]


def timing(normal, in_traffic):
    return LegTiming(normal_seconds=normal, in_traffic_seconds=in_traffic)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def mock_client():
    """Mock directions client"""
    client = Mock(spec=DirectionsClient)
    client.fetch_leg_timing = AsyncMock()
    return client


def make_service(client, corridors, clock, **kwargs):
    return TrafficIndexService(
        client,
        corridors,
        cache=TTLCache(30, clock=clock),
        now=FakeNow(),
        **kwargs,
    )


class TestComputeIndex:
    """Test index arithmetic"""

    def test_average_and_index(self):
        """50% and 0% average to 25%, index 26"""
        results = [
            CorridorResult(name="a", increase_pct=50.0),
            CorridorResult(name="b", increase_pct=0.0),
        ]
        index, avg = compute_index(results)

        assert avg == pytest.approx(25.0)
        assert index == 26

    def test_failed_corridors_excluded(self):
        """Failures are left out of the mean, not counted as zero"""
        results = [
            CorridorResult(name="a", increase_pct=0.0),
            CorridorResult(name="b", increase_pct=10.0),
            CorridorResult(name="c", error="route not found"),
        ]
        index, avg = compute_index(results)

        assert avg == pytest.approx(5.0)
        assert index == 6

    def test_clamps_high(self):
        """Extreme congestion clamps to 99"""
        index, _ = compute_index([CorridorResult(name="a", increase_pct=500.0)])
        assert index == 99

    def test_clamps_low(self):
        """Faster-than-typical traffic clamps to 1"""
        index, _ = compute_index([CorridorResult(name="a", increase_pct=-50.0)])
        assert index == 1

    def test_nan_falls_back_to_one(self):
        """A non-finite average yields index 1"""
        index, _ = compute_index([CorridorResult(name="a", increase_pct=float("nan"))])
        assert index == 1

    def test_rounds_half_up(self):
        """Halves round up"""
        index, _ = compute_index([CorridorResult(name="a", increase_pct=1.5)])
        assert index == 3

    @pytest.mark.parametrize("increase", [-100.0, -1.0, 0.0, 42.4, 97.6, 98.0, 1e6])
    def test_index_always_in_range(self, increase):
        """Index is an integer between 1 and 99"""
        index, _ = compute_index([CorridorResult(name="a", increase_pct=increase)])
        assert isinstance(index, int)
        assert 1 <= index <= 99

    def test_all_failed(self):
        """No successful corridor raises NoDataError"""
        with pytest.raises(NoDataError):
            compute_index([CorridorResult(name="a", error="boom")])


class TestTrafficIndexService:
    """Test traffic index service"""

    @pytest.mark.asyncio
    async def test_end_to_end_index(self, mock_client, clock):
        """Two corridors at +50% and +0% give index 26"""
        corridors = make_corridors(2)
        mock_client.fetch_leg_timing.side_effect = [timing(1000, 1500), timing(800, 800)]
        service = make_service(mock_client, corridors, clock)

        snapshot = await service.get_index()

        assert snapshot.index == 26
        assert snapshot.avg_increase_pct == 25
        assert [r.name for r in snapshot.routes] == ["corridor-0", "corridor-1"]
        assert snapshot.routes[0].increase_pct == pytest.approx(50.0)
        assert snapshot.routes[1].increase_pct == pytest.approx(0.0)
        assert mock_client.fetch_leg_timing.call_count == 2

        first_call = mock_client.fetch_leg_timing.call_args_list[0]
        assert first_call[0] == (corridors[0].from_, corridors[0].to)

    @pytest.mark.asyncio
    async def test_partial_failure(self, mock_client, clock):
        """One failing corridor does not abort the others and is kept in detail"""
        corridors = make_corridors(3)
        mock_client.fetch_leg_timing.side_effect = [
            timing(1000, 1000),
            timing(1000, 1100),
            UpstreamError("route not found"),
        ]
        service = make_service(mock_client, corridors, clock)

        snapshot = await service.get_index()

        assert snapshot.avg_increase_pct == 5
        assert snapshot.index == 6
        assert snapshot.routes[2].error == "route not found"
        assert snapshot.routes[2].increase_pct is None

    @pytest.mark.asyncio
    async def test_missing_data_marks_corridor_failed(self, mock_client, clock):
        """Missing durations mark the corridor failed instead of zero increase"""
        mock_client.fetch_leg_timing.side_effect = [
            timing(1000, 1200),
            MissingDataError("duration fields missing"),
        ]
        service = make_service(mock_client, make_corridors(2), clock)

        snapshot = await service.get_index()

        assert snapshot.avg_increase_pct == 20
        assert snapshot.index == 21
        assert snapshot.routes[1].error == "duration fields missing"

    @pytest.mark.asyncio
    async def test_all_failed_raises_and_does_not_cache(self, mock_client, clock):
        """Total failure raises NoDataError and leaves the cache empty"""
        mock_client.fetch_leg_timing.side_effect = UpstreamError("down")
        service = make_service(mock_client, make_corridors(2), clock)

        with pytest.raises(NoDataError, match="No routes computed"):
            await service.get_index()

        assert "index" not in service.cache

        mock_client.fetch_leg_timing.side_effect = None
        mock_client.fetch_leg_timing.return_value = timing(100, 110)
        snapshot = await service.get_index()
        assert snapshot.index == 11

    @pytest.mark.asyncio
    async def test_cached_within_ttl(self, mock_client, clock):
        """Calls within the TTL return the same snapshot without new queries"""
        mock_client.fetch_leg_timing.return_value = timing(1000, 1200)
        service = make_service(mock_client, make_corridors(2), clock)

        first = await service.get_index()
        clock.advance(29)
        second = await service.get_index()

        assert second.updated_at == first.updated_at
        assert second is first
        assert mock_client.fetch_leg_timing.call_count == 2

    @pytest.mark.asyncio
    async def test_recomputed_after_ttl(self, mock_client, clock):
        """A call after expiry recomputes with a new timestamp"""
        mock_client.fetch_leg_timing.return_value = timing(1000, 1200)
        service = make_service(mock_client, make_corridors(2), clock)

        first = await service.get_index()
        clock.advance(30)
        second = await service.get_index()

        assert second.updated_at > first.updated_at
        assert mock_client.fetch_leg_timing.call_count == 4

    @pytest.mark.asyncio
    async def test_invalidate(self, mock_client, clock):
        """Invalidation forces a recomputation"""
        mock_client.fetch_leg_timing.return_value = timing(1000, 1000)
        service = make_service(mock_client, make_corridors(1), clock)

        await service.get_index()
        service.invalidate()
        await service.get_index()

        assert mock_client.fetch_leg_timing.call_count == 2

    @pytest.mark.asyncio
    async def test_concurrent_misses_overfetch(self, mock_client, clock):
        """Without coalescing, concurrent misses each fan out"""
        async def slow_timing(origin, destination):
            await asyncio.sleep(0.01)
            return timing(1000, 1100)

        mock_client.fetch_leg_timing.side_effect = slow_timing
        service = make_service(mock_client, make_corridors(2), clock)

        await asyncio.gather(service.get_index(), service.get_index())

        assert mock_client.fetch_leg_timing.call_count == 4

    @pytest.mark.asyncio
    async def test_concurrent_misses_coalesced(self, mock_client, clock):
        """With coalescing, concurrent misses share one fan-out"""
        async def slow_timing(origin, destination):
            await asyncio.sleep(0.01)
            return timing(1000, 1100)

        mock_client.fetch_leg_timing.side_effect = slow_timing
        service = make_service(mock_client, make_corridors(2), clock, coalesce_refresh=True)

        first, second = await asyncio.gather(service.get_index(), service.get_index())

        assert first is second
        assert mock_client.fetch_leg_timing.call_count == 2

    @pytest.mark.asyncio
    async def test_payload_shapes(self, mock_client, clock):
        """Serialised corridors carry either increasePct or error"""
        mock_client.fetch_leg_timing.side_effect = [timing(1000, 1500), UpstreamError("nope")]
        service = make_service(mock_client, make_corridors(2), clock)

        payload = (await service.get_index()).to_payload()

        assert set(payload) == {"index", "avgIncreasePct", "routes", "updatedAt"}
        assert payload["routes"][0] == {"name": "corridor-0", "increasePct": 50.0}
        assert payload["routes"][1] == {"name": "corridor-1", "error": "nope"}
        assert payload["updatedAt"].startswith("2025-09-01T08:00")

    @pytest.mark.asyncio
    async def test_cancelled_corridor_marked_failed(self, mock_client, clock):
        """A cancelled corridor query is recorded as a failure, not a crash"""
        mock_client.fetch_leg_timing.side_effect = [timing(1000, 1300), asyncio.CancelledError()]
        service = make_service(mock_client, make_corridors(2), clock)

        snapshot = await service.get_index()

        assert snapshot.avg_increase_pct == 30
        assert snapshot.routes[1].ok is False
        assert snapshot.routes[1].error == "CancelledError"
