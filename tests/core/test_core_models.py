"""
Tests for shared models
"""

from datetime import timezone

import pytest
from pydantic import ValidationError

from trafficindex.core.models import Corridor, Event, GeoPoint, TravelMode, round_half_up


class TestGeoPoint:
    """Test GeoPoint model"""

    def test_parse(self):
        point = GeoPoint.parse(" 41.0082, 28.9784 ")
        assert point.lat == 41.0082
        assert point.lng == 28.9784

    def test_str(self):
        assert str(GeoPoint(lat=41.0, lng=29.0)) == "41.0,29.0"

    @pytest.mark.parametrize("value", ["41.0", "a,b", "41,29,1", ""])
    def test_parse_invalid(self, value):
        with pytest.raises(ValueError):
            GeoPoint.parse(value)

    def test_range_validation(self):
        """Coordinates outside the valid range are rejected"""
        with pytest.raises(ValidationError):
            GeoPoint(lat=91, lng=0)
        with pytest.raises(ValidationError):
            GeoPoint(lat=0, lng=-181)
        with pytest.raises(ValueError):
            GeoPoint.parse("100,0")


class TestCorridor:
    """Test Corridor model"""

    def test_from_alias(self):
        """Corridors load from dicts using the 'from' key"""
        corridor = Corridor(**{
            "name": "Airport→Taksim",
            "from": {"lat": 41.262, "lng": 28.7424},
            "to": {"lat": 41.0369, "lng": 28.985},
        })

        assert corridor.from_ == GeoPoint(lat=41.262, lng=28.7424)
        assert corridor.model_dump(by_alias=True)["from"]["lat"] == 41.262

    def test_immutable(self):
        corridor = Corridor(name="a", from_=GeoPoint(lat=0, lng=0), to=GeoPoint(lat=1, lng=1))
        with pytest.raises(ValidationError):
            corridor.name = "b"


class TestEvent:
    """Test Event model"""

    def test_naive_datetimes_assumed_utc(self):
        event = Event(
            title="Match", lat=41.0, lng=29.0,
            start="2025-09-01T18:00:00", end="2025-09-01T21:00:00",
            venue="Stadium",
        )
        assert event.start.tzinfo == timezone.utc

    def test_offset_preserved(self):
        event = Event(
            title="Match", lat=41.0, lng=29.0,
            start="2025-09-01T18:00:00+03:00", end="2025-09-01T21:00:00+03:00",
            venue="Stadium",
        )
        assert event.start.utcoffset().total_seconds() == 3 * 3600


class TestHelpers:
    """Test helpers"""

    @pytest.mark.parametrize("value,expected", [(0.5, 1), (1.49, 1), (2.5, 3), (-0.5, 0), (-1.6, -2)])
    def test_round_half_up(self, value, expected):
        assert round_half_up(value) == expected

    def test_travel_modes(self):
        assert TravelMode("bicycling") is TravelMode.BICYCLING
