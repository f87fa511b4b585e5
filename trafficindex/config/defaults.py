"""
Built-in Istanbul datasets
"""

from typing import List

from trafficindex.core.models import Corridor, Event, GeoPoint

from .models import DatasetConfig


def _corridor(name: str, from_lat: float, from_lng: float, to_lat: float, to_lng: float) -> Corridor:
    return Corridor(
        name=name,
        from_=GeoPoint(lat=from_lat, lng=from_lng),
        to=GeoPoint(lat=to_lat, lng=to_lng),
    )


DEFAULT_CORRIDORS: List[Corridor] = [
    _corridor("E5 West→Centre (Beylikdüzü→Bakırköy)", 41.0018, 28.6401, 40.9799, 28.8721),
    _corridor("E5 East→Centre (Kartal→Kadıköy)", 40.9076, 29.2278, 40.9871, 29.0356),
    _corridor("TEM West→Centre (Hadımköy→Maslak)", 41.1361, 28.5870, 41.1115, 29.0203),
    _corridor("TEM East→Centre (Şile→Ümraniye)", 41.1717, 29.3535, 41.0332, 29.0985),
    _corridor("1st Bridge Asia→Europe (Kuzguncuk→Beşiktaş)", 41.0408, 29.0320, 41.0423, 29.0050),
    _corridor("2nd Bridge Asia→Europe (Kavacık→Levent)", 41.0917, 29.0745, 41.0854, 29.0218),
    _corridor("Eurasia Tunnel (Acıbadem→Yenikapı)", 41.0087, 29.0396, 41.0044, 28.9557),
    _corridor("Airport→Taksim", 41.2620, 28.7424, 41.0369, 28.9850),
]

DEFAULT_EVENTS: List[Event] = [
    Event(
        title="Vodafone Park Match",
        lat=41.0391, lng=29.0006,
        start="2025-09-01T18:00:00+03:00", end="2025-09-01T21:00:00+03:00",
        venue="Vodafone Park",
    ),
    Event(
        title="Rams Park Match",
        lat=41.1032, lng=28.9989,
        start="2025-09-02T20:00:00+03:00", end="2025-09-02T23:00:00+03:00",
        venue="Rams Park",
    ),
    Event(
        title="TÜYAP Fair",
        lat=41.0065, lng=28.6414,
        start="2025-09-05T10:00:00+03:00", end="2025-09-05T19:00:00+03:00",
        venue="TÜYAP",
    ),
    Event(
        title="Ülker Arena Concert",
        lat=40.9857, lng=29.1171,
        start="2025-09-03T19:00:00+03:00", end="2025-09-03T22:30:00+03:00",
        venue="Ülker Sports Arena",
    ),
]


def default_config() -> DatasetConfig:
    return DatasetConfig(corridors=DEFAULT_CORRIDORS, events=DEFAULT_EVENTS)
