"""
Shared data models for TrafficIndex
"""

import math
from datetime import datetime, timezone
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


def utc_now() -> datetime:
    """Current time as a timezone-aware UTC datetime"""
    return datetime.now(timezone.utc)


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves away from negative infinity"""
    return int(math.floor(value + 0.5))


class CamelModel(BaseModel):
    """Base model serialising field names as camelCase"""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class TravelMode(str, Enum):
    """Travel modes understood by the directions provider"""

    DRIVING = "driving"
    TRANSIT = "transit"
    WALKING = "walking"
    BICYCLING = "bicycling"


class GeoPoint(BaseModel):
    """Geographic point in decimal degrees"""

    model_config = ConfigDict(frozen=True)

    lat: float = Field(description="Latitude", ge=-90, le=90)
    lng: float = Field(description="Longitude", ge=-180, le=180)

    @classmethod
    def parse(cls, value: str) -> "GeoPoint":
        """
        Parse a "lat,lng" string

        Raises:
            ValueError: If the string is not two comma-separated numbers in range
        """
        parts = [p.strip() for p in str(value).split(",")]
        if len(parts) != 2:
            raise ValueError(f"Expected 'lat,lng', got: {value!r}")
        try:
            lat, lng = float(parts[0]), float(parts[1])
        except ValueError:
            raise ValueError(f"Coordinates must be numeric: {value!r}")
        return cls(lat=lat, lng=lng)

    def __str__(self) -> str:
        return f"{self.lat},{self.lng}"


class Corridor(BaseModel):
    """Fixed reference origin-destination pair used as a congestion probe"""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    name: str = Field(description="Unique corridor name", min_length=1)
    from_: GeoPoint = Field(alias="from", description="Corridor origin")
    to: GeoPoint = Field(description="Corridor destination")


class Event(BaseModel):
    """Scheduled event that can cause local traffic peaks"""

    model_config = ConfigDict(frozen=True)

    title: str = Field(description="Event title")
    lat: float = Field(description="Venue latitude", ge=-90, le=90)
    lng: float = Field(description="Venue longitude", ge=-180, le=180)
    start: datetime = Field(description="Event start")
    end: datetime = Field(description="Event end")
    venue: str = Field(description="Venue name")

    @field_validator("start", "end")
    @classmethod
    def assume_utc(cls, v: datetime) -> datetime:
        """Treat naive datetimes as UTC"""
        if v.tzinfo is None:
            return v.replace(tzinfo=timezone.utc)
        return v
