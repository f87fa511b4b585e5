"""
Configuration models for TrafficIndex
"""

import os
from enum import Enum
from pathlib import Path
from typing import List, Mapping, Optional

from pydantic import BaseModel, Field, field_validator

from trafficindex.core.models import Corridor, Event


class ConfigFormat(str, Enum):
    """Supported configuration file formats"""

    YAML = "yaml"
    JSON = "json"


class DatasetConfig(BaseModel):
    """
    Static datasets and tuning for one city
    Loaded from a YAML/JSON file or built from the defaults
    """

    city: str = Field("Istanbul", description="City the corridors describe")
    corridors: List[Corridor] = Field(
        ...,
        description="Reference corridors for the traffic index",
        min_length=1,
    )
    events: List[Event] = Field(
        default_factory=list,
        description="Scheduled events"
    )
    index_ttl_seconds: float = Field(
        30.0,
        description="How long a traffic index snapshot is served from cache",
        ge=0
    )
    coalesce_refresh: bool = Field(
        False,
        description="Share one index recomputation between concurrent callers"
    )
    default_modes: List[str] = Field(
        default=["driving", "transit", "walking"],
        description="Modes compared when a request names none"
    )
    event_lead_minutes: int = Field(
        120,
        description="Minutes before an event starts that it counts as active",
        ge=0
    )
    event_tail_minutes: int = Field(
        60,
        description="Minutes after an event ends that it counts as active",
        ge=0
    )

    @field_validator("corridors")
    @classmethod
    def unique_corridor_names(cls, v):
        """Corridor names identify corridors and must be unique"""
        names = [c.name for c in v]
        duplicates = sorted({n for n in names if names.count(n) > 1})
        if duplicates:
            raise ValueError(f"Duplicate corridor names: {', '.join(duplicates)}")
        return v

    @field_validator("default_modes")
    @classmethod
    def normalise_modes(cls, v):
        modes = [m.strip().lower() for m in v if m.strip()]
        if not modes:
            raise ValueError("At least one default mode is required")
        return modes


class Settings(BaseModel):
    """Process settings read from the environment"""

    google_maps_key: Optional[str] = Field(None, description="Directions API key")
    host: str = Field("127.0.0.1", description="Bind address for the API server")
    port: int = Field(5050, description="Port for the API server", ge=1, le=65535)
    config_path: Optional[Path] = Field(None, description="Dataset file (YAML/JSON)")
    request_timeout: float = Field(10.0, description="Upstream request timeout in seconds", gt=0)
    index_ttl_seconds: Optional[float] = Field(
        None, description="Overrides the dataset's index TTL", ge=0
    )

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Settings":
        """Build settings from environment variables, ignoring unset ones"""
        env = os.environ if environ is None else environ
        mapping = {
            "google_maps_key": "GOOGLE_MAPS_SERVER_KEY",
            "host": "HOST",
            "port": "PORT",
            "config_path": "TRAFFICINDEX_CONFIG",
            "request_timeout": "TRAFFICINDEX_TIMEOUT",
            "index_ttl_seconds": "TRAFFICINDEX_INDEX_TTL",
        }
        values = {field: env[var] for field, var in mapping.items() if env.get(var)}
        return cls(**values)
