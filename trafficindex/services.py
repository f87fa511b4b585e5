"""
Service wiring shared by the API and the CLI
"""

from dataclasses import dataclass
from datetime import timedelta
from typing import Optional

from trafficindex.config.models import DatasetConfig, Settings
from trafficindex.config.parser import ConfigParser
from trafficindex.core.cache import TTLCache
from trafficindex.events.service import EventService
from trafficindex.routing.client import DirectionsClient
from trafficindex.traffic.commute_service import CommuteService
from trafficindex.traffic.index_service import TrafficIndexService


@dataclass
class Services:
    """The three request-facing services"""

    index: TrafficIndexService
    commute: CommuteService
    events: EventService


def build_services(settings: Settings, dataset: Optional[DatasetConfig] = None) -> Services:
    """
    Build services from settings and a dataset

    Raises:
        ValueError: If no directions API key is configured
        ConfigParserError: If the configured dataset file is invalid
    """
    if dataset is None:
        dataset = ConfigParser.load_or_default(settings.config_path)

    client = DirectionsClient(api_key=settings.google_maps_key, timeout=settings.request_timeout)

    ttl = settings.index_ttl_seconds
    if ttl is None:
        ttl = dataset.index_ttl_seconds

    return Services(
        index=TrafficIndexService(
            client,
            dataset.corridors,
            cache=TTLCache(ttl),
            coalesce_refresh=dataset.coalesce_refresh,
        ),
        commute=CommuteService(client, default_modes=dataset.default_modes),
        events=build_event_service(dataset),
    )


def build_event_service(dataset: DatasetConfig) -> EventService:
    return EventService(
        dataset.events,
        lead=timedelta(minutes=dataset.event_lead_minutes),
        tail=timedelta(minutes=dataset.event_tail_minutes),
    )
