"""
TrafficIndex Configuration Module
Handles environment settings and YAML/JSON corridor/event datasets
"""

from .defaults import DEFAULT_CORRIDORS, DEFAULT_EVENTS, default_config
from .models import ConfigFormat, DatasetConfig, Settings
from .parser import ConfigParser, ConfigParserError

__all__ = [
    "ConfigFormat",
    "DatasetConfig",
    "Settings",
    "ConfigParser",
    "ConfigParserError",
    "DEFAULT_CORRIDORS",
    "DEFAULT_EVENTS",
    "default_config",
]
