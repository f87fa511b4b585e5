"""
Configuration file parser for TrafficIndex
Handles YAML and JSON dataset files with validation
"""

import json
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml
from pydantic import ValidationError

from trafficindex.core.errors import TrafficIndexError

from .defaults import default_config
from .models import ConfigFormat, DatasetConfig


class ConfigParserError(TrafficIndexError):
    """Configuration parsing error"""
    pass


class ConfigParser:
    """Parser for TrafficIndex dataset files"""

    @staticmethod
    def detect_format(file_path: Path) -> ConfigFormat:
        """Detect configuration file format from extension"""
        suffix = file_path.suffix.lower()

        if suffix in ['.yaml', '.yml']:
            return ConfigFormat.YAML
        elif suffix == '.json':
            return ConfigFormat.JSON
        else:
            raise ConfigParserError(f"Unsupported file format: {suffix}")

    @staticmethod
    def load_file(file_path: Path) -> Dict[str, Any]:
        """Load configuration file content"""
        if not file_path.exists():
            raise ConfigParserError(f"Configuration file not found: {file_path}")

        format_type = ConfigParser.detect_format(file_path)

        try:
            content = file_path.read_text(encoding='utf-8')
            if format_type == ConfigFormat.YAML:
                data = yaml.safe_load(content) or {}
            else:
                data = json.loads(content)
        except yaml.YAMLError as e:
            raise ConfigParserError(f"Invalid YAML syntax: {e}")
        except json.JSONDecodeError as e:
            raise ConfigParserError(f"Invalid JSON syntax: {e}")
        except OSError as e:
            raise ConfigParserError(f"Error reading file: {e}")

        if not isinstance(data, dict):
            raise ConfigParserError("Configuration root must be a mapping")
        return data

    @staticmethod
    def save_file(config: DatasetConfig, file_path: Path, format_type: Optional[ConfigFormat] = None) -> None:
        """Save configuration to file"""
        if format_type is None:
            format_type = ConfigParser.detect_format(file_path)

        file_path.parent.mkdir(parents=True, exist_ok=True)

        config_dict = config.model_dump(mode='json', by_alias=True)

        if format_type == ConfigFormat.YAML:
            content = yaml.dump(
                config_dict,
                default_flow_style=False,
                allow_unicode=True,
                sort_keys=False,
                indent=2
            )
        else:
            content = json.dumps(config_dict, indent=2, ensure_ascii=False)

        try:
            file_path.write_text(content, encoding='utf-8')
        except OSError as e:
            raise ConfigParserError(f"Error saving file: {e}")

    @staticmethod
    def parse_dataset(data: Dict[str, Any]) -> DatasetConfig:
        """Parse a DatasetConfig from dictionary data"""
        try:
            return DatasetConfig(**data)
        except ValidationError as e:
            raise ConfigParserError(f"Invalid dataset configuration: {e}")

    @staticmethod
    def parse_config(file_path: Union[str, Path]) -> DatasetConfig:
        """
        Parse configuration file into DatasetConfig

        Args:
            file_path: Path to configuration file

        Returns:
            DatasetConfig instance

        Raises:
            ConfigParserError: If parsing fails
        """
        file_path = Path(file_path)
        raw_data = ConfigParser.load_file(file_path)

        if 'corridors' not in raw_data:
            raise ConfigParserError("Configuration missing 'corridors' section")

        return ConfigParser.parse_dataset(raw_data)

    @staticmethod
    def load_or_default(file_path: Optional[Union[str, Path]] = None) -> DatasetConfig:
        """Parse the given file, or fall back to the built-in datasets"""
        if file_path is None:
            return default_config()
        return ConfigParser.parse_config(file_path)

    @staticmethod
    def create_template_config() -> DatasetConfig:
        """Create a template configuration from the built-in datasets"""
        return default_config()
