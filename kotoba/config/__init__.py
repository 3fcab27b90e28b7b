"""YAML configuration loader for Kotoba."""

import os
import yaml
from pathlib import Path
from typing import Dict, Any, Optional
import logging

from pydantic import ValidationError

from ..models.settings import AppSettings

logger = logging.getLogger(__name__)

# Keys holding filesystem paths, resolved relative to the config file
_PATH_KEYS = (
    ('storage', 'data_directory'),
    ('logging', 'file_path'),
    ('speech', 'credentials_path'),
)


class KotobaConfig:
    """Kotoba configuration loader."""

    def __init__(self, config_path: Optional[str] = None):
        """Initialize configuration loader.

        Args:
            config_path: Path to YAML config file. If None, uses kotoba.yaml
                        in the current directory.
        """
        self.config_file = Path(config_path or "kotoba.yaml")

        if not self.config_file.exists():
            raise FileNotFoundError(f"Configuration file not found: {self.config_file}")

        logger.info(f"Loading configuration from: {self.config_file}")
        self.config = self._load_config()

    def _load_config(self) -> Dict[str, Any]:
        """Load and parse YAML configuration file."""
        try:
            with open(self.config_file, 'r', encoding='utf-8') as f:
                config = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid YAML in configuration file: {e}") from e

        if not config:
            raise ValueError("Configuration file is empty")
        if not isinstance(config, dict):
            raise ValueError("Configuration root must be a mapping")

        self._resolve_paths(config)

        logger.info("Configuration loaded successfully")
        return config

    def _resolve_paths(self, config: Dict[str, Any]) -> None:
        """Resolve relative paths in configuration relative to config file location."""
        config_dir = self.config_file.parent

        for section, key in _PATH_KEYS:
            if isinstance(config.get(section), dict) and config[section].get(key):
                path = config[section][key]
                if not os.path.isabs(path):
                    config[section][key] = str(config_dir / path)

    def get(self, key_path: str, default: Any = None) -> Any:
        """Get configuration value using dot notation (e.g., 'storage.data_directory').

        Args:
            key_path: Dot-separated key path
            default: Default value if key not found

        Returns:
            Configuration value or default
        """
        keys = key_path.split('.')
        value = self.config

        for key in keys:
            if isinstance(value, dict) and key in value:
                value = value[key]
            else:
                return default

        return value

    def load_settings(self) -> AppSettings:
        """Build the live settings document from the ``settings`` section."""
        raw = self.get('settings') or {}
        try:
            return AppSettings.model_validate(raw)
        except ValidationError as e:
            raise ValueError(f"Invalid settings section: {e}") from e

    def get_data_directory(self) -> str:
        """Get data directory path."""
        data_dir = self.get('storage.data_directory', 'data')
        return str(Path(data_dir).absolute())

    def get_speech_credentials_path(self) -> str:
        """Get speech engine credentials path - raises if missing."""
        creds_path = self.get('speech.credentials_path')
        if not creds_path:
            raise ValueError("Speech credentials path not configured in kotoba.yaml")

        creds_file = Path(creds_path)
        if not creds_file.exists():
            raise FileNotFoundError(f"Speech credentials file not found: {creds_path}")

        return str(creds_file.absolute())
