"""
Runtime settings for the Interchange pipeline driver.

Settings say where documents live and how to reach object stores. They are
separate from the config document, which belongs to the tap or target.
"""

import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from ..core.exceptions import ConfigurationError
from ..storage.documents import DocumentLocations
from ..storage.registry import BackendRegistry, create_registry


logger = logging.getLogger(__name__)


# Environment variable -> dotted settings key
ENV_OVERRIDES = {
    "INTERCHANGE_CONFIG": "documents.config",
    "INTERCHANGE_STATE": "documents.state",
    "INTERCHANGE_CATALOG": "documents.catalog",
    "INTERCHANGE_S3_ENDPOINT_URL": "storage.s3.endpoint_url",
    "INTERCHANGE_S3_REGION": "storage.s3.region",
    "INTERCHANGE_GS_ENDPOINT_URL": "storage.gs.endpoint_url",
    "INTERCHANGE_LOG_LEVEL": "logging.level",
}


class InterchangeSettings:
    """
    Settings for the pipeline driver.

    Loads a YAML settings file if given, otherwise defaults, then applies
    environment variable overrides.

    Example settings file:

        documents:
          config: config/tap.json
          state: gs://pipelines/state/tap.json
          catalog: gs://pipelines/catalog/tap.json
        storage:
          s3:
            region: eu-west-1
        logging:
          level: INFO
          structured: false
    """

    def __init__(self, settings_path: Optional[Path] = None):
        """
        Initialize settings.

        Args:
            settings_path: Path to YAML settings file (optional)
        """
        self.settings_path = Path(settings_path) if settings_path else None
        self.settings = self._load_settings() if self.settings_path else self._default_settings()
        self._apply_env_overrides()

    def _load_settings(self) -> Dict[str, Any]:
        """Load settings from a YAML file, merged over the defaults."""
        if not self.settings_path.exists():
            raise ConfigurationError(f"Settings file not found: {self.settings_path}")

        logger.info(f"Loading settings from: {self.settings_path}")

        try:
            with open(self.settings_path, "r", encoding="utf-8") as f:
                loaded = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Invalid settings file {self.settings_path}: {e}") from e

        if loaded is None:
            loaded = {}
        if not isinstance(loaded, dict):
            raise ConfigurationError(
                f"Settings file must contain a mapping: {self.settings_path}"
            )

        return _merge(self._default_settings(), loaded)

    def _default_settings(self) -> Dict[str, Any]:
        """Return default settings."""
        return {
            "documents": {
                "config": None,
                "state": None,
                "catalog": None,
            },
            "storage": {
                "s3": {
                    "endpoint_url": None,
                    "region": None,
                },
                "gs": {
                    "endpoint_url": None,
                },
            },
            "logging": {
                "level": "INFO",
                "structured": False,
            },
        }

    def _apply_env_overrides(self) -> None:
        """Apply environment variable overrides to loaded settings."""
        for env_name, key in ENV_OVERRIDES.items():
            value = os.environ.get(env_name)
            if value:
                self.set(key, value)

    def set(self, key: str, value: Any) -> None:
        """Set a settings value by dotted key."""
        *parents, last = key.split(".")
        node = self.settings
        for k in parents:
            node = node.setdefault(k, {})
        node[last] = value

    def get(self, key: str, default: Any = None) -> Any:
        """Get a settings value by dotted key."""
        keys = key.split(".")
        value = self.settings

        for k in keys:
            if isinstance(value, dict):
                value = value.get(k)
            else:
                return default

        return value if value is not None else default

    def get_locations(self) -> DocumentLocations:
        """Get the configured document locations."""
        return DocumentLocations.from_dict(self.settings.get("documents") or {})

    def get_storage_config(self) -> Dict[str, Any]:
        """Get storage configuration."""
        return self.settings.get("storage", {})

    def get_logging_config(self) -> Dict[str, Any]:
        """Get logging configuration."""
        return self.settings.get("logging", {})

    def get_log_level(self) -> int:
        """Get the configured log level as a logging constant."""
        level = self.get("logging.level", "INFO")
        if isinstance(level, int):
            return level
        resolved = logging.getLevelName(str(level).upper())
        if not isinstance(resolved, int):
            raise ConfigurationError(f"Unknown log level: {level}")
        return resolved


def _merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """Recursively merge override into a copy of base."""
    result = dict(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(result.get(key), dict):
            result[key] = _merge(result[key], value)
        else:
            result[key] = value
    return result


def build_registry(settings: InterchangeSettings) -> BackendRegistry:
    """Build a backend registry using the configured object-store endpoints."""
    return create_registry(
        s3_endpoint_url=settings.get("storage.s3.endpoint_url"),
        s3_region=settings.get("storage.s3.region"),
        gs_endpoint_url=settings.get("storage.gs.endpoint_url"),
    )
