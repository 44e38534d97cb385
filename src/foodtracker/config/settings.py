"""Application settings and configuration management."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

import yaml


def _default_config_dir() -> Path:
    """Return the default configuration directory."""
    return Path.home() / ".foodtracker"


def _default_storage_path() -> Path:
    """Return the default meal archive path."""
    return _default_config_dir() / "meals.json"


@dataclass
class StorageConfig:
    """Meal archive configuration."""

    path: Path = field(default_factory=_default_storage_path)


@dataclass
class SearchConfig:
    """Search bar configuration."""

    rating_match: str = "exact"  # "exact" or "contains"
    default_scope: str = "Name"  # "Name" or "Rating"


@dataclass
class LoggingConfig:
    """Logging configuration."""

    level: str = "WARNING"
    format: str = "%(asctime)s %(levelname)s %(name)s: %(message)s"


@dataclass
class Settings:
    """Main application settings."""

    storage: StorageConfig = field(default_factory=StorageConfig)
    search: SearchConfig = field(default_factory=SearchConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    @classmethod
    def load(cls, config_path: Optional[Path] = None) -> "Settings":
        """Load settings from YAML file or return defaults.

        Args:
            config_path: Path to config.yaml. If None, uses ~/.foodtracker/config.yaml

        Returns:
            Settings instance
        """
        if config_path is None:
            config_path = _default_config_dir() / "config.yaml"

        if not config_path.exists():
            return cls()

        with open(config_path) as f:
            data = yaml.safe_load(f) or {}

        settings = cls()

        # Parse storage config
        if "storage" in data:
            storage_data = data["storage"] or {}
            if storage_data.get("path"):
                settings.storage.path = Path(storage_data["path"]).expanduser()

        # Parse search config
        if "search" in data:
            search_data = data["search"] or {}
            if "rating_match" in search_data:
                settings.search.rating_match = str(search_data["rating_match"])
            if "default_scope" in search_data:
                settings.search.default_scope = str(search_data["default_scope"])

        # Parse logging config
        if "logging" in data:
            log_data = data["logging"] or {}
            if "level" in log_data:
                settings.logging.level = str(log_data["level"]).upper()
            if "format" in log_data:
                settings.logging.format = log_data["format"]

        return settings

    def save(self, config_path: Optional[Path] = None) -> None:
        """Save current settings to YAML file.

        Args:
            config_path: Path to save config.yaml. If None, uses ~/.foodtracker/config.yaml
        """
        if config_path is None:
            config_path = _default_config_dir() / "config.yaml"

        config_path.parent.mkdir(parents=True, exist_ok=True)

        data = {
            "storage": {
                "path": str(self.storage.path),
            },
            "search": {
                "rating_match": self.search.rating_match,
                "default_scope": self.search.default_scope,
            },
            "logging": {
                "level": self.logging.level,
                "format": self.logging.format,
            },
        }

        with open(config_path, "w") as f:
            yaml.dump(data, f, default_flow_style=False, sort_keys=False)


# Global settings instance (lazy loaded)
_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """Get the global settings instance, loading from disk if needed."""
    global _settings
    if _settings is None:
        _settings = Settings.load()
    return _settings


def reload_settings() -> Settings:
    """Force reload settings from disk."""
    global _settings
    _settings = Settings.load()
    return _settings
