"""Runtime settings: optional YAML file, overridden by environment variables."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

import yaml
from pydantic import BaseModel, Field, ValidationError

from routeweather.errors import ConfigLoadFailed

logger = logging.getLogger(__name__)

CONFIG_DIR = Path(__file__).resolve().parent.parent.parent / "config"

# Environment variable → settings field
_ENV_OVERRIDES = {
    "ROUTEWEATHER_SAMPLE_INTERVAL_KM": "sample_interval_km",
    "ROUTEWEATHER_REQUEST_TIMEOUT_S": "request_timeout_s",
    "ROUTEWEATHER_MAX_RETRIES": "max_retries",
    "ROUTEWEATHER_BACKOFF_FACTOR": "backoff_factor",
    "ROUTEWEATHER_MAX_WORKERS": "max_workers",
    "DATA_DIR": "data_dir",
    "DATABASE_URL": "database_url",
}

DB_FILENAME = "routeweather.db"


class Settings(BaseModel):
    """Tunables for sampling, outbound HTTP and storage."""

    sample_interval_km: float = Field(default=5.0, gt=0)
    request_timeout_s: float = Field(default=15.0, gt=0)
    max_retries: int = Field(default=2, ge=0)
    backoff_factor: float = Field(default=0.5, ge=0)
    max_workers: int = Field(default=16, ge=1)
    data_dir: str = "data"
    database_url: Optional[str] = None

    def db_url(self) -> str:
        """``database_url`` when set, else a SQLite file under ``data_dir``."""
        if self.database_url:
            return self.database_url
        return f"sqlite:///{Path(self.data_dir) / DB_FILENAME}"


@dataclass
class ApiKeys:
    """Credentials for the map/geocoding and places providers."""

    mapbox: str
    google: str


def _settings_file(config_path: Path | None) -> Path | None:
    if config_path is not None:
        return config_path
    env_path = os.environ.get("ROUTEWEATHER_CONFIG")
    if env_path:
        return Path(env_path)
    default = CONFIG_DIR / "settings.yaml"
    return default if default.exists() else None


def load_settings(config_path: Path | None = None) -> Settings:
    """Build Settings from defaults, then the YAML file, then the environment.

    Raises:
        ConfigLoadFailed: If the YAML file is unreadable or a value fails validation.
    """
    path = _settings_file(config_path)
    raw: dict = {}
    if path is not None:
        try:
            with open(path) as f:
                raw = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as exc:
            raise ConfigLoadFailed(f"Cannot read settings file {path}: {exc}") from exc
        if not isinstance(raw, dict):
            raise ConfigLoadFailed(f"Settings file {path} must contain a mapping")
        logger.debug("Loaded settings from %s", path)

    for env_name, field_name in _ENV_OVERRIDES.items():
        if os.environ.get(env_name):
            raw[field_name] = os.environ[env_name]

    for key in [k for k in raw if k not in Settings.model_fields]:
        logger.warning("Ignoring unknown setting %r", key)
        del raw[key]

    try:
        return Settings.model_validate(raw)
    except ValidationError as exc:
        bad = ", ".join(str(err["loc"][0]) for err in exc.errors())
        raise ConfigLoadFailed(f"Invalid settings ({bad}): {exc}") from exc


def load_api_keys() -> ApiKeys:
    """Read provider credentials from the environment.

    Raises:
        ConfigLoadFailed: If either key is missing or empty.
    """
    mapbox = os.environ.get("MAPBOX_API_KEY", "")
    google = os.environ.get("GOOGLE_API_KEY", "")
    missing = [
        name
        for name, value in (("MAPBOX_API_KEY", mapbox), ("GOOGLE_API_KEY", google))
        if not value
    ]
    if missing:
        raise ConfigLoadFailed(f"Missing configuration: {', '.join(missing)}")
    return ApiKeys(mapbox=mapbox, google=google)
