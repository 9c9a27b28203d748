"""Service configuration for gpsbridge."""

from __future__ import annotations

import dataclasses
import os
from datetime import tzinfo
from typing import Any
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from gpsbridge._constants import DEFAULT_GEOCODING_URL
from gpsbridge.exceptions import ConfigError

#: Environment variable -> field for string settings.
_ENV_CONFIG_MAP = {
    "LOGIN_URL": "login_url",
    "LOGINDATA": "login_data",
    "UPD_DEVICES_URL": "devices_url",
    "UPD_DEVICES_BASE_DATA": "devices_body_prefix",
    "HA_BASE_URL": "platform_url",
    "HA_TOKEN": "platform_token",
    "LOCATIONIQ_TOKEN": "geocoding_api_key",
    "GEOCODING_URL": "geocoding_url",
    "GEOCODE_CACHE_FILE": "geocode_cache_file",
    "ENTITY_PREFIX": "entity_prefix",
    "TIME_ZONE": "time_zone",
    "TRACCAR_URL": "traccar_url",
}

_ENV_FLOAT_MAP = {
    "SYNC_INTERVAL": "sync_interval",
    "ZONE_REFRESH_INTERVAL": "zone_refresh_interval",
    "PUBLISH_INTERVAL": "publish_interval",
    "HTTP_TIMEOUT": "http_timeout",
}

_ENV_INT_MAP = {
    "HTTP_PORT": "http_port",
    "GEOCODE_CACHE_MAX_ENTRIES": "geocode_cache_max_entries",
}

#: Fields without which a sync cycle cannot run, with their env names.
_REQUIRED_FIELDS = {
    "login_url": "LOGIN_URL",
    "login_data": "LOGINDATA",
    "devices_url": "UPD_DEVICES_URL",
    "devices_body_prefix": "UPD_DEVICES_BASE_DATA",
    "platform_url": "HA_BASE_URL",
    "platform_token": "HA_TOKEN",
}


@dataclasses.dataclass(frozen=True)
class SyncConfig:
    """Service configuration.

    Parameters
    ----------
    login_url : str
        Vendor login endpoint.
    login_data : str
        Pre-encoded form body posted to ``login_url``.
    devices_url : str
        Vendor device-list endpoint.
    devices_body_prefix : str
        Form body prefix; the URL-encoded token is appended to it.
    platform_url : str
        Base URL of the automation platform (no trailing slash needed).
    platform_token : str
        Long-lived bearer token for the platform REST API.
    geocoding_api_key : str or None
        Reverse-geocoding API key. Geocoding is disabled when unset.
    geocoding_url : str
        Reverse-geocoding endpoint.
    geocode_cache_file : str
        JSON file backing the reverse-geocode cache.
    geocode_cache_max_entries : int or None
        Upper bound on cached geocode entries; ``None`` keeps everything.
    entity_prefix : str
        Prefix of every published entity object id.
    time_zone : str or None
        IANA zone of the vendor's naive position timestamps. Defaults
        to the host's local zone.
    sync_interval : float
        Seconds between device sync cycles.
    zone_refresh_interval : float
        Seconds between zone cache refreshes.
    publish_interval : float
        Minimum seconds between two device publish sequences.
    http_port : int
        Port of the health listener.
    http_timeout : float
        Total timeout in seconds for one outbound HTTP request.
    traccar_url : str or None
        OsmAnd endpoint positions are forwarded to. Disabled when unset.
    """

    login_url: str = ""
    login_data: str = ""
    devices_url: str = ""
    devices_body_prefix: str = ""
    platform_url: str = ""
    platform_token: str = ""
    geocoding_api_key: str | None = None
    geocoding_url: str = DEFAULT_GEOCODING_URL
    geocode_cache_file: str = "geoCache.json"
    geocode_cache_max_entries: int | None = None
    entity_prefix: str = "gps"
    time_zone: str | None = None
    sync_interval: float = 8.0
    zone_refresh_interval: float = 4 * 3600
    publish_interval: float = 1.0
    http_port: int = 3000
    http_timeout: float = 30.0
    traccar_url: str | None = None

    @property
    def geocoding_enabled(self) -> bool:
        return bool(self.geocoding_api_key)

    @property
    def forwarding_enabled(self) -> bool:
        return bool(self.traccar_url)

    def platform_endpoint(self, path: str) -> str:
        """Join *path* onto the platform base URL."""
        return f"{self.platform_url.rstrip('/')}/{path.lstrip('/')}"

    def validate(self) -> None:
        """Raise :class:`ConfigError` for missing required or unusable settings."""
        missing = tuple(
            env_key for field_name, env_key in _REQUIRED_FIELDS.items() if not str(getattr(self, field_name)).strip()
        )
        if missing:
            raise ConfigError(
                f"Missing required configuration: {', '.join(missing)}",
                missing=missing,
            )
        for name in ("sync_interval", "zone_refresh_interval"):
            if getattr(self, name) <= 0:
                raise ConfigError(f"{name} must be positive, got {getattr(self, name)}")
        if self.publish_interval < 0:
            raise ConfigError(f"publish_interval must not be negative, got {self.publish_interval}")
        if self.geocode_cache_max_entries is not None and self.geocode_cache_max_entries < 1:
            raise ConfigError(
                f"GEOCODE_CACHE_MAX_ENTRIES must be at least 1, got {self.geocode_cache_max_entries}"
            )
        load_time_zone(self.time_zone)

    @classmethod
    def from_env(cls, **overrides: Any) -> SyncConfig:
        """Create configuration from environment variables.

        Explicit keyword arguments override environment values.
        Numeric variables that do not parse raise :class:`ConfigError`.
        """
        env = os.environ

        config_kwargs: dict[str, Any] = {}
        for env_key, field_name in _ENV_CONFIG_MAP.items():
            val = env.get(env_key)
            if val is not None and val.strip():
                config_kwargs[field_name] = val

        for env_key, field_name in _ENV_FLOAT_MAP.items():
            val = env.get(env_key)
            if val is not None and field_name not in overrides:
                config_kwargs[field_name] = _parse_number(env_key, val, float)

        for env_key, field_name in _ENV_INT_MAP.items():
            val = env.get(env_key)
            if val is not None and field_name not in overrides:
                config_kwargs[field_name] = _parse_number(env_key, val, int)

        config_kwargs.update(overrides)

        return cls(**config_kwargs)


def load_time_zone(name: str | None) -> tzinfo | None:
    """Resolve an IANA zone name; ``None`` for an empty name."""
    if not name:
        return None
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError) as exc:
        raise ConfigError(f"Unknown TIME_ZONE {name!r}") from exc


def _parse_number(env_key: str, value: str, kind: type[int] | type[float]) -> Any:
    try:
        return kind(value.strip())
    except ValueError as exc:
        raise ConfigError(f"{env_key} must be a {kind.__name__}, got {value!r}") from exc
