from __future__ import annotations

import pytest

from gpsbridge.config import _ENV_CONFIG_MAP, _ENV_FLOAT_MAP, _ENV_INT_MAP, SyncConfig
from gpsbridge.exceptions import ConfigError

_REQUIRED_ENV = {
    "LOGIN_URL": "https://vendor.example/login",
    "LOGINDATA": "user=fleet&pwd=secret",
    "UPD_DEVICES_URL": "https://vendor.example/devices",
    "UPD_DEVICES_BASE_DATA": "mapType=GOOGLE&key=",
    "HA_BASE_URL": "http://ha.local:8123",
    "HA_TOKEN": "ha-token",
}


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for key in (*_ENV_CONFIG_MAP, *_ENV_FLOAT_MAP, *_ENV_INT_MAP):
        monkeypatch.delenv(key, raising=False)


def test_from_env_reads_required_and_optional_values(monkeypatch: pytest.MonkeyPatch) -> None:
    for key, value in _REQUIRED_ENV.items():
        monkeypatch.setenv(key, value)
    monkeypatch.setenv("SYNC_INTERVAL", "15")
    monkeypatch.setenv("HTTP_PORT", "8080")
    monkeypatch.setenv("LOCATIONIQ_TOKEN", "pk.123")

    config = SyncConfig.from_env()
    config.validate()

    assert config.login_url == "https://vendor.example/login"
    assert config.devices_body_prefix == "mapType=GOOGLE&key="
    assert config.sync_interval == 15.0
    assert config.http_port == 8080
    assert config.zone_refresh_interval == 4 * 3600
    assert config.publish_interval == 1.0
    assert config.geocoding_enabled is True
    assert config.forwarding_enabled is False


def test_overrides_take_precedence(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("HA_TOKEN", "from-env")
    monkeypatch.setenv("PUBLISH_INTERVAL", "5")

    config = SyncConfig.from_env(platform_token="explicit", publish_interval=0.5)

    assert config.platform_token == "explicit"
    assert config.publish_interval == 0.5


def test_validate_names_every_missing_variable(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("LOGIN_URL", "https://vendor.example/login")
    monkeypatch.setenv("HA_TOKEN", "   ")

    with pytest.raises(ConfigError) as exc_info:
        SyncConfig.from_env().validate()

    assert exc_info.value.missing == (
        "LOGINDATA",
        "UPD_DEVICES_URL",
        "UPD_DEVICES_BASE_DATA",
        "HA_BASE_URL",
        "HA_TOKEN",
    )
    assert "LOGINDATA" in str(exc_info.value)


def test_invalid_number_is_a_config_error(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("SYNC_INTERVAL", "often")

    with pytest.raises(ConfigError, match="SYNC_INTERVAL"):
        SyncConfig.from_env()


def test_validate_rejects_non_positive_interval() -> None:
    config = SyncConfig(
        login_url="https://vendor.example/login",
        login_data="user=fleet",
        devices_url="https://vendor.example/devices",
        devices_body_prefix="key=",
        platform_url="http://ha.local:8123",
        platform_token="ha-token",
        sync_interval=0,
    )

    with pytest.raises(ConfigError, match="sync_interval"):
        config.validate()


def test_platform_endpoint_joins_paths() -> None:
    config = SyncConfig(platform_url="http://ha.local:8123/")
    assert config.platform_endpoint("/api/states") == "http://ha.local:8123/api/states"


@pytest.mark.parametrize(
    ("env_key", "value", "message"),
    [
        ("TIME_ZONE", "Not/AZone", "Unknown TIME_ZONE"),
        ("GEOCODE_CACHE_MAX_ENTRIES", "0", "GEOCODE_CACHE_MAX_ENTRIES"),
    ],
)
def test_validate_rejects_unusable_optional_settings(
    monkeypatch: pytest.MonkeyPatch,
    env_key: str,
    value: str,
    message: str,
) -> None:
    for key, required in _REQUIRED_ENV.items():
        monkeypatch.setenv(key, required)
    monkeypatch.setenv(env_key, value)

    config = SyncConfig.from_env()

    with pytest.raises(ConfigError, match=message):
        config.validate()


def test_validate_accepts_single_entry_geocode_cache() -> None:
    config = SyncConfig(
        login_url="https://vendor.example/login",
        login_data="user=fleet",
        devices_url="https://vendor.example/devices",
        devices_body_prefix="key=",
        platform_url="http://ha.local:8123",
        platform_token="ha-token",
        geocode_cache_max_entries=1,
    )

    config.validate()
