"""gpsbridge - Republish vehicle-tracker telemetry as automation-platform state."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("gpsbridge")
except PackageNotFoundError:
    __version__ = "0+local"
from gpsbridge._envelope import decode_envelope
from gpsbridge.config import SyncConfig
from gpsbridge.exceptions import (
    AuthError,
    ConfigError,
    DecodeError,
    GpsBridgeError,
    PublishError,
    SessionExpiredError,
    TransportError,
)
from gpsbridge.geo import distance_meters
from gpsbridge.geocache import JsonFileStore, ReverseGeocodeCache
from gpsbridge.ingestion.normalize import battery_percentage, is_fresh
from gpsbridge.models import AuthToken, DeviceRecord, GeocodeEntry, Zone
from gpsbridge.service import SyncService
from gpsbridge.session import TokenManager
from gpsbridge.state.zones import ZoneCache
from gpsbridge.sync import CycleReport, CycleState, SyncContext, run_sync_cycle

__all__ = [
    "__version__",
    "AuthError",
    "AuthToken",
    "ConfigError",
    "CycleReport",
    "CycleState",
    "DecodeError",
    "DeviceRecord",
    "GeocodeEntry",
    "GpsBridgeError",
    "JsonFileStore",
    "PublishError",
    "ReverseGeocodeCache",
    "SessionExpiredError",
    "SyncConfig",
    "SyncContext",
    "SyncService",
    "TokenManager",
    "TransportError",
    "Zone",
    "ZoneCache",
    "battery_percentage",
    "decode_envelope",
    "distance_meters",
    "is_fresh",
    "run_sync_cycle",
]
