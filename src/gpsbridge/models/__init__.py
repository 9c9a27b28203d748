"""Data models for vendor and platform payloads."""

from gpsbridge.models._base import BridgeBaseModel
from gpsbridge.models.device import DeviceRecord
from gpsbridge.models.geocode import GeocodeEntry
from gpsbridge.models.token import AuthToken
from gpsbridge.models.zone import Zone

__all__ = [
    "AuthToken",
    "BridgeBaseModel",
    "DeviceRecord",
    "GeocodeEntry",
    "Zone",
]
