"""Device list parsing and publishable attribute sets."""

from __future__ import annotations

import logging
from typing import Any, NamedTuple

from pydantic import ValidationError

from gpsbridge._constants import ATTRIBUTE_KEY_PREFIX
from gpsbridge.ingestion.normalize import battery_percentage, format_state
from gpsbridge.models.device import DeviceRecord

_logger = logging.getLogger(__name__)


class ParsedDevices(NamedTuple):
    devices: list[DeviceRecord]
    invalid: list[str]


def parse_device_list(decoded: dict[str, Any]) -> ParsedDevices:
    """Validate each entry of ``decoded["devices"]`` independently.

    Entries that fail validation are reported by id (or list position
    when they have none) instead of failing the whole list.
    """
    devices: list[DeviceRecord] = []
    invalid: list[str] = []
    for index, item in enumerate(decoded.get("devices") or []):
        try:
            devices.append(DeviceRecord.model_validate(item))
        except ValidationError as exc:
            label = str(item.get("id")) if isinstance(item, dict) and item.get("id") is not None else f"#{index}"
            _logger.warning("Skipping malformed device %s: %s", label, exc.errors(include_url=False))
            invalid.append(label)
    return ParsedDevices(devices, invalid)


def build_sensor_attributes(device: DeviceRecord) -> list[tuple[str, str]]:
    """Ordered ``(key, value)`` pairs published as one sensor each.

    Keys carry :data:`ATTRIBUTE_KEY_PREFIX` so they can be appended to the
    device's entity id as a suffix.
    """
    p = ATTRIBUTE_KEY_PREFIX
    return [
        (f"{p}id", device.id),
        (f"{p}latitude", format_state(device.latitude)),
        (f"{p}longitude", format_state(device.longitude)),
        (f"{p}speed", format_state(device.speed)),
        (f"{p}course", format_state(device.course)),
        (f"{p}battery_voltage", device.battery_voltage or ""),
        (f"{p}battery", battery_percentage(device.battery_voltage)),
        (f"{p}name", device.name),
        (f"{p}position_time", device.position_time or ""),
        (f"{p}is_stop", format_state(device.is_stop)),
        (f"{p}signal", format_state(device.signal)),
        (f"{p}satellite", format_state(device.satellite)),
        (f"{p}satellite_gl", format_state(device.satellite_gl)),
        (f"{p}satellite_bd", format_state(device.satellite_bd)),
    ]


def tracker_attributes(attributes: list[tuple[str, str]]) -> dict[str, str]:
    """Flat attribute map for the tracker entity, prefix stripped from keys."""
    return {key.removeprefix(ATTRIBUTE_KEY_PREFIX): value for key, value in attributes}
