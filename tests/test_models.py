from __future__ import annotations

import pytest
from pydantic import ValidationError

from gpsbridge.ingestion.devices import build_sensor_attributes, parse_device_list, tracker_attributes
from gpsbridge.models.device import DeviceRecord
from gpsbridge.models.geocode import GeocodeEntry


def _vendor_device(**overrides: object) -> dict[str, object]:
    device: dict[str, object] = {
        "id": 4021,
        "lat": "38.7223",
        "lng": "-9.1393",
        "speed": "42.5",
        "course": 180,
        "dy": "12.6",
        "name": "Van 1",
        "positionTime": "2026-03-14 11:00:00",
        "isStop": "0",
        "signal": "28",
        "satellite": "9",
        "satellitegl": "",
        "satellitebd": "4",
    }
    device.update(overrides)
    return device


def test_device_record_parses_vendor_fields() -> None:
    device = DeviceRecord.model_validate(_vendor_device())

    assert device.id == "4021"
    assert device.latitude == pytest.approx(38.7223)
    assert device.longitude == pytest.approx(-9.1393)
    assert device.speed == pytest.approx(42.5)
    assert device.course == 180
    assert device.battery_voltage == "12.6"
    assert device.position_time == "2026-03-14 11:00:00"
    assert device.is_stop is False
    assert device.signal == 28
    assert device.satellite_gl is None
    assert device.satellite_bd == 4
    assert device.raw["dy"] == "12.6"


def test_device_record_is_immutable() -> None:
    device = DeviceRecord.model_validate(_vendor_device())
    with pytest.raises(ValidationError):
        device.name = "changed"  # type: ignore[misc]


def test_device_name_falls_back_to_id() -> None:
    device = DeviceRecord.model_validate(_vendor_device(name="--"))
    assert device.name == "4021"


@pytest.mark.parametrize("overrides", [{"lat": "north"}, {"lng": None}, {"id": ""}])
def test_device_record_rejects_unusable_entries(overrides: dict[str, object]) -> None:
    with pytest.raises(ValidationError):
        DeviceRecord.model_validate(_vendor_device(**overrides))


def test_parse_device_list_isolates_invalid_entries() -> None:
    parsed = parse_device_list(
        {
            "devices": [
                _vendor_device(id=1),
                _vendor_device(id=2, lat="--"),
                "garbage",
                _vendor_device(id=3),
            ]
        }
    )

    assert [device.id for device in parsed.devices] == ["1", "3"]
    assert parsed.invalid == ["2", "#2"]


def test_sensor_attributes_are_ordered_and_string_valued() -> None:
    attributes = build_sensor_attributes(DeviceRecord.model_validate(_vendor_device()))

    assert [key for key, _ in attributes] == [
        "_id",
        "_latitude",
        "_longitude",
        "_speed",
        "_course",
        "_battery_voltage",
        "_battery",
        "_name",
        "_position_time",
        "_is_stop",
        "_signal",
        "_satellite",
        "_satellite_gl",
        "_satellite_bd",
    ]
    values = dict(attributes)
    assert values["_battery"] == "80"
    assert values["_course"] == "180"
    assert values["_is_stop"] == "false"
    assert values["_satellite_gl"] == ""
    assert all(isinstance(value, str) for value in values.values())


def test_tracker_attributes_strip_key_prefix() -> None:
    flat = tracker_attributes([("_latitude", "1.5"), ("_battery", "50")])
    assert flat == {"latitude": "1.5", "battery": "50"}


def test_geocode_entry_record_round_trip() -> None:
    record = {"display_name": "Rua Augusta", "place_id": "1", "requestLat": 38.71, "requestLng": -9.13}
    entry = GeocodeEntry.from_record(record)

    assert entry.display_name == "Rua Augusta"
    assert entry.payload == {"display_name": "Rua Augusta", "place_id": "1"}
    assert entry.to_record() == record
