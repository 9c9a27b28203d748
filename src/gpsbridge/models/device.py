"""Vendor device record model."""

from __future__ import annotations

from typing import Any

from pydantic import AliasChoices, Field, field_validator, model_validator

from gpsbridge.ingestion.normalize import safe_bool, safe_float, safe_int, safe_str
from gpsbridge.models._base import BridgeBaseModel


class DeviceRecord(BridgeBaseModel):
    """Telemetry of one tracked device as reported by the vendor.

    Parameters
    ----------
    id : str
        Vendor device id.
    latitude, longitude : float
        Last reported position in degrees.
    speed : float or None
        Speed in km/h.
    course : float or None
        Heading in degrees.
    battery_voltage : str or None
        Raw battery voltage string (vendor field ``dy``).
    name : str
        Display name; falls back to the id when the vendor sends none.
    position_time : str or None
        Vendor-local ``YYYY-MM-DD HH:MM:SS`` timestamp of the fix.
    is_stop : bool or None
        Whether the vendor considers the device parked.
    signal, satellite, satellite_gl, satellite_bd : int or None
        Signal strength and GPS/GLONASS/BeiDou satellite counts.
    """

    id: str
    latitude: float = Field(validation_alias=AliasChoices("latitude", "lat"))
    longitude: float = Field(validation_alias=AliasChoices("longitude", "lng", "lon"))
    speed: float | None = None
    course: float | None = Field(default=None, validation_alias=AliasChoices("course", "bearing"))
    battery_voltage: str | None = Field(default=None, validation_alias=AliasChoices("battery_voltage", "dy"))
    name: str = ""
    position_time: str | None = Field(default=None, validation_alias=AliasChoices("position_time", "positionTime"))
    is_stop: bool | None = Field(default=None, validation_alias=AliasChoices("is_stop", "isStop"))
    signal: int | None = None
    satellite: int | None = None
    satellite_gl: int | None = Field(default=None, validation_alias=AliasChoices("satellite_gl", "satellitegl"))
    satellite_bd: int | None = Field(default=None, validation_alias=AliasChoices("satellite_bd", "satellitebd"))

    @field_validator("id", mode="before")
    @classmethod
    def _coerce_id(cls, value: Any) -> str:
        text = safe_str(value)
        if text is None:
            raise ValueError("device id must be non-empty")
        return text

    @field_validator("latitude", "longitude", mode="before")
    @classmethod
    def _coerce_coordinate(cls, value: Any) -> float:
        parsed = safe_float(value)
        if parsed is None:
            raise ValueError(f"invalid coordinate: {value!r}")
        return parsed

    @field_validator("speed", "course", mode="before")
    @classmethod
    def _coerce_floats(cls, value: Any) -> float | None:
        return safe_float(value)

    @field_validator("battery_voltage", "position_time", mode="before")
    @classmethod
    def _coerce_strings(cls, value: Any) -> str | None:
        return safe_str(value)

    @field_validator("name", mode="before")
    @classmethod
    def _coerce_name(cls, value: Any) -> str:
        return safe_str(value) or ""

    @field_validator("is_stop", mode="before")
    @classmethod
    def _coerce_bool(cls, value: Any) -> bool | None:
        return safe_bool(value)

    @field_validator("signal", "satellite", "satellite_gl", "satellite_bd", mode="before")
    @classmethod
    def _coerce_ints(cls, value: Any) -> int | None:
        return safe_int(value)

    @model_validator(mode="after")
    def _default_name(self) -> DeviceRecord:
        if not self.name.strip():
            object.__setattr__(self, "name", self.id)
        return self
