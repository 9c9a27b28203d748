"""Reverse-geocode cache entry model."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class GeocodeEntry(BaseModel):
    """One cached provider answer and the coordinates it was asked for."""

    model_config = ConfigDict(frozen=True)

    request_lat: float
    request_lng: float
    payload: dict[str, Any] = Field(default_factory=dict)

    @property
    def display_name(self) -> str | None:
        name = self.payload.get("display_name")
        return str(name) if name else None

    def to_record(self) -> dict[str, Any]:
        """Flat on-disk form: the provider payload plus the request point."""
        return {**self.payload, "requestLat": self.request_lat, "requestLng": self.request_lng}

    @classmethod
    def from_record(cls, record: dict[str, Any]) -> GeocodeEntry:
        payload = {k: v for k, v in record.items() if k not in ("requestLat", "requestLng")}
        return cls(
            request_lat=float(record["requestLat"]),
            request_lng=float(record["requestLng"]),
            payload=payload,
        )
