"""Automation-platform zone model."""

from __future__ import annotations

from typing import Any

from pydantic import Field, model_validator

from gpsbridge.models._base import BridgeBaseModel


class Zone(BridgeBaseModel):
    """A named circular zone.

    Built from a platform state entity such as::

        {"entity_id": "zone.home", "state": "0",
         "attributes": {"latitude": 52.1, "longitude": 4.3,
                        "radius": 100, "friendly_name": "Home"}}
    """

    entity_id: str
    name: str
    latitude: float
    longitude: float
    radius: float = Field(ge=0)

    @model_validator(mode="before")
    @classmethod
    def _flatten_entity(cls, values: Any) -> Any:
        if not isinstance(values, dict) or "attributes" not in values:
            return values
        attributes = values.get("attributes")
        if not isinstance(attributes, dict):
            return values
        entity_id = str(values.get("entity_id", ""))
        flat: dict[str, Any] = {
            "entity_id": entity_id,
            "name": attributes.get("friendly_name") or entity_id.partition(".")[2],
            "latitude": attributes.get("latitude"),
            "longitude": attributes.get("longitude"),
            "radius": attributes.get("radius"),
            "raw": values.get("raw", values),
        }
        return {key: value for key, value in flat.items() if value is not None}
