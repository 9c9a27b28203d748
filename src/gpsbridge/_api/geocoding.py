"""Reverse-geocoding provider (LocationIQ compatible)."""

from __future__ import annotations

from typing import Any

from gpsbridge._transport import Transport
from gpsbridge.config import SyncConfig
from gpsbridge.exceptions import TransportError


async def reverse_geocode(config: SyncConfig, transport: Transport, lat: float, lng: float) -> dict[str, Any]:
    """Return the provider's address payload for a point.

    Raises
    ------
    TransportError
        On request failure or a non-object answer.
    """
    params = {
        "key": config.geocoding_api_key or "",
        "lat": str(lat),
        "lon": str(lng),
        "format": "json",
    }
    result = await transport.request_json("GET", config.geocoding_url, params=params)
    if not isinstance(result, dict):
        raise TransportError(
            f"Reverse geocode returned {type(result).__name__}, expected an object",
            endpoint=config.geocoding_url,
        )
    return result
