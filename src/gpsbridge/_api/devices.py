"""Vendor device-list endpoint."""

from __future__ import annotations

import logging
from typing import Any
from urllib.parse import quote

from gpsbridge._envelope import decode_object
from gpsbridge._transport import Transport
from gpsbridge.config import SyncConfig
from gpsbridge.exceptions import SessionExpiredError, TransportError
from gpsbridge.models.token import AuthToken

_logger = logging.getLogger(__name__)

# Characters encodeURIComponent leaves alone; the vendor expects that encoding.
_URI_COMPONENT_SAFE = "-_.!~*'()"


def build_device_list_body(config: SyncConfig, token: AuthToken) -> str:
    """Configured body prefix followed by the URL-encoded token."""
    return config.devices_body_prefix + quote(token.key, safe=_URI_COMPONENT_SAFE)


async def post_device_list(config: SyncConfig, transport: Transport, token: AuthToken) -> str:
    """POST the device-list request and return the raw envelope.

    Raises
    ------
    SessionExpiredError
        The vendor answered 401/403.
    TransportError
        Any other network or HTTP failure.
    """
    endpoint = config.devices_url
    try:
        return await transport.post_form(endpoint, build_device_list_body(config, token))
    except TransportError as exc:
        if exc.is_auth_failure:
            raise SessionExpiredError(f"Device list rejected token: {exc}", endpoint=endpoint) from exc
        raise


def decode_device_payload(text: str, *, endpoint: str = "") -> dict[str, Any]:
    """Decode the device-list envelope.

    Raises
    ------
    DecodeError
        The envelope or its JSON did not decode.
    SessionExpiredError
        The decoded object carries no ``devices`` array, which is how the
        vendor answers a token it no longer accepts.
    """
    decoded = decode_object(text, endpoint=endpoint)
    if not isinstance(decoded.get("devices"), list):
        raise SessionExpiredError(
            f"Device list response has no devices array (keys={sorted(decoded)})",
            endpoint=endpoint,
        )
    _logger.debug("Device list returned %d entries", len(decoded["devices"]))
    return decoded
