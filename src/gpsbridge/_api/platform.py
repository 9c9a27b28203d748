"""Automation-platform REST endpoints.

Endpoints:
  - GET  /api/states                (zone discovery)
  - POST /api/states/<entity_id>    (state publication)
"""

from __future__ import annotations

import logging
import re
from typing import Any

from pydantic import ValidationError

from gpsbridge._constants import SENSOR_DOMAIN, TRACKER_DOMAIN, ZONE_ENTITY_PREFIX
from gpsbridge._transport import Transport
from gpsbridge.config import SyncConfig
from gpsbridge.exceptions import PublishError, TransportError
from gpsbridge.models.zone import Zone

_logger = logging.getLogger(__name__)

_SLUG_INVALID = re.compile(r"[^a-z0-9]+")


def _auth_headers(config: SyncConfig) -> dict[str, str]:
    return {"authorization": f"Bearer {config.platform_token}"}


def entity_slug(name: str) -> str:
    """Lower-case *name* and collapse anything outside ``[a-z0-9]`` to ``_``."""
    slug = _SLUG_INVALID.sub("_", name.strip().lower()).strip("_")
    return slug or "unknown"


def sensor_entity_id(config: SyncConfig, device_name: str, suffix: str) -> str:
    return f"{SENSOR_DOMAIN}.{config.entity_prefix}_{entity_slug(device_name)}{suffix}"


def tracker_entity_id(config: SyncConfig, device_name: str) -> str:
    return f"{TRACKER_DOMAIN}.{config.entity_prefix}_{entity_slug(device_name)}"


def parse_zones(entities: Any) -> list[Zone]:
    """Keep the ``zone.*`` entities, in the order the platform returned them.

    Zones with missing or unusable attributes are skipped.
    """
    if not isinstance(entities, list):
        return []
    zones: list[Zone] = []
    for entity in entities:
        if not isinstance(entity, dict):
            continue
        entity_id = str(entity.get("entity_id", ""))
        if not entity_id.startswith(ZONE_ENTITY_PREFIX):
            continue
        try:
            zones.append(Zone.model_validate(entity))
        except ValidationError as exc:
            _logger.debug("Skipping malformed zone %s: %s", entity_id, exc)
    return zones


async def fetch_zones(config: SyncConfig, transport: Transport) -> list[Zone]:
    """Fetch every zone entity from the platform.

    Raises
    ------
    TransportError
        If the states call fails or does not return a list.
    """
    url = config.platform_endpoint("/api/states")
    entities = await transport.request_json("GET", url, headers=_auth_headers(config))
    if not isinstance(entities, list):
        raise TransportError(
            f"Expected a list of states, got {type(entities).__name__}",
            endpoint=url,
        )
    return parse_zones(entities)


async def publish_state(
    config: SyncConfig,
    transport: Transport,
    entity_id: str,
    state: str,
    attributes: dict[str, Any] | None = None,
) -> None:
    """Create or overwrite one entity state.

    Raises
    ------
    PublishError
        If the write fails for any reason.
    """
    payload: dict[str, Any] = {"state": state}
    if attributes is not None:
        payload["attributes"] = attributes

    url = config.platform_endpoint(f"/api/states/{entity_id}")
    try:
        await transport.request_json("POST", url, headers=_auth_headers(config), payload=payload)
    except TransportError as exc:
        raise PublishError(
            f"Publishing {entity_id} failed: {exc}",
            entity_id=entity_id,
            status_code=exc.status_code,
        ) from exc
