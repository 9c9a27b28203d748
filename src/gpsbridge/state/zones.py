"""Geofence zone cache."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from datetime import UTC, datetime

from gpsbridge._api.platform import fetch_zones
from gpsbridge._constants import NOT_HOME
from gpsbridge._transport import Transport
from gpsbridge.config import SyncConfig
from gpsbridge.exceptions import TransportError
from gpsbridge.geo import distance_meters
from gpsbridge.models.zone import Zone

_logger = logging.getLogger(__name__)


class ZoneCache:
    """Snapshot of the platform's zones, replaced wholesale on refresh.

    The snapshot is an immutable tuple swapped in a single assignment, so
    a reader iterating it never sees a half-updated list.
    """

    def __init__(self, config: SyncConfig, transport: Transport) -> None:
        self._config = config
        self._transport = transport
        self._zones: tuple[Zone, ...] = ()
        self._refreshed_at: datetime | None = None

    @property
    def zones(self) -> tuple[Zone, ...]:
        return self._zones

    @property
    def refreshed_at(self) -> datetime | None:
        """When the snapshot was last replaced, ``None`` if never."""
        return self._refreshed_at

    def replace(self, zones: Iterable[Zone]) -> None:
        self._zones = tuple(zones)
        self._refreshed_at = datetime.now(UTC)

    async def refresh(self) -> bool:
        """Re-fetch the zones; keep the previous snapshot on failure.

        Returns whether the snapshot was replaced.
        """
        try:
            zones = await fetch_zones(self._config, self._transport)
        except TransportError as exc:
            _logger.warning("Zone refresh failed, keeping %d cached zones: %s", len(self._zones), exc)
            return False
        self.replace(zones)
        _logger.info("Zone cache refreshed with %d zones", len(zones))
        return True

    def resolve(self, lat: float, lng: float) -> str:
        """Name of the first zone containing the point, else ``not_home``."""
        for zone in self._zones:
            if distance_meters(zone.latitude, zone.longitude, lat, lng) <= zone.radius:
                return zone.name
        return NOT_HOME
