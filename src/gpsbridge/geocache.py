"""Proximity cache over reverse-geocoding lookups.

Provider quotas are low and street-level precision is plenty, so any
earlier answer requested within :data:`GEOCODE_HIT_DISTANCE_M` of a new
point is reused instead of calling the provider again.
"""

from __future__ import annotations

import asyncio
import json
import logging
import os
from collections.abc import Awaitable, Callable
from pathlib import Path
from typing import Any, Protocol

from pydantic import ValidationError

from gpsbridge._constants import GEOCODE_HIT_DISTANCE_M
from gpsbridge.exceptions import TransportError
from gpsbridge.geo import distance_meters
from gpsbridge.models.geocode import GeocodeEntry

_logger = logging.getLogger(__name__)

GeocodeLookup = Callable[[float, float], Awaitable[dict[str, Any]]]


class CacheStore(Protocol):
    """Key-value persistence for the flat list of cache records."""

    def load(self) -> list[dict[str, Any]]:
        ...

    def save(self, records: list[dict[str, Any]]) -> None:
        ...


class JsonFileStore:
    """Stores the records as one pretty-printed JSON array."""

    def __init__(self, path: str | os.PathLike[str]) -> None:
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    def load(self) -> list[dict[str, Any]]:
        if not self._path.exists():
            return []
        try:
            data = json.loads(self._path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as exc:
            _logger.error("Error loading geocode cache %s: %s", self._path, exc)
            return []
        if not isinstance(data, list):
            _logger.error("Geocode cache %s is not a JSON array, ignoring it", self._path)
            return []
        return [item for item in data if isinstance(item, dict)]

    def save(self, records: list[dict[str, Any]]) -> None:
        tmp = self._path.with_name(self._path.name + ".tmp")
        try:
            tmp.write_text(json.dumps(records, indent=2, ensure_ascii=False), encoding="utf-8")
            tmp.replace(self._path)
        except OSError as exc:
            _logger.error("Error saving geocode cache %s: %s", self._path, exc)


class ReverseGeocodeCache:
    """Append-only proximity cache in front of a geocoding lookup.

    Parameters
    ----------
    store : CacheStore
        Persistence for the entries; read once on first use, written
        after every new entry.
    lookup : callable
        ``await lookup(lat, lng)`` returning the provider payload.
    hit_distance : float
        Points closer than this many meters to a cached request reuse it.
    max_entries : int or None
        Oldest entries are dropped beyond this size; ``None`` keeps all.
    """

    def __init__(
        self,
        store: CacheStore,
        lookup: GeocodeLookup,
        *,
        hit_distance: float = GEOCODE_HIT_DISTANCE_M,
        max_entries: int | None = None,
    ) -> None:
        if max_entries is not None and max_entries < 1:
            raise ValueError(f"max_entries must be at least 1, got {max_entries}")
        self._store = store
        self._lookup = lookup
        self._hit_distance = hit_distance
        self._max_entries = max_entries
        self._entries: list[GeocodeEntry] | None = None

    @property
    def entries(self) -> tuple[GeocodeEntry, ...]:
        return tuple(self._entries or ())

    async def _loaded(self) -> list[GeocodeEntry]:
        if self._entries is None:
            records = await asyncio.to_thread(self._store.load)
            entries: list[GeocodeEntry] = []
            for record in records:
                try:
                    entries.append(GeocodeEntry.from_record(record))
                except (KeyError, TypeError, ValueError, ValidationError):
                    _logger.debug("Dropping unreadable geocode cache record: %s", sorted(record))
            self._entries = entries
            _logger.debug("Loaded %d geocode cache entries", len(entries))
        return self._entries

    def find(self, lat: float, lng: float) -> GeocodeEntry | None:
        """First cached entry requested within the hit distance, if any."""
        for entry in self._entries or ():
            if distance_meters(lat, lng, entry.request_lat, entry.request_lng) < self._hit_distance:
                return entry
        return None

    async def lookup(self, lat: float, lng: float) -> dict[str, Any] | None:
        """Return the address payload for a point.

        Upstream failures are logged and yield ``None``; nothing is cached
        for them.
        """
        entries = await self._loaded()
        cached = self.find(lat, lng)
        if cached is not None:
            return cached.payload

        try:
            payload = await self._lookup(lat, lng)
        except TransportError as exc:
            _logger.warning("Reverse geocode of (%s, %s) failed: %s", lat, lng, exc)
            return None

        entries.append(GeocodeEntry(request_lat=lat, request_lng=lng, payload=payload))
        if self._max_entries is not None and len(entries) > self._max_entries:
            del entries[: len(entries) - self._max_entries]
        await asyncio.to_thread(self._store.save, [entry.to_record() for entry in entries])
        return payload
