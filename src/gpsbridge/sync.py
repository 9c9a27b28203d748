"""Device sync cycle.

One cycle walks ``NO_TOKEN -> AUTHENTICATING -> FETCHING -> DECODING ->
PUBLISHING -> IDLE``. Failures before publishing end the cycle early
(the next scheduled cycle is the retry); failures while publishing only
cost the device they happened on.
"""

from __future__ import annotations

import dataclasses
import enum
import functools
import logging
from datetime import UTC, datetime, tzinfo

from gpsbridge._api.devices import decode_device_payload, post_device_list
from gpsbridge._api.geocoding import reverse_geocode
from gpsbridge._api.platform import publish_state, sensor_entity_id, tracker_entity_id
from gpsbridge._api.traccar import forward_position
from gpsbridge._constants import ATTRIBUTE_KEY_PREFIX
from gpsbridge._pacing import RateGate
from gpsbridge._transport import Transport
from gpsbridge.config import SyncConfig, load_time_zone
from gpsbridge.exceptions import AuthError, DecodeError, PublishError, SessionExpiredError, TransportError
from gpsbridge.geocache import JsonFileStore, ReverseGeocodeCache
from gpsbridge.ingestion.devices import build_sensor_attributes, parse_device_list, tracker_attributes
from gpsbridge.ingestion.normalize import battery_percentage, is_fresh
from gpsbridge.models.device import DeviceRecord
from gpsbridge.session import TokenManager
from gpsbridge.state.zones import ZoneCache

_logger = logging.getLogger(__name__)


class CycleState(enum.StrEnum):
    NO_TOKEN = "no_token"
    AUTHENTICATING = "authenticating"
    FETCHING = "fetching"
    DECODING = "decoding"
    PUBLISHING = "publishing"
    IDLE = "idle"


@dataclasses.dataclass
class CycleReport:
    """What one cycle did, device ids grouped by outcome."""

    states: list[CycleState] = dataclasses.field(default_factory=list)
    error: str | None = None
    published: list[str] = dataclasses.field(default_factory=list)
    failed: list[str] = dataclasses.field(default_factory=list)
    stale: list[str] = dataclasses.field(default_factory=list)
    invalid: list[str] = dataclasses.field(default_factory=list)
    finished_at: datetime | None = None

    @property
    def aborted(self) -> bool:
        return self.error is not None

    @property
    def last_active_state(self) -> CycleState | None:
        """Last state before returning to idle."""
        active = [state for state in self.states if state is not CycleState.IDLE]
        return active[-1] if active else None

    def enter(self, state: CycleState) -> None:
        self.states.append(state)


@dataclasses.dataclass
class SyncContext:
    """Everything that survives between cycles.

    Only the token (inside ``tokens``) and the zone snapshot change
    between cycles; both are owned here rather than at module level so
    tests can build a context around fakes.
    """

    config: SyncConfig
    transport: Transport
    tokens: TokenManager
    zones: ZoneCache
    gate: RateGate
    geocoder: ReverseGeocodeCache | None = None
    tz: tzinfo | None = None
    last_report: CycleReport | None = None

    @classmethod
    def create(
        cls,
        config: SyncConfig,
        transport: Transport,
        *,
        gate: RateGate | None = None,
        geocoder: ReverseGeocodeCache | None = None,
    ) -> SyncContext:
        """Wire the default collaborators for *config*."""
        if geocoder is None and config.geocoding_enabled:
            geocoder = ReverseGeocodeCache(
                JsonFileStore(config.geocode_cache_file),
                functools.partial(reverse_geocode, config, transport),
                max_entries=config.geocode_cache_max_entries,
            )
        return cls(
            config=config,
            transport=transport,
            tokens=TokenManager(config, transport),
            zones=ZoneCache(config, transport),
            gate=gate or RateGate(config.publish_interval),
            geocoder=geocoder,
            tz=load_time_zone(config.time_zone),
        )


async def publish_device(ctx: SyncContext, device: DeviceRecord) -> None:
    """Publish one device: a sensor per attribute, then the tracker entity.

    Raises
    ------
    PublishError
        On the first write that fails; later writes for the device are
        not attempted.
    """
    config = ctx.config
    attributes = build_sensor_attributes(device)

    if ctx.geocoder is not None:
        address = await ctx.geocoder.lookup(device.latitude, device.longitude)
        if address and address.get("display_name"):
            attributes.append((f"{ATTRIBUTE_KEY_PREFIX}address", str(address["display_name"])))

    state = ctx.zones.resolve(device.latitude, device.longitude)

    await ctx.gate.wait()
    for key, value in attributes:
        await publish_state(config, ctx.transport, sensor_entity_id(config, device.name, key), value)
    await publish_state(
        config,
        ctx.transport,
        tracker_entity_id(config, device.name),
        state,
        tracker_attributes(attributes),
    )

    if config.forwarding_enabled:
        await forward_position(config, ctx.transport, device, battery_percentage(device.battery_voltage))

    _logger.debug("Published device %s (%s) as %s", device.id, device.name, state)


async def run_sync_cycle(ctx: SyncContext, *, now: datetime | None = None) -> CycleReport:
    """Run one poll-and-publish cycle.

    Never raises for vendor, platform or decoding failures; the outcome
    is described by the returned report (also kept as
    ``ctx.last_report``).
    """
    report = CycleReport()
    now = now or datetime.now(UTC)
    try:
        await _run_cycle(ctx, report, now)
    finally:
        report.enter(CycleState.IDLE)
        report.finished_at = datetime.now(UTC)
        ctx.last_report = report
    return report


async def _run_cycle(ctx: SyncContext, report: CycleReport, now: datetime) -> None:
    config = ctx.config

    try:
        if not ctx.tokens.has_token:
            report.enter(CycleState.NO_TOKEN)
            report.enter(CycleState.AUTHENTICATING)
        token = await ctx.tokens.get_token()

        report.enter(CycleState.FETCHING)
        text = await post_device_list(config, ctx.transport, token)

        report.enter(CycleState.DECODING)
        decoded = decode_device_payload(text, endpoint=config.devices_url)
    except SessionExpiredError as exc:
        _logger.warning("Vendor session rejected, logging in again next cycle: %s", exc)
        ctx.tokens.invalidate()
        report.error = str(exc)
        return
    except AuthError as exc:
        _logger.warning("Failed obtaining token: %s", exc)
        report.error = str(exc)
        return
    except TransportError as exc:
        _logger.warning("Fetching device list failed: %s", exc)
        report.error = str(exc)
        return
    except DecodeError as exc:
        _logger.warning("Decoding device list failed: %s", exc)
        report.error = str(exc)
        return

    parsed = parse_device_list(decoded)
    report.invalid.extend(parsed.invalid)

    report.enter(CycleState.PUBLISHING)
    for device in parsed.devices:
        if not is_fresh(device.position_time, now, tz=ctx.tz):
            _logger.debug("Skipping device %s, last position %s is stale", device.id, device.position_time)
            report.stale.append(device.id)
            continue
        try:
            await publish_device(ctx, device)
        except PublishError as exc:
            _logger.warning("Failed publishing device %s: %s", device.id, exc)
            report.failed.append(device.id)
        else:
            report.published.append(device.id)

    _logger.info(
        "Sync cycle done: %d published, %d failed, %d stale, %d invalid",
        len(report.published),
        len(report.failed),
        len(report.stale),
        len(report.invalid),
    )
