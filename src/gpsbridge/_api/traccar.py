"""Position forwarding over the OsmAnd protocol (as accepted by Traccar)."""

from __future__ import annotations

from gpsbridge._transport import Transport
from gpsbridge.config import SyncConfig
from gpsbridge.exceptions import PublishError, TransportError
from gpsbridge.ingestion.normalize import format_state
from gpsbridge.models.device import DeviceRecord


def build_osmand_params(device: DeviceRecord, battery: str) -> dict[str, str]:
    params = {
        "id": device.id,
        "lat": format_state(device.latitude),
        "lon": format_state(device.longitude),
        "speed": format_state(device.speed),
        "bearing": format_state(device.course),
        "batt": battery,
        "timestamp": device.position_time or "",
    }
    return {key: value for key, value in params.items() if value != ""}


async def forward_position(config: SyncConfig, transport: Transport, device: DeviceRecord, battery: str) -> None:
    """Send one position report.

    Raises
    ------
    PublishError
        If the forwarding endpoint rejects or does not answer the report.
    """
    url = config.traccar_url or ""
    try:
        await transport.request_text("GET", url, params=build_osmand_params(device, battery))
    except TransportError as exc:
        raise PublishError(
            f"Forwarding position of {device.id} failed: {exc}",
            entity_id=device.id,
            status_code=exc.status_code,
        ) from exc
