"""Long-running sync service."""

from __future__ import annotations

import asyncio
import logging
from typing import Any

import aiohttp
from aiohttp import web

from gpsbridge._scheduler import PeriodicRunner
from gpsbridge._transport import HttpTransport
from gpsbridge.config import SyncConfig
from gpsbridge.exceptions import GpsBridgeError
from gpsbridge.sync import CycleReport, SyncContext, run_sync_cycle

_logger = logging.getLogger(__name__)

_CONTEXT_KEY = web.AppKey("sync_context", SyncContext)


async def _handle_health(request: web.Request) -> web.Response:
    ctx = request.app[_CONTEXT_KEY]
    report = ctx.last_report
    body: dict[str, Any] = {
        "status": "ok",
        "token": ctx.tokens.has_token,
        "zones": len(ctx.zones.zones),
        "zones_refreshed_at": ctx.zones.refreshed_at.isoformat() if ctx.zones.refreshed_at else None,
        "last_cycle": None,
    }
    if report is not None:
        body["last_cycle"] = {
            "finished_at": report.finished_at.isoformat() if report.finished_at else None,
            "state": report.last_active_state.value if report.last_active_state else None,
            "error": report.error,
            "published": len(report.published),
            "failed": len(report.failed),
            "stale": len(report.stale),
        }
    return web.json_response(body)


def build_health_app(ctx: SyncContext) -> web.Application:
    """Minimal status listener; the service has no other HTTP API."""
    app = web.Application()
    app[_CONTEXT_KEY] = ctx
    app.router.add_get("/", _handle_health)
    app.router.add_get("/health", _handle_health)
    return app


class SyncService:
    """Owns the HTTP session, both periodic jobs and the health listener.

    Usage::

        async with SyncService(SyncConfig.from_env()) as service:
            await service.serve_forever()
    """

    def __init__(
        self,
        config: SyncConfig,
        *,
        session: aiohttp.ClientSession | None = None,
        host: str = "0.0.0.0",  # noqa: S104
    ) -> None:
        self._config = config
        self._external_session = session is not None
        self._http_session = session
        self._host = host
        self._ctx: SyncContext | None = None
        self._sync_runner: PeriodicRunner | None = None
        self._zone_runner: PeriodicRunner | None = None
        self._web_runner: web.AppRunner | None = None

    # ------------------------------------------------------------------
    # Context manager lifecycle
    # ------------------------------------------------------------------

    async def __aenter__(self) -> SyncService:
        self._config.validate()
        if self._http_session is None:
            self._http_session = aiohttp.ClientSession()
        transport = HttpTransport(self._http_session, timeout=self._config.http_timeout)
        try:
            self._ctx = SyncContext.create(self._config, transport)
        except BaseException:
            if not self._external_session:
                await self._http_session.close()
                self._http_session = None
            raise
        if not self._config.geocoding_enabled:
            _logger.info("Reverse geocoding disabled (LOCATIONIQ_TOKEN not set)")
        return self

    async def __aexit__(self, *exc: Any) -> None:
        await self.stop()
        if not self._external_session and self._http_session is not None:
            await self._http_session.close()
            self._http_session = None
        self._ctx = None

    @property
    def context(self) -> SyncContext:
        if self._ctx is None:
            raise GpsBridgeError("Service not initialized. Use 'async with SyncService(...) as service:'")
        return self._ctx

    # ------------------------------------------------------------------
    # Jobs
    # ------------------------------------------------------------------

    async def refresh_zones(self) -> bool:
        return await self.context.zones.refresh()

    async def sync_once(self) -> CycleReport:
        return await run_sync_cycle(self.context)

    async def run_once(self) -> CycleReport:
        """Refresh zones, then run a single sync cycle."""
        await self.refresh_zones()
        return await self.sync_once()

    async def start(self) -> None:
        """Start the health listener and both periodic jobs."""
        ctx = self.context
        self._web_runner = web.AppRunner(build_health_app(ctx))
        await self._web_runner.setup()
        site = web.TCPSite(self._web_runner, self._host, self._config.http_port)
        await site.start()
        _logger.info("Health listener on %s:%d", self._host, self._config.http_port)

        # Zones first so the first sync cycle can already resolve them.
        await self.refresh_zones()
        self._zone_runner = PeriodicRunner("zone-refresh", self._config.zone_refresh_interval, self.refresh_zones)
        self._sync_runner = PeriodicRunner("device-sync", self._config.sync_interval, self.sync_once)
        self._sync_runner.start()
        self._zone_runner.start(initial_delay=self._config.zone_refresh_interval)

    async def stop(self) -> None:
        for runner in (self._sync_runner, self._zone_runner):
            if runner is not None:
                await runner.stop()
        self._sync_runner = None
        self._zone_runner = None
        if self._web_runner is not None:
            await self._web_runner.cleanup()
            self._web_runner = None

    async def serve_forever(self, stop_event: asyncio.Event | None = None) -> None:
        """Run until *stop_event* is set (or the task is cancelled)."""
        await self.start()
        await (stop_event or asyncio.Event()).wait()
