"""Command-line entry point: ``python -m gpsbridge``."""

from __future__ import annotations

import argparse
import asyncio
import contextlib
import dataclasses
import logging
import signal

from gpsbridge.config import SyncConfig
from gpsbridge.exceptions import ConfigError
from gpsbridge.service import SyncService

_logger = logging.getLogger("gpsbridge")


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Poll the tracking vendor and publish device state to the automation platform",
    )
    parser.add_argument("--debug", action="store_true", help="Enable DEBUG logging.")
    parser.add_argument(
        "--once",
        action="store_true",
        help="Refresh zones, run a single sync cycle and exit (no health listener).",
    )
    parser.add_argument("--port", type=int, default=None, help="Health listener port (overrides HTTP_PORT).")
    return parser.parse_args(argv)


async def _run(args: argparse.Namespace) -> int:
    try:
        config = SyncConfig.from_env()
        if args.port is not None:
            config = dataclasses.replace(config, http_port=args.port)
        config.validate()
    except ConfigError as exc:
        _logger.error("%s", exc)
        return 2

    async with SyncService(config) as service:
        if args.once:
            report = await service.run_once()
            return 1 if report.aborted else 0

        stop_event = asyncio.Event()
        loop = asyncio.get_running_loop()
        for sig in (signal.SIGINT, signal.SIGTERM):
            with contextlib.suppress(NotImplementedError):
                loop.add_signal_handler(sig, stop_event.set)
        await service.serve_forever(stop_event)
        _logger.info("Shutting down")
    return 0


def main(argv: list[str] | None = None) -> int:
    args = _parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.debug else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    return asyncio.run(_run(args))


if __name__ == "__main__":
    raise SystemExit(main())
