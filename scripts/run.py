#!/usr/bin/env python3
"""Exporter entrypoint — starts the monitors and the metrics endpoint.

The process runs until any one monitor has gone ``fail_after_secs`` without a
successful poll, then exits with status 1 so the process manager restarts it.

Usage::

    # Credentials from the environment
    CLOUDANT_URL=https://acct.cloudant.com CLOUDANT_APIKEY=... python scripts/run.py

    # Custom config file and listen address
    python scripts/run.py --config config/settings.yaml --listen-address 0.0.0.0:9090

    # Override log level
    python scripts/run.py --log-level DEBUG
"""

from __future__ import annotations

import argparse
import asyncio
import platform
import sys

import structlog
from pydantic import ValidationError

from src.cloudant.client import CloudantClient
from src.cloudant.exceptions import CloudantError
from src.core.config import ServerConfig, Settings, load_settings
from src.core.logging import setup_logging
from src.core.version import APP_NAME, get_version
from src.exposition.server import start_metrics_server
from src.supervisor.factory import create_loopers
from src.supervisor.supervisor import Supervisor

logger = structlog.get_logger(__name__)

EXIT_MONITOR_DIED = 1
EXIT_STARTUP_FAILED = 2


def apply_overrides(settings: Settings, args: argparse.Namespace) -> Settings:
    """Apply command-line overrides on top of the loaded settings."""
    if args.listen_address:
        settings = settings.model_copy(update={
            "server": ServerConfig(listen_address=args.listen_address),
        })
    return settings


async def run(args: argparse.Namespace) -> int:
    """Start everything and block until the first monitor dies."""
    try:
        settings = apply_overrides(load_settings(args.config), args)
    except ValidationError as exc:
        logger.error("invalid_configuration", error=str(exc))
        return EXIT_STARTUP_FAILED
    setup_logging(level=args.log_level)

    logger.info(
        "exporter_starting",
        app=APP_NAME,
        version=get_version(),
        python=platform.python_version(),
    )

    client = CloudantClient(settings.cloudant)
    try:
        await client.connect()
    except CloudantError as exc:
        logger.error("cloudant_client_init_failed", error=str(exc))
        return EXIT_STARTUP_FAILED
    logger.info("cloudant_service", url=client.service_url)

    loopers = create_loopers(client, settings)
    if not loopers:
        logger.error("no_monitors_enabled")
        await client.close()
        return EXIT_STARTUP_FAILED

    supervisor = Supervisor(loopers)

    # Nothing stops the server explicitly: it goes down with the process.
    host, port = settings.server.host, settings.server.port
    await start_metrics_server(host, port)
    logger.info("http_server_started", listen_address=f"{host}:{port}")

    try:
        dead = await supervisor.run()
    finally:
        await supervisor.shutdown()
    logger.critical("exporter_exiting", monitor=dead)
    return EXIT_MONITOR_DIED


def main() -> None:
    parser = argparse.ArgumentParser(
        description="Export Cloudant replication, throughput and task metrics to Prometheus.",
    )
    parser.add_argument(
        "--config",
        default=None,
        help="Path to settings YAML (default: config/settings.yaml)",
    )
    parser.add_argument(
        "--listen-address",
        default=None,
        help="Address to serve /metrics on (default: 127.0.0.1:8080)",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        help="Log level override: DEBUG, INFO, WARNING, ERROR",
    )
    args = parser.parse_args()

    code = asyncio.run(run(args))
    sys.exit(code)


if __name__ == "__main__":
    main()
