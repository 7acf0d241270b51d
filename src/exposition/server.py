"""Prometheus exposition endpoint — serves ``GET /metrics`` over aiohttp.

Runs alongside the supervisor and is not coordinated with it: it renders
whatever the monitors have published so far and goes away when the process
exits.
"""

from __future__ import annotations

from aiohttp import web
from prometheus_client import CONTENT_TYPE_LATEST, REGISTRY, CollectorRegistry, generate_latest

_REGISTRY_KEY: web.AppKey[CollectorRegistry] = web.AppKey("registry", CollectorRegistry)


async def _handle_metrics(request: web.Request) -> web.Response:
    registry = request.app[_REGISTRY_KEY]
    return web.Response(
        body=generate_latest(registry),
        headers={"Content-Type": CONTENT_TYPE_LATEST},
    )


async def _handle_index(request: web.Request) -> web.Response:
    return web.Response(
        text='<html><body><a href="/metrics">Metrics</a></body></html>',
        content_type="text/html",
    )


def create_metrics_app(registry: CollectorRegistry = REGISTRY) -> web.Application:
    """Build the aiohttp application serving *registry*."""
    app = web.Application()
    app[_REGISTRY_KEY] = registry
    app.router.add_get("/", _handle_index)
    app.router.add_get("/metrics", _handle_metrics)
    return app


async def start_metrics_server(
    host: str = "127.0.0.1",
    port: int = 8080,
    registry: CollectorRegistry = REGISTRY,
) -> web.AppRunner:
    """Start the metrics server. Returns the runner for cleanup."""
    runner = web.AppRunner(create_metrics_app(registry), access_log=None)
    await runner.setup()
    site = web.TCPSite(runner, host, port)
    await site.start()
    return runner
