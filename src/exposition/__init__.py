"""Metrics exposition over HTTP."""

from src.exposition.server import create_metrics_app, start_metrics_server

__all__ = [
    "create_metrics_app",
    "start_metrics_server",
]
