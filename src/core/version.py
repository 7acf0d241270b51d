"""Application name and version, as reported in logs and the User-Agent."""

from __future__ import annotations

import platform
from importlib.metadata import PackageNotFoundError, version

APP_NAME = "cloudant_exporter"


def get_version() -> str:
    """Installed distribution version, or ``development`` from a source checkout."""
    try:
        return version("cloudant-exporter")
    except PackageNotFoundError:
        return "development"


def user_agent() -> str:
    """``cloudant_exporter/<version>(python <x.y.z>)``."""
    return f"{APP_NAME}/{get_version()}(python {platform.python_version()})"
