"""Pydantic settings loaded from YAML configuration."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field, SecretStr, field_validator

_settings: Settings | None = None

_DEFAULT_CONFIG_PATH = Path("config/settings.yaml")

# Environment variables that override the ``cloudant`` section, matching the
# IBM SDK "external config" naming for a service called CLOUDANT.
_CLOUDANT_ENV: dict[str, str] = {
    "CLOUDANT_URL": "url",
    "CLOUDANT_AUTH_TYPE": "auth_type",
    "CLOUDANT_APIKEY": "apikey",
    "CLOUDANT_USERNAME": "username",
    "CLOUDANT_PASSWORD": "password",
}


class CloudantConfig(BaseModel):
    """Cloudant connection configuration."""

    url: str = ""
    auth_type: str = ""  # "iam", "basic" or "" to pick from the credentials
    apikey: SecretStr = SecretStr("")
    username: str = ""
    password: SecretStr = SecretStr("")
    iam_url: str = "https://iam.cloud.ibm.com/identity/token"
    timeout_secs: float = Field(default=10.0, gt=0)
    max_connections: int = Field(default=10, gt=0)
    max_retries: int = Field(default=3, ge=0)
    max_retry_interval_secs: float = Field(default=30.0, ge=0)


class ServerConfig(BaseModel):
    """Metrics exposition endpoint configuration."""

    listen_address: str = "127.0.0.1:8080"

    @field_validator("listen_address")
    @classmethod
    def _check_listen_address(cls, value: str) -> str:
        split_listen_address(value)
        return value

    @property
    def host(self) -> str:
        return split_listen_address(self.listen_address)[0]

    @property
    def port(self) -> int:
        return split_listen_address(self.listen_address)[1]


def split_listen_address(address: str) -> tuple[str, int]:
    """Split ``host:port`` into its parts. An empty host binds all interfaces.

    Raises:
        ValueError: If the port is missing, not a number, or outside 0-65535.
    """
    host, sep, port = address.rpartition(":")
    if not sep:
        raise ValueError(f"listen address {address!r} has no port")
    if not port.isdigit():
        raise ValueError(f"listen address {address!r} has a non-numeric port")
    number = int(port)
    if number > 65535:
        raise ValueError(f"listen address {address!r} port is out of range")
    return host.strip("[]") or "0.0.0.0", number


class SupervisorConfig(BaseModel):
    """Failure window and startup jitter shared by all monitors."""

    fail_after_secs: float = Field(default=300.0, gt=0)
    jitter_max_secs: float = Field(default=15.0, ge=0)


class MonitorConfig(BaseModel):
    """Per-monitor poll configuration."""

    enabled: bool = True
    interval_secs: float = Field(default=5.0, gt=0)


class ReplicationStatusConfig(MonitorConfig):
    """Replication status monitor; defaults to one poll every ten minutes."""

    interval_secs: float = Field(default=600.0, gt=0)


class MonitorsConfig(BaseModel):
    """Container for all monitor configurations."""

    replication_progress: MonitorConfig = MonitorConfig()
    replication_status: ReplicationStatusConfig = ReplicationStatusConfig()
    throughput: MonitorConfig = MonitorConfig()
    active_tasks: MonitorConfig = MonitorConfig()


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: str = "INFO"
    format: str = "json"


class Settings(BaseModel):
    """Root settings container."""

    cloudant: CloudantConfig = CloudantConfig()
    server: ServerConfig = ServerConfig()
    supervisor: SupervisorConfig = SupervisorConfig()
    monitors: MonitorsConfig = MonitorsConfig()
    logging: LoggingConfig = LoggingConfig()


def _apply_env_overrides(data: dict[str, Any], environ: dict[str, str]) -> dict[str, Any]:
    """Overlay CLOUDANT_* environment variables onto the raw config dict."""
    overrides = {
        field: environ[var]
        for var, field in _CLOUDANT_ENV.items()
        if environ.get(var)
    }
    if not overrides:
        return data
    cloudant = data.get("cloudant")
    merged = dict(cloudant) if isinstance(cloudant, dict) else {}
    merged.update(overrides)
    return {**data, "cloudant": merged}


def load_settings(
    path: str | Path | None = None,
    environ: dict[str, str] | None = None,
) -> Settings:
    """Load settings from a YAML file and cache globally.

    Args:
        path: Path to YAML config. Defaults to config/settings.yaml.
        environ: Environment mapping for CLOUDANT_* overrides. Defaults to
            ``os.environ``.

    Returns:
        Parsed Settings instance.
    """
    global _settings  # noqa: PLW0603

    config_path = Path(path) if path else _DEFAULT_CONFIG_PATH

    data: dict[str, Any] = {}
    if config_path.exists():
        with open(config_path) as f:
            raw = yaml.safe_load(f)
            if isinstance(raw, dict):
                data = raw

    data = _apply_env_overrides(data, dict(os.environ) if environ is None else environ)

    _settings = Settings(**data)
    return _settings


def get_settings() -> Settings:
    """Return the cached settings, loading defaults if not yet loaded."""
    global _settings  # noqa: PLW0603
    if _settings is None:
        _settings = load_settings()
    return _settings


def reset_settings() -> None:
    """Reset the cached settings (useful for testing)."""
    global _settings  # noqa: PLW0603
    _settings = None
