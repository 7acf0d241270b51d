"""Cloudant API client used by the monitors."""

from src.cloudant.client import CloudantClient, resolve_auth_type
from src.cloudant.exceptions import (
    CloudantAuthError,
    CloudantConnectionError,
    CloudantError,
    CloudantHTTPError,
    CloudantParseError,
)

__all__ = [
    "CloudantAuthError",
    "CloudantClient",
    "CloudantConnectionError",
    "CloudantError",
    "CloudantHTTPError",
    "CloudantParseError",
    "resolve_auth_type",
]
