"""Exception hierarchy for the Cloudant client."""

from __future__ import annotations


class CloudantError(Exception):
    """Base exception for all Cloudant client errors."""


class CloudantConnectionError(CloudantError):
    """Failed to reach the Cloudant service (DNS, TCP, TLS, timeout)."""


class CloudantHTTPError(CloudantError):
    """Cloudant answered with a non-success HTTP status."""

    def __init__(self, status_code: int, message: str) -> None:
        super().__init__(f"HTTP {status_code}: {message}")
        self.status_code = status_code


class CloudantAuthError(CloudantError):
    """Credentials are missing, or the IAM token exchange failed."""


class CloudantParseError(CloudantError):
    """A response body was not the JSON object we expected."""
