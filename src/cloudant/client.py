"""Async Cloudant HTTP client — IAM or basic auth, retries on 429/5xx.

Only the read-only monitoring endpoints the exporter polls are wrapped.

Usage::

    client = CloudantClient(settings.cloudant)
    await client.connect()
    tasks = await client.get_active_tasks()
    await client.close()
"""

from __future__ import annotations

import asyncio
import time
from collections.abc import Callable
from typing import Any

import httpx
import structlog

from src.cloudant.exceptions import (
    CloudantAuthError,
    CloudantConnectionError,
    CloudantHTTPError,
    CloudantParseError,
)
from src.core.config import CloudantConfig, get_settings
from src.core.version import user_agent as default_user_agent

logger = structlog.stdlib.get_logger()

_IAM_GRANT_TYPE = "urn:ibm:params:oauth:grant-type:apikey"
_TOKEN_REFRESH_MARGIN_SECS = 60.0
_RETRY_BASE_SECS = 1.0
_RETRYABLE_STATUS = frozenset({429, 500, 502, 503, 504})

AUTH_IAM = "iam"
AUTH_BASIC = "basic"


def resolve_auth_type(config: CloudantConfig) -> str:
    """Pick the authentication scheme from the explicit setting or the credentials."""
    if config.auth_type:
        auth_type = config.auth_type.lower()
        if auth_type not in (AUTH_IAM, AUTH_BASIC):
            raise CloudantAuthError(f"Unsupported auth_type {config.auth_type!r}")
        return auth_type
    if config.apikey.get_secret_value():
        return AUTH_IAM
    if config.username:
        return AUTH_BASIC
    raise CloudantAuthError("No Cloudant credentials configured (apikey or username/password)")


def _retry_delay(attempt: int, retry_after: str | None, cap: float) -> float:
    """Exponential backoff, or the server's Retry-After, capped at *cap*."""
    delay = _RETRY_BASE_SECS * (2 ** attempt)
    if retry_after:
        try:
            delay = float(retry_after)
        except ValueError:
            pass
    return max(0.0, min(delay, cap))


def _error_message(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return response.reason_phrase
    if isinstance(body, dict):
        parts = [str(body[k]) for k in ("error", "reason") if body.get(k)]
        if parts:
            return ": ".join(parts)
    return response.reason_phrase


class CloudantClient:
    """Thin async wrapper over ``httpx.AsyncClient`` for the Cloudant API."""

    def __init__(
        self,
        config: CloudantConfig | None = None,
        user_agent: str | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._config = config or get_settings().cloudant
        self._user_agent = user_agent or default_user_agent()
        self._transport = transport
        self._clock = clock
        self._http: httpx.AsyncClient | None = None
        self._auth_type: str | None = None
        self._token: str | None = None
        self._token_expires_at = 0.0

    @property
    def service_url(self) -> str:
        return self._config.url.rstrip("/")

    @property
    def auth_type(self) -> str | None:
        return self._auth_type

    @property
    def connected(self) -> bool:
        """Whether the HTTP client is active."""
        return self._http is not None and not self._http.is_closed

    # ── Lifecycle ───────────────────────────────────────────────

    async def connect(self) -> None:
        """Validate the configuration and create the httpx async client."""
        if not self.service_url:
            raise CloudantConnectionError("Cloudant URL not configured")
        self._auth_type = resolve_auth_type(self._config)

        auth: httpx.BasicAuth | None = None
        if self._auth_type == AUTH_BASIC:
            auth = httpx.BasicAuth(
                self._config.username,
                self._config.password.get_secret_value(),
            )
        elif not self._config.apikey.get_secret_value():
            raise CloudantAuthError("IAM authentication requires an apikey")

        self._http = httpx.AsyncClient(
            base_url=self.service_url,
            auth=auth,
            timeout=httpx.Timeout(self._config.timeout_secs),
            limits=httpx.Limits(
                max_connections=self._config.max_connections,
                max_keepalive_connections=self._config.max_connections,
            ),
            headers={"User-Agent": self._user_agent, "Accept": "application/json"},
            transport=self._transport,
        )
        logger.info(
            "cloudant_client_connected",
            url=self.service_url,
            auth_type=self._auth_type,
        )

    async def close(self) -> None:
        """Close the httpx async client."""
        if self._http is not None:
            await self._http.aclose()
            self._http = None
        self._token = None
        self._token_expires_at = 0.0

    async def __aenter__(self) -> CloudantClient:
        await self.connect()
        return self

    async def __aexit__(self, *exc: object) -> None:
        await self.close()

    # ── Monitoring endpoints ────────────────────────────────────

    async def get_active_tasks(self) -> list[dict[str, Any]]:
        """``GET /_active_tasks``."""
        body = await self._get("/_active_tasks")
        if not isinstance(body, list):
            raise CloudantParseError("/_active_tasks did not return a JSON array")
        return [task for task in body if isinstance(task, dict)]

    async def get_scheduler_docs(self, limit: int = 1000, skip: int = 0) -> dict[str, Any]:
        """``GET /_scheduler/docs`` — one page of replication documents."""
        return await self._get_object("/_scheduler/docs", {"limit": limit, "skip": skip})

    async def get_scheduler_jobs(self, limit: int = 1000, skip: int = 0) -> dict[str, Any]:
        """``GET /_scheduler/jobs`` — one page of running replication jobs."""
        return await self._get_object("/_scheduler/jobs", {"limit": limit, "skip": skip})

    async def get_current_throughput(self) -> dict[str, Any]:
        """``GET /_api/v2/user/current/throughput``."""
        return await self._get_object("/_api/v2/user/current/throughput")

    async def get_capacity_throughput(self) -> dict[str, Any]:
        """``GET /_api/v2/user/capacity/throughput``."""
        return await self._get_object("/_api/v2/user/capacity/throughput")

    # ── Internal ────────────────────────────────────────────────

    def _require_http(self) -> httpx.AsyncClient:
        if self._http is None:
            raise CloudantConnectionError("HTTP client not connected")
        return self._http

    async def _get_object(self, path: str, params: dict[str, Any] | None = None) -> dict[str, Any]:
        body = await self._get(path, params)
        if not isinstance(body, dict):
            raise CloudantParseError(f"{path} did not return a JSON object")
        return body

    async def _get(self, path: str, params: dict[str, Any] | None = None) -> Any:
        """GET *path* and decode the JSON body, retrying transient failures."""
        http = self._require_http()
        attempt = 0
        while True:
            headers: dict[str, str] = {}
            if self._auth_type == AUTH_IAM:
                headers["Authorization"] = f"Bearer {await self._bearer_token()}"

            try:
                response = await http.get(path, params=params, headers=headers)
            except httpx.TransportError as exc:
                if attempt < self._config.max_retries:
                    await self._backoff(path, attempt, None, error=str(exc))
                    attempt += 1
                    continue
                raise CloudantConnectionError(f"GET {path} failed: {exc}") from exc

            status = response.status_code
            if status in _RETRYABLE_STATUS and attempt < self._config.max_retries:
                await self._backoff(path, attempt, response.headers.get("Retry-After"), status=status)
                attempt += 1
                continue

            if status == 401 and self._auth_type == AUTH_IAM:
                self._token = None
            if response.is_error:
                raise CloudantHTTPError(status, _error_message(response))

            try:
                return response.json()
            except ValueError as exc:
                raise CloudantParseError(f"{path} returned invalid JSON") from exc

    async def _backoff(
        self,
        path: str,
        attempt: int,
        retry_after: str | None,
        **context: object,
    ) -> None:
        delay = _retry_delay(attempt, retry_after, self._config.max_retry_interval_secs)
        logger.warning(
            "cloudant_request_retry",
            path=path,
            attempt=attempt + 1,
            delay_secs=delay,
            **context,
        )
        await asyncio.sleep(delay)

    async def _bearer_token(self) -> str:
        """Return a cached IAM token, exchanging the API key when near expiry."""
        now = self._clock()
        if self._token is not None and now < self._token_expires_at - _TOKEN_REFRESH_MARGIN_SECS:
            return self._token

        http = self._require_http()
        attempt = 0
        while True:
            try:
                response = await http.post(
                    self._config.iam_url,
                    data={
                        "grant_type": _IAM_GRANT_TYPE,
                        "apikey": self._config.apikey.get_secret_value(),
                    },
                )
            except httpx.TransportError as exc:
                if attempt < self._config.max_retries:
                    await self._backoff(self._config.iam_url, attempt, None, error=str(exc))
                    attempt += 1
                    continue
                raise CloudantAuthError(f"IAM token request failed: {exc}") from exc

            status = response.status_code
            if status in _RETRYABLE_STATUS and attempt < self._config.max_retries:
                await self._backoff(
                    self._config.iam_url, attempt, response.headers.get("Retry-After"), status=status,
                )
                attempt += 1
                continue
            break

        if response.is_error:
            raise CloudantAuthError(
                f"IAM token request returned {response.status_code}: {_error_message(response)}"
            )
        try:
            body = response.json()
            token = str(body["access_token"])
            if "expiration" in body:
                expires_at = float(body["expiration"])
            else:
                expires_at = now + float(body.get("expires_in", 3600))
        except (ValueError, KeyError, TypeError) as exc:
            raise CloudantAuthError("IAM token response missing access_token") from exc

        self._token = token
        self._token_expires_at = expires_at
        logger.debug("iam_token_refreshed", expires_at=expires_at)
        return token
