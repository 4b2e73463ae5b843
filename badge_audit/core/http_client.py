"""
HTTP plumbing for the badge data source: pooled AsyncClient and a retrying request.
"""
from __future__ import annotations

import asyncio
import logging
import math
from contextlib import asynccontextmanager
from typing import Any, Dict, Iterable, Optional

import httpx

from badge_audit.core.config import settings
from badge_audit.core.error_handling import request_id_var

logger = logging.getLogger(__name__)


def get_async_client(
    timeout: Optional[float] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None
) -> httpx.AsyncClient:
    """AsyncClient with the HTTP_* pool limits. Tests pass an httpx.MockTransport."""
    return httpx.AsyncClient(
        timeout=timeout or settings.HTTP_CLIENT_TIMEOUT,
        transport=transport,
        limits=httpx.Limits(
            max_keepalive_connections=settings.HTTP_MAX_KEEPALIVE_CONNECTIONS,
            max_connections=settings.HTTP_MAX_CONNECTIONS,
        ),
    )


async def request_with_retry(
    client: httpx.AsyncClient,
    method: str,
    url: str,
    *,
    headers: Optional[Dict[str, str]] = None,
    params: Optional[Dict[str, Any]] = None,
    timeout: Optional[float] = None,
    retry_statuses: Iterable[int] | None = None,
    max_attempts: Optional[int] = None,
    backoff_seconds: Optional[float] = None,
) -> httpx.Response:
    """
    Send one request, retrying transport errors and HTTP_RETRY_STATUSES.

    Waits Retry-After when the server sends it, else backoff * 2^(attempt-1).
    A retryable status on the last attempt is returned, not raised; the
    repository turns it into DataSourceError.
    """
    attempts = max_attempts or settings.HTTP_RETRY_ATTEMPTS
    statuses = tuple(retry_statuses or settings.HTTP_RETRY_STATUSES)
    base = settings.HTTP_RETRY_BACKOFF_SECONDS if backoff_seconds is None else backoff_seconds
    request_id = request_id_var.get()
    attempt = 0

    while True:
        attempt += 1
        last_attempt = attempt >= attempts
        try:
            response = await client.request(
                method, url, headers=headers, params=params,
                timeout=timeout or settings.HTTP_CLIENT_TIMEOUT,
            )
        except httpx.HTTPError as exc:
            if last_attempt:
                logger.error(f"[{request_id}] {method} {url} failed after {attempts} attempt(s): {exc}")
                raise
            delay = _backoff(base, attempt)
            logger.warning(f"[{request_id}] {method} {url} attempt {attempt}/{attempts}: {exc}; retry in {delay:.2f}s")
        else:
            if response.status_code not in statuses or last_attempt:
                return response
            delay = _get_retry_after_seconds(response) or _backoff(base, attempt)
            logger.warning(
                f"[{request_id}] {method} {url} attempt {attempt}/{attempts}: "
                f"status {response.status_code}; retry in {delay:.2f}s"
            )
        await asyncio.sleep(delay)


def _backoff(base: float, attempt: int) -> float:
    return base * math.pow(2, attempt - 1)


def _get_retry_after_seconds(response: httpx.Response) -> Optional[float]:
    """Seconds form of Retry-After only; HTTP-date values fall back to backoff."""
    try:
        return float(response.headers.get("Retry-After", ""))
    except ValueError:
        return None


@asynccontextmanager
async def get_managed_client(
    persistent_client: Optional[httpx.AsyncClient] = None,
    timeout: Optional[float] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None
):
    """Yield the repository's open client, or a one-off client closed on exit."""
    should_close = persistent_client is None
    client = persistent_client or get_async_client(timeout=timeout, transport=transport)
    try:
        yield client
    finally:
        if should_close:
            await client.aclose()
