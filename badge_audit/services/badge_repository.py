"""
Read-only access to the badges table over the Supabase PostgREST API.

This is the only part of the audit that performs I/O. It fetches the whole
table in one request; the audit core never calls back into it.
"""
import logging
from typing import Any, Dict, List, Mapping, Optional

import httpx

from badge_audit.core.config import settings
from badge_audit.core.constants import POSTGREST_PATH
from badge_audit.core.error_handling import ConfigurationError, DataSourceError
from badge_audit.core.http_client import get_async_client, get_managed_client, request_with_retry

logger = logging.getLogger(__name__)


class SupabaseBadgeRepository:
    """Fetches badge definition rows from a Supabase project.

    Use as an async context manager to reuse one connection pool:

        async with SupabaseBadgeRepository.from_settings() as repo:
            rows = await repo.fetch_badges()
    """

    def __init__(
        self,
        base_url: Optional[str],
        api_key: Optional[str],
        table: str = "badges",
        order_column: Optional[str] = "created_at",
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None
    ):
        """Initialize the repository.

        Args:
            base_url: Project URL, e.g. https://<project>.supabase.co
            api_key: Anon or service key sent as apikey and bearer token
            table: Table holding badge definitions
            order_column: Column to sort ascending by, None for store order
            timeout: Request timeout in seconds (default: HTTP_CLIENT_TIMEOUT)
            transport: Custom httpx transport (tests use httpx.MockTransport)

        Raises:
            ConfigurationError: If URL or key is missing
        """
        self.base_url = (base_url or "").rstrip("/")
        self.api_key = api_key
        self.table = table
        self.order_column = order_column
        self.timeout = timeout or settings.HTTP_CLIENT_TIMEOUT
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

        self._validate_credentials()

        logger.info(f"Initialized {self.__class__.__name__} for table '{table}' with timeout={self.timeout}s")

    @classmethod
    def from_settings(cls, **overrides: Any) -> "SupabaseBadgeRepository":
        """Build a repository from SUPABASE_* and BADGES_* settings."""
        params: Dict[str, Any] = {
            "base_url": settings.SUPABASE_URL,
            "api_key": settings.SUPABASE_ANON_KEY,
            "table": settings.BADGES_TABLE,
            "order_column": settings.BADGES_ORDER_COLUMN or None,
            "timeout": settings.HTTP_CLIENT_TIMEOUT,
        }
        params.update(overrides)
        return cls(**params)

    def _validate_credentials(self) -> None:
        if not self.base_url:
            raise ConfigurationError("SUPABASE_URL is not configured")
        if not self.base_url.startswith(("http://", "https://")):
            raise ConfigurationError(f"SUPABASE_URL must be an http(s) URL, got {self.base_url!r}")
        if not self.api_key:
            raise ConfigurationError("SUPABASE_ANON_KEY is not configured")

    @property
    def table_url(self) -> str:
        return f"{self.base_url}{POSTGREST_PATH}/{self.table}"

    @property
    def _headers(self) -> Dict[str, str]:
        return {
            "apikey": self.api_key,
            "Authorization": f"Bearer {self.api_key}",
            "Accept": "application/json",
        }

    def _query_params(self) -> Dict[str, str]:
        params = {"select": "*"}
        if self.order_column:
            params["order"] = f"{self.order_column}.asc"
        return params

    async def __aenter__(self):
        self._client = self._create_client()
        logger.debug(f"{self.__class__.__name__} context manager entered")
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()
        logger.debug(f"{self.__class__.__name__} context manager exited")

    async def close(self):
        """Close the HTTP client. Safe to call multiple times."""
        if self._client:
            await self._client.aclose()
            self._client = None
            logger.debug(f"{self.__class__.__name__} HTTP client closed")

    def _create_client(self) -> httpx.AsyncClient:
        return get_async_client(timeout=self.timeout, transport=self._transport)

    async def fetch_badges(self) -> List[Mapping[str, Any]]:
        """
        Fetch every badge row in one request.

        Returns:
            Raw row mappings, ordered by order_column ascending

        Raises:
            DataSourceError: On transport failure, non-2xx status or a
                payload that is not a JSON array
        """
        try:
            async with get_managed_client(self._client, self.timeout, self._transport) as client:
                response = await request_with_retry(
                    client,
                    "GET",
                    self.table_url,
                    headers=self._headers,
                    params=self._query_params(),
                    timeout=self.timeout,
                )
        except httpx.HTTPError as e:
            raise DataSourceError(f"Request to {self.table_url} failed: {e}") from e

        if response.status_code >= 400:
            raise DataSourceError(
                f"Fetching '{self.table}' failed with status {response.status_code}: {response.text[:200]}"
            )

        try:
            payload = response.json()
        except ValueError as e:
            raise DataSourceError(f"Response from '{self.table}' is not valid JSON") from e

        if not isinstance(payload, list):
            raise DataSourceError(
                f"Expected a JSON array of rows from '{self.table}', got {type(payload).__name__}"
            )

        logger.info(f"Fetched {len(payload)} row(s) from '{self.table}'")
        return payload

    async def health_check(self) -> bool:
        """Check the table is reachable. Never raises."""
        timeout = settings.HTTP_CLIENT_HEALTH_CHECK_TIMEOUT
        try:
            async with get_managed_client(self._client, timeout, self._transport) as client:
                response = await client.get(
                    self.table_url,
                    headers=self._headers,
                    params={"select": "id", "limit": "1"},
                    timeout=timeout,
                )
            return response.status_code < 400
        except Exception as e:
            logger.warning(f"Badge data source health check failed: {e}")
            return False

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}("
            f"url={self.table_url}, "
            f"timeout={self.timeout}s"
            ")"
        )
