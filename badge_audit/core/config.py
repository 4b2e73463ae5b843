"""
Configuration settings for the application.
"""
from pydantic_settings import BaseSettings
from typing import Optional, List

from badge_audit.core.constants import (
    DEFAULT_BADGES_TABLE,
    DEFAULT_BADGES_ORDER_COLUMN,
    DEFAULT_REQUIRED_TYPES,
    DEFAULT_DEPRECATED_TYPES,
    VALUE_POLICIES,
)


def _split_csv(value: Optional[str]) -> List[str]:
    """Split a comma-separated setting, dropping blanks but keeping order."""
    if not value:
        return []
    return [item.strip() for item in value.split(',') if item.strip()]


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # API Key Authentication
    API_KEY: Optional[str] = None  # Required when REQUIRE_API_KEY is True
    REQUIRE_API_KEY: bool = True  # Set to False to disable bearer token authentication

    # Logging Configuration
    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: str = "text"  # Options: "text", "json"
    LOG_INCLUDE_REQUEST_ID: bool = True  # Include X-Request-ID in logs

    # HTTP Client Configuration
    HTTP_CLIENT_TIMEOUT: float = 30.0  # Default timeout for the badge fetch (seconds)
    HTTP_CLIENT_HEALTH_CHECK_TIMEOUT: float = 10.0  # Timeout for health check requests (seconds)
    HTTP_MAX_KEEPALIVE_CONNECTIONS: int = 10
    HTTP_MAX_CONNECTIONS: int = 20
    HTTP_RETRY_ATTEMPTS: int = 3  # Retry attempts for transient errors
    HTTP_RETRY_BACKOFF_SECONDS: float = 2.0  # Base backoff for retries
    HTTP_RETRY_STATUSES: tuple[int, ...] = (429, 500, 502, 503, 504)

    # Performance Monitoring
    RESPONSE_TIME_WARNING_THRESHOLD_MS: int = 5000  # Warn if an audit takes longer than 5s

    # Supabase / PostgREST data source
    SUPABASE_URL: Optional[str] = None  # e.g. https://<project>.supabase.co
    SUPABASE_ANON_KEY: Optional[str] = None
    BADGES_TABLE: str = DEFAULT_BADGES_TABLE
    BADGES_ORDER_COLUMN: str = DEFAULT_BADGES_ORDER_COLUMN

    # Canonicalization of criteria values
    # "exact": "5" and 5 are different rules; "numeric": parseable numbers collide
    CRITERIA_VALUE_POLICY: str = "exact"

    # Criteria taxonomy (comma-separated)
    TAXONOMY_REQUIRED_TYPES: str = ",".join(DEFAULT_REQUIRED_TYPES)
    TAXONOMY_DEPRECATED_TYPES: str = ",".join(DEFAULT_DEPRECATED_TYPES)
    TAXONOMY_KNOWN_TYPES: str = ""  # Empty disables the unrecognized-type check

    @property
    def required_types_list(self) -> List[str]:
        """Parse comma-separated required criteria types into list."""
        return _split_csv(self.TAXONOMY_REQUIRED_TYPES)

    @property
    def deprecated_types_list(self) -> List[str]:
        """Parse comma-separated deprecated criteria types into list."""
        return _split_csv(self.TAXONOMY_DEPRECATED_TYPES)

    @property
    def known_types_list(self) -> List[str]:
        """Parse comma-separated known criteria types into list."""
        return _split_csv(self.TAXONOMY_KNOWN_TYPES)

    @property
    def value_policy(self) -> str:
        """Criteria value policy, lowercased. Not validated here; the audit rejects unknown values."""
        return self.CRITERIA_VALUE_POLICY.strip().lower()

    @property
    def value_policy_valid(self) -> bool:
        return self.value_policy in VALUE_POLICIES

    @property
    def supabase_configured(self) -> bool:
        return bool(self.SUPABASE_URL and self.SUPABASE_ANON_KEY)

    class Config:
        env_file = ".env"
        case_sensitive = True
        extra = "ignore"  # Allow extra fields in .env (e.g. VITE_* keys of the web client)


settings = Settings()
