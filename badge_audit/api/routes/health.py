from fastapi import APIRouter

from badge_audit.core.config import settings
from badge_audit.models.catalog_models import Taxonomy
from badge_audit.core.error_handling import ConfigurationError

router = APIRouter()


@router.get("/")
async def root():
    """Basic health check endpoint."""
    return {"message": "Badge Catalog Audit API", "status": "healthy"}


@router.get("/health")
async def health_check():
    """
    Configuration health check.

    Verifies:
    - Supabase data source configuration
    - Taxonomy settings are consistent
    - Criteria value policy is known
    - Authentication settings
    """
    health_status = {
        "status": "healthy",
        "service": "Badge Catalog Audit",
        "version": "1.0",
    }

    config_checks = {
        "supabase_configured": settings.supabase_configured,
        "badges_table": settings.BADGES_TABLE,
        "value_policy": settings.value_policy,
        "api_key_required": settings.REQUIRE_API_KEY,
    }
    health_status.update(config_checks)

    try:
        taxonomy = Taxonomy.from_settings(settings)
        health_status["taxonomy"] = taxonomy.to_dict()
    except ConfigurationError as e:
        health_status["status"] = "degraded"
        health_status["taxonomy_error"] = str(e)

    if not settings.value_policy_valid:
        health_status["status"] = "degraded"
        health_status["value_policy_error"] = (
            f"Unknown CRITERIA_VALUE_POLICY {settings.value_policy!r}; audits will be rejected"
        )

    if not settings.supabase_configured:
        health_status["status"] = "degraded"
        health_status["warning"] = "Supabase data source not configured; only POST /audit is available"

    return health_status
