"""
Badge catalog audit API endpoints.

Audits either a snapshot posted by the caller or the live badges table.
All endpoints are read-only with respect to the data store.
"""
from fastapi import APIRouter, Depends
from fastapi.responses import PlainTextResponse
from typing import Optional
import logging

from badge_audit.core.config import settings
from badge_audit.core.security import verify_api_key
from badge_audit.core.error_handling import handle_audit_errors
from badge_audit.models.api_models import AuditRequest, AuditResponse
from badge_audit.models.catalog_models import Taxonomy
from badge_audit.services.badge_repository import SupabaseBadgeRepository
from badge_audit.services.catalog import CatalogAuditService, DedupePlanner, ReportBuilder

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/audit", tags=["audit"])


def get_badge_repository() -> SupabaseBadgeRepository:
    """Build the badge repository from settings. Raises ConfigurationError when Supabase is not configured."""
    return SupabaseBadgeRepository.from_settings()


def _build_service(value_policy: Optional[str] = None) -> CatalogAuditService:
    return CatalogAuditService(value_policy=value_policy or settings.value_policy)


@router.post("", response_model=AuditResponse, dependencies=[Depends(verify_api_key)])
@handle_audit_errors("Failed to audit badge snapshot")
async def audit_snapshot(request: AuditRequest) -> AuditResponse:
    """
    Audit badge rows supplied in the request body.

    Returns:
        Structured findings plus the rendered text report
    """
    taxonomy = request.resolve_taxonomy()
    service = _build_service(request.value_policy)

    report = service.run_raw(request.records, taxonomy)
    logger.info(
        f"Audited posted snapshot: records={report.total_records}, "
        f"consistent={report.is_consistent}"
    )
    return AuditResponse.from_report(report, ReportBuilder().render_text(report))


@router.get("/remote", response_model=AuditResponse, dependencies=[Depends(verify_api_key)])
@handle_audit_errors("Failed to audit badge table")
async def audit_remote(value_policy: Optional[str] = None) -> AuditResponse:
    """Fetch the live badges table and audit it against the configured taxonomy."""
    taxonomy = Taxonomy.from_settings(settings)
    service = _build_service(value_policy)

    async with get_badge_repository() as repository:
        report = await service.audit_repository(repository, taxonomy)

    return AuditResponse.from_report(report, ReportBuilder().render_text(report))


@router.get("/remote/dedupe-sql", response_class=PlainTextResponse, dependencies=[Depends(verify_api_key)])
@handle_audit_errors("Failed to build dedupe proposal")
async def dedupe_sql(value_policy: Optional[str] = None) -> PlainTextResponse:
    """
    Propose SQL that would remove duplicate badges, keeping the oldest of each rule.

    The statement is returned for review only; nothing is executed.
    """
    taxonomy = Taxonomy.from_settings(settings)
    service = _build_service(value_policy)

    async with get_badge_repository() as repository:
        report = await service.audit_repository(repository, taxonomy)

    plan = DedupePlanner().plan(report)
    return PlainTextResponse(plan.render_sql(settings.BADGES_TABLE))
