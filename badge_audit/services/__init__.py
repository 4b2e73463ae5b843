"""Services package for badge data access and catalog consistency audits."""

from badge_audit.services.badge_repository import SupabaseBadgeRepository
from badge_audit.services.catalog import CatalogAuditService, DedupePlanner, ReportBuilder

__all__ = [
    'SupabaseBadgeRepository',
    'CatalogAuditService',
    'DedupePlanner',
    'ReportBuilder',
]
