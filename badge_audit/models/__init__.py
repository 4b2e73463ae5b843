"""Catalog dataclasses and Pydantic models for API validation."""

from .catalog_models import (
    BadgeRecord,
    CanonicalKey,
    Taxonomy,
    TypeFinding,
    ValidationOutcome,
    DuplicateGroup,
    CatalogReport,
    DedupePlan,
)
from .api_models import (
    TaxonomyConfig,
    AuditRequest,
    AuditResponse,
    BadgeRecordOut,
    DuplicateGroupOut,
    TypeFindingOut,
)

__all__ = [
    "BadgeRecord",
    "CanonicalKey",
    "Taxonomy",
    "TypeFinding",
    "ValidationOutcome",
    "DuplicateGroup",
    "CatalogReport",
    "DedupePlan",
    "TaxonomyConfig",
    "AuditRequest",
    "AuditResponse",
    "BadgeRecordOut",
    "DuplicateGroupOut",
    "TypeFindingOut",
]
