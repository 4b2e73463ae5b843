"""
Badge catalog consistency package.

- record_normalizer.py: boundary parsing and canonical keys
- taxonomy_validator.py: required / deprecated / unrecognized criteria types
- duplicate_detector.py: exact grouping by canonical key
- report_builder.py: report assembly and text rendering
- dedupe_planner.py: cleanup proposal derived from a report
- audit_orchestrator.py: CatalogAuditService wiring it all together
"""
from .audit_orchestrator import CatalogAuditService, BadgeSource
from .record_normalizer import RecordNormalizer
from .taxonomy_validator import TaxonomyValidator
from .duplicate_detector import DuplicateDetector
from .report_builder import ReportBuilder
from .dedupe_planner import DedupePlanner

__all__ = [
    'CatalogAuditService',
    'BadgeSource',
    'RecordNormalizer',
    'TaxonomyValidator',
    'DuplicateDetector',
    'ReportBuilder',
    'DedupePlanner',
]
