"""
Cleanup proposal for duplicate badge rules.

The earliest record of each duplicate group is kept; the report's input order
is the fetch order (created_at ascending), so "first" means "oldest".
"""
import logging

from badge_audit.models.catalog_models import CatalogReport, DedupePlan

logger = logging.getLogger(__name__)


class DedupePlanner:
    """Derives which records a cleanup would remove. Never touches the store."""

    def plan(self, report: CatalogReport) -> DedupePlan:
        keep_ids = []
        remove_ids = []
        removals = []

        for group in report.duplicate_groups:
            first, *rest = group.records
            keep_ids.append(first.id)
            for record in rest:
                remove_ids.append(record.id)
                removals.append((group.key, record))

        if remove_ids:
            logger.info(f"Dedupe plan: keep {len(keep_ids)}, remove {len(remove_ids)} badge record(s)")

        return DedupePlan(
            keep_ids=tuple(keep_ids),
            remove_ids=tuple(remove_ids),
            removals=tuple(removals),
        )
