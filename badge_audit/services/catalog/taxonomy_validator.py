"""
Criteria taxonomy checks for a badge catalog snapshot.

Reports three kinds of drift:
1. Missing required types (a supported badge category has no badge)
2. Deprecated types still present (a migration did not fully apply)
3. Unrecognized types (the award logic cannot evaluate them), only when
   known types are configured
"""
import logging
from typing import Dict, List, Sequence

from badge_audit.models.catalog_models import BadgeRecord, Taxonomy, TypeFinding, ValidationOutcome

logger = logging.getLogger(__name__)


class TaxonomyValidator:
    """Checks a record set against required, deprecated and known criteria types."""

    def validate(self, records: Sequence[BadgeRecord], taxonomy: Taxonomy) -> ValidationOutcome:
        """
        Compare observed criteria types with the taxonomy.

        Never raises: every finding is data for the report.

        Args:
            records: Parsed badge records, in input order
            taxonomy: Criteria taxonomy for this run

        Returns:
            ValidationOutcome with missing types in required order, deprecated
            findings in deprecated order and unrecognized findings in
            first-seen order
        """
        by_type = self._group_by_type(records)

        missing = tuple(t for t in taxonomy.required_types if t not in by_type)

        deprecated_found = tuple(
            TypeFinding(criteria_type=t, records=tuple(by_type[t]))
            for t in taxonomy.deprecated_types
            if t in by_type
        )

        unrecognized_found: tuple[TypeFinding, ...] = ()
        if taxonomy.known_types:
            unrecognized_found = tuple(
                TypeFinding(criteria_type=t, records=tuple(group))
                for t, group in by_type.items()
                if t not in taxonomy.known_types and t not in taxonomy.deprecated_types
            )

        if missing:
            logger.info(f"Missing required criteria types: {', '.join(missing)}")
        for finding in deprecated_found:
            logger.warning(
                f"Deprecated criteria type '{finding.criteria_type}' still used by "
                f"{len(finding.records)} badge(s)"
            )
        for finding in unrecognized_found:
            logger.warning(
                f"Criteria type '{finding.criteria_type}' is not evaluated by the award logic "
                f"({len(finding.records)} badge(s))"
            )

        return ValidationOutcome(
            missing=missing,
            deprecated_found=deprecated_found,
            unrecognized_found=unrecognized_found,
        )

    @staticmethod
    def observed_types(records: Sequence[BadgeRecord]) -> List[str]:
        """Distinct criteria types in first-seen order."""
        return list(dict.fromkeys(r.criteria_type for r in records))

    @staticmethod
    def _group_by_type(records: Sequence[BadgeRecord]) -> Dict[str, List[BadgeRecord]]:
        by_type: Dict[str, List[BadgeRecord]] = {}
        for record in records:
            by_type.setdefault(record.criteria_type, []).append(record)
        return by_type
