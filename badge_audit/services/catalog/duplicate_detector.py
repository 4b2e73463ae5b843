"""
Exact duplicate detection over canonical keys.
"""
import logging
from typing import Dict, List, Optional, Sequence

from badge_audit.models.catalog_models import BadgeRecord, CanonicalKey, DuplicateGroup

from .record_normalizer import RecordNormalizer

logger = logging.getLogger(__name__)


class DuplicateDetector:
    """Groups records that encode the same achievement rule."""

    def __init__(self, normalizer: Optional[RecordNormalizer] = None):
        """
        Args:
            normalizer: Key source when keys are not passed in (default: exact policy)
        """
        self.normalizer = normalizer or RecordNormalizer()

    def group(
        self,
        records: Sequence[BadgeRecord],
        keys: Optional[Sequence[CanonicalKey]] = None
    ) -> List[DuplicateGroup]:
        """
        Partition records by canonical key, singletons included.

        Groups come out in first-seen order of their key, members in input order.

        Args:
            records: Parsed badge records
            keys: Precomputed keys aligned with records (computed if omitted)

        Raises:
            ValueError: If keys and records differ in length
        """
        if keys is None:
            keys = self.normalizer.normalize_all(records)
        elif len(keys) != len(records):
            raise ValueError(f"Got {len(keys)} keys for {len(records)} records")

        buckets: Dict[CanonicalKey, List[BadgeRecord]] = {}
        for key, record in zip(keys, records):
            buckets.setdefault(key, []).append(record)

        return [DuplicateGroup(key=key, records=tuple(members)) for key, members in buckets.items()]

    def detect(
        self,
        records: Sequence[BadgeRecord],
        keys: Optional[Sequence[CanonicalKey]] = None
    ) -> List[DuplicateGroup]:
        """Return only groups with two or more records, in first-seen order."""
        duplicates = [g for g in self.group(records, keys) if g.size > 1]

        for dup in duplicates:
            ids = ", ".join(str(r.id) for r in dup.records)
            logger.warning(f"Duplicate badge rule {dup.key.label}: {dup.size} records (ids: {ids})")

        return duplicates
