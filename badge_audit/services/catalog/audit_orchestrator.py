"""
Audit orchestration for badge catalog consistency.

Coordinates record parsing, canonical keys, taxonomy checks, duplicate
detection and report assembly. Holds no state between runs.
"""
import logging
import time
import warnings
from typing import Any, Iterable, List, Mapping, Optional, Protocol, Sequence

from badge_audit.core.constants import VALUE_POLICY_EXACT
from badge_audit.core.error_handling import EmptyInputWarning
from badge_audit.models.catalog_models import BadgeRecord, CatalogReport, Taxonomy

from .duplicate_detector import DuplicateDetector
from .record_normalizer import RecordNormalizer
from .report_builder import ReportBuilder
from .taxonomy_validator import TaxonomyValidator

logger = logging.getLogger(__name__)

EMPTY_INPUT_MESSAGE = "No badge records supplied; every required type is reported missing"


class BadgeSource(Protocol):
    """Data-access collaborator returning the full badge snapshot."""

    async def fetch_badges(self) -> List[Mapping[str, Any]]:
        ...


class CatalogAuditService:
    """Runs one consistency audit over a badge snapshot."""

    def __init__(
        self,
        value_policy: str = VALUE_POLICY_EXACT,
        normalizer: Optional[RecordNormalizer] = None,
        validator: Optional[TaxonomyValidator] = None,
        detector: Optional[DuplicateDetector] = None,
        builder: Optional[ReportBuilder] = None
    ):
        """
        Initialize the audit service with its components.

        Args:
            value_policy: Criteria value policy, ignored when normalizer is given
            normalizer: Pre-built normalizer (optional)
            validator: Pre-built taxonomy validator (optional)
            detector: Pre-built duplicate detector (optional, shares the normalizer)
            builder: Pre-built report builder (optional)

        Raises:
            ConfigurationError: If the value policy is unknown
        """
        self.normalizer = normalizer or RecordNormalizer(value_policy)
        self.validator = validator or TaxonomyValidator()
        self.detector = detector or DuplicateDetector(self.normalizer)
        self.builder = builder or ReportBuilder()

    @property
    def value_policy(self) -> str:
        return self.normalizer.value_policy

    def run(self, records: Sequence[BadgeRecord], taxonomy: Taxonomy) -> CatalogReport:
        """
        Audit parsed records against a taxonomy.

        Duplicates, missing and deprecated types are findings in the report,
        never exceptions. An empty snapshot emits EmptyInputWarning and still
        yields a report.
        """
        start_time = time.time()
        records = list(records)

        run_warnings: List[str] = []
        if not records:
            warnings.warn(EMPTY_INPUT_MESSAGE, EmptyInputWarning, stacklevel=2)
            logger.warning(EMPTY_INPUT_MESSAGE)
            run_warnings.append(EMPTY_INPUT_MESSAGE)

        keys = self.normalizer.normalize_all(records)
        duplicates = self.detector.detect(records, keys)
        validation = self.validator.validate(records, taxonomy)

        report = self.builder.build(
            records,
            duplicates,
            validation,
            warnings=run_warnings,
            value_policy=self.value_policy,
        )

        logger.info(
            f"Audited {report.total_records} badge(s) in {time.time() - start_time:.3f}s: "
            f"{len(report.duplicate_groups)} duplicate rule(s), "
            f"{len(report.missing_types)} missing type(s), "
            f"{len(report.deprecated_found)} deprecated type(s)"
        )
        return report

    def run_raw(self, raw_records: Iterable[Any], taxonomy: Taxonomy) -> CatalogReport:
        """Parse untyped rows at the boundary, then audit. Malformed rows abort the run."""
        records = self.normalizer.parse_records(raw_records)
        return self.run(records, taxonomy)

    async def audit_repository(self, repository: BadgeSource, taxonomy: Taxonomy) -> CatalogReport:
        """
        Fetch the snapshot once from the injected collaborator and audit it.

        The taxonomy is built before the fetch, so configuration errors surface
        without any network traffic. Fetch errors propagate unchanged.
        """
        raw_records = await repository.fetch_badges()
        logger.info(f"Fetched {len(raw_records)} badge row(s) from {repository.__class__.__name__}")
        return self.run_raw(raw_records, taxonomy)
