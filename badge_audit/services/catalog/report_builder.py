"""
Report builder for badge catalog audits.

Assembles detector and validator output into a CatalogReport and renders the
operator-facing text view. No finding is recomputed here.
"""
import logging
from typing import Iterable, List, Sequence

from badge_audit.core.constants import REPORT_RULE, REPORT_SUBRULE
from badge_audit.models.catalog_models import (
    BadgeRecord,
    CatalogReport,
    DuplicateGroup,
    TypeFinding,
    ValidationOutcome,
)

logger = logging.getLogger(__name__)


class ReportBuilder:
    """Builds and renders audit reports."""

    def build(
        self,
        records: Sequence[BadgeRecord],
        duplicates: Sequence[DuplicateGroup],
        validation: ValidationOutcome,
        warnings: Iterable[str] = (),
        value_policy: str = "exact"
    ) -> CatalogReport:
        """Aggregate findings, preserving the order each component produced."""
        report = CatalogReport(
            total_records=len(records),
            duplicate_groups=tuple(duplicates),
            missing_types=tuple(validation.missing),
            deprecated_found=tuple(validation.deprecated_found),
            unrecognized_found=tuple(validation.unrecognized_found),
            warnings=tuple(warnings),
            value_policy=value_policy,
        )
        logger.info(
            "Audit report built",
            extra={"extra_fields": {
                "total_records": report.total_records,
                "duplicate_groups": len(report.duplicate_groups),
                "missing_types": len(report.missing_types),
                "deprecated_types": len(report.deprecated_found),
                "unrecognized_types": len(report.unrecognized_found),
            }}
        )
        return report

    def render_text(self, report: CatalogReport) -> str:
        """Render the report for a console or a log file."""
        lines: List[str] = [
            REPORT_RULE,
            "Badge Catalog Audit",
            REPORT_RULE,
            f"Total badges: {report.total_records}",
            f"Value policy: {report.value_policy}",
            f"Status: {'CONSISTENT' if report.is_consistent else 'FINDINGS'}",
        ]

        for warning in report.warnings:
            lines.append(f"[WARNING] {warning}")

        lines += ["", f"Duplicates ({len(report.duplicate_groups)} rule(s), "
                      f"{report.duplicate_record_count} extra record(s)):", REPORT_SUBRULE]
        if report.duplicate_groups:
            for group in report.duplicate_groups:
                lines.append(f"[DUPLICATE] {group.key.label} x{group.size}")
                lines.extend(self._record_lines(group.records))
        else:
            lines.append("No duplicates found.")

        lines += ["", f"Missing required types ({len(report.missing_types)}):", REPORT_SUBRULE]
        if report.missing_types:
            lines.extend(f"[MISSING] {t}" for t in report.missing_types)
        else:
            lines.append("All required types present.")

        lines += ["", f"Deprecated types still present ({len(report.deprecated_found)}):", REPORT_SUBRULE]
        lines.extend(self._finding_lines("DEPRECATED", report.deprecated_found)
                     or ["No deprecated types found."])

        if report.unrecognized_found:
            lines += ["", f"Unrecognized types ({len(report.unrecognized_found)}):", REPORT_SUBRULE]
            lines.extend(self._finding_lines("UNRECOGNIZED", report.unrecognized_found))

        lines.append(REPORT_RULE)
        return "\n".join(lines)

    def _finding_lines(self, tag: str, findings: Sequence[TypeFinding]) -> List[str]:
        lines: List[str] = []
        for finding in findings:
            lines.append(f"[{tag}] {finding.criteria_type} ({len(finding.records)} badge(s))")
            lines.extend(self._record_lines(finding.records))
        return lines

    @staticmethod
    def _record_lines(records: Iterable[BadgeRecord]) -> List[str]:
        return [
            f"  - {r.name or '<unnamed>'} | {r.criteria_type}:{r.criteria_value!r} | ID: {r.id}"
            for r in records
        ]
