"""
Command-line badge catalog audit.

Examples:
    badge-audit --input badges.json --required focus_master weekly_marathon
    badge-audit --remote --dedupe-sql
    badge-audit --remote --json --strict
"""
import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path
from typing import Any, List, Optional, Sequence

from badge_audit.core.config import settings
from badge_audit.core.constants import AWARDABLE_CRITERIA_TYPES, VALUE_POLICIES
from badge_audit.core.error_handling import BadgeAuditError, MalformedRecordError
from badge_audit.core.logging import setup_logging
from badge_audit.models.catalog_models import CatalogReport, Taxonomy
from badge_audit.services.badge_repository import SupabaseBadgeRepository
from badge_audit.services.catalog import CatalogAuditService, DedupePlanner, ReportBuilder

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_FINDINGS = 1
EXIT_ERROR = 2


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="badge-audit",
        description="Check badge definitions for duplicate rules and criteria taxonomy drift."
    )
    source = parser.add_mutually_exclusive_group(required=True)
    source.add_argument("--input", type=Path, help="JSON file holding an array of badge rows")
    source.add_argument("--remote", action="store_true", help="Fetch the badges table from Supabase")

    parser.add_argument("--required", nargs="*", default=None,
                        help="Required criteria types (default: TAXONOMY_REQUIRED_TYPES)")
    parser.add_argument("--deprecated", nargs="*", default=None,
                        help="Deprecated criteria types (default: TAXONOMY_DEPRECATED_TYPES)")
    parser.add_argument("--known", nargs="*", default=None,
                        help="Criteria types the award logic evaluates (default: TAXONOMY_KNOWN_TYPES)")
    parser.add_argument("--known-awardable", action="store_true",
                        help="Use the types evaluated by the client award hook as known types")
    parser.add_argument("--policy", choices=VALUE_POLICIES, default=None,
                        help="Criteria value policy (default: CRITERIA_VALUE_POLICY)")
    parser.add_argument("--json", action="store_true", help="Print the structured report as JSON")
    parser.add_argument("--dedupe-sql", action="store_true",
                        help="Also print a DELETE statement for review (never executed)")
    parser.add_argument("--strict", action="store_true",
                        help="Exit with status 1 when the report has findings")
    parser.add_argument("--log-level", default=None, help="Override LOG_LEVEL")
    return parser


def build_taxonomy(args: argparse.Namespace) -> Taxonomy:
    """Command-line lists override the configured taxonomy one field at a time."""
    if args.known_awardable:
        known = list(AWARDABLE_CRITERIA_TYPES)
    elif args.known is not None:
        known = args.known
    else:
        known = settings.known_types_list

    return Taxonomy(
        required_types=tuple(args.required if args.required is not None else settings.required_types_list),
        deprecated_types=tuple(args.deprecated if args.deprecated is not None else settings.deprecated_types_list),
        known_types=tuple(known),
    )


def load_snapshot(path: Path) -> List[Any]:
    """Read a JSON array of badge rows (e.g. a table export).

    Raises ValueError for a file that is not UTF-8 JSON.
    """
    with open(path, encoding="utf-8") as f:
        payload = json.load(f)
    if isinstance(payload, dict) and isinstance(payload.get("data"), list):
        payload = payload["data"]
    if not isinstance(payload, list):
        raise MalformedRecordError(f"{path} must contain a JSON array of badge rows")
    return payload


async def fetch_report(service: CatalogAuditService, taxonomy: Taxonomy) -> CatalogReport:
    async with SupabaseBadgeRepository.from_settings() as repository:
        return await service.audit_repository(repository, taxonomy)


def run(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(level=args.log_level, stream=sys.stderr)

    try:
        taxonomy = build_taxonomy(args)
        service = CatalogAuditService(value_policy=args.policy or settings.value_policy)

        if args.remote:
            report = asyncio.run(fetch_report(service, taxonomy))
        else:
            report = service.run_raw(load_snapshot(args.input), taxonomy)
    except (BadgeAuditError, OSError, ValueError) as e:
        logger.error(f"Audit aborted: {e}")
        print(f"error: {e}", file=sys.stderr)
        return EXIT_ERROR

    if args.json:
        print(json.dumps(report.to_dict(), indent=2, ensure_ascii=False, default=str))
    else:
        print(ReportBuilder().render_text(report))

    if args.dedupe_sql:
        plan = DedupePlanner().plan(report)
        print()
        print(plan.render_sql(settings.BADGES_TABLE))

    if args.strict and not report.is_consistent:
        return EXIT_FINDINGS
    return EXIT_OK


def main() -> None:
    sys.exit(run())


if __name__ == "__main__":
    main()
