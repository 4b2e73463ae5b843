#!/usr/bin/env python3
"""
Audit the badge catalog from a JSON export or the live Supabase table.

Usage:
    python scripts/audit_catalog.py --input badges.json
    python scripts/audit_catalog.py --remote --dedupe-sql --strict
"""
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from badge_audit.cli import main  # noqa: E402

if __name__ == "__main__":
    main()
