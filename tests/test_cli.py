"""
Tests for the badge-audit command line.
"""
import io
import json
import tempfile
import unittest
from contextlib import redirect_stdout
from pathlib import Path
from unittest.mock import patch

from badge_audit import cli

from helpers import raw_row

ROWS = [
    raw_row(1, "streak", 5, name="Seri"),
    raw_row(2, "focus_master", 10),
    raw_row(3, "streak", 5, name="Seri"),
    raw_row(4, "share_stats", 1),
]


class TestCli(unittest.TestCase):
    """Test cases for cli.run."""

    def setUp(self):
        """Set up test fixtures."""
        self.tmpdir = tempfile.TemporaryDirectory()
        self.addCleanup(self.tmpdir.cleanup)
        self.snapshot = self._write("badges.json", ROWS)

    def _write(self, name, payload):
        path = Path(self.tmpdir.name) / name
        path.write_text(payload if isinstance(payload, str) else json.dumps(payload), encoding="utf-8")
        return path

    def _run(self, *argv):
        out = io.StringIO()
        with redirect_stdout(out):
            code = cli.run(["--log-level", "ERROR", *argv])
        return code, out.getvalue()

    def test_text_report(self):
        code, out = self._run("--input", str(self.snapshot), "--required", "streak", "weekly_marathon",
                              "--deprecated", "share_stats")

        self.assertEqual(code, cli.EXIT_OK)
        self.assertIn("[DUPLICATE] streak:5 x2", out)
        self.assertIn("[MISSING] weekly_marathon", out)
        self.assertIn("[DEPRECATED] share_stats", out)

    def test_json_report(self):
        code, out = self._run("--input", str(self.snapshot), "--json", "--required", "--deprecated")

        payload = json.loads(out)
        self.assertEqual(code, cli.EXIT_OK)
        self.assertEqual(payload["total_records"], 4)
        self.assertEqual(payload["duplicate_groups"][0]["key"], "streak:5")
        self.assertEqual(payload["missing_types"], [])

    def test_strict_exit_codes(self):
        code, _ = self._run("--input", str(self.snapshot), "--strict", "--required", "--deprecated")
        self.assertEqual(code, cli.EXIT_FINDINGS)

        clean = self._write("clean.json", [raw_row(1, "streak", 5)])
        code, _ = self._run("--input", str(clean), "--strict", "--required", "streak", "--deprecated")
        self.assertEqual(code, cli.EXIT_OK)

    def test_dedupe_sql(self):
        code, out = self._run("--input", str(self.snapshot), "--dedupe-sql", "--required", "--deprecated")

        self.assertEqual(code, cli.EXIT_OK)
        self.assertIn("WHERE id IN (3);", out)

    def test_data_wrapper_accepted(self):
        wrapped = self._write("wrapped.json", {"data": ROWS})
        code, out = self._run("--input", str(wrapped), "--json", "--required", "--deprecated")

        self.assertEqual(code, cli.EXIT_OK)
        self.assertEqual(json.loads(out)["total_records"], 4)

    def test_known_awardable_flags_unreachable_types(self):
        code, out = self._run("--input", str(self.snapshot), "--json", "--known-awardable",
                              "--required", "--deprecated")

        unrecognized = [f["criteria_type"] for f in json.loads(out)["unrecognized_found"]]
        self.assertIn("focus_master", unrecognized)
        self.assertNotIn("streak", unrecognized)

    def test_malformed_snapshot(self):
        bad = self._write("bad.json", [{"id": 1, "name": "x", "criteria_value": 5}])
        code, _ = self._run("--input", str(bad))
        self.assertEqual(code, cli.EXIT_ERROR)

    def test_not_an_array(self):
        bad = self._write("object.json", {"rows": []})
        code, _ = self._run("--input", str(bad))
        self.assertEqual(code, cli.EXIT_ERROR)

    def test_invalid_json(self):
        bad = self._write("broken.json", "[{")
        code, _ = self._run("--input", str(bad))
        self.assertEqual(code, cli.EXIT_ERROR)

    def test_missing_file(self):
        code, _ = self._run("--input", str(Path(self.tmpdir.name) / "absent.json"))
        self.assertEqual(code, cli.EXIT_ERROR)

    def test_overlapping_taxonomy(self):
        code, _ = self._run("--input", str(self.snapshot), "--required", "streak", "--deprecated", "streak")
        self.assertEqual(code, cli.EXIT_ERROR)

    def test_misconfigured_value_policy(self):
        with patch.object(cli.settings, "CRITERIA_VALUE_POLICY", "numerc"):
            code, _ = self._run("--input", str(self.snapshot))
        self.assertEqual(code, cli.EXIT_ERROR)

    def test_snapshot_not_utf8(self):
        bad = Path(self.tmpdir.name) / "latin.json"
        bad.write_bytes(b"\xff\xfe[")
        code, _ = self._run("--input", str(bad))
        self.assertEqual(code, cli.EXIT_ERROR)

    def test_remote_unconfigured(self):
        with patch.object(cli.settings, "SUPABASE_URL", None):
            code, _ = self._run("--remote")
        self.assertEqual(code, cli.EXIT_ERROR)


if __name__ == "__main__":
    unittest.main()
