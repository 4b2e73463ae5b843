"""
Unit tests for RecordNormalizer: boundary parsing and canonical keys.
"""
import unittest

from badge_audit.core.error_handling import ConfigurationError, MalformedRecordError
from badge_audit.models.catalog_models import BadgeRecord, CanonicalKey
from badge_audit.services.catalog import RecordNormalizer

from helpers import make_record, raw_row


class TestParseRecord(unittest.TestCase):
    """Test cases for building BadgeRecords from raw rows."""

    def setUp(self):
        """Set up test fixtures."""
        self.normalizer = RecordNormalizer()

    def test_parse_snake_case_row(self):
        """Test a row shaped like the badges table."""
        record = self.normalizer.parse_record(
            raw_row(7, "streak", 5, name="Seri", created_at="2025-01-01T00:00:00Z")
        )

        self.assertIsInstance(record, BadgeRecord)
        self.assertEqual(record.id, 7)
        self.assertEqual(record.name, "Seri")
        self.assertEqual(record.criteria_type, "streak")
        self.assertEqual(record.criteria_value, 5)
        self.assertEqual(record.created_at, "2025-01-01T00:00:00Z")

    def test_parse_camel_case_row(self):
        """Test camelCase keys are accepted."""
        record = self.normalizer.parse_record({
            "id": "b-1",
            "name": "Focus",
            "criteriaType": "focus_master",
            "criteriaValue": 10,
            "createdAt": "2025-01-01",
        })

        self.assertEqual(record.criteria_type, "focus_master")
        self.assertEqual(record.criteria_value, 10)
        self.assertEqual(record.created_at, "2025-01-01")

    def test_missing_name_defaults_to_empty(self):
        record = self.normalizer.parse_record({"id": 1, "criteria_type": "streak", "criteria_value": 3})
        self.assertEqual(record.name, "")
        self.assertIsNone(record.created_at)

    def test_missing_criteria_type_is_malformed(self):
        """Test a row without criteria_type aborts with MalformedRecordError."""
        with self.assertRaises(MalformedRecordError) as ctx:
            self.normalizer.parse_record({"id": 3, "name": "x", "criteria_value": 5}, index=2)

        self.assertEqual(ctx.exception.index, 2)
        self.assertEqual(ctx.exception.record_id, 3)
        self.assertIn("criteria_type", str(ctx.exception))

    def test_missing_criteria_value_is_malformed(self):
        with self.assertRaises(MalformedRecordError):
            self.normalizer.parse_record({"id": 3, "criteria_type": "streak"})

    def test_null_criteria_value_is_malformed(self):
        """Test an explicit null counts as missing."""
        with self.assertRaises(MalformedRecordError):
            self.normalizer.parse_record(raw_row(3, "streak", None))

    def test_missing_id_is_malformed(self):
        with self.assertRaises(MalformedRecordError):
            self.normalizer.parse_record({"criteria_type": "streak", "criteria_value": 5})

    def test_empty_criteria_type_is_malformed(self):
        with self.assertRaises(MalformedRecordError):
            self.normalizer.parse_record(raw_row(1, "", 5))

    def test_non_scalar_value_is_malformed(self):
        with self.assertRaises(MalformedRecordError):
            self.normalizer.parse_record(raw_row(1, "streak", [5]))

    def test_boolean_value_is_malformed(self):
        """Test booleans are rejected rather than treated as 0/1."""
        with self.assertRaises(MalformedRecordError):
            self.normalizer.parse_record(raw_row(1, "streak", True))

    def test_non_mapping_is_malformed(self):
        with self.assertRaises(MalformedRecordError):
            self.normalizer.parse_record(["streak", 5])

    def test_parse_records_aborts_on_first_bad_row(self):
        """Test the whole batch fails instead of silently dropping a row."""
        rows = [raw_row(1, "streak", 5), {"id": 2, "criteria_type": "streak"}, raw_row(3, "focus_master", 10)]

        with self.assertRaises(MalformedRecordError) as ctx:
            self.normalizer.parse_records(rows)

        self.assertEqual(ctx.exception.index, 1)

    def test_parse_records_preserves_order(self):
        rows = [raw_row(3, "a", 1), raw_row(1, "b", 2), raw_row(2, "c", 3)]
        records = self.normalizer.parse_records(rows)
        self.assertEqual([r.id for r in records], [3, 1, 2])


class TestExactPolicy(unittest.TestCase):
    """Test cases for the default exact value policy."""

    def setUp(self):
        """Set up test fixtures."""
        self.normalizer = RecordNormalizer("exact")

    def test_same_rule_same_key(self):
        key1 = self.normalizer.normalize(make_record("streak", 5))
        key2 = self.normalizer.normalize(make_record("streak", 5, name="Other name"))
        self.assertEqual(key1, key2)
        self.assertEqual(key1.token, key2.token)

    def test_string_and_int_are_distinct(self):
        """Test "5" and 5 do not collide under the exact policy."""
        key_str = self.normalizer.normalize(make_record("streak", "5"))
        key_int = self.normalizer.normalize(make_record("streak", 5))
        self.assertNotEqual(key_str, key_int)
        self.assertNotEqual(key_str.token, key_int.token)

    def test_int_and_float_are_distinct(self):
        key_int = self.normalizer.normalize(make_record("streak", 5))
        key_float = self.normalizer.normalize(make_record("streak", 5.0))
        self.assertNotEqual(key_int, key_float)

    def test_type_is_compared_exactly(self):
        """Test criteria types are not case-folded."""
        key1 = self.normalizer.normalize(make_record("Streak", 5))
        key2 = self.normalizer.normalize(make_record("streak", 5))
        self.assertNotEqual(key1, key2)

    def test_label_formats(self):
        self.assertEqual(self.normalizer.normalize(make_record("streak", 5)).label, "streak:5")
        self.assertEqual(self.normalizer.normalize(make_record("streak", "5")).label, 'streak:"5"')

    def test_deterministic(self):
        record = make_record("study_hours", 12.5)
        self.assertEqual(self.normalizer.normalize(record), self.normalizer.normalize(record))

    def test_token_cannot_be_forged_by_string_value(self):
        """Test a string value that looks like a typed token stays distinct."""
        key_str = self.normalizer.normalize(make_record("streak", "int:5"))
        key_int = self.normalizer.normalize(make_record("streak", 5))
        self.assertNotEqual(key_str.token, key_int.token)


class TestNumericPolicy(unittest.TestCase):
    """Test cases for the numeric value policy."""

    def setUp(self):
        """Set up test fixtures."""
        self.normalizer = RecordNormalizer("numeric")

    def test_numeric_representations_collide(self):
        keys = {
            self.normalizer.normalize(make_record("streak", v))
            for v in (5, 5.0, "5", " 5 ", "5.00")
        }
        self.assertEqual(keys, {CanonicalKey("streak", "number", "5")})

    def test_decimal_trailing_zeros(self):
        key = self.normalizer.normalize(make_record("study_hours", "2.50"))
        self.assertEqual(key.value_repr, "2.5")

    def test_large_integral_value(self):
        key = self.normalizer.normalize(make_record("study_hours", 50))
        self.assertEqual(key.value_repr, "50")

    def test_long_values_are_not_rounded(self):
        """Values differing past the 28th significant digit stay distinct."""
        key1 = self.normalizer.normalize(make_record("study_hours", 12345678901234567890123456789012))
        key2 = self.normalizer.normalize(make_record("study_hours", 12345678901234567890123456789000))

        self.assertNotEqual(key1, key2)
        self.assertEqual(key1.value_repr, "12345678901234567890123456789012")
        self.assertEqual(key2.value_repr, "12345678901234567890123456789000")

    def test_small_fraction(self):
        key = self.normalizer.normalize(make_record("gpa_legend", "0.0500"))
        self.assertEqual(key.value_repr, "0.05")

    def test_huge_exponent_uses_exponent_form(self):
        key1 = self.normalizer.normalize(make_record("streak", "1e1000000"))
        key2 = self.normalizer.normalize(make_record("streak", "10E999999"))

        self.assertEqual(key1.value_kind, "number")
        self.assertEqual(key1.value_repr, "1E+1000000")
        self.assertEqual(key1, key2)

    def test_tiny_exponent_uses_exponent_form(self):
        key = self.normalizer.normalize(make_record("streak", "-2.50e-500"))
        self.assertEqual(key.value_repr, "-25E-501")

    def test_negative_zero_collides_with_zero(self):
        key1 = self.normalizer.normalize(make_record("gpa_legend", "-0"))
        key2 = self.normalizer.normalize(make_record("gpa_legend", 0))
        self.assertEqual(key1, key2)

    def test_non_numeric_string_stays_string(self):
        key = self.normalizer.normalize(make_record("profile_complete", "yes"))
        self.assertEqual(key.value_kind, "str")
        self.assertEqual(key.value_repr, "yes")

    def test_nan_string_is_not_a_number(self):
        key = self.normalizer.normalize(make_record("streak", "NaN"))
        self.assertEqual(key.value_kind, "str")

    def test_unknown_policy_rejected(self):
        with self.assertRaises(ConfigurationError):
            RecordNormalizer("fuzzy")


if __name__ == "__main__":
    unittest.main()
