"""
Shared constants for the badge catalog audit.

This module consolidates constants used across the codebase to ensure
consistency and make it easier to modify common values.
"""

# Data source
DEFAULT_BADGES_TABLE = "badges"
DEFAULT_BADGES_ORDER_COLUMN = "created_at"
POSTGREST_PATH = "/rest/v1"

# Criteria value canonicalization policies
VALUE_POLICY_EXACT = "exact"
VALUE_POLICY_NUMERIC = "numeric"
VALUE_POLICIES = (VALUE_POLICY_EXACT, VALUE_POLICY_NUMERIC)

# Taxonomy defaults (catalog state after the badge migration)
DEFAULT_REQUIRED_TYPES = (
    "focus_master",
    "weekly_marathon",
    "grades_logged",
    "diverse_study",
)
DEFAULT_DEPRECATED_TYPES = (
    "share_stats",
    "library_study",
    "weights_complete",
)

# Criteria types the client-side award hook knows how to evaluate
AWARDABLE_CRITERIA_TYPES = (
    "first_course",
    "profile_complete",
    "streak",
    "study_hours",
    "marathon",
    "night_owl",
    "early_bird",
    "diverse_study",
    "gpa_legend",
    "friends_count",
    "first_challenge",
    "absenteeism_update",
    "syllabus_add",
    "gpa_calc",
    "weights_complete",
    "first_session",
)

# Report rendering
REPORT_RULE = "=" * 60
REPORT_SUBRULE = "-" * 60
