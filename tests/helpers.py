"""Shared badge fixtures for tests."""
from badge_audit.models.catalog_models import BadgeRecord

_next_id = [0]


def make_record(criteria_type, criteria_value, record_id=None, name=None, created_at=None) -> BadgeRecord:
    """Build a BadgeRecord with a fresh id unless one is given."""
    if record_id is None:
        _next_id[0] += 1
        record_id = _next_id[0]
    return BadgeRecord(
        id=record_id,
        name=name if name is not None else f"{criteria_type} {criteria_value}",
        criteria_type=criteria_type,
        criteria_value=criteria_value,
        created_at=created_at,
    )


def raw_row(record_id, criteria_type, criteria_value, name="Badge", created_at=None) -> dict:
    """Row shaped like the badges table (snake_case columns)."""
    return {
        "id": record_id,
        "name": name,
        "criteria_type": criteria_type,
        "criteria_value": criteria_value,
        "created_at": created_at,
    }
