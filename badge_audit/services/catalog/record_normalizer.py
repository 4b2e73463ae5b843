"""
Record construction and canonical keys for badge comparison.
"""
import logging
import math
from collections.abc import Mapping
from decimal import Decimal, InvalidOperation
from typing import Any, Iterable, List, Optional

from badge_audit.core.constants import VALUE_POLICIES, VALUE_POLICY_EXACT, VALUE_POLICY_NUMERIC
from badge_audit.core.error_handling import ConfigurationError, MalformedRecordError
from badge_audit.models.catalog_models import BadgeRecord, CanonicalKey

logger = logging.getLogger(__name__)

# Longer plain renderings switch to exponent form
_PLAIN_REPR_LIMIT = 100

# Stored column name first, camelCase alias second
_FIELD_ALIASES = {
    "id": ("id",),
    "name": ("name",),
    "criteria_type": ("criteria_type", "criteriaType"),
    "criteria_value": ("criteria_value", "criteriaValue"),
    "created_at": ("created_at", "createdAt"),
    "description": ("description",),
}


def _lookup(raw: Mapping, field_name: str) -> Any:
    for alias in _FIELD_ALIASES[field_name]:
        if alias in raw and raw[alias] is not None:
            return raw[alias]
    return None


class RecordNormalizer:
    """Turn raw badge rows into BadgeRecords and map records to canonical keys."""

    def __init__(self, value_policy: str = VALUE_POLICY_EXACT):
        """
        Args:
            value_policy: "exact" keeps the stored representation ("5" != 5),
                "numeric" coerces parseable numbers before comparing

        Raises:
            ConfigurationError: If the policy is unknown
        """
        if value_policy not in VALUE_POLICIES:
            raise ConfigurationError(
                f"Unknown criteria value policy {value_policy!r}; expected one of {', '.join(VALUE_POLICIES)}"
            )
        self.value_policy = value_policy

    # ============================================================================
    # Boundary construction
    # ============================================================================

    def parse_record(self, raw: Any, index: Optional[int] = None) -> BadgeRecord:
        """
        Validate one raw row and build a BadgeRecord.

        Args:
            raw: Row mapping as returned by the data store
            index: Position in the input sequence, used in error messages

        Returns:
            Typed BadgeRecord

        Raises:
            MalformedRecordError: If id, criteria type or criteria value is
                missing or has an unusable type
        """
        if not isinstance(raw, Mapping):
            raise MalformedRecordError(
                f"Badge record must be a mapping, got {type(raw).__name__}", index=index
            )

        record_id = _lookup(raw, "id")
        if record_id is None:
            raise MalformedRecordError("Badge record is missing 'id'", index=index)
        if isinstance(record_id, bool) or not isinstance(record_id, (str, int)):
            raise MalformedRecordError(
                f"Badge id must be a string or integer, got {type(record_id).__name__}",
                index=index
            )

        criteria_type = _lookup(raw, "criteria_type")
        if criteria_type is None:
            raise MalformedRecordError("Badge record is missing 'criteria_type'", index=index, record_id=record_id)
        if not isinstance(criteria_type, str) or not criteria_type:
            raise MalformedRecordError(
                f"'criteria_type' must be a non-empty string, got {criteria_type!r}",
                index=index, record_id=record_id
            )

        criteria_value = _lookup(raw, "criteria_value")
        if criteria_value is None:
            raise MalformedRecordError("Badge record is missing 'criteria_value'", index=index, record_id=record_id)
        if isinstance(criteria_value, bool) or not isinstance(criteria_value, (str, int, float)):
            raise MalformedRecordError(
                f"'criteria_value' must be a string or number, got {type(criteria_value).__name__}",
                index=index, record_id=record_id
            )

        name = _lookup(raw, "name")
        created_at = _lookup(raw, "created_at")
        description = _lookup(raw, "description")

        return BadgeRecord(
            id=record_id,
            name=str(name) if name is not None else "",
            criteria_type=criteria_type,
            criteria_value=criteria_value,
            created_at=str(created_at) if created_at is not None else None,
            description=str(description) if description is not None else None,
        )

    def parse_records(self, raws: Iterable[Any]) -> List[BadgeRecord]:
        """Parse rows in order. The first malformed row aborts the whole batch."""
        records = [self.parse_record(raw, index=i) for i, raw in enumerate(raws)]
        logger.debug(f"Parsed {len(records)} badge records")
        return records

    # ============================================================================
    # Canonical keys
    # ============================================================================

    def normalize(self, record: BadgeRecord) -> CanonicalKey:
        """
        Map a record to the key that identifies its achievement rule.

        Only criteria_type and criteria_value take part; name, id and
        timestamps never do.
        """
        kind, value_repr = self._canonical_value(record.criteria_value)
        return CanonicalKey(criteria_type=record.criteria_type, value_kind=kind, value_repr=value_repr)

    def normalize_all(self, records: Iterable[BadgeRecord]) -> List[CanonicalKey]:
        return [self.normalize(r) for r in records]

    def _canonical_value(self, value) -> tuple[str, str]:
        if self.value_policy == VALUE_POLICY_NUMERIC:
            number = _as_decimal(value)
            if number is not None:
                return "number", _decimal_repr(number)
            return "str", str(value)

        if isinstance(value, str):
            return "str", value
        if isinstance(value, int):
            return "int", str(value)
        return "float", repr(value)


def _as_decimal(value) -> Optional[Decimal]:
    """Finite decimal for ints, floats and numeric strings; None otherwise."""
    if isinstance(value, float):
        if not math.isfinite(value):
            return None
        return Decimal(repr(value))
    if isinstance(value, int):
        return Decimal(value)
    try:
        number = Decimal(value.strip())
    except (InvalidOperation, ValueError):
        return None
    return number if number.is_finite() else None


def _decimal_repr(number: Decimal) -> str:
    """
    Exact text for a finite decimal with trailing zeros removed.

    5, 5.0 and 5.00 all render as "5"; 2.50 renders as "2.5". Digits are never
    rounded, and values whose plain form would be very long (e.g. 1e1000000)
    render as <digits>E<exponent>.
    """
    if number.is_zero():
        return "0"

    sign, digit_tuple, exponent = number.as_tuple()
    digits = list(digit_tuple)
    while digits[-1] == 0:
        digits.pop()
        exponent += 1
    text = "".join(str(d) for d in digits)

    if len(text) + abs(exponent) > _PLAIN_REPR_LIMIT:
        body = f"{text}E{exponent:+d}"
    elif exponent >= 0:
        body = text + "0" * exponent
    else:
        point = len(text) + exponent
        if point > 0:
            body = f"{text[:point]}.{text[point:]}"
        else:
            body = "0." + "0" * -point + text
    return ("-" if sign else "") + body
