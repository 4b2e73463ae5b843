"""
Catalog models for badge audits.

This module provides the typed badge record, its canonical key, the criteria
taxonomy and the immutable report produced by one audit run.
"""
from dataclasses import dataclass, field
from typing import Any, Iterable, Optional, Tuple, Union

from badge_audit.core.error_handling import ConfigurationError

RecordId = Union[str, int]
CriteriaValue = Union[str, int, float]


@dataclass(frozen=True)
class BadgeRecord:
    """One badge definition row, validated at the boundary."""

    id: RecordId
    """Opaque unique identifier, stable per record."""

    name: str
    """Display label."""

    criteria_type: str
    """Rule family the badge belongs to (e.g. "streak")."""

    criteria_value: CriteriaValue
    """Threshold paired with criteria_type."""

    created_at: Optional[str] = None
    """Creation timestamp as stored. Display only."""

    description: Optional[str] = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "criteria_type": self.criteria_type,
            "criteria_value": self.criteria_value,
            "created_at": self.created_at,
        }


@dataclass(frozen=True)
class CanonicalKey:
    """Comparable identity of a badge rule. Equal keys mean the same rule."""

    criteria_type: str
    value_kind: str
    """"str", "int", "float" under the exact policy; "number" or "str" under numeric."""

    value_repr: str

    @property
    def token(self) -> str:
        """Single comparison token, unambiguous across value kinds."""
        return f"{self.criteria_type}|{self.value_kind}:{self.value_repr}"

    @property
    def label(self) -> str:
        """Operator-facing form, e.g. streak:5 or streak:"5"."""
        if self.value_kind == "str":
            return f'{self.criteria_type}:"{self.value_repr}"'
        return f"{self.criteria_type}:{self.value_repr}"

    def __str__(self) -> str:
        return self.label


def _ordered_unique(values: Optional[Iterable[str]], field_name: str) -> Tuple[str, ...]:
    """Keep configured order, drop repeats, reject blanks."""
    result: list[str] = []
    for value in values or ():
        if not isinstance(value, str) or not value:
            raise ConfigurationError(f"{field_name} entries must be non-empty strings, got {value!r}")
        if value not in result:
            result.append(value)
    return tuple(result)


@dataclass(frozen=True)
class Taxonomy:
    """Required, deprecated and known criteria types for one run.

    Iteration order is the configured order, so reports diff cleanly between runs.
    An empty known_types disables the unrecognized-type check.
    """

    required_types: Tuple[str, ...] = ()
    deprecated_types: Tuple[str, ...] = ()
    known_types: Tuple[str, ...] = ()

    def __post_init__(self):
        """Normalize to ordered tuples and reject overlapping required/deprecated types."""
        required = _ordered_unique(self.required_types, "required_types")
        deprecated = _ordered_unique(self.deprecated_types, "deprecated_types")
        known = _ordered_unique(self.known_types, "known_types")

        overlap = [t for t in required if t in deprecated]
        if overlap:
            raise ConfigurationError(
                f"Criteria types cannot be both required and deprecated: {', '.join(overlap)}"
            )

        object.__setattr__(self, "required_types", required)
        object.__setattr__(self, "deprecated_types", deprecated)
        object.__setattr__(self, "known_types", known)

    @classmethod
    def from_settings(cls, settings) -> "Taxonomy":
        """Build the taxonomy configured through environment/.env."""
        return cls(
            required_types=tuple(settings.required_types_list),
            deprecated_types=tuple(settings.deprecated_types_list),
            known_types=tuple(settings.known_types_list),
        )

    def to_dict(self) -> dict[str, list[str]]:
        return {
            "required_types": list(self.required_types),
            "deprecated_types": list(self.deprecated_types),
            "known_types": list(self.known_types),
        }


@dataclass(frozen=True)
class TypeFinding:
    """A criteria type together with every record carrying it."""

    criteria_type: str
    records: Tuple[BadgeRecord, ...]

    def to_dict(self) -> dict[str, Any]:
        return {
            "criteria_type": self.criteria_type,
            "records": [r.to_dict() for r in self.records],
        }


@dataclass(frozen=True)
class ValidationOutcome:
    """Taxonomy check result."""

    missing: Tuple[str, ...] = ()
    deprecated_found: Tuple[TypeFinding, ...] = ()
    unrecognized_found: Tuple[TypeFinding, ...] = ()

    @property
    def deprecated_types_found(self) -> Tuple[str, ...]:
        return tuple(f.criteria_type for f in self.deprecated_found)


@dataclass(frozen=True)
class DuplicateGroup:
    """Records sharing one canonical key, in input order."""

    key: CanonicalKey
    records: Tuple[BadgeRecord, ...]

    @property
    def size(self) -> int:
        return len(self.records)

    def to_dict(self) -> dict[str, Any]:
        return {
            "key": self.key.label,
            "token": self.key.token,
            "criteria_type": self.key.criteria_type,
            "records": [r.to_dict() for r in self.records],
        }


@dataclass(frozen=True)
class CatalogReport:
    """Result of one audit run. Immutable and free of timestamps."""

    total_records: int
    duplicate_groups: Tuple[DuplicateGroup, ...] = ()
    missing_types: Tuple[str, ...] = ()
    deprecated_found: Tuple[TypeFinding, ...] = ()
    unrecognized_found: Tuple[TypeFinding, ...] = ()
    warnings: Tuple[str, ...] = ()
    value_policy: str = "exact"

    @property
    def duplicate_record_count(self) -> int:
        """Records a cleanup would remove (every group member after the first)."""
        return sum(g.size - 1 for g in self.duplicate_groups)

    @property
    def is_consistent(self) -> bool:
        """True when no finding of any kind was reported."""
        return not (
            self.duplicate_groups
            or self.missing_types
            or self.deprecated_found
            or self.unrecognized_found
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "total_records": self.total_records,
            "value_policy": self.value_policy,
            "is_consistent": self.is_consistent,
            "duplicate_record_count": self.duplicate_record_count,
            "duplicate_groups": [g.to_dict() for g in self.duplicate_groups],
            "missing_types": list(self.missing_types),
            "deprecated_found": [f.to_dict() for f in self.deprecated_found],
            "unrecognized_found": [f.to_dict() for f in self.unrecognized_found],
            "warnings": list(self.warnings),
        }


@dataclass(frozen=True)
class DedupePlan:
    """Ids a duplicate cleanup would keep and remove. Never applied automatically."""

    keep_ids: Tuple[RecordId, ...] = ()
    remove_ids: Tuple[RecordId, ...] = ()
    removals: Tuple[Tuple[CanonicalKey, BadgeRecord], ...] = field(default=(), compare=False)

    @property
    def is_empty(self) -> bool:
        return not self.remove_ids

    def render_sql(self, table: str = "badges") -> str:
        """
        Render the removals as one DELETE statement for manual review.

        Integer ids are emitted bare, everything else as a quoted literal.
        """
        if not self.remove_ids:
            return "-- No duplicates found."

        lines = [f"-- Duplicate found: [{record.name}] ({key.label}, id: {record.id})"
                 for key, record in self.removals]
        literals = ", ".join(_sql_literal(record_id) for record_id in self.remove_ids)
        quoted_table = '"' + table.replace('"', '""') + '"'
        lines.append(f"DELETE FROM {quoted_table} WHERE id IN ({literals});")
        return "\n".join(lines)


def _sql_literal(value: RecordId) -> str:
    if isinstance(value, int) and not isinstance(value, bool):
        return str(value)
    return "'" + str(value).replace("'", "''") + "'"
