"""
Pydantic models for API request and response structures.
"""
from pydantic import BaseModel, Field, field_validator
from typing import List, Optional, Dict, Any, Union

from badge_audit.core.config import settings
from badge_audit.core.constants import VALUE_POLICIES
from badge_audit.models.catalog_models import CatalogReport, Taxonomy


class TaxonomyConfig(BaseModel):
    """Criteria taxonomy supplied with an audit request."""

    required_types: List[str] = Field(
        default_factory=list,
        description="Criteria types that must appear at least once in the catalog"
    )
    deprecated_types: List[str] = Field(
        default_factory=list,
        description="Criteria types removed by a migration that must not appear"
    )
    known_types: List[str] = Field(
        default_factory=list,
        description="Criteria types the award logic can evaluate. Empty disables the check."
    )

    def to_taxonomy(self) -> Taxonomy:
        """Build the core taxonomy. Raises ConfigurationError on overlap."""
        return Taxonomy(
            required_types=tuple(self.required_types),
            deprecated_types=tuple(self.deprecated_types),
            known_types=tuple(self.known_types),
        )


class AuditRequest(BaseModel):
    """Request model for auditing a badge snapshot supplied by the caller."""

    records: List[Dict[str, Any]] = Field(
        ...,
        description="Badge rows as returned by the data store (snake_case or camelCase keys)"
    )
    taxonomy: Optional[TaxonomyConfig] = Field(
        default=None,
        description="Taxonomy override. If None, uses the configured TAXONOMY_* settings."
    )
    value_policy: Optional[str] = Field(
        default=None,
        description="Criteria value policy: 'exact' or 'numeric'. If None, uses CRITERIA_VALUE_POLICY."
    )

    @field_validator('value_policy')
    @classmethod
    def validate_value_policy(cls, v: Optional[str]) -> Optional[str]:
        """Validate policy is one of the supported options."""
        if v is None:
            return None
        if v.lower() not in VALUE_POLICIES:
            raise ValueError(f"value_policy must be one of: {', '.join(VALUE_POLICIES)}")
        return v.lower()

    def resolve_taxonomy(self) -> Taxonomy:
        if self.taxonomy is None:
            return Taxonomy.from_settings(settings)
        return self.taxonomy.to_taxonomy()

    model_config = {
        "json_schema_extra": {
            "example": {
                "records": [
                    {"id": 1, "name": "Seri Başlangıcı", "criteria_type": "streak", "criteria_value": 5},
                    {"id": 2, "name": "Odak Ustası", "criteria_type": "focus_master", "criteria_value": 10},
                ],
                "taxonomy": {
                    "required_types": ["focus_master", "weekly_marathon"],
                    "deprecated_types": ["share_stats"],
                },
                "value_policy": "exact",
            }
        }
    }


class BadgeRecordOut(BaseModel):
    id: Union[int, str]
    name: str
    criteria_type: str
    criteria_value: Union[int, float, str]
    created_at: Optional[str] = None


class DuplicateGroupOut(BaseModel):
    key: str = Field(..., description="Operator-facing key, e.g. streak:5")
    token: str = Field(..., description="Exact comparison token")
    criteria_type: str
    records: List[BadgeRecordOut]


class TypeFindingOut(BaseModel):
    criteria_type: str
    records: List[BadgeRecordOut]


class AuditResponse(BaseModel):
    """Response model for one audit run: structured findings plus the text view."""

    total_records: int = Field(..., description="Number of badge records audited")
    value_policy: str = Field(..., description="Criteria value policy used for duplicate keys")
    is_consistent: bool = Field(..., description="True when no finding was reported")
    duplicate_record_count: int = Field(..., description="Records a duplicate cleanup would remove")
    duplicate_groups: List[DuplicateGroupOut] = Field(default_factory=list)
    missing_types: List[str] = Field(default_factory=list)
    deprecated_found: List[TypeFindingOut] = Field(default_factory=list)
    unrecognized_found: List[TypeFindingOut] = Field(default_factory=list)
    warnings: List[str] = Field(default_factory=list)
    text: str = Field(..., description="Human-readable rendering of the report")

    @classmethod
    def from_report(cls, report: CatalogReport, text: str) -> "AuditResponse":
        return cls(**report.to_dict(), text=text)
