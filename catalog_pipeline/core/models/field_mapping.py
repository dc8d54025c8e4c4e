"""
FieldMapping model binding one source field to one catalog field.
"""

from datetime import datetime
from typing import Any

from pydantic import ConfigDict, Field

from .base import CatalogModel, utc_now
from .catalog_field import new_id

# Rule types a mapping may declare. Types without an implementation, and
# any type not listed here, degrade to "direct" with a warning.
TRANSFORMATION_TYPES = ("direct", "format", "calculation", "lookup", "conditional")


class TransformationRule(CatalogModel):
    """
    Optional value transformation applied while mapping.

    Attributes:
        type: direct, format, calculation, lookup or conditional
        expression: Rule expression (regex pattern for format rules)
        parameters: Rule parameters (replacement, lookup_table, ...)
    """

    type: str = "direct"
    expression: str | None = None
    parameters: dict[str, Any] = Field(default_factory=dict)


class FieldMapping(CatalogModel):
    """
    A binding from one source field to one catalog field, scoped to a source.

    Unique per (source_id, source_field_name).
    """

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "sourceId": "src_1",
                "sourceFieldName": "customer_email",
                "catalogFieldId": "8c0f8f7e-3c8e-4d8c-9a53-3c1ad3c5e2b1",
                "transformationRule": {"type": "direct"},
                "confidence": 0.85,
                "isManual": False,
            }
        }
    )

    id: str = Field(default_factory=new_id)
    source_id: str = Field(..., min_length=1)
    source_field_name: str = Field(..., min_length=1)
    catalog_field_id: str = Field(..., min_length=1)
    transformation_rule: TransformationRule | None = None
    confidence: float = Field(default=1.0, ge=0.0, le=1.0)
    is_manual: bool = True
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)

    @property
    def key(self) -> tuple[str, str]:
        return (self.source_id, self.source_field_name)
