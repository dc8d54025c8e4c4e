"""
CatalogField and CatalogCategory models for the shared target schema.
"""

import re
from datetime import datetime
from typing import Literal
from uuid import uuid4

from pydantic import ConfigDict, Field, field_validator, model_validator

from .base import CatalogModel, utc_now

CatalogDataType = Literal[
    "string",
    "number",
    "currency",
    "boolean",
    "date",
    "datetime",
    "email",
    "url",
    "enum",
    "array",
    "object",
]

FIELD_NAME_PATTERN = re.compile(r"^[a-z][a-z0-9_]*$")


def new_id() -> str:
    return str(uuid4())


class ValidationRules(CatalogModel):
    """
    Declarative value rules for a catalog field.

    Attributes:
        pattern: Regular expression the string form of the value must match
        min_length: Minimum string length
        max_length: Maximum string length
        min_value: Minimum numeric value (inclusive)
        max_value: Maximum numeric value (inclusive)
        enum_values: Allowed values
        decimal_places: Maximum digits after the decimal point
    """

    pattern: str | None = None
    min_length: int | None = Field(default=None, ge=0)
    max_length: int | None = Field(default=None, ge=0)
    min_value: int | float | None = None
    max_value: int | float | None = None
    enum_values: list[str] | None = None
    decimal_places: int | None = Field(default=None, ge=0)

    @field_validator("pattern")
    @classmethod
    def pattern_must_compile(cls, v: str | None) -> str | None:
        if v is not None:
            try:
                re.compile(v)
            except re.error as e:
                raise ValueError(f"Invalid regex pattern: {e}") from e
        return v


class CatalogField(CatalogModel):
    """
    A named, typed target field in the shared catalog schema.

    Attributes:
        id: Unique identifier
        name: snake_case name, unique across the catalog
        display_name: Human-readable label used in validation messages
        data_type: Declared value type
        category: Category name (identity, contact, financial, ...)
        is_required: Whether a value must be present
        is_standard: Built-in (seeded) field vs user-defined
        validation_rules: Value rules
        tags: Free-form tags used for mapping suggestions
        related_field_ids: Links to other catalog fields (must be acyclic)
    """

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "name": "email_address",
                "displayName": "Email Address",
                "dataType": "email",
                "category": "contact",
                "isRequired": False,
                "isStandard": True,
                "validationRules": {"pattern": "^[^@]+@[^@]+\\.[^@]+$"},
                "tags": ["contact", "communication", "pii"],
            }
        }
    )

    id: str = Field(default_factory=new_id)
    name: str = Field(..., min_length=1, max_length=100)
    display_name: str = Field(..., min_length=1)
    description: str = ""
    data_type: CatalogDataType
    category: str = "custom"
    is_required: bool = False
    is_standard: bool = False
    validation_rules: ValidationRules = Field(default_factory=ValidationRules)
    tags: list[str] = Field(default_factory=list)
    related_field_ids: list[str] = Field(default_factory=list)
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)

    @field_validator("name")
    @classmethod
    def name_must_be_snake_case(cls, v: str) -> str:
        if not FIELD_NAME_PATTERN.match(v):
            raise ValueError(
                "Field name must start with a lowercase letter and contain only "
                "lowercase letters, numbers, and underscores"
            )
        return v

    @model_validator(mode="after")
    def enum_requires_values(self) -> "CatalogField":
        if self.data_type == "enum" and not self.validation_rules.enum_values:
            raise ValueError("Enum fields must declare validation_rules.enum_values")
        return self


class CatalogCategory(CatalogModel):
    """Grouping for catalog fields (identity, contact, location, ...)."""

    id: str = Field(default_factory=new_id)
    name: str = Field(..., min_length=1)
    display_name: str
    description: str = ""
    color: str = "gray"
    icon: str = "folder"
    sort_order: int = 0
    is_standard: bool = False
