"""
Derived schema models produced by the schema analyzer.
"""

from pydantic import Field, JsonValue

from .base import CatalogModel


class SchemaField(CatalogModel):
    """
    Inferred description of one field.

    type is None when no non-null value was ever observed, "mixed" when more
    than one type was observed.
    """

    name: str
    type: str | None = None
    nullable: bool = False
    examples: list[JsonValue] = Field(default_factory=list, max_length=3)


class SchemaDefinition(CatalogModel):
    """Ordered list of inferred fields."""

    fields: list[SchemaField] = Field(default_factory=list)

    def get(self, name: str) -> SchemaField | None:
        return next((f for f in self.fields if f.name == name), None)

    @property
    def field_names(self) -> list[str]:
        return [f.name for f in self.fields]
