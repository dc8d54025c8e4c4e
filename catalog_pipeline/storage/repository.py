"""
Persistence interface for catalog fields, categories, field mappings and
data sources.

The pipeline never talks to a database directly: services receive a
CatalogRepository and stay agnostic of the backend behind it. Repositories
store and return models as given; uniqueness, reference and cascade rules
are enforced by the catalog service.
"""

from abc import ABC, abstractmethod

from catalog_pipeline.core.models import CatalogCategory, CatalogField, DataSource, FieldMapping


class CatalogRepository(ABC):
    """Abstract store for catalog administration entities."""

    # Catalog fields

    @abstractmethod
    def get_field(self, field_id: str) -> CatalogField | None:
        """Return the field with this id, or None."""

    @abstractmethod
    def get_field_by_name(self, name: str) -> CatalogField | None:
        """Return the field with this name, or None."""

    @abstractmethod
    def list_fields(self) -> list[CatalogField]:
        """Return all fields ordered by category, then name."""

    @abstractmethod
    def save_field(self, field: CatalogField) -> CatalogField:
        """Insert or replace a field by id."""

    @abstractmethod
    def delete_field(self, field_id: str) -> bool:
        """Delete a field; returns False when it did not exist."""

    # Categories

    @abstractmethod
    def list_categories(self) -> list[CatalogCategory]:
        """Return all categories ordered by sort_order."""

    @abstractmethod
    def save_category(self, category: CatalogCategory) -> CatalogCategory:
        """Insert or replace a category by id."""

    # Field mappings

    @abstractmethod
    def get_mapping(self, source_id: str, source_field_name: str) -> FieldMapping | None:
        """Return the mapping for a source field, or None."""

    @abstractmethod
    def list_mappings(
        self, source_id: str | None = None, catalog_field_id: str | None = None
    ) -> list[FieldMapping]:
        """Return mappings, optionally filtered by source and/or catalog field."""

    @abstractmethod
    def save_mapping(self, mapping: FieldMapping) -> FieldMapping:
        """Insert or replace a mapping by (source_id, source_field_name)."""

    @abstractmethod
    def delete_mapping(self, mapping_id: str) -> bool:
        """Delete a mapping by id; returns False when it did not exist."""

    @abstractmethod
    def delete_mappings_for_field(self, catalog_field_id: str) -> int:
        """Delete every mapping targeting a catalog field; returns the count."""

    @abstractmethod
    def delete_mappings_for_source(self, source_id: str) -> int:
        """Delete every mapping of a data source; returns the count."""

    # Data sources

    @abstractmethod
    def get_source(self, source_id: str) -> DataSource | None:
        """Return the data source with this id, or None."""

    @abstractmethod
    def list_sources(self) -> list[DataSource]:
        """Return all data sources."""

    @abstractmethod
    def save_source(self, source: DataSource) -> DataSource:
        """Insert or replace a data source by id."""

    @abstractmethod
    def delete_source(self, source_id: str) -> bool:
        """Delete a data source; returns False when it did not exist."""
