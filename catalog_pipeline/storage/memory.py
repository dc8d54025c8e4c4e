"""
In-memory CatalogRepository.

Used by the CLI and by tests. Stored models are copied on the way in and
out so callers cannot mutate repository state by accident.
"""

from catalog_pipeline.core.models import CatalogCategory, CatalogField, DataSource, FieldMapping

from .repository import CatalogRepository


class InMemoryCatalogRepository(CatalogRepository):
    """Dict-backed repository; insertion order is preserved."""

    def __init__(self) -> None:
        self._fields: dict[str, CatalogField] = {}
        self._categories: dict[str, CatalogCategory] = {}
        self._mappings: dict[tuple[str, str], FieldMapping] = {}
        self._sources: dict[str, DataSource] = {}

    def get_field(self, field_id: str) -> CatalogField | None:
        field = self._fields.get(field_id)
        return field.model_copy(deep=True) if field else None

    def get_field_by_name(self, name: str) -> CatalogField | None:
        for field in self._fields.values():
            if field.name == name:
                return field.model_copy(deep=True)
        return None

    def list_fields(self) -> list[CatalogField]:
        fields = sorted(self._fields.values(), key=lambda f: (f.category, f.name))
        return [f.model_copy(deep=True) for f in fields]

    def save_field(self, field: CatalogField) -> CatalogField:
        self._fields[field.id] = field.model_copy(deep=True)
        return field

    def delete_field(self, field_id: str) -> bool:
        return self._fields.pop(field_id, None) is not None

    def list_categories(self) -> list[CatalogCategory]:
        categories = sorted(self._categories.values(), key=lambda c: c.sort_order)
        return [c.model_copy(deep=True) for c in categories]

    def save_category(self, category: CatalogCategory) -> CatalogCategory:
        self._categories[category.id] = category.model_copy(deep=True)
        return category

    def get_mapping(self, source_id: str, source_field_name: str) -> FieldMapping | None:
        mapping = self._mappings.get((source_id, source_field_name))
        return mapping.model_copy(deep=True) if mapping else None

    def list_mappings(
        self, source_id: str | None = None, catalog_field_id: str | None = None
    ) -> list[FieldMapping]:
        return [
            m.model_copy(deep=True)
            for m in self._mappings.values()
            if (source_id is None or m.source_id == source_id)
            and (catalog_field_id is None or m.catalog_field_id == catalog_field_id)
        ]

    def save_mapping(self, mapping: FieldMapping) -> FieldMapping:
        self._mappings[mapping.key] = mapping.model_copy(deep=True)
        return mapping

    def delete_mapping(self, mapping_id: str) -> bool:
        for key, mapping in self._mappings.items():
            if mapping.id == mapping_id:
                del self._mappings[key]
                return True
        return False

    def delete_mappings_for_field(self, catalog_field_id: str) -> int:
        keys = [k for k, m in self._mappings.items() if m.catalog_field_id == catalog_field_id]
        for key in keys:
            del self._mappings[key]
        return len(keys)

    def delete_mappings_for_source(self, source_id: str) -> int:
        keys = [k for k in self._mappings if k[0] == source_id]
        for key in keys:
            del self._mappings[key]
        return len(keys)

    def get_source(self, source_id: str) -> DataSource | None:
        source = self._sources.get(source_id)
        return source.model_copy(deep=True) if source else None

    def list_sources(self) -> list[DataSource]:
        return [s.model_copy(deep=True) for s in self._sources.values()]

    def save_source(self, source: DataSource) -> DataSource:
        self._sources[source.id] = source.model_copy(deep=True)
        return source

    def delete_source(self, source_id: str) -> bool:
        return self._sources.pop(source_id, None) is not None
