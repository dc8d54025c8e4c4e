"""
Catalog administration service.

Owns the rules the repository does not enforce: unique field names, existing
and acyclic related-field references, confirmed deletion of standard
fields, cascade deletes, one mapping per (source, source field), seeding of
the standard catalog, search, and catalog import/export.
"""

from collections.abc import Iterable, Mapping
from typing import Any

from pydantic import ValidationError as PydanticValidationError

from catalog_pipeline.config import PipelineSettings
from catalog_pipeline.core.catalog_config import CatalogConfigLoader
from catalog_pipeline.core.exceptions import (
    CatalogError,
    CatalogFieldNotFoundError,
    CircularRelationshipError,
    ConfirmationRequiredError,
    DuplicateCatalogFieldError,
    MappingError,
)
from catalog_pipeline.core.mapping import MappingSuggester
from catalog_pipeline.core.models import (
    CatalogCategory,
    CatalogField,
    CatalogImportResult,
    DataSource,
    FieldMapping,
    MappingSuggestion,
    TransformationRule,
    utc_now,
)
from catalog_pipeline.observability.logger import get_logger
from catalog_pipeline.storage import CatalogRepository

logger = get_logger(__name__)

EXPORT_VERSION = "1.0"

# Category filters with special meaning in search_fields
ALL_FIELDS = "all"
STANDARD_FIELDS = "standard"
CUSTOM_FIELDS = "custom"

EXPORTED_CATEGORY_KEYS = ("name", "displayName", "description", "color", "icon", "sortOrder", "isStandard")
EXPORTED_FIELD_KEYS = (
    "name",
    "displayName",
    "description",
    "dataType",
    "category",
    "isRequired",
    "isStandard",
    "tags",
    "validationRules",
)


class CatalogService:
    """
    Catalog field, category, mapping and data source administration.

    Usage:
        service = CatalogService(InMemoryCatalogRepository())
        service.seed_standard_catalog()
        service.auto_map_fields("src_1", ["customer_email", "phone_number"])
    """

    def __init__(
        self,
        repository: CatalogRepository,
        settings: PipelineSettings | None = None,
        suggester: MappingSuggester | None = None,
    ):
        """
        Initialize the service.

        Args:
            repository: Persistence backend
            settings: Pipeline settings (defaults to PipelineSettings())
            suggester: Mapping suggester (defaults to one built from settings)
        """
        self.repository = repository
        self.settings = settings or PipelineSettings()
        self.suggester = suggester or MappingSuggester.from_settings(self.settings)

    # Standard catalog

    def seed_standard_catalog(self, loader: CatalogConfigLoader | None = None) -> int:
        """
        Insert standard categories and fields that are not present yet.

        Safe to call repeatedly: existing categories and fields (matched by
        name) are left untouched.

        Args:
            loader: Source of standard definitions (defaults to the configured YAML)

        Returns:
            Number of fields inserted
        """
        loader = loader or CatalogConfigLoader(self.settings.standard_catalog_path)

        existing_categories = {c.name for c in self.repository.list_categories()}
        for category in loader.load_categories():
            if category.name not in existing_categories:
                self.repository.save_category(category)

        inserted = 0
        for field in loader.load_fields():
            if self.repository.get_field_by_name(field.name) is None:
                self.repository.save_field(field)
                inserted += 1

        logger.info("Standard catalog seeded", extra={"inserted_fields": inserted})
        return inserted

    # Catalog fields

    def list_fields(self) -> list[CatalogField]:
        return self.repository.list_fields()

    def get_field(self, field_id: str) -> CatalogField:
        """
        Fetch a field by id.

        Raises:
            CatalogFieldNotFoundError: If no field has this id
        """
        field = self.repository.get_field(field_id)
        if field is None:
            raise CatalogFieldNotFoundError(field_id)
        return field

    def search_fields(self, category: str | None = None, term: str | None = None) -> list[CatalogField]:
        """
        Filter fields by category and search term.

        Args:
            category: "all", "standard", "custom" or a category name
            term: Case-insensitive substring of name, display name,
                  description or any tag

        Returns:
            Matching fields
        """
        fields = self.repository.list_fields()

        if category and category != ALL_FIELDS:
            if category == STANDARD_FIELDS:
                fields = [f for f in fields if f.is_standard]
            elif category == CUSTOM_FIELDS:
                fields = [f for f in fields if not f.is_standard]
            else:
                fields = [f for f in fields if f.category == category]

        if term:
            needle = term.lower()
            fields = [
                f for f in fields
                if needle in f.name.lower()
                or needle in f.display_name.lower()
                or needle in f.description.lower()
                or any(needle in tag.lower() for tag in f.tags)
            ]

        return fields

    def create_field(self, field: CatalogField) -> CatalogField:
        """
        Add a field to the catalog.

        Raises:
            DuplicateCatalogFieldError: If the name is taken
            CatalogFieldNotFoundError: If a related field id does not exist
            CircularRelationshipError: If related_field_ids would form a cycle
        """
        if self.repository.get_field_by_name(field.name) is not None:
            raise DuplicateCatalogFieldError(field.name)

        self._check_relationships(field)
        self.repository.save_field(field)
        logger.info("Catalog field created", extra={"field_id": field.id, "field_name": field.name})
        return field

    def update_field(self, field_id: str, **updates: Any) -> CatalogField:
        """
        Update attributes of an existing field.

        Args:
            field_id: Field to update
            **updates: Attribute values (snake_case names)

        Returns:
            The updated field

        Raises:
            CatalogFieldNotFoundError: If the field or a related field does not exist
            DuplicateCatalogFieldError: If renamed to a taken name
            CircularRelationshipError: If related_field_ids would form a cycle
            pydantic.ValidationError: If the updated field is invalid
        """
        current = self.get_field(field_id)

        data = current.model_dump()
        data.update(updates)
        data["id"] = current.id
        data["created_at"] = current.created_at
        data["updated_at"] = utc_now()
        field = CatalogField.model_validate(data)

        if field.name != current.name:
            other = self.repository.get_field_by_name(field.name)
            if other is not None and other.id != field.id:
                raise DuplicateCatalogFieldError(field.name)

        self._check_relationships(field)
        self.repository.save_field(field)
        logger.info("Catalog field updated", extra={"field_id": field.id, "updated": sorted(updates)})
        return field

    def delete_field(self, field_id: str, confirm: bool = False) -> int:
        """
        Delete a field and everything that references it.

        Mappings targeting the field are deleted and the id is removed from
        other fields' related_field_ids.

        Args:
            field_id: Field to delete
            confirm: Required for standard fields

        Returns:
            Number of mappings deleted

        Raises:
            CatalogFieldNotFoundError: If the field does not exist
            ConfirmationRequiredError: If the field is standard and confirm is False
        """
        field = self.get_field(field_id)
        if field.is_standard and not confirm:
            dependents = self.repository.list_mappings(catalog_field_id=field_id)
            raise ConfirmationRequiredError(field.name, len(dependents))

        removed = self.repository.delete_mappings_for_field(field_id)

        for other in self.repository.list_fields():
            if field_id in other.related_field_ids:
                other.related_field_ids = [i for i in other.related_field_ids if i != field_id]
                other.updated_at = utc_now()
                self.repository.save_field(other)

        self.repository.delete_field(field_id)
        logger.info(
            "Catalog field deleted",
            extra={"field_id": field_id, "field_name": field.name, "mappings_deleted": removed},
        )
        return removed

    def _check_relationships(self, field: CatalogField) -> None:
        """Related ids must exist and must not lead back to the field."""
        fields = {f.id: f for f in self.repository.list_fields()}
        fields[field.id] = field

        for related_id in field.related_field_ids:
            if related_id not in fields:
                raise CatalogFieldNotFoundError(related_id)

        path = _find_cycle(field.id, fields)
        if path:
            raise CircularRelationshipError(field.id, path)

    # Categories

    def list_categories(self) -> list[CatalogCategory]:
        return self.repository.list_categories()

    def create_category(self, category: CatalogCategory) -> CatalogCategory:
        """
        Add a category.

        Raises:
            CatalogError: If the name is taken
        """
        if any(c.name == category.name for c in self.repository.list_categories()):
            raise CatalogError(f"Category with name '{category.name}' already exists")
        return self.repository.save_category(category)

    # Field mappings

    def create_mapping(
        self,
        source_id: str,
        source_field_name: str,
        catalog_field_id: str,
        transformation_rule: TransformationRule | None = None,
        confidence: float = 1.0,
        is_manual: bool = True,
    ) -> FieldMapping:
        """
        Create or replace the mapping of one source field.

        At most one mapping exists per (source_id, source_field_name); a
        second call updates the first, keeping its id and creation time.

        Raises:
            MappingError: If the catalog field does not exist
        """
        if self.repository.get_field(catalog_field_id) is None:
            raise MappingError(
                f"Cannot map '{source_field_name}': catalog field not found: {catalog_field_id}"
            )

        existing = self.repository.get_mapping(source_id, source_field_name)
        mapping = FieldMapping(
            source_id=source_id,
            source_field_name=source_field_name,
            catalog_field_id=catalog_field_id,
            transformation_rule=transformation_rule,
            confidence=confidence,
            is_manual=is_manual,
        )
        if existing is not None:
            mapping.id = existing.id
            mapping.created_at = existing.created_at

        self.repository.save_mapping(mapping)
        logger.debug(
            "Field mapping saved",
            extra={
                "source_id": source_id,
                "source_field": source_field_name,
                "catalog_field_id": catalog_field_id,
                "updated": existing is not None,
            },
        )
        return mapping

    def list_mappings(self, source_id: str) -> list[FieldMapping]:
        return self.repository.list_mappings(source_id=source_id)

    def delete_mapping(self, mapping_id: str) -> bool:
        return self.repository.delete_mapping(mapping_id)

    # Data sources

    def register_source(self, source: DataSource) -> DataSource:
        return self.repository.save_source(source)

    def get_source(self, source_id: str) -> DataSource:
        """
        Fetch a data source.

        Raises:
            CatalogError: If the source is unknown
        """
        source = self.repository.get_source(source_id)
        if source is None:
            raise CatalogError(f"Data source not found: {source_id}")
        return source

    def delete_source(self, source_id: str) -> int:
        """
        Delete a data source and its mappings.

        Returns:
            Number of mappings deleted
        """
        removed = self.repository.delete_mappings_for_source(source_id)
        self.repository.delete_source(source_id)
        logger.info("Data source deleted", extra={"source_id": source_id, "mappings_deleted": removed})
        return removed

    # Suggestions

    def generate_mapping_suggestions(
        self, source_id: str, source_fields: Iterable[str]
    ) -> list[MappingSuggestion]:
        """
        Suggest catalog fields for the unmapped fields of a source.

        Fields that already have a mapping for this source are skipped.
        """
        mapped = {m.source_field_name for m in self.repository.list_mappings(source_id=source_id)}
        pending = [name for name in source_fields if name not in mapped]
        return self.suggester.suggest(pending, self.repository.list_fields())

    def auto_map_fields(
        self,
        source_id: str,
        source_fields: Iterable[str],
        min_confidence: float | None = None,
    ) -> list[FieldMapping]:
        """
        Create non-manual mappings for confident top suggestions.

        Args:
            source_id: Source being mapped
            source_fields: Source field names
            min_confidence: Top candidates at or above this are mapped
                            (defaults to settings.auto_map_min_confidence)

        Returns:
            Mappings created
        """
        threshold = self.settings.auto_map_min_confidence if min_confidence is None else min_confidence

        created = []
        claimed = {m.catalog_field_id for m in self.repository.list_mappings(source_id=source_id)}
        for suggestion in self.generate_mapping_suggestions(source_id, source_fields):
            top = suggestion.best
            if top is None or top.confidence < threshold:
                continue
            if top.catalog_field_id in claimed:
                logger.info(
                    "Skipping auto-mapping; catalog field already mapped for source",
                    extra={"source_field": suggestion.source_field_name, "catalog_field": top.catalog_field_name},
                )
                continue
            created.append(
                self.create_mapping(
                    source_id=source_id,
                    source_field_name=suggestion.source_field_name,
                    catalog_field_id=top.catalog_field_id,
                    confidence=top.confidence,
                    is_manual=False,
                )
            )
            claimed.add(top.catalog_field_id)

        logger.info(
            "Auto-mapped fields",
            extra={"source_id": source_id, "mappings_created": len(created), "min_confidence": threshold},
        )
        return created

    # Import / export

    def export_catalog(self) -> dict[str, Any]:
        """
        Export categories and fields as a portable document.

        Returns:
            {version, exportedAt, categories[], fields[]} with camelCase keys
        """
        categories = [c.to_wire() for c in self.repository.list_categories()]
        fields = [f.to_wire() for f in self.repository.list_fields()]
        return {
            "version": EXPORT_VERSION,
            "exportedAt": utc_now().isoformat(),
            "categories": [{k: c[k] for k in EXPORTED_CATEGORY_KEYS} for c in categories],
            "fields": [{k: f[k] for k in EXPORTED_FIELD_KEYS} for f in fields],
        }

    def import_catalog(self, document: Mapping[str, Any]) -> CatalogImportResult:
        """
        Import categories and fields from an export document.

        Fields may be listed at the top level under "fields" or nested under
        each category's "fields". Imported entries are always custom. Entries
        that fail are reported and the rest are still imported.

        Raises:
            ValueError: If the document has neither a fields list nor a categories list
        """
        top_fields = document.get("fields")
        categories = document.get("categories")
        if top_fields is not None and not isinstance(top_fields, list):
            raise ValueError("Invalid import file: fields must be an array")
        if categories is not None and not isinstance(categories, list):
            raise ValueError("Invalid import file: categories must be an array")
        if top_fields is None and categories is None:
            raise ValueError("Invalid import file: missing fields array")

        errors: list[str] = []
        imported = 0

        known_categories = {c.name for c in self.repository.list_categories()}
        pending_fields: list[Any] = list(top_fields or [])

        for entry in categories or []:
            if not isinstance(entry, Mapping):
                errors.append("Skipped category entry that is not an object")
                continue
            nested = entry.get("fields") or []
            if not isinstance(nested, list):
                errors.append(f"Skipped fields of category {entry.get('name')}: fields must be an array")
                nested = []
            # Non-object entries are reported with the top-level fields below
            pending_fields.extend(
                {**f, "category": entry.get("name")} if isinstance(f, Mapping) else f for f in nested
            )
            if entry.get("name") in known_categories:
                continue
            try:
                category = CatalogCategory.model_validate(
                    {
                        **{k: v for k, v in entry.items() if k != "fields"},
                        "id": entry.get("name"),
                        "displayName": entry.get("displayName") or entry.get("name"),
                        "isStandard": False,
                    }
                )
                self.repository.save_category(category)
                known_categories.add(category.name)
            except PydanticValidationError as e:
                errors.append(f"Failed to import category {entry.get('name')}: {e.error_count()} invalid value(s)")

        for entry in pending_fields:
            if not isinstance(entry, Mapping):
                errors.append("Skipped field entry that is not an object")
                continue
            name = entry.get("name")
            try:
                field = CatalogField.model_validate(
                    {
                        **entry,
                        "displayName": entry.get("displayName") or name,
                        "isStandard": False,
                        "relatedFieldIds": [],
                    }
                )
                self.create_field(field)
                imported += 1
            except PydanticValidationError as e:
                errors.append(f"Failed to import field {name}: {e.error_count()} invalid value(s)")
            except CatalogError as e:
                errors.append(f"Failed to import field {name}: {e}")

        if errors:
            logger.warning("Catalog import finished with errors", extra={"imported": imported, "errors": len(errors)})
            message = f"Imported {imported} fields with {len(errors)} errors"
        else:
            logger.info("Catalog import finished", extra={"imported": imported})
            message = f"Successfully imported {imported} fields"

        return CatalogImportResult(
            success=not errors, message=message, imported_count=imported, errors=errors
        )


def _find_cycle(start_id: str, fields: Mapping[str, CatalogField]) -> list[str] | None:
    """
    Depth-first search for a related-field path leading back to start_id.

    A field listing itself is a cycle of length one.

    Returns:
        The cycle as a list of ids (start_id first and last), or None
    """
    visited: set[str] = set()
    stack: list[tuple[str, list[str]]] = [(start_id, [start_id])]

    while stack:
        current, path = stack.pop()
        field = fields.get(current)
        if field is None:
            continue
        for related_id in field.related_field_ids:
            if related_id == start_id:
                return path + [start_id]
            if related_id not in visited:
                visited.add(related_id)
                stack.append((related_id, path + [related_id]))

    return None
