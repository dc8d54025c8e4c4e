"""
Exception hierarchy for catalog administration and mapping definition errors.

Parse problems and transformation-rule problems are never raised; they are
logged and reported as warnings. The exceptions below represent invalid
configuration and are surfaced to the caller.
"""


class CatalogError(Exception):
    """Base class for catalog and mapping configuration errors."""


class CatalogFieldNotFoundError(CatalogError):
    """Raised when a catalog field id does not reference an existing field."""

    def __init__(self, field_id: str):
        self.field_id = field_id
        super().__init__(f"Catalog field not found: {field_id}")


class DuplicateCatalogFieldError(CatalogError):
    """Raised when a catalog field name is already taken."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Catalog field with name '{name}' already exists")


class ConfirmationRequiredError(CatalogError):
    """Raised when deleting a standard field without explicit confirmation."""

    def __init__(self, field_name: str, mapping_count: int):
        self.field_name = field_name
        self.mapping_count = mapping_count
        super().__init__(
            f"'{field_name}' is a standard catalog field with {mapping_count} dependent mapping(s); "
            "pass confirm=True to delete it"
        )


class MappingError(CatalogError):
    """Raised when a field mapping or field relationship is invalid."""


class CircularRelationshipError(MappingError):
    """Raised when related_field_ids would form a cycle."""

    def __init__(self, field_id: str, path: list[str]):
        self.field_id = field_id
        self.path = path
        super().__init__(
            f"Related fields of '{field_id}' form a cycle: {' -> '.join(path)}"
        )
