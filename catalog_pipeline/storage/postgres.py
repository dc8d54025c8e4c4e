"""
PostgreSQL CatalogRepository.

Each entity is stored as its camelCase JSON document in a JSONB column, next
to the key columns used for lookups and ordering. Writes are idempotent
upserts (INSERT ... ON CONFLICT DO UPDATE).
"""

from psycopg.types.json import Jsonb

from catalog_pipeline.core.models import CatalogCategory, CatalogField, DataSource, FieldMapping
from catalog_pipeline.observability.logger import get_logger

from .connection import CatalogConnectionPool
from .repository import CatalogRepository

logger = get_logger(__name__)

SCHEMA_DDL = """
CREATE TABLE IF NOT EXISTS catalog_category (
    category_id TEXT PRIMARY KEY,
    name TEXT COLLATE "C" NOT NULL,
    sort_order INTEGER NOT NULL DEFAULT 0,
    document JSONB NOT NULL
);

CREATE TABLE IF NOT EXISTS catalog_field (
    field_id TEXT PRIMARY KEY,
    name TEXT COLLATE "C" NOT NULL UNIQUE,
    category TEXT COLLATE "C" NOT NULL,
    document JSONB NOT NULL,
    updated_at TIMESTAMPTZ NOT NULL DEFAULT NOW()
);

CREATE TABLE IF NOT EXISTS data_source (
    source_id TEXT PRIMARY KEY,
    document JSONB NOT NULL
);

CREATE TABLE IF NOT EXISTS field_mapping (
    mapping_id TEXT NOT NULL UNIQUE,
    source_id TEXT NOT NULL,
    source_field_name TEXT NOT NULL,
    catalog_field_id TEXT NOT NULL,
    document JSONB NOT NULL,
    PRIMARY KEY (source_id, source_field_name)
);

CREATE INDEX IF NOT EXISTS idx_field_mapping_catalog_field
    ON field_mapping (catalog_field_id);
"""

TABLES = ("field_mapping", "catalog_field", "catalog_category", "data_source")


class PostgresCatalogRepository(CatalogRepository):
    """CatalogRepository backed by PostgreSQL through a CatalogConnectionPool."""

    def __init__(self, pool: CatalogConnectionPool):
        """
        Args:
            pool: Open connection pool
        """
        self.pool = pool

    def initialize_schema(self) -> None:
        """Create the catalog tables if they do not exist."""
        self.pool.execute_script(SCHEMA_DDL)
        logger.info("Catalog schema initialized")

    def truncate(self) -> None:
        """Remove every row from the catalog tables."""
        self.pool.execute_script(f"TRUNCATE TABLE {', '.join(TABLES)}")

    @staticmethod
    def _document(model) -> Jsonb:
        return Jsonb(model.to_wire())

    # Catalog fields

    def get_field(self, field_id: str) -> CatalogField | None:
        rows = self.pool.execute_query(
            "SELECT document FROM catalog_field WHERE field_id = %s", (field_id,)
        )
        return CatalogField.model_validate(rows[0]["document"]) if rows else None

    def get_field_by_name(self, name: str) -> CatalogField | None:
        rows = self.pool.execute_query(
            "SELECT document FROM catalog_field WHERE name = %s", (name,)
        )
        return CatalogField.model_validate(rows[0]["document"]) if rows else None

    def list_fields(self) -> list[CatalogField]:
        rows = self.pool.execute_query(
            "SELECT document FROM catalog_field ORDER BY category, name"
        )
        return [CatalogField.model_validate(r["document"]) for r in rows]

    def save_field(self, field: CatalogField) -> CatalogField:
        self.pool.execute_command(
            """
            INSERT INTO catalog_field (field_id, name, category, document, updated_at)
            VALUES (%s, %s, %s, %s, %s)
            ON CONFLICT (field_id) DO UPDATE SET
                name = EXCLUDED.name,
                category = EXCLUDED.category,
                document = EXCLUDED.document,
                updated_at = EXCLUDED.updated_at
            """,
            (field.id, field.name, field.category, self._document(field), field.updated_at),
        )
        return field

    def delete_field(self, field_id: str) -> bool:
        return self.pool.execute_command(
            "DELETE FROM catalog_field WHERE field_id = %s", (field_id,)
        ) > 0

    # Categories

    def list_categories(self) -> list[CatalogCategory]:
        rows = self.pool.execute_query(
            "SELECT document FROM catalog_category ORDER BY sort_order, name"
        )
        return [CatalogCategory.model_validate(r["document"]) for r in rows]

    def save_category(self, category: CatalogCategory) -> CatalogCategory:
        self.pool.execute_command(
            """
            INSERT INTO catalog_category (category_id, name, sort_order, document)
            VALUES (%s, %s, %s, %s)
            ON CONFLICT (category_id) DO UPDATE SET
                name = EXCLUDED.name,
                sort_order = EXCLUDED.sort_order,
                document = EXCLUDED.document
            """,
            (category.id, category.name, category.sort_order, self._document(category)),
        )
        return category

    # Field mappings

    def get_mapping(self, source_id: str, source_field_name: str) -> FieldMapping | None:
        rows = self.pool.execute_query(
            """
            SELECT document FROM field_mapping
            WHERE source_id = %s AND source_field_name = %s
            """,
            (source_id, source_field_name),
        )
        return FieldMapping.model_validate(rows[0]["document"]) if rows else None

    def list_mappings(
        self, source_id: str | None = None, catalog_field_id: str | None = None
    ) -> list[FieldMapping]:
        clauses = []
        params: list[str] = []
        if source_id is not None:
            clauses.append("source_id = %s")
            params.append(source_id)
        if catalog_field_id is not None:
            clauses.append("catalog_field_id = %s")
            params.append(catalog_field_id)

        query = "SELECT document FROM field_mapping"
        if clauses:
            query += " WHERE " + " AND ".join(clauses)
        query += " ORDER BY source_id, source_field_name"

        rows = self.pool.execute_query(query, tuple(params))
        return [FieldMapping.model_validate(r["document"]) for r in rows]

    def save_mapping(self, mapping: FieldMapping) -> FieldMapping:
        self.pool.execute_command(
            """
            INSERT INTO field_mapping
                (mapping_id, source_id, source_field_name, catalog_field_id, document)
            VALUES (%s, %s, %s, %s, %s)
            ON CONFLICT (source_id, source_field_name) DO UPDATE SET
                mapping_id = EXCLUDED.mapping_id,
                catalog_field_id = EXCLUDED.catalog_field_id,
                document = EXCLUDED.document
            """,
            (
                mapping.id,
                mapping.source_id,
                mapping.source_field_name,
                mapping.catalog_field_id,
                self._document(mapping),
            ),
        )
        return mapping

    def delete_mapping(self, mapping_id: str) -> bool:
        return self.pool.execute_command(
            "DELETE FROM field_mapping WHERE mapping_id = %s", (mapping_id,)
        ) > 0

    def delete_mappings_for_field(self, catalog_field_id: str) -> int:
        return self.pool.execute_command(
            "DELETE FROM field_mapping WHERE catalog_field_id = %s", (catalog_field_id,)
        )

    def delete_mappings_for_source(self, source_id: str) -> int:
        return self.pool.execute_command(
            "DELETE FROM field_mapping WHERE source_id = %s", (source_id,)
        )

    # Data sources

    def get_source(self, source_id: str) -> DataSource | None:
        rows = self.pool.execute_query(
            "SELECT document FROM data_source WHERE source_id = %s", (source_id,)
        )
        return DataSource.model_validate(rows[0]["document"]) if rows else None

    def list_sources(self) -> list[DataSource]:
        rows = self.pool.execute_query("SELECT document FROM data_source ORDER BY source_id")
        return [DataSource.model_validate(r["document"]) for r in rows]

    def save_source(self, source: DataSource) -> DataSource:
        self.pool.execute_command(
            """
            INSERT INTO data_source (source_id, document)
            VALUES (%s, %s)
            ON CONFLICT (source_id) DO UPDATE SET document = EXCLUDED.document
            """,
            (source.id, self._document(source)),
        )
        return source

    def delete_source(self, source_id: str) -> bool:
        return self.pool.execute_command(
            "DELETE FROM data_source WHERE source_id = %s", (source_id,)
        ) > 0
