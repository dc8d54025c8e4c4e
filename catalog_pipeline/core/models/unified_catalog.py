"""
UnifiedDataCatalog export artifact.
"""

import json
from datetime import datetime

from pydantic import Field

from .base import CatalogModel, utc_now
from .results import ExtractionDiagnostics, MappingStatistics
from .schema import SchemaDefinition
from .source_record import SourceRecord


class CatalogSummary(CatalogModel):
    """Summary statistics over the full record set."""

    data_types: list[str] = Field(default_factory=list)
    record_count: int = 0
    field_count: int = 0
    sample_size: int = 0


class CatalogMeta(CatalogModel):
    """Truncation information; always present."""

    truncated: bool = False
    returned_records: int = 0


class MappingMetadata(CatalogModel):
    """Present on catalogs assembled from mapped records."""

    source: str = "field_mapped"
    mapped_fields: int = 0
    total_source_fields: int = 0
    unmapped_fields: list[str] = Field(default_factory=list)
    validation_errors: int = 0

    @classmethod
    def from_statistics(cls, stats: MappingStatistics, error_count: int) -> "MappingMetadata":
        return cls(
            mapped_fields=stats.mapped_fields,
            total_source_fields=stats.total_source_fields,
            unmapped_fields=list(stats.unmapped_fields),
            validation_errors=error_count,
        )


class UnifiedDataCatalog(CatalogModel):
    """
    Normalized, schema-annotated output of transforming one data source.

    The JSON export (camelCase, 2-space indent) is the interchange format
    consumed by previews and query tooling.

    Attributes:
        catalog_id: catalog_{source_id}_{epoch_ms}
        source_id: Source the catalog was built from
        source_name: Source display name
        created_at: Assembly time
        total_records: Full, untruncated record count
        data_schema: Schema over the full record set (serialized as "schema")
        records: Records, possibly truncated to max_records
        summary: Summary statistics
        meta: Truncation information
        metadata: Mapping statistics for mapped catalogs
        diagnostics: Extraction problems recovered from
    """

    catalog_id: str
    source_id: str
    source_name: str = ""
    created_at: datetime = Field(default_factory=utc_now)
    total_records: int = Field(..., ge=0)
    data_schema: SchemaDefinition = Field(..., alias="schema")
    records: list[SourceRecord] = Field(default_factory=list)
    summary: CatalogSummary = Field(default_factory=CatalogSummary)
    meta: CatalogMeta = Field(default_factory=CatalogMeta)
    metadata: MappingMetadata | None = None
    diagnostics: ExtractionDiagnostics = Field(default_factory=ExtractionDiagnostics)

    def to_json(self, indent: int = 2) -> str:
        """Export as human-readable JSON."""
        return json.dumps(self.to_wire(), indent=indent)
