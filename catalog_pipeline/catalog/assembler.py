"""
Unified catalog assembler.

Packages records, the inferred schema and summary statistics into one
exportable UnifiedDataCatalog. The schema and totals always describe the
full record set; max_records only limits how many records are included.
"""

import time
from collections.abc import Sequence

from catalog_pipeline.core.models import (
    CatalogMeta,
    CatalogSummary,
    ExtractionDiagnostics,
    MappingMetadata,
    SourceRecord,
    TransformationResult,
    UnifiedDataCatalog,
)
from catalog_pipeline.core.schema import SchemaAnalyzer
from catalog_pipeline.observability.logger import get_logger

logger = get_logger(__name__)


def new_catalog_id(source_id: str) -> str:
    """catalog_{source_id}_{epoch milliseconds}"""
    return f"catalog_{source_id}_{time.time_ns() // 1_000_000}"


class CatalogAssembler:
    """Builds UnifiedDataCatalog objects from record sets."""

    def __init__(self, analyzer: SchemaAnalyzer | None = None):
        self.analyzer = analyzer or SchemaAnalyzer()

    def assemble(
        self,
        source_id: str,
        source_name: str,
        records: Sequence[SourceRecord],
        max_records: int = 0,
        diagnostics: ExtractionDiagnostics | None = None,
        metadata: MappingMetadata | None = None,
    ) -> UnifiedDataCatalog:
        """
        Assemble a catalog.

        Args:
            source_id: Source the records belong to
            source_name: Source display name
            records: Full record set
            max_records: Records to include; 0 means all
            diagnostics: Extraction problems to attach
            metadata: Mapping statistics for mapped catalogs

        Returns:
            UnifiedDataCatalog
        """
        if max_records < 0:
            raise ValueError(f"max_records must be >= 0, got {max_records}")

        schema = self.analyzer.analyze(records)
        truncated = 0 < max_records < len(records)
        returned = list(records[:max_records]) if truncated else list(records)

        data_types = list(dict.fromkeys(r.metadata.original_format for r in records))

        catalog = UnifiedDataCatalog(
            catalog_id=new_catalog_id(source_id),
            source_id=source_id,
            source_name=source_name,
            total_records=len(records),
            data_schema=schema,
            records=returned,
            summary=CatalogSummary(
                data_types=data_types,
                record_count=len(records),
                field_count=len(schema.fields),
                sample_size=len(returned),
            ),
            meta=CatalogMeta(truncated=truncated, returned_records=len(returned)),
            metadata=metadata,
            diagnostics=diagnostics or ExtractionDiagnostics(),
        )

        logger.debug(
            "Catalog assembled",
            extra={
                "catalog_id": catalog.catalog_id,
                "total_records": catalog.total_records,
                "returned_records": len(returned),
                "field_count": len(schema.fields),
                "truncated": truncated,
            },
        )
        return catalog

    def assemble_mapped(
        self,
        source_name: str,
        result: TransformationResult,
        max_records: int = 0,
    ) -> UnifiedDataCatalog:
        """
        Assemble a catalog from mapped records.

        Args:
            source_name: Source display name
            result: Output of the mapping applier
            max_records: Records to include; 0 means all

        Returns:
            UnifiedDataCatalog with mapping metadata attached
        """
        return self.assemble(
            source_id=result.source_id,
            source_name=source_name,
            records=result.records,
            max_records=max_records,
            metadata=MappingMetadata.from_statistics(
                result.statistics, len(result.validation_errors)
            ),
        )


def assemble_catalog(
    source_id: str,
    source_name: str,
    records: Sequence[SourceRecord],
    max_records: int = 0,
) -> UnifiedDataCatalog:
    """Assemble a catalog with a default CatalogAssembler."""
    return CatalogAssembler().assemble(source_id, source_name, records, max_records)
