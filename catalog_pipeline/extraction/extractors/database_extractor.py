"""
Database extractor: materialized row-sets imported from a database.
"""

from catalog_pipeline.observability.logger import get_logger

from .base import ExtractionResult, SourceExtractor, as_record_data

logger = get_logger(__name__)

NO_DATA_WARNING = "No data available - showing metadata only"


class DatabaseExtractor(SourceExtractor):
    """
    Each row in configuration.data becomes one record as-is.

    metadata.relational_import (relationalImport on the wire) marks rows
    joined across related tables; those records carry the
    database_relational format. Without rows, a
    single metadata-only record is emitted with a warning.
    """

    def extract(self, start_index: int = 0) -> ExtractionResult:
        rows = self.source.configuration.data
        if not rows:
            logger.warning(NO_DATA_WARNING, extra={"source_id": self.source.id})
            record = self.build_record(
                record_id=f"{self.source.id}_database_metadata",
                record_index=start_index,
                data=self.metadata_data("database_type", "database"),
                original_format="database",
                method="metadata_extraction",
                confidence=0.7,
                warnings=[NO_DATA_WARNING],
            )
            return ExtractionResult([record])

        relational = self._metadata_value("relational_import", "relationalImport") is True
        warnings = []
        if relational:
            primary_table = self._metadata_value("primary_table", "primaryTable") or "unknown"
            warnings.append(
                f"This is a relational import from {primary_table} with nested data from related tables"
            )

        records = []
        for offset, row in enumerate(rows):
            index = start_index + offset
            records.append(
                self.build_record(
                    record_id=f"{self.source.id}_record_{index}",
                    record_index=index,
                    data=as_record_data(row),
                    original_format="database_relational" if relational else "database",
                    method="relational_import" if relational else "database_import",
                    warnings=warnings,
                    source_type="database",
                )
            )
        return ExtractionResult(records)

    def _metadata_value(self, key: str, wire_key: str):
        # Descriptors from the web application spell metadata keys in camelCase
        metadata = self.source.metadata
        return metadata[key] if key in metadata else metadata.get(wire_key)
