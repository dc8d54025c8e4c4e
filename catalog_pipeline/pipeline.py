"""
Catalog pipeline orchestration.

Coordinates the flow: detect → extract → analyze/suggest → apply mappings → assemble
"""

from collections.abc import Iterable, Sequence
from typing import Any

from catalog_pipeline.catalog import CatalogAssembler
from catalog_pipeline.config import PipelineSettings
from catalog_pipeline.core.exceptions import CatalogError
from catalog_pipeline.core.mapping import MappingApplier, MappingSuggester
from catalog_pipeline.core.models import (
    CatalogField,
    DataSource,
    FieldMapping,
    FieldValidationResult,
    MappingSuggestion,
    TransformationResult,
    UnifiedDataCatalog,
)
from catalog_pipeline.core.schema import source_field_names
from catalog_pipeline.core.validators import CatalogValidator
from catalog_pipeline.extraction import DataTransformer, ExtractionResult
from catalog_pipeline.observability.logger import get_logger, log_operation
from catalog_pipeline.observability.metrics import track_duration, transformation_duration_seconds
from catalog_pipeline.services import CatalogService
from catalog_pipeline.storage import CatalogRepository

logger = get_logger(__name__)


class CatalogPipeline:
    """
    Orchestrates catalog transformation for data sources.

    Flow:
    1. Detect the format of each file (or route database/api sources)
    2. Extract SourceRecords
    3. Infer the schema and suggest catalog mappings
    4. Apply confirmed mappings, validating every mapped value
    5. Assemble a UnifiedDataCatalog
    """

    def __init__(
        self,
        repository: CatalogRepository,
        settings: PipelineSettings | None = None,
    ):
        """
        Initialize the pipeline.

        Args:
            repository: Store holding catalog fields, mappings and data sources
            settings: Pipeline settings (defaults to PipelineSettings())
        """
        self.settings = settings or PipelineSettings()
        self.repository = repository

        self.transformer = DataTransformer(max_content_chars=self.settings.max_content_chars)
        self.assembler = CatalogAssembler()
        self.suggester = MappingSuggester.from_settings(self.settings)
        self.catalog_service = CatalogService(repository, self.settings, self.suggester)

        logger.info(
            "Catalog pipeline initialized",
            extra={
                "default_max_records": self.settings.default_max_records,
                "max_content_chars": self.settings.max_content_chars,
            },
        )

    def _resolve_source(self, source: DataSource | str) -> DataSource:
        if isinstance(source, DataSource):
            return source
        return self.catalog_service.get_source(source)

    def extract(self, source: DataSource | str) -> ExtractionResult:
        """Extract every record of a source."""
        data_source = self._resolve_source(source)
        with track_duration(transformation_duration_seconds, source_type=data_source.type):
            return self.transformer.extract(data_source)

    def transform_data_source(
        self, source: DataSource | str, max_records: int | None = None
    ) -> UnifiedDataCatalog:
        """
        Transform a data source into a unified catalog.

        Args:
            source: Data source or the id of a registered one
            max_records: Records to include (0 = all, None = settings default)

        Returns:
            UnifiedDataCatalog whose schema and totals cover every record
        """
        data_source = self._resolve_source(source)
        limit = self.settings.default_max_records if max_records is None else max_records

        with log_operation("Transforming data source", logger=logger, source_id=data_source.id):
            extraction = self.extract(data_source)
            return self.assembler.assemble(
                source_id=data_source.id,
                source_name=data_source.name,
                records=extraction.records,
                max_records=limit,
                diagnostics=extraction.diagnostics,
            )

    def load_source_fields(self, source: DataSource | str) -> list[str]:
        """
        Field names of a source's records, in first-seen order.

        Args:
            source: Data source or the id of a registered one

        Returns:
            Ordered distinct field names
        """
        return source_field_names(self.extract(source).records)

    def suggest_mappings(
        self,
        source_fields: Iterable[str],
        catalog_fields: Sequence[CatalogField] | None = None,
    ) -> list[MappingSuggestion]:
        """
        Suggest catalog fields for source fields.

        Args:
            source_fields: Source field names
            catalog_fields: Candidate catalog fields (defaults to the stored catalog)

        Returns:
            One MappingSuggestion per source field with candidates
        """
        fields = self.repository.list_fields() if catalog_fields is None else catalog_fields
        return self.suggester.suggest(source_fields, fields)

    def auto_map_fields(
        self, source: DataSource | str, min_confidence: float | None = None
    ) -> list[FieldMapping]:
        """
        Create mappings for a source's fields whose top suggestion is confident.

        Args:
            source: Data source or the id of a registered one
            min_confidence: Threshold (defaults to settings.auto_map_min_confidence)

        Returns:
            Mappings created
        """
        data_source = self._resolve_source(source)
        return self.catalog_service.auto_map_fields(
            data_source.id, self.load_source_fields(data_source), min_confidence
        )

    def apply_mappings(
        self,
        source: DataSource | str,
        mappings: Sequence[FieldMapping] | None = None,
    ) -> TransformationResult:
        """
        Apply field mappings to every record of a source.

        Args:
            source: Data source or the id of a registered one
            mappings: Mappings to apply (defaults to the stored mappings of the source)

        Returns:
            TransformationResult with fields, records, validation errors and statistics

        Raises:
            MappingError: If a mapping is invalid
        """
        data_source = self._resolve_source(source)
        if mappings is None:
            mappings = self.repository.list_mappings(source_id=data_source.id)
        if not mappings:
            raise CatalogError(f"No field mappings defined for data source '{data_source.id}'")

        extraction = self.extract(data_source)
        applier = MappingApplier(self.repository.list_fields())
        return applier.apply(data_source.id, extraction.records, mappings)

    def transform_mapped_source(
        self,
        source: DataSource | str,
        mappings: Sequence[FieldMapping] | None = None,
        max_records: int | None = None,
    ) -> UnifiedDataCatalog:
        """
        Apply mappings and assemble the mapped records into a catalog.

        Returns:
            UnifiedDataCatalog with mapping metadata attached
        """
        data_source = self._resolve_source(source)
        limit = self.settings.default_max_records if max_records is None else max_records
        result = self.apply_mappings(data_source, mappings)
        return self.assembler.assemble_mapped(data_source.name, result, max_records=limit)

    def validate_field_value(self, value: Any, field: CatalogField | str) -> FieldValidationResult:
        """
        Validate one value against a catalog field.

        Args:
            value: Value to check
            field: Catalog field or its id

        Returns:
            FieldValidationResult
        """
        if isinstance(field, str):
            field = self.catalog_service.get_field(field)
        return CatalogValidator(field).validate(value)


def transform_data_source(source: DataSource, max_records: int = 0) -> UnifiedDataCatalog:
    """
    Transform a data source without a catalog store.

    Args:
        source: Data source descriptor
        max_records: Records to include (0 = all)

    Returns:
        UnifiedDataCatalog
    """
    extraction = DataTransformer().extract(source)
    return CatalogAssembler().assemble(
        source_id=source.id,
        source_name=source.name,
        records=extraction.records,
        max_records=max_records,
        diagnostics=extraction.diagnostics,
    )


def suggest_mappings(
    source_fields: Iterable[str],
    catalog_fields: Sequence[CatalogField],
    settings: PipelineSettings | None = None,
) -> list[MappingSuggestion]:
    """Suggest catalog fields for source fields with the standard rule chain."""
    return MappingSuggester.from_settings(settings or PipelineSettings()).suggest(
        source_fields, catalog_fields
    )
