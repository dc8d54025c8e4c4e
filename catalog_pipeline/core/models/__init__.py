"""
Core data models for the catalog transformation pipeline.

All models use Pydantic for runtime validation and type safety.
"""

from .base import CatalogModel, utc_now
from .catalog_field import (
    FIELD_NAME_PATTERN,
    CatalogCategory,
    CatalogDataType,
    CatalogField,
    ValidationRules,
)
from .data_source import DataSource, FileRef, SourceConfiguration
from .field_mapping import TRANSFORMATION_TYPES, FieldMapping, TransformationRule
from .results import (
    CatalogImportResult,
    ExtractionDiagnostics,
    FieldValidationResult,
    MappingStatistics,
    MappingSuggestion,
    PayloadValidationResult,
    RecordValidationError,
    SuggestedMapping,
    TransformationResult,
)
from .schema import SchemaDefinition, SchemaField
from .source_record import FileInfo, ProcessingInfo, RecordMetadata, SourceRecord
from .unified_catalog import CatalogMeta, CatalogSummary, MappingMetadata, UnifiedDataCatalog

__all__ = [
    "CatalogModel",
    "utc_now",
    "FIELD_NAME_PATTERN",
    "CatalogCategory",
    "CatalogDataType",
    "CatalogField",
    "ValidationRules",
    "DataSource",
    "FileRef",
    "SourceConfiguration",
    "TRANSFORMATION_TYPES",
    "FieldMapping",
    "TransformationRule",
    "CatalogImportResult",
    "ExtractionDiagnostics",
    "FieldValidationResult",
    "MappingStatistics",
    "MappingSuggestion",
    "PayloadValidationResult",
    "RecordValidationError",
    "SuggestedMapping",
    "TransformationResult",
    "SchemaDefinition",
    "SchemaField",
    "FileInfo",
    "ProcessingInfo",
    "RecordMetadata",
    "SourceRecord",
    "CatalogMeta",
    "CatalogSummary",
    "MappingMetadata",
    "UnifiedDataCatalog",
]
