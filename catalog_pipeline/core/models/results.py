"""
Result models returned by validation, suggestion and mapping operations.
"""

from pydantic import Field, JsonValue

from .base import CatalogModel
from .source_record import SourceRecord


class FieldValidationResult(CatalogModel):
    """Outcome of validating one value against one catalog field."""

    is_valid: bool
    errors: list[str] = Field(default_factory=list)


class PayloadValidationResult(CatalogModel):
    """Outcome of a structural check on a transformed payload."""

    is_valid: bool
    errors: list[str] = Field(default_factory=list)


class SuggestedMapping(CatalogModel):
    """One candidate catalog field for a source field."""

    catalog_field_id: str
    catalog_field_name: str
    confidence: float = Field(..., ge=0.0, le=1.0)
    reason: str


class MappingSuggestion(CatalogModel):
    """Candidates for one source field, best first."""

    source_field_name: str
    suggested_mappings: list[SuggestedMapping] = Field(default_factory=list)

    @property
    def best(self) -> SuggestedMapping | None:
        return self.suggested_mappings[0] if self.suggested_mappings else None


class RecordValidationError(CatalogModel):
    """Validation failures for one mapped field of one record."""

    record_index: int
    field: str
    source_field: str | None = None
    value: JsonValue = None
    errors: list[str]


class MappingStatistics(CatalogModel):
    """Aggregate counts for one mapping application."""

    total_records: int = 0
    successful_records: int = 0
    failed_records: int = 0
    mapped_fields: int = 0
    total_source_fields: int = 0
    unmapped_fields: list[str] = Field(default_factory=list)


class TransformationResult(CatalogModel):
    """
    Output of applying a mapping set to a source's records.

    Attributes:
        source_id: Source the records came from
        fields: Output field names in first-seen record key order
        records: New records keyed by catalog field names
        validation_errors: Per-record, per-field validation failures
        statistics: Aggregate counts
        warnings: Transformation-rule degradations and key collisions
    """

    source_id: str
    fields: list[str] = Field(default_factory=list)
    records: list[SourceRecord] = Field(default_factory=list)
    validation_errors: list[RecordValidationError] = Field(default_factory=list)
    statistics: MappingStatistics = Field(default_factory=MappingStatistics)
    warnings: list[str] = Field(default_factory=list)


class ExtractionDiagnostics(CatalogModel):
    """Problems recovered from during extraction of one source."""

    skipped_rows: int = 0
    parse_errors: list[str] = Field(default_factory=list)
    skipped_files: list[str] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)

    def merge(self, other: "ExtractionDiagnostics") -> None:
        self.skipped_rows += other.skipped_rows
        self.parse_errors.extend(other.parse_errors)
        self.skipped_files.extend(other.skipped_files)
        self.warnings.extend(other.warnings)


class CatalogImportResult(CatalogModel):
    """Outcome of importing a catalog export document."""

    success: bool
    message: str
    imported_count: int = 0
    errors: list[str] = Field(default_factory=list)
