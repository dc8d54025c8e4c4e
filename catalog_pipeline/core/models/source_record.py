"""
SourceRecord model representing one logical row or item extracted from a data source.
"""

from datetime import datetime

from pydantic import ConfigDict, Field, JsonValue

from .base import CatalogModel, utc_now


class FileInfo(CatalogModel):
    """File the record was extracted from."""

    model_config = ConfigDict(frozen=True)

    name: str
    size: int | None = None
    type: str | None = None


class ProcessingInfo(CatalogModel):
    """How the record was produced and how much the extraction is trusted."""

    model_config = ConfigDict(frozen=True)

    method: str
    confidence: float = Field(default=1.0, ge=0.0, le=1.0)
    warnings: list[str] = Field(default_factory=list)


class RecordMetadata(CatalogModel):
    """Extraction metadata attached to every SourceRecord."""

    model_config = ConfigDict(frozen=True)

    original_format: str
    extracted_at: datetime = Field(default_factory=utc_now)
    file_info: FileInfo | None = None
    processing_info: ProcessingInfo


class SourceRecord(CatalogModel):
    """
    One logical row or item extracted from a data source.

    Records are immutable: field mapping produces a new record whose data is
    keyed by catalog field names, with the original data attached as
    source_data for traceability.

    Attributes:
        id: Source-scoped unique identifier
        source_id: Owning data source
        source_name: Human-readable data source name
        source_type: Data source type (filesystem, database, api, ...)
        record_index: 0-based position, dense and increasing per source
        data: Ordered mapping of field name to JSON value
        metadata: Extraction metadata (format, method, confidence, warnings)
        source_data: Pre-mapping data, set only on mapped records
    """

    model_config = ConfigDict(
        frozen=True,
        json_schema_extra={
            "example": {
                "id": "src_1_customers.csv_row_0",
                "sourceId": "src_1",
                "sourceName": "Customers",
                "sourceType": "filesystem",
                "recordIndex": 0,
                "data": {
                    "customer_name": "Ada Lovelace",
                    "customer_email": "ada@example.com",
                },
                "metadata": {
                    "originalFormat": "csv",
                    "extractedAt": "2025-01-15T10:00:00Z",
                    "processingInfo": {"method": "csv_header_mapping", "confidence": 1.0},
                },
            }
        },
    )

    id: str = Field(..., min_length=1)
    source_id: str
    source_name: str = ""
    source_type: str = ""
    record_index: int = Field(..., ge=0)
    data: dict[str, JsonValue]
    metadata: RecordMetadata
    source_data: dict[str, JsonValue] | None = None

    @property
    def warnings(self) -> list[str]:
        return self.metadata.processing_info.warnings
