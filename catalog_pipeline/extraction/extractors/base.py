"""
Base classes for record extractors.

An extractor turns one file (or one source's materialized rows) into
SourceRecords. It assigns record indices starting at start_index so the
caller can keep indices dense across all files of a source, and it never
mutates its input.
"""

from abc import ABC, abstractmethod
from typing import Any

from catalog_pipeline.core.models import (
    DataSource,
    ExtractionDiagnostics,
    FileInfo,
    FileRef,
    ProcessingInfo,
    RecordMetadata,
    SourceRecord,
)


class ExtractionResult:
    """Records produced by one extraction plus the problems recovered from."""

    def __init__(
        self,
        records: list[SourceRecord] | None = None,
        diagnostics: ExtractionDiagnostics | None = None,
    ):
        self.records = records or []
        self.diagnostics = diagnostics or ExtractionDiagnostics()

    def __len__(self) -> int:
        return len(self.records)


class RecordExtractor(ABC):
    """
    Shared record construction for all extractors.

    Attributes:
        source: The data source being extracted
    """

    def __init__(self, source: DataSource):
        self.source = source

    def build_record(
        self,
        record_id: str,
        record_index: int,
        data: dict[str, Any],
        original_format: str,
        method: str,
        confidence: float = 1.0,
        warnings: list[str] | None = None,
        file: FileRef | None = None,
        source_type: str | None = None,
    ) -> SourceRecord:
        """Build a SourceRecord owned by this extractor's source."""
        file_info = FileInfo(name=file.name, size=file.size, type=file.type) if file else None
        return SourceRecord(
            id=record_id,
            source_id=self.source.id,
            source_name=self.source.name,
            source_type=source_type or self.source.type,
            record_index=record_index,
            data=data,
            metadata=RecordMetadata(
                original_format=original_format,
                file_info=file_info,
                processing_info=ProcessingInfo(
                    method=method,
                    confidence=confidence,
                    warnings=warnings or [],
                ),
            ),
        )


class FileExtractor(RecordExtractor):
    """Extracts records from one attached file."""

    format_name: str = ""

    def record_id(self, file: FileRef, suffix: str) -> str:
        return f"{self.source.id}_{file.name}_{suffix}"

    @abstractmethod
    def extract(self, file: FileRef, start_index: int = 0) -> ExtractionResult:
        """
        Extract records from a file with non-empty content.

        Args:
            file: File reference
            start_index: record_index of the first produced record

        Returns:
            ExtractionResult; parse problems are reported in its diagnostics
        """


class SourceExtractor(RecordExtractor):
    """Extracts records from a source's configuration rather than a file."""

    @abstractmethod
    def extract(self, start_index: int = 0) -> ExtractionResult:
        """Extract all records of the source."""

    def metadata_data(self, kind_key: str, kind: str) -> dict[str, Any]:
        """Data for a metadata-only record when the source carries no rows."""
        configuration = self.source.configuration.model_dump(
            mode="json", exclude={"data"}, exclude_none=True
        )
        for file in configuration.get("files", []):
            file.pop("content", None)
        return {
            kind_key: kind,
            "configuration": configuration,
            "metadata": self.source.metadata,
            "record_count": self.source.record_count or 0,
        }


def as_record_data(item: Any) -> dict[str, Any]:
    """Objects are records as-is; any other JSON value is wrapped under "value"."""
    if isinstance(item, dict):
        return dict(item)
    return {"value": item}
