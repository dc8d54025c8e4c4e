"""
Data transformer: extracts every record of one data source.

Routes the source through the format detector, runs the matching extractor
for each file (or for the whole source, for database and api sources) and
keeps record indices dense across files. Problems with a single file are
recorded in the diagnostics and never abort the source.
"""

from catalog_pipeline.core.models import DataSource, ExtractionDiagnostics, FileRef
from catalog_pipeline.observability.logger import get_logger
from catalog_pipeline.observability.metrics import record_extraction

from .detector import FormatDetector
from .extractors import (
    APIExtractor,
    CSVExtractor,
    DatabaseExtractor,
    DocumentExtractor,
    ExtractionResult,
    FileExtractor,
    JSONExtractor,
    TextExtractor,
)

logger = get_logger(__name__)

FILE_EXTRACTORS: dict[str, type[FileExtractor]] = {
    "csv": CSVExtractor,
    "json": JSONExtractor,
    "document": DocumentExtractor,
    "text": TextExtractor,
}


class DataTransformer:
    """
    Extracts SourceRecords from a DataSource.

    Attributes:
        detector: Format detector used for routing
        max_content_chars: Files longer than this are skipped (None = no ceiling)
    """

    def __init__(self, detector: FormatDetector | None = None, max_content_chars: int | None = None):
        self.detector = detector or FormatDetector()
        self.max_content_chars = max_content_chars

    def extract(self, source: DataSource) -> ExtractionResult:
        """
        Extract all records of a source.

        Args:
            source: Data source descriptor

        Returns:
            ExtractionResult with records indexed 0..n-1 and diagnostics
        """
        route = self.detector.route(source)
        if route == "database":
            result = DatabaseExtractor(source).extract()
        elif route == "api":
            result = APIExtractor(source).extract()
        else:
            result = self._extract_files(source)

        if route != "files" and result.records:
            record_extraction(
                source.type, result.records[0].metadata.original_format, len(result.records)
            )

        logger.info(
            "Data source extracted",
            extra={
                "source_id": source.id,
                "source_type": source.type,
                "record_count": len(result.records),
                "skipped_rows": result.diagnostics.skipped_rows,
                "parse_errors": len(result.diagnostics.parse_errors),
                "skipped_files": len(result.diagnostics.skipped_files),
            },
        )
        return result

    def _extract_files(self, source: DataSource) -> ExtractionResult:
        records = []
        diagnostics = ExtractionDiagnostics()
        files = source.configuration.files or []

        if not files:
            message = f"Data source '{source.id}' has no files to extract"
            logger.warning(message, extra={"source_id": source.id})
            diagnostics.warnings.append(message)

        for file in files:
            skip_reason = self._skip_reason(file)
            if skip_reason:
                logger.warning(
                    f"Skipping file {file.name} - {skip_reason}",
                    extra={"source_id": source.id, "file_name": file.name},
                )
                diagnostics.skipped_files.append(file.name)
                diagnostics.warnings.append(f"{file.name}: {skip_reason}")
                continue

            file_format = self.detector.detect(file)
            extractor = FILE_EXTRACTORS[file_format](source)
            file_result = extractor.extract(file, start_index=len(records))

            if file_result.records:
                record_extraction(
                    source.type,
                    file_result.records[0].metadata.original_format,
                    len(file_result.records),
                )
            records.extend(file_result.records)
            diagnostics.merge(file_result.diagnostics)

        return ExtractionResult(records, diagnostics)

    def _skip_reason(self, file: FileRef) -> str | None:
        if file.content is None:
            return "no content available"
        if self.max_content_chars is not None and len(file.content) > self.max_content_chars:
            return (
                f"content length {len(file.content)} exceeds the limit of "
                f"{self.max_content_chars} characters"
            )
        return None


__all__ = ["DataTransformer", "ExtractionResult", "FILE_EXTRACTORS"]
