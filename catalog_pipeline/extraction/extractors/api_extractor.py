"""
API extractor: payload rows stored in configuration or in an attached JSON file.
"""

import json

from catalog_pipeline.core.models import ExtractionDiagnostics
from catalog_pipeline.observability.logger import get_logger
from catalog_pipeline.observability.metrics import increment_counter, parse_errors_total

from .base import ExtractionResult, SourceExtractor, as_record_data

logger = get_logger(__name__)

NO_DATA_WARNING = "No API data found in configuration"


class APIExtractor(SourceExtractor):
    """
    Looks for rows in configuration.data first, then in the first attached
    file with content (a JSON array or a single object). Without rows, a
    single metadata-only record is emitted with a warning.
    """

    def _rows_from_files(self, diagnostics: ExtractionDiagnostics) -> list:
        files = self.source.configuration.files or []
        payload_file = next((f for f in files if f.content), None)
        if payload_file is None:
            return []
        try:
            parsed = json.loads(payload_file.content)
        except json.JSONDecodeError as e:
            message = f"{payload_file.name}: invalid API JSON payload: {e.msg}"
            logger.warning(message, extra={"source_id": self.source.id})
            increment_counter(parse_errors_total, format="api")
            diagnostics.parse_errors.append(message)
            return []
        return parsed if isinstance(parsed, list) else [parsed]

    def extract(self, start_index: int = 0) -> ExtractionResult:
        diagnostics = ExtractionDiagnostics()
        rows = self.source.configuration.data
        origin = "configuration.data"
        if not rows:
            rows = self._rows_from_files(diagnostics)
            origin = "configuration.files"

        logger.info(
            "API data extracted",
            extra={"source_id": self.source.id, "records_found": len(rows), "origin": origin},
        )

        if not rows:
            record = self.build_record(
                record_id=f"{self.source.id}_api_metadata",
                record_index=start_index,
                data=self.metadata_data("api_type", "api"),
                original_format="api",
                method="metadata_extraction",
                confidence=0.7,
                warnings=[NO_DATA_WARNING],
            )
            return ExtractionResult([record], diagnostics)

        records = []
        for offset, item in enumerate(rows):
            index = start_index + offset
            records.append(
                self.build_record(
                    record_id=f"{self.source.id}_api_record_{index}",
                    record_index=index,
                    data=as_record_data(item),
                    original_format="api",
                    method="api_data_extraction",
                    source_type="api",
                )
            )
        return ExtractionResult(records, diagnostics)
