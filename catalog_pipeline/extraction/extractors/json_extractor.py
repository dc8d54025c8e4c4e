"""
JSON extractor: structure-preserving passthrough.
"""

import json

from catalog_pipeline.core.models import ExtractionDiagnostics, FileRef
from catalog_pipeline.observability.logger import get_logger
from catalog_pipeline.observability.metrics import increment_counter, parse_errors_total

from .base import ExtractionResult, FileExtractor, as_record_data

logger = get_logger(__name__)

# Keys checked, in order, for a wrapped record array
ENVELOPE_KEYS = ("records", "data", "items")


class JSONExtractor(FileExtractor):
    """
    Turns JSON text into records without flattening.

    - array: one record per element
    - object with a list under records, data or items: one record per element
    - any other object: a single record
    Malformed JSON produces no records and a parse error in the diagnostics.
    """

    format_name = "json"

    def extract(self, file: FileRef, start_index: int = 0) -> ExtractionResult:
        diagnostics = ExtractionDiagnostics()
        try:
            parsed = json.loads(file.content or "")
        except json.JSONDecodeError as e:
            message = f"{file.name}: invalid JSON at line {e.lineno} column {e.colno}: {e.msg}"
            logger.error(message, extra={"source_id": self.source.id, "file_name": file.name})
            increment_counter(parse_errors_total, format="json")
            diagnostics.parse_errors.append(message)
            return ExtractionResult(diagnostics=diagnostics)

        if isinstance(parsed, list):
            items = parsed
        elif isinstance(parsed, dict):
            envelope = next(
                (parsed[key] for key in ENVELOPE_KEYS if isinstance(parsed.get(key), list)),
                None,
            )
            items = envelope if envelope is not None else [parsed]
        else:
            message = f"{file.name}: top-level JSON value is a {type(parsed).__name__}, not an object or array"
            logger.warning(message, extra={"source_id": self.source.id})
            diagnostics.warnings.append(message)
            return ExtractionResult(diagnostics=diagnostics)

        records = []
        for offset, item in enumerate(items):
            index = start_index + offset
            records.append(
                self.build_record(
                    record_id=self.record_id(file, f"item_{index}"),
                    record_index=index,
                    data=as_record_data(item),
                    original_format="json",
                    method="json_passthrough",
                    file=file,
                )
            )

        logger.debug(
            f"JSON extraction complete: {len(records)} records from {file.name}",
            extra={"source_id": self.source.id},
        )
        return ExtractionResult(records, diagnostics)
