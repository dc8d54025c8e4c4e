"""
CSV extractor: header row to record keys, with opportunistic value typing.
"""

import csv
import re
from datetime import datetime, timezone
from typing import Any

from catalog_pipeline.core.models import ExtractionDiagnostics, FileRef
from catalog_pipeline.observability.logger import get_logger
from catalog_pipeline.observability.metrics import increment_counter, skipped_rows_total

from .base import ExtractionResult, FileExtractor

logger = get_logger(__name__)

INTEGER_PATTERN = re.compile(r"^-?\d+$")
DECIMAL_PATTERN = re.compile(r"^-?\d+\.\d+$")
DATE_PREFIX_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}")


def parse_csv_line(line: str) -> list[str]:
    """Split one CSV line, honoring double-quoted commas; values are trimmed."""
    row = next(csv.reader([line], skipinitialspace=True), [])
    return [value.strip() for value in row]


def to_iso_timestamp(value: str) -> str | None:
    """
    Normalize a YYYY-MM-DD-prefixed string to YYYY-MM-DDTHH:MM:SS.mmmZ.

    Values without an offset are taken as UTC. Returns None if the value
    does not parse as a date.
    """
    text = value.strip()
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    else:
        parsed = parsed.astimezone(timezone.utc)
    return parsed.strftime("%Y-%m-%dT%H:%M:%S.") + f"{parsed.microsecond // 1000:03d}Z"


def parse_csv_value(value: str) -> Any:
    """
    Type one CSV value.

    - "" -> None
    - integers -> int, decimals -> float
    - true/false (any case) -> bool
    - YYYY-MM-DD... that parses -> ISO-8601 UTC timestamp string
    - anything else -> the string
    """
    if value == "":
        return None
    if INTEGER_PATTERN.match(value):
        return int(value)
    if DECIMAL_PATTERN.match(value):
        return float(value)

    lowered = value.lower()
    if lowered == "true":
        return True
    if lowered == "false":
        return False

    if DATE_PREFIX_PATTERN.match(value):
        timestamp = to_iso_timestamp(value)
        if timestamp is not None:
            return timestamp

    return value


class CSVExtractor(FileExtractor):
    """
    Turns CSV text into one record per data row.

    The first non-blank line is the header. Rows whose value count differs
    from the header are skipped and counted in the diagnostics.
    """

    format_name = "csv"

    def extract(self, file: FileRef, start_index: int = 0) -> ExtractionResult:
        lines = [line.rstrip("\r") for line in (file.content or "").split("\n")]
        lines = [line for line in lines if line.strip()]
        diagnostics = ExtractionDiagnostics()
        if not lines:
            return ExtractionResult(diagnostics=diagnostics)

        headers = parse_csv_line(lines[0])
        records = []

        for line_number, line in enumerate(lines[1:], start=2):
            values = parse_csv_line(line)
            if len(values) != len(headers):
                diagnostics.skipped_rows += 1
                logger.warning(
                    f"Row {line_number} of {file.name} has {len(values)} values but "
                    f"{len(headers)} headers; skipping",
                    extra={"source_id": self.source.id, "file_name": file.name},
                )
                continue

            index = start_index + len(records)
            records.append(
                self.build_record(
                    record_id=self.record_id(file, f"row_{index}"),
                    record_index=index,
                    data={header: parse_csv_value(value) for header, value in zip(headers, values)},
                    original_format="csv",
                    method="csv_header_mapping",
                    file=file,
                )
            )

        if diagnostics.skipped_rows:
            increment_counter(skipped_rows_total, diagnostics.skipped_rows)
            diagnostics.warnings.append(
                f"{file.name}: skipped {diagnostics.skipped_rows} row(s) with a column count "
                f"different from the header"
            )

        logger.debug(
            f"CSV extraction complete: {len(records)} records from {file.name}",
            extra={"source_id": self.source.id},
        )
        return ExtractionResult(records, diagnostics)
