"""
Schema inference for extracted records.

Scans every record (no sampling) and reports, per distinct key, the observed
value type, whether the key was ever null or missing, and up to three
distinct example values in first-seen order. The schema is a view over the
records passed in and is recomputed on every call.
"""

from collections.abc import Iterable, Mapping
from typing import Any

from catalog_pipeline.core.models import SchemaDefinition, SchemaField, SourceRecord
from catalog_pipeline.observability.logger import get_logger

logger = get_logger(__name__)

MIXED_TYPE = "mixed"
MAX_EXAMPLES = 3


def value_type(value: Any) -> str:
    """
    Classify a non-null value as string, number, boolean or object.

    Lists and dicts are both "object".
    """
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, int | float):
        return "number"
    if isinstance(value, str):
        return "string"
    return "object"


class _FieldStats:
    __slots__ = ("types", "examples", "null_count", "present_count")

    def __init__(self) -> None:
        self.types: list[str] = []
        self.examples: list[Any] = []
        self.null_count = 0
        self.present_count = 0

    def observe(self, value: Any) -> None:
        self.present_count += 1
        if value is None:
            self.null_count += 1
            return

        kind = value_type(value)
        if kind not in self.types:
            self.types.append(kind)

        if len(self.examples) < MAX_EXAMPLES and not _contains(self.examples, value):
            self.examples.append(value)


def _contains(examples: list[Any], value: Any) -> bool:
    # True == 1 in Python; keep boolean and numeric examples distinct
    return any(type(e) is type(value) and e == value for e in examples)


class SchemaAnalyzer:
    """
    Infers a field schema from a sequence of records.

    Field order follows first appearance across records.
    """

    def analyze(self, records: Iterable[SourceRecord | Mapping[str, Any]]) -> SchemaDefinition:
        """
        Infer the schema of a record set.

        Args:
            records: SourceRecords or plain data mappings

        Returns:
            SchemaDefinition with one SchemaField per distinct key
        """
        stats: dict[str, _FieldStats] = {}
        record_count = 0

        for record in records:
            data = record.data if isinstance(record, SourceRecord) else record
            record_count += 1
            for key, value in data.items():
                stats.setdefault(key, _FieldStats()).observe(value)

        fields = []
        for name, field_stats in stats.items():
            if not field_stats.types:
                inferred_type = None
            elif len(field_stats.types) == 1:
                inferred_type = field_stats.types[0]
            else:
                inferred_type = MIXED_TYPE

            # Missing from some record counts as nullable
            nullable = field_stats.null_count > 0 or field_stats.present_count < record_count

            fields.append(
                SchemaField(
                    name=name,
                    type=inferred_type,
                    nullable=nullable,
                    examples=field_stats.examples,
                )
            )

        logger.debug(
            "Schema analyzed",
            extra={"record_count": record_count, "field_count": len(fields)},
        )
        return SchemaDefinition(fields=fields)


def analyze_schema(records: Iterable[SourceRecord | Mapping[str, Any]]) -> SchemaDefinition:
    """Infer the schema of a record set."""
    return SchemaAnalyzer().analyze(records)


def source_field_names(records: Iterable[SourceRecord | Mapping[str, Any]]) -> list[str]:
    """
    Distinct field names across records, in first-seen order.

    Args:
        records: SourceRecords or plain data mappings

    Returns:
        Ordered list of source field names
    """
    names: dict[str, None] = {}
    for record in records:
        data = record.data if isinstance(record, SourceRecord) else record
        for key in data:
            names.setdefault(key, None)
    return list(names)
