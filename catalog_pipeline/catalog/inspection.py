"""
Inspection helpers for already-transformed payloads.

Downstream tooling receives catalog data in one of three shapes: a unified
catalog (as a model or its JSON wire form), an array of field-mapped items
({catalogData, sourceData, mappingInfo}) or a plain array of records. These
helpers detect the shape, count and sample records, check structure, and
render catalogs for export or display.
"""

from collections.abc import Mapping, Sequence
from typing import Any, Literal

from catalog_pipeline.core.models import (
    MappingMetadata,
    PayloadValidationResult,
    ProcessingInfo,
    RecordMetadata,
    SourceRecord,
    UnifiedDataCatalog,
)
from catalog_pipeline.observability.logger import get_logger

from .assembler import CatalogAssembler

logger = get_logger(__name__)

DataFormat = Literal["unified_catalog", "field_mapped_array", "raw_array", "unknown"]

FIELD_MAPPED_KEYS = ("catalogData", "sourceData", "mappingInfo")

MAPPED_SOURCE_ID = "mapped_source"
MAPPED_SOURCE_NAME = "Mapped Source"


def export_catalog_json(catalog: UnifiedDataCatalog) -> str:
    """Export a catalog as camelCase JSON with 2-space indentation."""
    return catalog.to_json(indent=2)


def generate_catalog_summary(catalog: UnifiedDataCatalog) -> str:
    """
    Render a short human-readable summary of a catalog.

    Args:
        catalog: Catalog to describe

    Returns:
        Multi-line summary text
    """
    created = catalog.created_at.strftime("%Y-%m-%d %H:%M:%S %Z").strip()
    return (
        "Data Catalog Summary:\n"
        f"- Source: {catalog.source_name}\n"
        f"- Records: {catalog.total_records:,}\n"
        f"- Fields: {len(catalog.data_schema.fields)}\n"
        f"- Data Types: {', '.join(catalog.summary.data_types)}\n"
        f"- Created: {created}"
    )


def _is_catalog_mapping(data: Any) -> bool:
    return isinstance(data, Mapping) and "totalRecords" in data and "records" in data


def detect_data_format(data: Any) -> DataFormat:
    """
    Detect the shape of a transformed payload.

    A mapping carrying both totalRecords and records is a unified catalog.
    A list whose first item carries any field-mapped key is a field-mapped
    array; any other list (including an empty one) is a raw array.
    """
    if isinstance(data, UnifiedDataCatalog) or _is_catalog_mapping(data):
        return "unified_catalog"

    if isinstance(data, Sequence) and not isinstance(data, str | bytes):
        if not data:
            return "raw_array"
        first = data[0]
        if isinstance(first, Mapping) and any(k in first for k in FIELD_MAPPED_KEYS):
            return "field_mapped_array"
        return "raw_array"

    return "unknown"


def get_record_count(data: Any) -> int:
    """Return the number of records a payload describes, 0 when unknown."""
    data_format = detect_data_format(data)

    if data_format == "unified_catalog":
        if isinstance(data, UnifiedDataCatalog):
            return data.total_records
        return int(data.get("totalRecords") or 0)

    if data_format in ("field_mapped_array", "raw_array"):
        return len(data)

    return 0


def extract_sample_records(data: Any, count: int) -> list[dict[str, Any]]:
    """
    Return the data of the first count records of a payload.

    Args:
        data: Payload in any supported shape
        count: Number of records wanted; non-positive yields nothing

    Returns:
        List of record data dicts
    """
    if count <= 0:
        return []

    data_format = detect_data_format(data)

    if data_format == "unified_catalog":
        if isinstance(data, UnifiedDataCatalog):
            return [dict(r.data) for r in data.records[:count]]
        return [r.get("data", {}) for r in list(data.get("records") or [])[:count]]

    if data_format == "field_mapped_array":
        return [item.get("catalogData", {}) for item in list(data)[:count]]

    if data_format == "raw_array":
        return list(data)[:count]

    return []


def validate_transformed_data(data: Any) -> PayloadValidationResult:
    """
    Check that a payload has the structure its detected shape requires.

    Mappings that carry any unified catalog property must carry all of
    totalRecords, records and schema. Every item of a field-mapped array
    must be an object with catalogData, sourceData and mappingInfo.

    Args:
        data: Payload to check

    Returns:
        PayloadValidationResult listing every structural problem found
    """
    errors: list[str] = []

    if data is None:
        return PayloadValidationResult(is_valid=False, errors=["Data is null or undefined"])

    if isinstance(data, UnifiedDataCatalog):
        return PayloadValidationResult(is_valid=True)

    if not isinstance(data, Mapping | Sequence) or isinstance(data, str | bytes):
        return PayloadValidationResult(is_valid=False, errors=["Data must be an object or array"])

    if isinstance(data, Mapping):
        catalog_keys = ("totalRecords", "records", "schema")
        if any(k in data for k in catalog_keys):
            for key in catalog_keys:
                if key not in data:
                    errors.append(f"Missing {key} property")
            return PayloadValidationResult(is_valid=not errors, errors=errors)

    data_format = detect_data_format(data)

    if data_format == "field_mapped_array":
        for i, item in enumerate(data):
            if not isinstance(item, Mapping):
                errors.append(f"Item {i} is not an object")
                continue
            for key in FIELD_MAPPED_KEYS:
                if key not in item:
                    errors.append(f"Item {i} missing {key}")
    elif data_format == "unknown":
        errors.append("Unknown data format")

    if errors:
        logger.warning(
            "Transformed data failed structural validation",
            extra={"data_format": data_format, "error_count": len(errors)},
        )

    return PayloadValidationResult(is_valid=not errors, errors=errors)


def convert_to_unified_format(items: Sequence[Mapping[str, Any]]) -> UnifiedDataCatalog:
    """
    Convert an array of field-mapped items into a unified catalog.

    Each item becomes one record whose data is the item's catalogData and
    whose source_data is its sourceData. Mapping statistics are aggregated
    across items: mapped_fields is the rounded mean, total_source_fields comes
    from the first item, unmapped fields are de-duplicated in order and
    validation errors are counted.

    Args:
        items: Field-mapped items

    Returns:
        UnifiedDataCatalog with mapping metadata attached

    Raises:
        ValueError: If items is not a list of objects
    """
    if not isinstance(items, Sequence) or isinstance(items, str | bytes):
        raise ValueError("Invalid input: expected array of field-mapped records")
    if any(not isinstance(item, Mapping) for item in items):
        raise ValueError("Invalid input: every field-mapped record must be an object")

    records = [
        SourceRecord(
            id=f"mapped_record_{index}",
            source_id=MAPPED_SOURCE_ID,
            source_name=MAPPED_SOURCE_NAME,
            source_type="mapped",
            record_index=index,
            data=dict(item.get("catalogData") or {}),
            source_data=item.get("sourceData"),
            metadata=RecordMetadata(
                original_format="field_mapped",
                processing_info=ProcessingInfo(
                    method="field_mapping_transformation", confidence=1.0
                ),
            ),
        )
        for index, item in enumerate(items)
    ]

    infos = [item.get("mappingInfo") or {} for item in items]
    mapped_fields = 0
    if infos:
        mean = sum(info.get("mappedFields", 0) for info in infos) / len(infos)
        mapped_fields = int(mean + 0.5)

    unmapped: list[str] = []
    for info in infos:
        for name in info.get("unmappedFields", []):
            if name not in unmapped:
                unmapped.append(name)

    metadata = MappingMetadata(
        source="catalog_mapping",
        mapped_fields=mapped_fields,
        total_source_fields=infos[0].get("totalFields", 0) if infos else 0,
        unmapped_fields=unmapped,
        validation_errors=sum(len(info.get("validationErrors", [])) for info in infos),
    )

    return CatalogAssembler().assemble(
        source_id=MAPPED_SOURCE_ID,
        source_name=MAPPED_SOURCE_NAME,
        records=records,
        metadata=metadata,
    )
