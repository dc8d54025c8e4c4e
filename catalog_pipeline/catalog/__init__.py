"""
Unified catalog assembly, export and inspection.
"""

from .assembler import CatalogAssembler, assemble_catalog, new_catalog_id
from .inspection import (
    convert_to_unified_format,
    detect_data_format,
    export_catalog_json,
    extract_sample_records,
    generate_catalog_summary,
    get_record_count,
    validate_transformed_data,
)

__all__ = [
    "CatalogAssembler",
    "assemble_catalog",
    "new_catalog_id",
    "convert_to_unified_format",
    "detect_data_format",
    "export_catalog_json",
    "extract_sample_records",
    "generate_catalog_summary",
    "get_record_count",
    "validate_transformed_data",
]
