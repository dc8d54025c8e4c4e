"""
Per-format record extractors.
"""

from .api_extractor import APIExtractor
from .base import ExtractionResult, FileExtractor, RecordExtractor, SourceExtractor
from .csv_extractor import CSVExtractor, parse_csv_line, parse_csv_value
from .database_extractor import DatabaseExtractor
from .document_extractor import DocumentExtractor, detect_entities, is_heading
from .json_extractor import JSONExtractor
from .text_extractor import TextExtractor

__all__ = [
    "APIExtractor",
    "ExtractionResult",
    "FileExtractor",
    "RecordExtractor",
    "SourceExtractor",
    "CSVExtractor",
    "parse_csv_line",
    "parse_csv_value",
    "DatabaseExtractor",
    "DocumentExtractor",
    "detect_entities",
    "is_heading",
    "JSONExtractor",
    "TextExtractor",
]
