"""
Format detection and record extraction for data sources.
"""

from .detector import FormatDetector, detect_file_format
from .transformer import DataTransformer, ExtractionResult

__all__ = ["FormatDetector", "detect_file_format", "DataTransformer", "ExtractionResult"]
