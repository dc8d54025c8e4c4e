"""
Runtime settings for catalog-pipeline.

Settings come from environment variables, optionally seeded from a .env
file through python-dotenv. Tunable heuristics (suggestion thresholds,
display limits, content ceilings) live here rather than in the modules that
use them.
"""

import os
from pathlib import Path

from dotenv import load_dotenv
from pydantic import BaseModel, Field

RESOURCES_DIR = Path(__file__).parent / "resources"
DEFAULT_STANDARD_CATALOG_PATH = RESOURCES_DIR / "standard_catalog.yaml"
DEFAULT_MAPPING_PATTERNS_PATH = RESOURCES_DIR / "mapping_patterns.yaml"


class PipelineSettings(BaseModel):
    """
    Pipeline settings.

    Attributes:
        log_level: Log level name
        log_format: "json" or "text"
        default_max_records: Records returned in an assembled catalog (0 = all)
        max_content_chars: Files with more characters are skipped (None = no ceiling)
        suggestion_min_confidence: Candidates must score above this to be suggested
        auto_map_min_confidence: Top candidates at or above this are auto-mapped
        standard_catalog_path: YAML file with standard categories and fields
        mapping_patterns_path: YAML file with the common-pattern synonym table
    """

    log_level: str = "INFO"
    log_format: str = "json"
    default_max_records: int = Field(default=100, ge=0)
    max_content_chars: int | None = Field(default=None, gt=0)
    suggestion_min_confidence: float = Field(default=0.5, ge=0.0, le=1.0)
    auto_map_min_confidence: float = Field(default=0.8, ge=0.0, le=1.0)
    standard_catalog_path: Path = DEFAULT_STANDARD_CATALOG_PATH
    mapping_patterns_path: Path = DEFAULT_MAPPING_PATTERNS_PATH

    class Config:
        json_schema_extra = {
            "example": {
                "log_level": "INFO",
                "log_format": "json",
                "default_max_records": 100,
                "max_content_chars": 5000000,
                "suggestion_min_confidence": 0.5,
                "auto_map_min_confidence": 0.8,
            }
        }


ENV_VARS = {
    "log_level": "LOG_LEVEL",
    "log_format": "LOG_FORMAT",
    "default_max_records": "CATALOG_DEFAULT_MAX_RECORDS",
    "max_content_chars": "CATALOG_MAX_CONTENT_CHARS",
    "suggestion_min_confidence": "CATALOG_SUGGESTION_MIN_CONFIDENCE",
    "auto_map_min_confidence": "CATALOG_AUTO_MAP_MIN_CONFIDENCE",
    "standard_catalog_path": "CATALOG_STANDARD_FIELDS_PATH",
    "mapping_patterns_path": "CATALOG_MAPPING_PATTERNS_PATH",
}


def load_settings(env_file: str | Path | None = None) -> PipelineSettings:
    """
    Build settings from the environment.

    Args:
        env_file: Optional .env file loaded before reading variables
                  (existing environment variables win)

    Returns:
        Validated PipelineSettings

    Raises:
        pydantic.ValidationError: If a variable holds an invalid value
    """
    if env_file is not None:
        load_dotenv(env_file, override=False)

    values = {}
    for attr, env_var in ENV_VARS.items():
        raw = os.getenv(env_var)
        if raw is not None and raw != "":
            values[attr] = raw

    return PipelineSettings(**values)
