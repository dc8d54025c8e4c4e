"""
Catalog field mapping: suggestion, transformation rules and application.
"""

from .applier import MappingApplier, apply_field_mappings
from .scoring_rules import (
    CommonPatternRule,
    DisplayNameRule,
    ExactNameRule,
    NameContainmentRule,
    ScoringRule,
    SharedTokenRule,
    TagRule,
    default_rules,
    normalize_name,
)
from .suggester import MappingSuggester
from .transformations import (
    TRANSFORMATION_REGISTRY,
    DirectTransformation,
    FormatTransformation,
    LookupTransformation,
    Transformation,
    compile_transformation,
)

__all__ = [
    "MappingApplier",
    "apply_field_mappings",
    "CommonPatternRule",
    "DisplayNameRule",
    "ExactNameRule",
    "NameContainmentRule",
    "ScoringRule",
    "SharedTokenRule",
    "TagRule",
    "default_rules",
    "normalize_name",
    "MappingSuggester",
    "TRANSFORMATION_REGISTRY",
    "DirectTransformation",
    "FormatTransformation",
    "LookupTransformation",
    "Transformation",
    "compile_transformation",
]
