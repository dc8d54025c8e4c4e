"""
Catalog field rule validators.

Provides validators for required values, data types, string length, regex
patterns, enum membership, numeric ranges and decimal precision, plus the
CatalogValidator that applies a field's full rule set.
"""

from .base_validator import BaseValidator, ValidationError
from .catalog_validator import CatalogValidator, validate_field_value
from .decimal_places_validator import DecimalPlacesValidator, count_decimal_places
from .enum_validator import EnumValidator
from .length_validator import LengthValidator
from .range_validator import RangeValidator
from .regex_validator import RegexValidator
from .required_field_validator import RequiredFieldValidator
from .type_validator import TypeValidator

__all__ = [
    "BaseValidator",
    "ValidationError",
    "CatalogValidator",
    "validate_field_value",
    "RequiredFieldValidator",
    "TypeValidator",
    "LengthValidator",
    "RegexValidator",
    "EnumValidator",
    "RangeValidator",
    "DecimalPlacesValidator",
    "count_decimal_places",
]
