"""
TypeValidator - checks a value against a catalog data type and coerces it.
"""

import math
import re
from datetime import datetime
from typing import Any
from urllib.parse import urlparse

from .base_validator import BaseValidator, ValidationError

EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")

# Accepted after ISO-8601 parsing fails
DATE_FORMATS = (
    "%m/%d/%Y",
    "%m/%d/%y",
    "%m-%d-%Y",
    "%Y/%m/%d",
    "%B %d, %Y",
    "%b %d, %Y",
    "%d %B %Y",
    "%d %b %Y",
    "%a, %d %b %Y %H:%M:%S %Z",
)

TRUE_STRINGS = ("true", "1", "yes")
FALSE_STRINGS = ("false", "0", "no")


def parse_date(value: str) -> datetime | None:
    """Parse a date string with ISO-8601 first, then common formats."""
    text = value.strip()
    try:
        return datetime.fromisoformat(text)
    except ValueError:
        pass
    for fmt in DATE_FORMATS:
        try:
            return datetime.strptime(text, fmt)
        except ValueError:
            continue
    return None


def to_number(value: Any) -> int | float | None:
    """Coerce numbers and numeric strings; None when not numeric."""
    if isinstance(value, bool):
        return None
    if isinstance(value, int | float):
        return value if math.isfinite(value) else None
    if isinstance(value, str):
        try:
            number = float(value.strip())
        except ValueError:
            return None
        if not math.isfinite(number):
            return None
        return int(number) if number.is_integer() and "." not in value and "e" not in value.lower() else number
    return None


class TypeValidator(BaseValidator):
    """
    Validates that a value matches the field's declared data type.

    coerce() returns the value in the form rule validators expect: numbers
    for number/currency, the original string for text types.

    Parameters:
    - data_type: Catalog data type (string, number, currency, date, ...)
    """

    TYPE_MESSAGES = {
        "string": "must be a string",
        "number": "must be a number",
        "currency": "must be a valid currency amount",
        "date": "must be a valid date",
        "datetime": "must be a valid date",
        "boolean": "must be a boolean",
        "email": "must be a valid email address",
        "url": "must be a valid URL",
        "enum": "must be a string",
        "array": "must be an array",
        "object": "must be an object",
    }

    def __init__(self, field_name: str, parameters: dict[str, Any] | None = None):
        super().__init__(field_name, parameters)

        self.data_type = self.parameters.get("data_type")
        if not self.data_type:
            raise ValueError("TypeValidator requires 'data_type' parameter")
        if self.data_type not in self.TYPE_MESSAGES:
            raise ValueError(f"Unsupported data type: {self.data_type}")

    def validate(self, value: Any, record: dict[str, Any]) -> None:
        self.coerce(value)

    def coerce(self, value: Any) -> Any:
        """
        Coerce a present value to the field's data type.

        Raises:
            ValidationError: If the value does not fit the data type
        """
        coercer = getattr(self, f"_coerce_{self.data_type}")
        try:
            return coercer(value)
        except (TypeError, ValueError):
            raise self.fail(self.TYPE_MESSAGES[self.data_type]) from None

    def _coerce_string(self, value: Any) -> str:
        if not isinstance(value, str):
            raise TypeError(type(value).__name__)
        return value

    _coerce_enum = _coerce_string

    def _coerce_number(self, value: Any) -> int | float:
        number = to_number(value)
        if number is None:
            raise ValueError(f"not numeric: {value!r}")
        return number

    _coerce_currency = _coerce_number

    def _coerce_date(self, value: Any) -> Any:
        if isinstance(value, bool):
            raise TypeError("bool")
        if isinstance(value, int | float):
            # Epoch values are dates
            if not math.isfinite(value):
                raise ValueError("non-finite")
            return value
        if not isinstance(value, str) or parse_date(value) is None:
            raise ValueError(f"not a date: {value!r}")
        return value

    _coerce_datetime = _coerce_date

    def _coerce_boolean(self, value: Any) -> bool:
        if isinstance(value, bool):
            return value
        if isinstance(value, str):
            if value.strip().lower() in TRUE_STRINGS:
                return True
            if value.strip().lower() in FALSE_STRINGS:
                return False
        raise ValueError(f"not a boolean: {value!r}")

    def _coerce_email(self, value: Any) -> str:
        text = self._coerce_string(value)
        if not EMAIL_PATTERN.match(text):
            raise ValueError(f"not an email: {text!r}")
        return text

    def _coerce_url(self, value: Any) -> str:
        text = self._coerce_string(value)
        parsed = urlparse(text)
        if parsed.scheme not in ("http", "https") or not parsed.netloc:
            raise ValueError(f"not a URL: {text!r}")
        return text

    def _coerce_array(self, value: Any) -> list:
        if not isinstance(value, list):
            raise TypeError(type(value).__name__)
        return value

    def _coerce_object(self, value: Any) -> dict:
        if not isinstance(value, dict):
            raise TypeError(type(value).__name__)
        return value

    @property
    def rule_type(self) -> str:
        return "type_check"


__all__ = ["TypeValidator", "ValidationError", "parse_date", "to_number"]
