"""
RegexValidator - validates string values against a field's pattern.
"""

import re
from re import Pattern
from typing import Any

from .base_validator import BaseValidator


class RegexValidator(BaseValidator):
    """
    Validates that a string value matches a regular expression.

    The pattern is searched, not anchored; patterns that must cover the whole
    value declare ^ and $ themselves.

    Parameters:
    - pattern: Regular expression pattern (string or compiled Pattern)
    """

    def __init__(self, field_name: str, parameters: dict[str, Any] | None = None):
        super().__init__(field_name, parameters)

        pattern = self.parameters.get("pattern")
        if not pattern:
            raise ValueError("RegexValidator requires 'pattern' parameter")

        try:
            if isinstance(pattern, str):
                self.pattern: Pattern = re.compile(pattern)
            elif isinstance(pattern, Pattern):
                self.pattern = pattern
            else:
                raise ValueError(f"Pattern must be string or compiled Pattern, got {type(pattern)}")
        except re.error as e:
            raise ValueError(f"Invalid regex pattern: {e}") from e

    def validate(self, value: Any, record: dict[str, Any]) -> None:
        if not isinstance(value, str):
            return

        if not self.pattern.search(value):
            raise self.fail("format is invalid")

    @property
    def rule_type(self) -> str:
        return "regex"
