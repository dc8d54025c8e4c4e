"""
RangeValidator - validates numeric values are within a field's bounds.
"""

from typing import Any

from .base_validator import BaseValidator, format_number


class RangeValidator(BaseValidator):
    """
    Validates that a numeric value is within a specified range.

    Parameters:
    - min_value: Minimum value (inclusive)
    - max_value: Maximum value (inclusive)
    """

    def __init__(self, field_name: str, parameters: dict[str, Any] | None = None):
        super().__init__(field_name, parameters)

        self.min_value = self.parameters.get("min_value")
        self.max_value = self.parameters.get("max_value")

        if self.min_value is None and self.max_value is None:
            raise ValueError("RangeValidator requires at least one of: min_value, max_value")

    def validate(self, value: Any, record: dict[str, Any]) -> None:
        # Non-numeric values are reported by the type check
        if isinstance(value, bool) or not isinstance(value, int | float):
            return

        if self.min_value is not None and value < self.min_value:
            raise self.fail(f"must be at least {format_number(self.min_value)}")

        if self.max_value is not None and value > self.max_value:
            raise self.fail(f"must be at most {format_number(self.max_value)}")

    @property
    def rule_type(self) -> str:
        return "range"
