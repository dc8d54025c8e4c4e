"""
LengthValidator - validates string length bounds.
"""

from typing import Any

from .base_validator import BaseValidator


class LengthValidator(BaseValidator):
    """
    Validates that a string is within length bounds.

    Parameters:
    - min_length: Minimum length (inclusive)
    - max_length: Maximum length (inclusive)
    """

    def __init__(self, field_name: str, parameters: dict[str, Any] | None = None):
        super().__init__(field_name, parameters)

        self.min_length = self.parameters.get("min_length")
        self.max_length = self.parameters.get("max_length")

        if self.min_length is None and self.max_length is None:
            raise ValueError("LengthValidator requires at least one of: min_length, max_length")

    def validate(self, value: Any, record: dict[str, Any]) -> None:
        if not isinstance(value, str):
            return

        if self.min_length is not None and len(value) < self.min_length:
            raise self.fail(f"must be at least {self.min_length} characters")

        if self.max_length is not None and len(value) > self.max_length:
            raise self.fail(f"must be at most {self.max_length} characters")

    @property
    def rule_type(self) -> str:
        return "length"
