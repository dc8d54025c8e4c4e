"""
RequiredFieldValidator - ensures a required catalog field has a value.
"""

from typing import Any

from .base_validator import BaseValidator


def is_empty(value: Any) -> bool:
    """None and the empty string count as missing; whitespace does not."""
    return value is None or value == ""


class RequiredFieldValidator(BaseValidator):
    """
    Fails if the value is None or an empty string.

    Runs independently of type checks, so a required field can report both a
    missing value and other errors for the same record.
    """

    def validate(self, value: Any, record: dict[str, Any]) -> None:
        if is_empty(value):
            raise self.fail("is required")

    @property
    def rule_type(self) -> str:
        return "required_field"
