"""
EnumValidator - validates membership in a field's allowed values.
"""

from typing import Any

from .base_validator import BaseValidator


class EnumValidator(BaseValidator):
    """
    Parameters:
    - enum_values: Allowed values (compared case-sensitively)
    """

    def __init__(self, field_name: str, parameters: dict[str, Any] | None = None):
        super().__init__(field_name, parameters)

        self.enum_values = list(self.parameters.get("enum_values") or [])
        if not self.enum_values:
            raise ValueError("EnumValidator requires non-empty 'enum_values' parameter")

    def validate(self, value: Any, record: dict[str, Any]) -> None:
        if value not in self.enum_values:
            raise self.fail(f"must be one of: {', '.join(self.enum_values)}")

    @property
    def rule_type(self) -> str:
        return "enum"
