"""
DecimalPlacesValidator - limits digits after the decimal point.
"""

from decimal import Decimal
from typing import Any

from .base_validator import BaseValidator


def count_decimal_places(value: int | float) -> int:
    """
    Count digits after the decimal point in the value's plain decimal form.

    Uses the shortest round-tripping representation, so 10.1 has one decimal
    place and 1e-7 has seven.
    """
    if isinstance(value, int) or value.is_integer():
        return 0
    text = format(Decimal(repr(value)), "f")
    _, _, fraction = text.partition(".")
    return len(fraction.rstrip("0"))


class DecimalPlacesValidator(BaseValidator):
    """
    Parameters:
    - decimal_places: Maximum number of decimal places
    """

    def __init__(self, field_name: str, parameters: dict[str, Any] | None = None):
        super().__init__(field_name, parameters)

        self.decimal_places = self.parameters.get("decimal_places")
        if self.decimal_places is None or self.decimal_places < 0:
            raise ValueError("DecimalPlacesValidator requires non-negative 'decimal_places' parameter")

    def validate(self, value: Any, record: dict[str, Any]) -> None:
        if isinstance(value, bool) or not isinstance(value, int | float):
            return

        if count_decimal_places(value) > self.decimal_places:
            raise self.fail(f"can have at most {self.decimal_places} decimal places")

    @property
    def rule_type(self) -> str:
        return "decimal_places"
