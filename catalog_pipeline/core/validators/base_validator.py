"""
Base validator interface for catalog field rules.

Each validator checks one rule of one catalog field and raises
ValidationError with a user-facing message naming the field's display name.
"""

from abc import ABC, abstractmethod
from typing import Any


class ValidationError(Exception):
    """Raised when a catalog field rule fails."""

    def __init__(self, rule_name: str, field_name: str, message: str):
        self.rule_name = rule_name
        self.field_name = field_name
        self.message = message
        super().__init__(f"[{rule_name}] {field_name}: {message}")


def format_number(value: int | float) -> str:
    """Render a rule bound the way users wrote it (10 rather than 10.0)."""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


class BaseValidator(ABC):
    """
    Abstract base class for catalog field rule validators.

    Parameters common to all validators:
    - display_name: Label used in error messages (defaults to field_name)
    """

    def __init__(self, field_name: str, parameters: dict[str, Any] | None = None):
        """
        Initialize validator.

        Args:
            field_name: Catalog field name
            parameters: Rule-specific parameters (e.g., max_length, pattern)
        """
        self.field_name = field_name
        self.parameters = parameters or {}
        self.display_name = self.parameters.get("display_name") or field_name

    @abstractmethod
    def validate(self, value: Any, record: dict[str, Any]) -> None:
        """
        Validate a value against this rule.

        Args:
            value: The (already type-coerced) value to validate
            record: The entire mapped record

        Raises:
            ValidationError: If validation fails
        """

    @property
    @abstractmethod
    def rule_type(self) -> str:
        """Return the rule type identifier."""

    def fail(self, message: str) -> ValidationError:
        return ValidationError(
            rule_name=self.rule_type,
            field_name=self.field_name,
            message=f"{self.display_name} {message}",
        )

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(field={self.field_name}, params={self.parameters})"
