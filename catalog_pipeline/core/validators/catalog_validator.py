"""
Catalog validator: checks one value against all rules of one catalog field.

Builds the rule validators a CatalogField declares and applies them in
order, collecting every failure rather than stopping at the first.
"""

from typing import Any

from catalog_pipeline.core.models import CatalogField, FieldValidationResult

from .base_validator import BaseValidator, ValidationError
from .decimal_places_validator import DecimalPlacesValidator
from .enum_validator import EnumValidator
from .length_validator import LengthValidator
from .range_validator import RangeValidator
from .regex_validator import RegexValidator
from .required_field_validator import RequiredFieldValidator, is_empty
from .type_validator import TypeValidator

TEXT_TYPES = ("string", "email", "url", "enum")
NUMERIC_TYPES = ("number", "currency")


class CatalogValidator:
    """
    Validates values against one catalog field's declared rules.

    Rule validators that apply per data type:
    - text types (string, email, url, enum): length, pattern, enum_values
    - number: min_value/max_value
    - currency: min_value/max_value, decimal_places
    Rule checks are skipped when the type check fails.
    """

    def __init__(self, field: CatalogField):
        """
        Initialize the validator for a catalog field.

        Args:
            field: The catalog field whose rules are applied
        """
        self.field = field
        common = {"display_name": field.display_name}

        self.required: RequiredFieldValidator | None = (
            RequiredFieldValidator(field.name, common) if field.is_required else None
        )
        self.type_validator = TypeValidator(field.name, {**common, "data_type": field.data_type})
        self.rule_validators: list[BaseValidator] = []
        self._build_rule_validators(common)

    def _build_rule_validators(self, common: dict[str, Any]) -> None:
        rules = self.field.validation_rules
        data_type = self.field.data_type

        if data_type in TEXT_TYPES:
            if rules.min_length is not None or rules.max_length is not None:
                self.rule_validators.append(
                    LengthValidator(
                        self.field.name,
                        {**common, "min_length": rules.min_length, "max_length": rules.max_length},
                    )
                )
            if rules.pattern:
                self.rule_validators.append(
                    RegexValidator(self.field.name, {**common, "pattern": rules.pattern})
                )
            if rules.enum_values:
                self.rule_validators.append(
                    EnumValidator(self.field.name, {**common, "enum_values": rules.enum_values})
                )

        elif data_type in NUMERIC_TYPES:
            if rules.min_value is not None or rules.max_value is not None:
                self.rule_validators.append(
                    RangeValidator(
                        self.field.name,
                        {**common, "min_value": rules.min_value, "max_value": rules.max_value},
                    )
                )
            if data_type == "currency" and rules.decimal_places is not None:
                self.rule_validators.append(
                    DecimalPlacesValidator(
                        self.field.name, {**common, "decimal_places": rules.decimal_places}
                    )
                )

    def validate(self, value: Any, record: dict[str, Any] | None = None) -> FieldValidationResult:
        """
        Validate a value.

        Args:
            value: The mapped value
            record: The entire mapped record (context for validators)

        Returns:
            FieldValidationResult with every failure message
        """
        record = record if record is not None else {self.field.name: value}
        errors: list[str] = []

        if self.required is not None:
            try:
                self.required.validate(value, record)
            except ValidationError as e:
                errors.append(e.message)

        if is_empty(value):
            return FieldValidationResult(is_valid=not errors, errors=errors)

        try:
            coerced = self.type_validator.coerce(value)
        except ValidationError as e:
            errors.append(e.message)
            return FieldValidationResult(is_valid=False, errors=errors)

        for validator in self.rule_validators:
            try:
                validator.validate(coerced, record)
            except ValidationError as e:
                errors.append(e.message)

        return FieldValidationResult(is_valid=not errors, errors=errors)

    def get_rule_summary(self) -> dict[str, Any]:
        """Describe which rule validators are active for this field."""
        return {
            "field_name": self.field.name,
            "data_type": self.field.data_type,
            "is_required": self.required is not None,
            "rules": [v.rule_type for v in self.rule_validators],
        }


def validate_field_value(value: Any, field: CatalogField) -> FieldValidationResult:
    """
    Validate a single value against a catalog field's rules.

    Args:
        value: Value to validate
        field: Catalog field declaring the rules

    Returns:
        FieldValidationResult(is_valid, errors)
    """
    return CatalogValidator(field).validate(value)
