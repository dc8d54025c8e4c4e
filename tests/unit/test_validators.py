"""
Unit tests for catalog field validators.

Includes property-based testing with hypothesis for validators.
"""

import pytest
from hypothesis import given
from hypothesis import strategies as st

from catalog_pipeline.core.models import CatalogField, ValidationRules
from catalog_pipeline.core.validators import (
    CatalogValidator,
    DecimalPlacesValidator,
    EnumValidator,
    LengthValidator,
    RangeValidator,
    RegexValidator,
    RequiredFieldValidator,
    TypeValidator,
    ValidationError,
    count_decimal_places,
    validate_field_value,
)


def make_field(data_type="string", is_required=False, **rules) -> CatalogField:
    return CatalogField(
        name="test_field",
        display_name="Test Field",
        data_type=data_type,
        is_required=is_required,
        validation_rules=ValidationRules(**rules),
    )


class TestRequiredFieldValidator:
    """Tests for RequiredFieldValidator"""

    def test_present_value_passes(self):
        """Test validation passes for a present value"""
        validator = RequiredFieldValidator("name", {"display_name": "Name"})
        validator.validate("John Doe", {"name": "John Doe"})  # Should not raise

    @pytest.mark.parametrize("value", [None, ""])
    def test_empty_value_fails(self, value):
        """Test None and empty string are missing"""
        validator = RequiredFieldValidator("name", {"display_name": "Name"})

        with pytest.raises(ValidationError) as exc_info:
            validator.validate(value, {})

        assert exc_info.value.message == "Name is required"
        assert exc_info.value.field_name == "name"
        assert exc_info.value.rule_name == "required_field"
        assert str(exc_info.value) == "[required_field] name: Name is required"

    def test_zero_and_false_are_present(self):
        """Test falsy non-empty values count as present"""
        validator = RequiredFieldValidator("flag")
        validator.validate(0, {})
        validator.validate(False, {})
        validator.validate(" ", {})


class TestTypeValidator:
    """Tests for TypeValidator coercion"""

    @given(st.integers())
    def test_property_integers_are_numbers(self, value):
        """Property test: any integer passes the number check unchanged"""
        validator = TypeValidator("n", {"data_type": "number"})
        assert validator.coerce(value) == value

    @given(st.floats(allow_nan=False, allow_infinity=False))
    def test_property_finite_floats_are_numbers(self, value):
        """Property test: any finite float passes the number check"""
        validator = TypeValidator("n", {"data_type": "number"})
        assert validator.coerce(value) == value

    def test_numeric_strings_coerced(self):
        """Test numeric strings become int or float"""
        validator = TypeValidator("n", {"data_type": "number"})
        assert validator.coerce("42") == 42
        assert isinstance(validator.coerce("42"), int)
        assert validator.coerce("10.50") == 10.5

    @pytest.mark.parametrize("value", [True, "abc", "nan", float("inf"), [1], None])
    def test_non_numbers_rejected(self, value):
        """Test booleans, text and non-finite values are not numbers"""
        validator = TypeValidator("n", {"data_type": "number", "display_name": "Amount"})
        with pytest.raises(ValidationError) as exc_info:
            validator.coerce(value)
        assert exc_info.value.message == "Amount must be a number"
        assert exc_info.value.rule_name == "type_check"

    @pytest.mark.parametrize(
        "value", ["2024-01-01", "2024-01-01T10:30:00", "01/15/2024", "March 5, 2024", 1704067200000]
    )
    def test_valid_dates(self, value):
        """Test ISO, common formats and epoch numbers are dates"""
        validator = TypeValidator("d", {"data_type": "date"})
        assert validator.coerce(value) == value

    @pytest.mark.parametrize("value", ["not a date", "2024-13-45", True])
    def test_invalid_dates(self, value):
        """Test unparseable values fail the date check"""
        validator = TypeValidator("d", {"data_type": "date", "display_name": "Start"})
        with pytest.raises(ValidationError) as exc_info:
            validator.coerce(value)
        assert exc_info.value.message == "Start must be a valid date"

    def test_email(self):
        """Test email shape check"""
        validator = TypeValidator("e", {"data_type": "email", "display_name": "Email"})
        assert validator.coerce("a@b.co") == "a@b.co"
        with pytest.raises(ValidationError, match="Email must be a valid email address"):
            validator.coerce("not-an-email")

    @pytest.mark.parametrize("value", ["example.com", "ftp://example.com", "http://", 42])
    def test_invalid_urls(self, value):
        """Test URLs need an http(s) scheme and host"""
        validator = TypeValidator("u", {"data_type": "url", "display_name": "Site"})
        with pytest.raises(ValidationError, match="Site must be a valid URL"):
            validator.coerce(value)

    def test_valid_url(self):
        """Test an https URL passes"""
        validator = TypeValidator("u", {"data_type": "url"})
        assert validator.coerce("https://example.com/x") == "https://example.com/x"

    def test_boolean(self):
        """Test booleans and boolean strings"""
        validator = TypeValidator("b", {"data_type": "boolean"})
        assert validator.coerce(True) is True
        assert validator.coerce("Yes") is True
        assert validator.coerce("0") is False
        with pytest.raises(ValidationError):
            validator.coerce("maybe")

    def test_array_and_object(self):
        """Test container types"""
        assert TypeValidator("a", {"data_type": "array"}).coerce([1]) == [1]
        assert TypeValidator("o", {"data_type": "object"}).coerce({"k": 1}) == {"k": 1}
        with pytest.raises(ValidationError):
            TypeValidator("a", {"data_type": "array"}).coerce({"k": 1})

    def test_unsupported_type(self):
        """Test unknown data types are rejected at construction"""
        with pytest.raises(ValueError):
            TypeValidator("x", {"data_type": "integer"})
        with pytest.raises(ValueError):
            TypeValidator("x", {})


class TestRuleValidators:
    """Tests for the single-rule validators"""

    def test_length_bounds(self):
        """Test length messages for both bounds"""
        validator = LengthValidator("f", {"display_name": "Code", "min_length": 2, "max_length": 4})
        validator.validate("abc", {})

        with pytest.raises(ValidationError, match="Code must be at least 2 characters"):
            validator.validate("a", {})
        with pytest.raises(ValidationError, match="Code must be at most 4 characters"):
            validator.validate("abcde", {})

    def test_length_requires_a_bound(self):
        """Test a length validator needs min or max"""
        with pytest.raises(ValueError):
            LengthValidator("f", {})

    @given(st.from_regex(r"ACC[0-9]{3}", fullmatch=True))
    def test_property_matching_values_pass(self, value):
        """Property test: every value generated from the pattern passes"""
        RegexValidator("f", {"pattern": r"^ACC[0-9]{3}$"}).validate(value, {})

    def test_regex_is_searched(self):
        """Test unanchored patterns match anywhere in the value"""
        RegexValidator("f", {"pattern": "[0-9]"}).validate("abc1", {})
        with pytest.raises(ValidationError, match="format is invalid"):
            RegexValidator("f", {"pattern": "^[0-9]+$"}).validate("abc1", {})

    def test_invalid_regex(self):
        """Test a broken pattern is rejected at construction"""
        with pytest.raises(ValueError, match="Invalid regex pattern"):
            RegexValidator("f", {"pattern": "([a-"})

    def test_enum_message_lists_values(self):
        """Test enum failure lists the allowed values"""
        validator = EnumValidator("f", {"display_name": "Status", "enum_values": ["open", "closed"]})
        validator.validate("open", {})
        with pytest.raises(ValidationError) as exc_info:
            validator.validate("OPEN", {})
        assert exc_info.value.message == "Status must be one of: open, closed"

    def test_range_bounds(self):
        """Test inclusive numeric bounds with user-facing numbers"""
        validator = RangeValidator("f", {"display_name": "Score", "min_value": 0.0, "max_value": 100})
        validator.validate(0, {})
        validator.validate(100, {})

        with pytest.raises(ValidationError) as exc_info:
            validator.validate(-1, {})
        assert exc_info.value.message == "Score must be at least 0"

        with pytest.raises(ValidationError, match="Score must be at most 100"):
            validator.validate(100.5, {})

    @given(st.floats(min_value=0, max_value=100, allow_nan=False, allow_infinity=False))
    def test_property_values_in_range_pass(self, value):
        """Property test: all values in [0, 100] pass"""
        RangeValidator("f", {"min_value": 0, "max_value": 100}).validate(value, {})

    @pytest.mark.parametrize(
        "value,expected", [(10, 0), (10.0, 0), (10.1, 1), (10.25, 2), (10.125, 3), (1e-7, 7)]
    )
    def test_count_decimal_places(self, value, expected):
        """Test decimal places come from the plain decimal form"""
        assert count_decimal_places(value) == expected

    def test_decimal_places(self):
        """Test decimal places limit"""
        validator = DecimalPlacesValidator("f", {"display_name": "Price", "decimal_places": 2})
        validator.validate(19.99, {})
        with pytest.raises(ValidationError, match="Price can have at most 2 decimal places"):
            validator.validate(19.999, {})


class TestCatalogValidator:
    """Tests for CatalogValidator, the per-field rule set"""

    def test_required_missing_value(self):
        """Test a missing required value reports only the required error"""
        result = validate_field_value(None, make_field(is_required=True))
        assert result.is_valid is False
        assert result.errors == ["Test Field is required"]

    def test_optional_missing_value_is_valid(self):
        """Test empty optional values skip all other checks"""
        result = validate_field_value("", make_field(data_type="number", min_value=5))
        assert result.is_valid is True
        assert result.errors == []

    def test_type_failure_skips_rule_checks(self):
        """Test rule checks do not run on values of the wrong type"""
        result = validate_field_value("abc", make_field(data_type="number", min_value=5))
        assert result.errors == ["Test Field must be a number"]

    def test_numeric_string_checked_against_range(self):
        """Test numeric strings are coerced before range checks"""
        field = make_field(data_type="number", min_value=0, max_value=10)
        assert validate_field_value("5", field).is_valid
        assert validate_field_value("15", field).errors == ["Test Field must be at most 10"]

    def test_collects_every_failure(self):
        """Test all failing text rules are reported together"""
        field = make_field(min_length=5, pattern="^[0-9]+$")
        result = validate_field_value("ab", field)
        assert result.errors == [
            "Test Field must be at least 5 characters",
            "Test Field format is invalid",
        ]

    def test_currency_decimal_places(self):
        """Test currency fields check range and decimal places"""
        field = make_field(data_type="currency", min_value=0, decimal_places=2)
        assert validate_field_value(12.5, field).is_valid
        result = validate_field_value(-1.005, field)
        assert result.errors == [
            "Test Field must be at least 0",
            "Test Field can have at most 2 decimal places",
        ]

    def test_enum_field(self):
        """Test enum fields check membership"""
        field = make_field(data_type="enum", enum_values=["male", "female"])
        assert validate_field_value("female", field).is_valid
        assert validate_field_value("unknown", field).errors == [
            "Test Field must be one of: male, female"
        ]

    def test_rule_summary(self):
        """Test the rule summary lists active validators"""
        field = make_field(data_type="currency", is_required=True, min_value=0, decimal_places=2)
        summary = CatalogValidator(field).get_rule_summary()
        assert summary == {
            "field_name": "test_field",
            "data_type": "currency",
            "is_required": True,
            "rules": ["range", "decimal_places"],
        }

    def test_standard_email_field(self, standard_fields):
        """Test the standard email field accepts and rejects addresses"""
        email = next(f for f in standard_fields if f.name == "email_address")
        assert validate_field_value("john@example.com", email).is_valid
        assert validate_field_value("john.example.com", email).errors == [
            "Email Address format is invalid"
        ]
