"""
Unit tests for schema inference.

Includes property-based testing with hypothesis for schema soundness.
"""

from hypothesis import given
from hypothesis import strategies as st

from catalog_pipeline.core.schema import SchemaAnalyzer, analyze_schema, source_field_names, value_type

primitive_values = st.one_of(
    st.none(),
    st.booleans(),
    st.integers(min_value=-1000, max_value=1000),
    st.text(max_size=5),
    st.lists(st.integers(), max_size=2),
)
record_lists = st.lists(
    st.dictionaries(st.sampled_from(["a", "b", "c", "d"]), primitive_values, max_size=4),
    min_size=1,
    max_size=8,
)


class TestValueType:
    """Tests for value classification"""

    def test_classification(self):
        """Test each JSON value kind maps to one type name"""
        assert value_type(True) == "boolean"
        assert value_type(3) == "number"
        assert value_type(3.5) == "number"
        assert value_type("x") == "string"
        assert value_type([1]) == "object"
        assert value_type({"k": 1}) == "object"


class TestSchemaAnalyzer:
    """Tests for SchemaAnalyzer"""

    def test_mixed_and_never_seen_types(self, record_factory):
        """Test a field with two types is mixed and an all-null field has no type"""
        records = [
            record_factory({"a": 1, "b": None}, index=0),
            record_factory({"a": "x"}, index=1),
        ]
        schema = analyze_schema(records)

        a = schema.get("a")
        assert a.type == "mixed"
        assert a.nullable is False

        b = schema.get("b")
        assert b.type is None
        assert b.nullable is True
        assert b.examples == []

    def test_examples_are_distinct_first_seen(self):
        """Test at most three distinct examples in first-seen order"""
        records = [{"n": v} for v in (5, 5, 7, 1, 9, 2)]
        field = analyze_schema(records).get("n")
        assert field.examples == [5, 7, 1]
        assert field.type == "number"

    def test_boolean_and_number_examples_kept_apart(self):
        """Test True and 1 are different examples"""
        field = analyze_schema([{"v": 1}, {"v": True}]).get("v")
        assert field.examples == [1, True]
        assert field.type == "mixed"

    def test_field_order_follows_first_appearance(self):
        """Test fields are listed in first-seen order"""
        schema = SchemaAnalyzer().analyze([{"b": 1}, {"a": 1, "b": 2}, {"c": 1}])
        assert schema.field_names == ["b", "a", "c"]

    def test_empty_input(self):
        """Test no records yields no fields"""
        assert analyze_schema([]).fields == []

    def test_recomputed_on_each_call(self):
        """Test the schema reflects the records of each call"""
        analyzer = SchemaAnalyzer()
        first = analyzer.analyze([{"x": 1}])
        second = analyzer.analyze([{"y": "z"}])
        assert first.field_names == ["x"]
        assert second.field_names == ["y"]

    @given(record_lists)
    def test_property_schema_soundness(self, records):
        """Property test: every key is reported with sound nullability and type"""
        schema = analyze_schema(records)
        keys = {key for record in records for key in record}
        assert set(schema.field_names) == keys

        for field in schema.fields:
            values = [r.get(field.name) for r in records]
            assert field.nullable == any(v is None for v in values)

            kinds = {value_type(v) for v in values if v is not None}
            if not kinds:
                assert field.type is None
            elif len(kinds) == 1:
                assert field.type == next(iter(kinds))
            else:
                assert field.type == "mixed"
            assert len(field.examples) <= 3


class TestSourceFieldNames:
    """Tests for source_field_names"""

    def test_order_preserved(self, record_factory):
        """Test names come back distinct and in first-seen order"""
        records = [
            record_factory({"customer_name": "A", "customer_email": "a@x.io"}, index=0),
            record_factory({"customer_email": "b@x.io", "phone_number": "1"}, index=1),
        ]
        assert source_field_names(records) == ["customer_name", "customer_email", "phone_number"]
