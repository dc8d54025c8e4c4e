"""
Unit tests for CatalogPipeline orchestration.
"""

import pytest

from catalog_pipeline.core.exceptions import CatalogError, CatalogFieldNotFoundError
from catalog_pipeline.core.models import FieldMapping
from catalog_pipeline.pipeline import CatalogPipeline, suggest_mappings, transform_data_source


@pytest.fixture
def pipeline(seeded_repository, settings, customers_csv_source):
    pipeline = CatalogPipeline(seeded_repository, settings)
    pipeline.catalog_service.register_source(customers_csv_source)
    return pipeline


class TestCatalogPipeline:
    """Tests for CatalogPipeline"""

    def test_transform_by_id(self, pipeline):
        """Test registered sources can be transformed by id"""
        catalog = pipeline.transform_data_source("src_customers")
        assert catalog.source_id == "src_customers"
        assert catalog.source_name == "Customers"
        assert catalog.total_records == 2
        assert catalog.summary.data_types == ["csv"]

    def test_transform_truncates(self, pipeline, customers_csv_source):
        """Test max_records limits records but not the schema"""
        catalog = pipeline.transform_data_source(customers_csv_source, max_records=1)
        assert len(catalog.records) == 1
        assert catalog.meta.truncated is True
        assert len(catalog.data_schema.fields) == 5

    def test_unknown_source(self, pipeline):
        """Test unregistered source ids raise CatalogError"""
        with pytest.raises(CatalogError):
            pipeline.transform_data_source("missing")

    def test_load_source_fields(self, pipeline):
        """Test field names come back in header order"""
        assert pipeline.load_source_fields("src_customers") == [
            "customer_name",
            "customer_email",
            "phone_number",
            "account_id",
            "registration_date",
        ]

    def test_suggest_against_stored_catalog(self, pipeline):
        """Test suggestions default to the stored catalog fields"""
        suggestions = pipeline.suggest_mappings(["phone_number"])
        assert suggestions[0].best.catalog_field_name == "phone_number"

    def test_apply_without_mappings(self, pipeline):
        """Test applying with no stored mappings is an error"""
        with pytest.raises(CatalogError, match="No field mappings"):
            pipeline.apply_mappings("src_customers")

    def test_apply_explicit_mappings(self, pipeline):
        """Test explicit mappings override stored ones"""
        mappings = [
            FieldMapping(
                source_id="src_customers", source_field_name="customer_email", catalog_field_id="email_address"
            )
        ]
        result = pipeline.apply_mappings("src_customers", mappings)
        assert result.records[0].data["email_address"] == "john@example.com"
        assert result.statistics.mapped_fields == 1

    def test_transform_mapped_source(self, pipeline):
        """Test auto-mapped records assemble with mapping metadata"""
        pipeline.auto_map_fields("src_customers")
        catalog = pipeline.transform_mapped_source("src_customers")

        assert catalog.metadata.mapped_fields == 3
        assert catalog.metadata.unmapped_fields == ["customer_name", "registration_date"]
        assert catalog.metadata.validation_errors == 0
        assert "account_number" in catalog.data_schema.field_names

    def test_validate_field_value(self, pipeline):
        """Test validation by field id"""
        assert pipeline.validate_field_value("a@b.co", "email_address").is_valid
        with pytest.raises(CatalogFieldNotFoundError):
            pipeline.validate_field_value("x", "missing")


class TestModuleFunctions:
    """Tests for the store-free helpers"""

    def test_transform_data_source(self, customers_csv_source):
        """Test transformation without a repository keeps every record"""
        catalog = transform_data_source(customers_csv_source)
        assert catalog.total_records == 2
        assert len(catalog.records) == 2

    def test_suggest_mappings(self, standard_fields):
        """Test suggestions with default settings"""
        suggestions = suggest_mappings(["customer_email"], standard_fields)
        assert suggestions[0].best.catalog_field_name == "email_address"
        assert suggestions[0].best.confidence == 0.85
