"""
Integration tests for PostgresCatalogRepository.

Tests catalog persistence against a PostgreSQL test container.
"""

import pytest

from catalog_pipeline.core.exceptions import CircularRelationshipError
from catalog_pipeline.core.models import (
    CatalogCategory,
    CatalogField,
    DataSource,
    FieldMapping,
    FileRef,
    SourceConfiguration,
    TransformationRule,
    ValidationRules,
)
from catalog_pipeline.services import CatalogService


@pytest.mark.integration
def test_field_round_trip(postgres_repository):
    """Test fields keep every attribute through the JSONB document."""
    field = CatalogField(
        name="loyalty_tier",
        display_name="Loyalty Tier",
        data_type="enum",
        category="business",
        tags=["crm"],
        validation_rules=ValidationRules(enum_values=["gold", "silver"]),
    )
    postgres_repository.save_field(field)

    loaded = postgres_repository.get_field(field.id)
    assert loaded == field
    assert postgres_repository.get_field_by_name("loyalty_tier").id == field.id
    assert postgres_repository.get_field("missing") is None


@pytest.mark.integration
def test_field_ordering_and_delete(postgres_repository):
    """Test fields list by category then name and delete reports removal."""
    for name, category in (("zeta", "contact"), ("alpha", "location"), ("beta", "contact")):
        postgres_repository.save_field(
            CatalogField(name=name, display_name=name, data_type="string", category=category)
        )

    fields = postgres_repository.list_fields()
    assert [f.name for f in fields] == ["beta", "zeta", "alpha"]

    assert postgres_repository.delete_field(fields[0].id) is True
    assert postgres_repository.delete_field(fields[0].id) is False


@pytest.mark.integration
def test_categories(postgres_repository):
    """Test categories list in sort order."""
    postgres_repository.save_category(CatalogCategory(name="b", display_name="B", sort_order=2))
    postgres_repository.save_category(CatalogCategory(name="a", display_name="A", sort_order=1))
    assert [c.name for c in postgres_repository.list_categories()] == ["a", "b"]


@pytest.mark.integration
def test_mapping_upsert_and_deletes(postgres_repository):
    """Test mappings upsert by (source, source field) and delete in bulk."""
    rule = TransformationRule(type="lookup", parameters={"lookup_table": {"M": "male"}})
    first = FieldMapping(source_id="s1", source_field_name="sex", catalog_field_id="gender", transformation_rule=rule)
    postgres_repository.save_mapping(first)

    replacement = FieldMapping(
        id=first.id, source_id="s1", source_field_name="sex", catalog_field_id="full_name"
    )
    postgres_repository.save_mapping(replacement)
    postgres_repository.save_mapping(FieldMapping(source_id="s2", source_field_name="sex", catalog_field_id="gender"))

    loaded = postgres_repository.get_mapping("s1", "sex")
    assert loaded.catalog_field_id == "full_name"
    assert loaded.transformation_rule is None
    assert len(postgres_repository.list_mappings(source_id="s1")) == 1
    assert len(postgres_repository.list_mappings(catalog_field_id="gender")) == 1

    assert postgres_repository.delete_mappings_for_source("s2") == 1
    assert postgres_repository.delete_mapping(first.id) is True
    assert postgres_repository.list_mappings() == []


@pytest.mark.integration
def test_sources(postgres_repository):
    """Test data sources keep their files and rows."""
    source = DataSource(
        id="src_1",
        name="Customers",
        type="filesystem",
        configuration=SourceConfiguration(
            files=[FileRef(name="a.csv", type="text/csv", size=3, content="a\n1")]
        ),
        metadata={"owner": "finance"},
    )
    postgres_repository.save_source(source)

    assert postgres_repository.get_source("src_1") == source
    assert [s.id for s in postgres_repository.list_sources()] == ["src_1"]
    assert postgres_repository.delete_source("src_1") is True
    assert postgres_repository.get_source("src_1") is None


@pytest.mark.integration
def test_service_over_postgres(postgres_repository, settings):
    """Test seeding, auto-mapping and cascades against PostgreSQL."""
    service = CatalogService(postgres_repository, settings)
    assert service.seed_standard_catalog() == 35
    assert service.seed_standard_catalog() == 0

    created = service.auto_map_fields("src_1", ["customer_email", "phone_number", "account_id"])
    assert len(created) == 3

    a = service.create_field(CatalogField(name="field_a", display_name="A", data_type="string"))
    b = service.create_field(
        CatalogField(name="field_b", display_name="B", data_type="string", related_field_ids=[a.id])
    )
    with pytest.raises(CircularRelationshipError):
        service.update_field(a.id, related_field_ids=[b.id])

    assert service.delete_field("email_address", confirm=True) == 1
    assert len(service.list_mappings("src_1")) == 2
