"""
Pytest configuration and fixtures for catalog-pipeline tests

This module provides shared fixtures for unit, integration, and E2E tests.
"""
from typing import Generator

import pytest

from catalog_pipeline.config import DEFAULT_STANDARD_CATALOG_PATH, PipelineSettings
from catalog_pipeline.core.catalog_config import CatalogConfigLoader
from catalog_pipeline.core.models import (
    CatalogField,
    DataSource,
    FileRef,
    ProcessingInfo,
    RecordMetadata,
    SourceConfiguration,
    SourceRecord,
)
from catalog_pipeline.storage import InMemoryCatalogRepository


# =======================
# PYTEST CONFIGURATION
# =======================

def pytest_configure(config):
    """Configure pytest with custom markers"""
    config.addinivalue_line(
        "markers", "unit: Unit tests that don't require external services"
    )
    config.addinivalue_line(
        "markers", "integration: Integration tests that may require Docker containers"
    )
    config.addinivalue_line(
        "markers", "e2e: End-to-end tests that run the CLI"
    )
    config.addinivalue_line(
        "markers", "slow: Tests that take more than 5 seconds to run"
    )


# =======================
# DATA FIXTURES
# =======================

CUSTOMERS_CSV = (
    "customer_name,customer_email,phone_number,account_id,registration_date\n"
    "John Doe,john@example.com,555-1234,ACC001,2024-01-01\n"
    "Jane Smith,jane@example.com,555-5678,ACC002,2024-01-02\n"
)


def _make_record(data: dict, index: int = 0, source_id: str = "src_1", original_format: str = "json") -> SourceRecord:
    """Build a SourceRecord around plain data."""
    return SourceRecord(
        id=f"{source_id}_record_{index}",
        source_id=source_id,
        source_type="filesystem",
        record_index=index,
        data=data,
        metadata=RecordMetadata(
            original_format=original_format,
            processing_info=ProcessingInfo(method="test_fixture"),
        ),
    )


def _make_file_source(*files: FileRef, source_id: str = "src_1", name: str = "Test Source") -> DataSource:
    """Build a filesystem DataSource from FileRefs."""
    return DataSource(
        id=source_id,
        name=name,
        type="filesystem",
        configuration=SourceConfiguration(files=list(files)),
    )


@pytest.fixture
def customers_csv_source() -> DataSource:
    """
    Filesystem source with one two-row customer CSV

    Returns:
        DataSource with id "src_customers"
    """
    return _make_file_source(
        FileRef(name="customers.csv", type="text/csv", size=len(CUSTOMERS_CSV), content=CUSTOMERS_CSV),
        source_id="src_customers",
        name="Customers",
    )


@pytest.fixture
def record_factory():
    """Factory building SourceRecords around plain data"""
    return _make_record


@pytest.fixture
def file_source_factory():
    """Factory building filesystem DataSources from FileRefs"""
    return _make_file_source


# =======================
# CATALOG FIXTURES
# =======================

@pytest.fixture(scope="session")
def standard_fields() -> list[CatalogField]:
    """
    Standard catalog fields from the packaged YAML

    Returns:
        Fields in declaration order
    """
    return CatalogConfigLoader(DEFAULT_STANDARD_CATALOG_PATH).load_fields()


@pytest.fixture
def settings() -> PipelineSettings:
    """Default settings, independent of the environment"""
    return PipelineSettings()


@pytest.fixture
def repository() -> InMemoryCatalogRepository:
    """Empty in-memory repository"""
    return InMemoryCatalogRepository()


@pytest.fixture
def seeded_repository(standard_fields) -> InMemoryCatalogRepository:
    """In-memory repository holding the standard catalog fields"""
    repo = InMemoryCatalogRepository()
    for field in standard_fields:
        repo.save_field(field)
    return repo


# =======================
# DATABASE FIXTURES (Testcontainers)
# =======================

@pytest.fixture(scope="session")
def postgres_container() -> Generator:
    """
    Start PostgreSQL container for integration tests

    Yields:
        PostgresContainer instance
    """
    from testcontainers.postgres import PostgresContainer

    with PostgresContainer(
        image="postgres:16.2-alpine",
        username="test_catalog",
        password="test_password",
        dbname="test_catalog",
    ) as postgres:
        yield postgres


@pytest.fixture(scope="session")
def postgres_pool(postgres_container) -> Generator:
    """
    Open a CatalogConnectionPool against the test container

    Yields:
        CatalogConnectionPool
    """
    from catalog_pipeline.storage import CatalogConnectionPool

    pool = CatalogConnectionPool(
        host=postgres_container.get_container_host_ip(),
        port=int(postgres_container.get_exposed_port(5432)),
        database="test_catalog",
        user="test_catalog",
        password="test_password",
    )
    pool.open(max_retries=5, retry_delay=1.0)
    yield pool
    pool.close()


@pytest.fixture
def postgres_repository(postgres_pool):
    """
    Provide a PostgresCatalogRepository with empty tables

    Returns:
        PostgresCatalogRepository
    """
    from catalog_pipeline.storage import PostgresCatalogRepository

    repo = PostgresCatalogRepository(postgres_pool)
    repo.initialize_schema()
    repo.truncate()
    return repo
