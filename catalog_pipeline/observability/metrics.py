"""
Prometheus metrics collection for catalog-pipeline

Counts extracted records, recovered parse problems, validation failures and
transformation-rule degradations, and times whole-source transformations.
"""
from pathlib import Path

from prometheus_client import (
    CollectorRegistry,
    Counter,
    Histogram,
    generate_latest,
    write_to_textfile,
)

REGISTRY = CollectorRegistry()


# =======================
# EXTRACTION METRICS
# =======================

records_extracted_total = Counter(
    name="catalog_records_extracted_total",
    documentation="Total number of records extracted from data sources",
    labelnames=["source_type", "format"],
    registry=REGISTRY,
)

parse_errors_total = Counter(
    name="catalog_parse_errors_total",
    documentation="Total number of files that failed to parse",
    labelnames=["format"],
    registry=REGISTRY,
)

skipped_rows_total = Counter(
    name="catalog_skipped_rows_total",
    documentation="Total number of CSV rows skipped for column count mismatch",
    registry=REGISTRY,
)

transformation_duration_seconds = Histogram(
    name="catalog_transformation_duration_seconds",
    documentation="Time spent transforming a data source into a unified catalog",
    labelnames=["source_type"],
    buckets=[0.01, 0.05, 0.1, 0.5, 1.0, 2.0, 5.0, 10.0, 30.0],
    registry=REGISTRY,
)

# =======================
# MAPPING METRICS
# =======================

suggestions_generated_total = Counter(
    name="catalog_suggestions_generated_total",
    documentation="Total number of mapping candidates proposed",
    labelnames=["reason"],
    registry=REGISTRY,
)

records_mapped_total = Counter(
    name="catalog_records_mapped_total",
    documentation="Total number of records passed through the mapping applier",
    labelnames=["status"],  # status: valid, invalid
    registry=REGISTRY,
)

validation_failures_total = Counter(
    name="catalog_validation_failures_total",
    documentation="Total number of mapped values that failed catalog field rules",
    labelnames=["field_name"],
    registry=REGISTRY,
)

rule_fallbacks_total = Counter(
    name="catalog_rule_fallbacks_total",
    documentation="Total number of transformation rules degraded to direct copy",
    labelnames=["rule_type"],
    registry=REGISTRY,
)


# =======================
# HELPER FUNCTIONS
# =======================

def generate_metrics() -> bytes:
    """
    Generate Prometheus metrics in text format

    Returns:
        Metrics in Prometheus text format
    """
    return generate_latest(REGISTRY)


def write_metrics_file(path: str | Path) -> None:
    """
    Write the registry in Prometheus text format for a textfile collector

    Used by one-shot CLI runs, which exit before any scrape.

    Args:
        path: Output file (written atomically)
    """
    write_to_textfile(str(path), REGISTRY)


class track_duration:
    """
    Context manager for tracking operation duration

    Usage:
        with track_duration(transformation_duration_seconds, source_type="filesystem"):
            ...
    """

    def __init__(self, histogram: Histogram, **labels):
        self.histogram = histogram
        self.labels = labels
        self.timer = None

    def __enter__(self):
        self.timer = self.histogram.labels(**self.labels).time()
        self.timer.__enter__()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.timer.__exit__(exc_type, exc_val, exc_tb)
        return False


def increment_counter(counter: Counter, value: float = 1.0, **labels) -> None:
    """
    Increment a counter metric

    Args:
        counter: Prometheus Counter metric
        value: Amount to increment (default: 1.0)
        **labels: Label values for the metric
    """
    if labels:
        counter.labels(**labels).inc(value)
    else:
        counter.inc(value)


def record_extraction(source_type: str, original_format: str, record_count: int) -> None:
    """Record how many records one file or row-set produced."""
    if record_count > 0:
        increment_counter(
            records_extracted_total, record_count, source_type=source_type, format=original_format
        )


def record_mapping_outcome(valid_records: int, invalid_records: int) -> None:
    """Record valid/invalid record counts for one mapping application."""
    if valid_records:
        increment_counter(records_mapped_total, valid_records, status="valid")
    if invalid_records:
        increment_counter(records_mapped_total, invalid_records, status="invalid")


def record_validation_failure(field_name: str) -> None:
    """Record a mapped value failing its catalog field's rules."""
    increment_counter(validation_failures_total, 1, field_name=field_name)
