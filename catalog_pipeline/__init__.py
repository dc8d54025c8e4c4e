"""
catalog-pipeline: data catalog transformation and field-mapping pipeline.

Converts heterogeneous data sources into a unified record model, infers
schemas, suggests and applies catalog field mappings, and validates mapped
values against catalog field rules.
"""

__version__ = "0.1.0"
