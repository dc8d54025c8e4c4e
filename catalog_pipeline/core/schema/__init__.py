"""
Schema inference over extracted records.
"""

from .analyzer import SchemaAnalyzer, analyze_schema, source_field_names, value_type

__all__ = ["SchemaAnalyzer", "analyze_schema", "source_field_names", "value_type"]
