"""
Core domain logic: models, validators, schema analysis and field mapping.
"""
