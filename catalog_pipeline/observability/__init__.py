"""
Structured logging and Prometheus metrics for catalog-pipeline.
"""
