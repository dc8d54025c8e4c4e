"""
Catalog persistence: repository interface and its implementations.
"""

from .connection import CatalogConnectionPool
from .memory import InMemoryCatalogRepository
from .postgres import PostgresCatalogRepository
from .repository import CatalogRepository

__all__ = [
    "CatalogConnectionPool",
    "CatalogRepository",
    "InMemoryCatalogRepository",
    "PostgresCatalogRepository",
]
