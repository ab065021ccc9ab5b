"""Storage layer - SQLite image catalog."""

from .database import CatalogDatabase

__all__ = ["CatalogDatabase"]
