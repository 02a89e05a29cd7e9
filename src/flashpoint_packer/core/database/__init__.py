"""Catalogue data source access."""

from .source import CatalogSource, ContentRow, ImageRow, SQLiteCatalogSource

__all__ = [
    "CatalogSource",
    "ContentRow",
    "ImageRow",
    "SQLiteCatalogSource",
]
