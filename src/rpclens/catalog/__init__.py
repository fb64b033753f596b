"""Catalog module - procedure tree, loading, building, and completion."""

from rpclens.catalog.builder import CatalogBuilder, json_schema_for
from rpclens.catalog.completion import Completion, CompletionItem, complete
from rpclens.catalog.loader import catalog_from_document, load_catalog
from rpclens.catalog.models import CatalogEntry, Group, Procedure, ProcedureCatalog

__all__ = [
    "CatalogBuilder",
    "CatalogEntry",
    "Completion",
    "CompletionItem",
    "Group",
    "Procedure",
    "ProcedureCatalog",
    "catalog_from_document",
    "complete",
    "json_schema_for",
    "load_catalog",
]
