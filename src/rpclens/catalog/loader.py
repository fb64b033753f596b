"""Catalog loading from JSON or YAML documents.

Accepts either the bare catalog mapping or a playground config payload that
carries the catalog under its `schema` key:

    {"trpcEndpoint": "/trpc", "schema": {"user": {"type": "router", ...}}}
"""

import json
from pathlib import Path
from typing import Any

import structlog
import yaml

from rpclens.catalog.models import ProcedureCatalog
from rpclens.core.errors import CatalogError

log = structlog.get_logger(__name__)

_JSON_SUFFIXES = {".json"}


def _read_document(path: Path) -> Any:
    if not path.exists():
        raise CatalogError.file_not_found(str(path))
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise CatalogError.parse_error(str(path), str(e)) from e
    if path.suffix.lower() in _JSON_SUFFIXES:
        try:
            return json.loads(text)
        except json.JSONDecodeError as e:
            raise CatalogError.parse_error(str(path), str(e)) from e
    try:
        return yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise CatalogError.parse_error(str(path), str(e)) from e


def _unwrap_payload(data: dict[str, Any]) -> dict[str, Any]:
    """Return the catalog mapping inside a config payload, or `data` itself.

    A catalog entry always has a `type` key, so a `schema` value without one
    is the payload's catalog rather than a procedure named "schema".
    """
    inner = data.get("schema")
    if isinstance(inner, dict) and "type" not in inner:
        return inner
    return data


def catalog_from_document(data: Any, *, source: str = "<memory>") -> ProcedureCatalog:
    """Build a catalog from an already-decoded document."""
    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise CatalogError.invalid_document(source, f"expected a mapping, got {type(data).__name__}")
    catalog = ProcedureCatalog.from_dict(_unwrap_payload(data))
    log.debug("catalog_loaded", source=source, procedures=sum(1 for _ in catalog.walk()))
    return catalog


def load_catalog(path: Path) -> ProcedureCatalog:
    """Load a procedure catalog from a `.json` or YAML file.

    Raises:
        CatalogError: If the file is missing, cannot be decoded, or does not
            hold a mapping.
    """
    return catalog_from_document(_read_document(path), source=str(path))
