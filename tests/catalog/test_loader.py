"""Tests for catalog/loader.py module.

Covers:
- load_catalog() for JSON and YAML files
- Config-payload unwrapping
- CatalogError for missing, unreadable, undecodable, and non-mapping documents
- YAML keys that decode to non-strings
"""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from rpclens.analyzer import Analyzer
from rpclens.catalog.loader import catalog_from_document, load_catalog
from rpclens.core.errors import CatalogError, ErrorCode


class TestLoadCatalog:
    """Tests for load_catalog function."""

    def test_loads_json(self, tmp_path: Path, catalog_document: dict) -> None:
        path = tmp_path / "catalog.json"
        path.write_text(json.dumps(catalog_document))

        catalog = load_catalog(path)
        assert catalog.to_dict() == catalog_document

    def test_loads_yaml(self, tmp_path: Path) -> None:
        path = tmp_path / "catalog.yaml"
        path.write_text(
            "post:\n"
            "  type: router\n"
            "  children:\n"
            "    list:\n"
            "      type: query\n"
            "      inputSchema:\n"
            "        type: object\n"
            "        properties:\n"
            "          limit: {type: integer}\n"
        )

        catalog = load_catalog(path)
        procedure = catalog.resolve(("post", "list"))
        assert procedure is not None
        assert procedure.input_schema == {"type": "object", "properties": {"limit": {"type": "integer"}}}

    def test_unwraps_config_payload(self, tmp_path: Path, catalog_document: dict) -> None:
        path = tmp_path / "playground.json"
        path.write_text(json.dumps({"trpcEndpoint": "/trpc", "schema": catalog_document}))

        catalog = load_catalog(path)
        assert catalog.resolve(("user", "get")) is not None

    def test_procedure_named_schema_is_not_unwrapped(self) -> None:
        catalog = catalog_from_document({"schema": {"type": "query"}, "other": {"type": "query"}})
        assert set(catalog) == {"schema", "other"}

    def test_empty_yaml_is_empty_catalog(self, tmp_path: Path) -> None:
        path = tmp_path / "empty.yaml"
        path.write_text("")
        assert len(load_catalog(path)) == 0

    def test_missing_file_raises(self, tmp_path: Path) -> None:
        with pytest.raises(CatalogError) as exc_info:
            load_catalog(tmp_path / "missing.json")
        assert exc_info.value.code == ErrorCode.CATALOG_FILE_NOT_FOUND

    def test_invalid_json_raises(self, tmp_path: Path) -> None:
        path = tmp_path / "bad.json"
        path.write_text("{not json")
        with pytest.raises(CatalogError) as exc_info:
            load_catalog(path)
        assert exc_info.value.code == ErrorCode.CATALOG_PARSE_ERROR
        assert exc_info.value.details["path"] == str(path)

    def test_invalid_yaml_raises(self, tmp_path: Path) -> None:
        path = tmp_path / "bad.yaml"
        path.write_text("a: [unclosed\n")
        with pytest.raises(CatalogError) as exc_info:
            load_catalog(path)
        assert exc_info.value.code == ErrorCode.CATALOG_PARSE_ERROR

    def test_non_mapping_document_raises(self, tmp_path: Path) -> None:
        path = tmp_path / "list.json"
        path.write_text("[1, 2, 3]")
        with pytest.raises(CatalogError) as exc_info:
            load_catalog(path)
        assert exc_info.value.code == ErrorCode.CATALOG_INVALID_DOCUMENT
        assert "list" in exc_info.value.message

    def test_undecodable_bytes_raise(self, tmp_path: Path) -> None:
        path = tmp_path / "binary.json"
        path.write_bytes(b"\xff\xfe{")
        with pytest.raises(CatalogError) as exc_info:
            load_catalog(path)
        assert exc_info.value.code == ErrorCode.CATALOG_PARSE_ERROR

    def test_directory_raises(self, tmp_path: Path) -> None:
        path = tmp_path / "catalog.json"
        path.mkdir()
        with pytest.raises(CatalogError) as exc_info:
            load_catalog(path)
        assert exc_info.value.code == ErrorCode.CATALOG_PARSE_ERROR


class TestYamlKeyTypes:
    """Bare YAML keys that decode to booleans or numbers."""

    def test_given_boolean_key_when_loaded_then_analysis_still_runs(self, tmp_path: Path) -> None:
        """A key like `on:` becomes "true" and does not break the cache key."""
        # Given
        path = tmp_path / "catalog.yaml"
        path.write_text("on:\n  type: query\nuser:\n  type: query\n404:\n  type: mutation\n")

        # When
        catalog = load_catalog(path)
        analysis = Analyzer(catalog).analyze("trpc.user.query()")

        # Then
        assert set(catalog) == {"true", "user", "404"}
        assert analysis.diagnostics == []
        assert catalog.resolve(("404",)) is not None

    def test_given_numeric_schema_keys_when_loaded_then_normalized(self, tmp_path: Path) -> None:
        path = tmp_path / "catalog.yaml"
        path.write_text(
            "codes:\n"
            "  type: query\n"
            "  inputSchema:\n"
            "    type: object\n"
            "    properties:\n"
            "      404: {type: string}\n"
            "      name: {type: string}\n"
        )

        catalog = load_catalog(path)

        procedure = catalog.resolve(("codes",))
        assert procedure is not None
        assert procedure.input_schema == {
            "type": "object",
            "properties": {"404": {"type": "string"}, "name": {"type": "string"}},
        }
        assert json.loads(catalog.serialize())["codes"]["type"] == "query"
