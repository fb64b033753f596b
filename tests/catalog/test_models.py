"""Tests for the procedure catalog tree."""

import pytest

from rpclens.catalog.models import Group, Procedure, ProcedureCatalog
from rpclens.scanner.models import CallKind


class TestProcedureCatalogFromDict:
    """Building a catalog from the introspection document."""

    def test_given_document_when_from_dict_then_tree_built(self, catalog: ProcedureCatalog) -> None:
        assert set(catalog) == {"user", "health"}
        assert isinstance(catalog.entries["user"], Group)
        health = catalog.entries["health"]
        assert isinstance(health, Procedure)
        assert health.kind is CallKind.QUERY
        assert health.input_schema is None

    def test_given_document_when_round_tripped_then_unchanged(self, catalog_document: dict) -> None:
        assert ProcedureCatalog.from_dict(catalog_document).to_dict() == catalog_document

    def test_given_malformed_entries_when_from_dict_then_skipped(self) -> None:
        """Unknown or malformed entries are skipped; the rest survives."""
        # Given
        document = {
            "broken": 5,
            "stream": {"type": "subscription"},
            "typed": {"type": "query", "inputSchema": "not-a-schema"},
            "grouped": {"type": "router", "children": ["nope"]},
        }

        # When
        catalog = ProcedureCatalog.from_dict(document)

        # Then
        assert set(catalog) == {"typed", "grouped"}
        typed = catalog.entries["typed"]
        assert isinstance(typed, Procedure)
        assert typed.input_schema is None
        grouped = catalog.entries["grouped"]
        assert isinstance(grouped, Group)
        assert len(grouped.children) == 0

    def test_entries_are_read_only(self, catalog: ProcedureCatalog) -> None:
        with pytest.raises(TypeError):
            catalog.entries["new"] = Procedure(kind=CallKind.QUERY)  # type: ignore[index]


class TestProcedureCatalogResolve:
    """Path resolution through groups."""

    def test_resolves_nested_procedure(self, catalog: ProcedureCatalog) -> None:
        procedure = catalog.resolve(("user", "create"))
        assert procedure is not None
        assert procedure.kind is CallKind.MUTATION

    @pytest.mark.parametrize(
        "path",
        [
            (),
            ("user",),
            ("missing",),
            ("user", "missing"),
            ("health", "extra"),
            ("foo", "bar"),
        ],
    )
    def test_unresolvable_paths_return_none(self, catalog: ProcedureCatalog, path: tuple[str, ...]) -> None:
        assert catalog.resolve(path) is None


class TestProcedureCatalogWalkAndSerialize:
    """Traversal and deterministic serialization."""

    def test_walk_yields_dotted_leaves(self, catalog: ProcedureCatalog) -> None:
        names = [name for name, _ in catalog.walk()]
        assert names == ["user.get", "user.create", "health"]

    def test_serialize_ignores_key_order(self) -> None:
        first = ProcedureCatalog.from_dict({"a": {"type": "query"}, "b": {"type": "mutation"}})
        second = ProcedureCatalog.from_dict({"b": {"type": "mutation"}, "a": {"type": "query"}})
        assert first.serialize() == second.serialize()

    def test_serialize_reflects_schema_changes(self) -> None:
        before = ProcedureCatalog.from_dict({"a": {"type": "query"}})
        after = ProcedureCatalog.from_dict({"a": {"type": "query", "inputSchema": {"type": "string"}}})
        assert before.serialize() != after.serialize()

    def test_empty_catalog(self) -> None:
        catalog = ProcedureCatalog()
        assert len(catalog) == 0
        assert "anything" not in catalog
        assert list(catalog.walk()) == []
        assert catalog.serialize() == "{}"
