"""Tests for catalog path completion."""

from rpclens.catalog.completion import complete
from rpclens.catalog.models import ProcedureCatalog


def _labels(catalog: ProcedureCatalog, text: str, **kwargs: object) -> list[str]:
    return [item.label for item in complete(catalog, text, **kwargs).items]  # type: ignore[arg-type]


class TestComplete:
    """Completion after the client root and inside groups."""

    def test_after_client_root_offers_top_level(self, catalog: ProcedureCatalog) -> None:
        completion = complete(catalog, "await trpc.")
        assert completion.start == len("await trpc.")
        assert [(i.label, i.kind, i.apply) for i in completion.items] == [
            ("health", "query", "health.query()"),
            ("user", "group", "user."),
        ]

    def test_inside_group_filters_by_partial_word(self, catalog: ProcedureCatalog) -> None:
        text = "trpc.user.cr"
        completion = complete(catalog, text)
        assert completion.start == len(text) - 2
        assert len(completion.items) == 1
        item = completion.items[0]
        assert (item.label, item.kind, item.apply) == ("create", "mutation", "create.mutate()")
        assert item.detail == "mutation user.create"

    def test_after_procedure_offers_verb(self, catalog: ProcedureCatalog) -> None:
        completion = complete(catalog, "trpc.user.get.")
        assert [(i.label, i.kind, i.apply) for i in completion.items] == [("query", "verb", "query()")]

    def test_wrong_verb_prefix_offers_nothing(self, catalog: ProcedureCatalog) -> None:
        assert _labels(catalog, "trpc.user.get.mu") == []

    def test_unknown_group_offers_nothing(self, catalog: ProcedureCatalog) -> None:
        assert _labels(catalog, "trpc.nope.") == []
        assert _labels(catalog, "trpc.health.deeper.") == []

    def test_partial_client_name_offers_client(self, catalog: ProcedureCatalog) -> None:
        text = "const data = trp"
        completion = complete(catalog, text)
        assert completion.start == text.index("trp")
        assert [(i.label, i.kind, i.apply) for i in completion.items] == [("trpc", "client", "trpc.")]

    def test_unrelated_text_offers_nothing(self, catalog: ProcedureCatalog) -> None:
        completion = complete(catalog, "const x = ")
        assert completion.items == []
        assert completion.start == len("const x = ")

    def test_without_client_root(self, catalog: ProcedureCatalog) -> None:
        assert _labels(catalog, "user.", client_name=None) == ["create", "get"]

    def test_to_dict(self, catalog: ProcedureCatalog) -> None:
        data = complete(catalog, "trpc.he").to_dict()
        assert data["start"] == len("trpc.")
        assert data["items"] == [
            {"label": "health", "kind": "query", "apply": "health.query()", "detail": "query health"},
        ]
