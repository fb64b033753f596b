"""Tests for building catalogs from Python types."""

from __future__ import annotations

import pytest
from pydantic import BaseModel, ConfigDict

from rpclens.catalog.builder import CatalogBuilder, json_schema_for
from rpclens.catalog.models import Group
from rpclens.scanner.models import CallKind


class GetUser(BaseModel):
    model_config = ConfigDict(extra="forbid")

    id: str


class User(BaseModel):
    id: str
    name: str


class NotAModel:
    pass


class TestJsonSchemaFor:
    """Schema extraction through pydantic."""

    def test_model_schema(self) -> None:
        schema = json_schema_for(GetUser)
        assert schema is not None
        assert schema["type"] == "object"
        assert schema["required"] == ["id"]
        assert schema["additionalProperties"] is False

    def test_plain_type_schema(self) -> None:
        assert json_schema_for(int) == {"type": "integer"}

    def test_none_means_no_schema(self) -> None:
        assert json_schema_for(None) is None

    def test_unsupported_type_degrades_to_none(self) -> None:
        assert json_schema_for(NotAModel, procedure="x", role="input") is None


class TestCatalogBuilder:
    """Incremental catalog assembly."""

    def test_given_dotted_paths_when_build_then_groups_created(self) -> None:
        # Given
        builder = (
            CatalogBuilder()
            .query("user.get", input=GetUser, output=User)
            .mutation("user.rename", input=User)
            .query("health")
        )

        # When
        catalog = builder.build()

        # Then
        assert isinstance(catalog.entries["user"], Group)
        get = catalog.resolve(("user", "get"))
        assert get is not None
        assert get.kind is CallKind.QUERY
        assert get.input_schema is not None
        assert get.output_schema is not None
        rename = catalog.resolve(("user", "rename"))
        assert rename is not None
        assert rename.kind is CallKind.MUTATION
        assert rename.output_schema is None
        health = catalog.resolve(("health",))
        assert health is not None
        assert health.input_schema is None

    def test_duplicate_path_rejected(self) -> None:
        builder = CatalogBuilder().query("a.b")
        with pytest.raises(ValueError, match="Duplicate"):
            builder.mutation("a.b")

    def test_procedure_cannot_become_group(self) -> None:
        builder = CatalogBuilder().query("a")
        with pytest.raises(ValueError, match="already a procedure"):
            builder.query("a.b")

    @pytest.mark.parametrize("path", ["", "a..b", "a.b-c", "a b"])
    def test_invalid_paths_rejected(self, path: str) -> None:
        with pytest.raises(ValueError, match="Invalid procedure path"):
            CatalogBuilder().query(path)

    def test_unsupported_input_type_leaves_procedure_without_schema(self) -> None:
        catalog = CatalogBuilder().query("odd", input=NotAModel).build()
        procedure = catalog.resolve(("odd",))
        assert procedure is not None
        assert procedure.input_schema is None
