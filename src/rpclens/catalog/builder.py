"""Build catalogs from Python types.

Lets a service describe its procedures with pydantic models (or any type
pydantic can produce a JSON schema for) instead of hand-writing the
introspection document:

    catalog = (
        CatalogBuilder()
        .query("user.get", input=GetUser, output=User)
        .mutation("user.rename", input=RenameUser)
        .query("health")
        .build()
    )

Models declared with ``model_config = ConfigDict(extra="forbid")`` produce
``additionalProperties: false`` and therefore unrecognized-key diagnostics.
"""

from __future__ import annotations

import re
from typing import Any

import structlog
from pydantic import PydanticUserError, TypeAdapter

from rpclens.catalog.models import ROUTER_TYPE, ProcedureCatalog
from rpclens.scanner.models import CallKind

log = structlog.get_logger(__name__)

_SEGMENT = re.compile(r"\w+", re.ASCII)


def json_schema_for(tp: Any, *, procedure: str = "", role: str = "input") -> dict[str, Any] | None:
    """Return the JSON schema pydantic generates for `tp`.

    Types pydantic cannot describe degrade to None (no schema) with a warning.
    """
    if tp is None:
        return None
    try:
        return TypeAdapter(tp).json_schema()
    except PydanticUserError as e:
        log.warning("schema_extraction_failed", procedure=procedure, role=role, error=str(e))
        return None


class CatalogBuilder:
    """Incrementally assembles a ProcedureCatalog from dotted procedure paths."""

    def __init__(self) -> None:
        self._root: dict[str, Any] = {}

    def query(self, path: str, *, input: Any = None, output: Any = None) -> CatalogBuilder:  # noqa: A002
        return self._add(path, CallKind.QUERY, input, output)

    def mutation(self, path: str, *, input: Any = None, output: Any = None) -> CatalogBuilder:  # noqa: A002
        return self._add(path, CallKind.MUTATION, input, output)

    def _add(self, path: str, kind: CallKind, input_type: Any, output_type: Any) -> CatalogBuilder:
        segments = path.split(".")
        if not all(_SEGMENT.fullmatch(s) for s in segments):
            raise ValueError(f"Invalid procedure path: {path!r}")

        level = self._root
        for segment in segments[:-1]:
            node = level.setdefault(segment, {"type": ROUTER_TYPE, "children": {}})
            if node["type"] != ROUTER_TYPE:
                raise ValueError(f"'{segment}' in {path!r} is already a procedure")
            level = node["children"]

        name = segments[-1]
        if name in level:
            raise ValueError(f"Duplicate catalog entry: {path!r}")

        entry: dict[str, Any] = {"type": kind.value}
        input_schema = json_schema_for(input_type, procedure=path, role="input")
        if input_schema is not None:
            entry["inputSchema"] = input_schema
        output_schema = json_schema_for(output_type, procedure=path, role="output")
        if output_schema is not None:
            entry["outputSchema"] = output_schema
        level[name] = entry
        return self

    def build(self) -> ProcedureCatalog:
        return ProcedureCatalog.from_dict(self._root)
