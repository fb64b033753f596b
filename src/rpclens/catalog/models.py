"""Procedure catalog models.

The catalog arrives as a nested document produced by router introspection:

    {
        "user": {"type": "router", "children": {
            "get": {"type": "query", "inputSchema": {...}},
            "rename": {"type": "mutation", "inputSchema": {...}},
        }},
        "health": {"type": "query"},
    }

Parsing is tolerant: entries that cannot be understood are skipped and
malformed schemas are dropped, each with a logged warning, so one bad entry
never hides the rest of the catalog. Bare YAML keys such as `on:` or `404:`
decode as booleans or numbers; entry names and schema keys are turned back
into strings the way JSON spells them (`"true"`, `"404"`).
"""

from __future__ import annotations

import json
from collections.abc import Iterator, Mapping, Sequence
from dataclasses import dataclass, field
from functools import cached_property
from types import MappingProxyType
from typing import Any, Union

import structlog

from rpclens.scanner.models import CallKind

log = structlog.get_logger(__name__)

ROUTER_TYPE = "router"

_KIND_BY_TYPE = {kind.value: kind for kind in CallKind}


@dataclass(frozen=True, slots=True)
class Procedure:
    """A remotely invokable operation (catalog leaf)."""

    kind: CallKind
    input_schema: Mapping[str, Any] | None = None
    output_schema: Mapping[str, Any] | None = None

    def to_dict(self) -> dict[str, Any]:
        d: dict[str, Any] = {"type": self.kind.value}
        if self.input_schema is not None:
            d["inputSchema"] = self.input_schema
        if self.output_schema is not None:
            d["outputSchema"] = self.output_schema
        return d


@dataclass(frozen=True, slots=True)
class Group:
    """A namespace node holding further entries."""

    children: ProcedureCatalog

    def to_dict(self) -> dict[str, Any]:
        return {"type": ROUTER_TYPE, "children": self.children.to_dict()}


CatalogEntry = Union[Group, Procedure]


@dataclass(frozen=True)
class ProcedureCatalog:
    """Immutable tree of named groups and procedures."""

    entries: Mapping[str, CatalogEntry] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "entries", MappingProxyType(dict(self.entries)))

    @classmethod
    def from_dict(cls, data: Mapping[str, Any], *, _prefix: str = "") -> ProcedureCatalog:
        """Build a catalog from the introspection document shape."""
        entries: dict[str, CatalogEntry] = {}
        for key, raw in data.items():
            name = _entry_name(key, _prefix)
            dotted = f"{_prefix}{name}"
            if not isinstance(raw, Mapping):
                log.warning("catalog_entry_skipped", entry=dotted, reason="not a mapping")
                continue

            entry_type = raw.get("type")
            if entry_type == ROUTER_TYPE:
                children = raw.get("children") or {}
                if not isinstance(children, Mapping):
                    log.warning("catalog_children_dropped", entry=dotted, reason="not a mapping")
                    children = {}
                entries[name] = Group(cls.from_dict(children, _prefix=f"{dotted}."))
            elif entry_type in _KIND_BY_TYPE:
                entries[name] = Procedure(
                    kind=_KIND_BY_TYPE[entry_type],
                    input_schema=_schema_or_none(raw.get("inputSchema"), dotted, "inputSchema"),
                    output_schema=_schema_or_none(raw.get("outputSchema"), dotted, "outputSchema"),
                )
            else:
                log.warning("catalog_entry_skipped", entry=dotted, reason=f"unknown type {entry_type!r}")
        return cls(entries)

    def to_dict(self) -> dict[str, Any]:
        return {name: entry.to_dict() for name, entry in self.entries.items()}

    @cached_property
    def _serialized(self) -> str:
        return json.dumps(self.to_dict(), sort_keys=True, separators=(",", ":"), default=str)

    def serialize(self) -> str:
        """Deterministic JSON serialization, computed once per catalog."""
        return self._serialized

    def resolve(self, path: Sequence[str]) -> Procedure | None:
        """Resolve a procedure path, descending through groups.

        Returns None when a segment is missing, a non-final segment is not a
        group, or the final segment names a group.
        """
        if not path:
            return None
        level = self
        for segment in path[:-1]:
            entry = level.entries.get(segment)
            if not isinstance(entry, Group):
                return None
            level = entry.children
        entry = level.entries.get(path[-1])
        return entry if isinstance(entry, Procedure) else None

    def walk(self, _prefix: str = "") -> Iterator[tuple[str, Procedure]]:
        """Yield (dotted name, procedure) for every leaf, depth first."""
        for name, entry in self.entries.items():
            if isinstance(entry, Group):
                yield from entry.children.walk(f"{_prefix}{name}.")
            else:
                yield f"{_prefix}{name}", entry

    def __len__(self) -> int:
        return len(self.entries)

    def __contains__(self, name: object) -> bool:
        return name in self.entries

    def __iter__(self) -> Iterator[str]:
        return iter(self.entries)


def _schema_or_none(value: Any, entry: str, key: str) -> Mapping[str, Any] | None:
    if value is None:
        return None
    if isinstance(value, Mapping):
        try:
            return json.loads(json.dumps(dict(value), default=str))
        except (TypeError, ValueError) as e:
            log.warning("catalog_schema_dropped", entry=entry, key=key, reason=str(e))
            return None
    log.warning("catalog_schema_dropped", entry=entry, key=key, reason=f"expected mapping, got {type(value).__name__}")
    return None


def _entry_name(key: Any, prefix: str) -> str:
    if isinstance(key, str):
        return key
    name = json.dumps(key) if key is None or isinstance(key, (bool, int, float)) else str(key)
    log.warning("catalog_entry_renamed", entry=f"{prefix}{name}", key_type=type(key).__name__)
    return name
