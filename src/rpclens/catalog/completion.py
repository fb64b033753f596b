"""Catalog path completion for editor hosts.

Given the text before the cursor, offers the catalog entries that can follow
the call chain being typed:

    trpc.            -> root groups and procedures
    trpc.user.       -> entries of the `user` group
    trpc.user.ge     -> entries of `user` starting with "ge"
    trpc.user.get.   -> the verb for `user.get` (query or mutate)
    trp              -> the client root itself
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from functools import lru_cache
from typing import Any, Literal

from rpclens.catalog.models import Group, Procedure, ProcedureCatalog
from rpclens.config.constants import DEFAULT_CLIENT_NAME

CompletionKind = Literal["client", "group", "query", "mutation", "verb"]

_TRAILING_WORD = re.compile(r"(?<![\w$.])(\w+)$", re.ASCII)


@dataclass(frozen=True, slots=True)
class CompletionItem:
    """One completion option."""

    label: str
    kind: CompletionKind
    apply: str
    detail: str = ""

    def to_dict(self) -> dict[str, str]:
        return {"label": self.label, "kind": self.kind, "apply": self.apply, "detail": self.detail}


@dataclass
class Completion:
    """Options plus the offset the typed word starts at (replaced on apply)."""

    start: int
    items: list[CompletionItem] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {"start": self.start, "items": [i.to_dict() for i in self.items]}


@lru_cache(maxsize=16)
def _chain_pattern(client_name: str | None) -> re.Pattern[str]:
    if client_name:
        return re.compile(rf"(?<![\w$]){re.escape(client_name)}((?:\.\w+)*)\.(\w*)$", re.ASCII)
    return re.compile(r"(?<![\w$.])((?:\w+\.)+)(\w*)$", re.ASCII)


def _typed_segments(chain: str, client_name: str | None) -> list[str]:
    if client_name:
        return chain[1:].split(".") if chain else []
    return chain[:-1].split(".")


def _entry_item(name: str, entry: Group | Procedure, dotted: str) -> CompletionItem:
    if isinstance(entry, Group):
        return CompletionItem(label=name, kind="group", apply=f"{name}.", detail=f"router {dotted}")
    return CompletionItem(
        label=name,
        kind=entry.kind.value,
        apply=f"{name}.{entry.kind.verb}()",
        detail=f"{entry.kind.value} {dotted}",
    )


def complete(
    catalog: ProcedureCatalog,
    text_before_cursor: str,
    *,
    client_name: str | None = DEFAULT_CLIENT_NAME,
) -> Completion:
    """Return completion options for the call chain ending at the cursor."""
    cursor = len(text_before_cursor)
    match = _chain_pattern(client_name).search(text_before_cursor)

    if match is None:
        word = _TRAILING_WORD.search(text_before_cursor)
        if client_name and word and client_name.startswith(word.group(1)):
            return Completion(
                start=word.start(1),
                items=[CompletionItem(label=client_name, kind="client", apply=f"{client_name}.")],
            )
        return Completion(start=cursor)

    partial = match.group(2)
    start = cursor - len(partial)
    segments = _typed_segments(match.group(1), client_name)

    level = catalog
    for i, segment in enumerate(segments):
        entry = level.entries.get(segment)
        if isinstance(entry, Group):
            level = entry.children
            continue
        if isinstance(entry, Procedure) and i == len(segments) - 1:
            verb = entry.kind.verb
            if not verb.startswith(partial):
                return Completion(start=start)
            detail = f"{entry.kind.value} {'.'.join(segments)}"
            return Completion(
                start=start,
                items=[CompletionItem(label=verb, kind="verb", apply=f"{verb}()", detail=detail)],
            )
        return Completion(start=start)

    prefix = ".".join(segments)
    items = [
        _entry_item(name, entry, f"{prefix}.{name}" if prefix else name)
        for name, entry in sorted(level.entries.items())
        if name.startswith(partial)
    ]
    return Completion(start=start, items=items)
