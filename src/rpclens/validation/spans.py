"""Best-effort narrowing of diagnostic spans to the offending property.

The validator only knows the property path of an issue. These helpers look the
path up again in the call's raw text (`name:` for each segment in turn) and,
when found, narrow the span to the key or to its value. When the lookup fails
the whole-call span is kept; narrowing never affects whether an issue is
reported.
"""

from __future__ import annotations

import re
from collections.abc import Sequence

from rpclens.scanner.literals import find_value_end, skip_string
from rpclens.scanner.models import ParsedCall, Span


def _key_pattern(name: str) -> re.Pattern[str]:
    return re.compile(rf"""(?<![\w$])(?P<q>["']?)(?P<name>{re.escape(name)})(?P=q)\s*:""")


# Keys of the argument object sit inside the call's `(` and the object's `{`.
_TOP_LEVEL_KEY_DEPTH = 2


def _nesting_depths(text: str) -> list[int]:
    """Bracket depth at each offset, -1 inside string literals.

    An opening quote carries the depth around it, so a quoted key is located
    at its quote.
    """
    depths = [0] * len(text)
    depth = 0
    i = 0
    while i < len(text):
        ch = text[i]
        if ch in "'\"":
            end = skip_string(text, i)
            depths[i] = depth
            depths[i + 1 : end] = [-1] * (end - i - 1)
            i = end
            continue
        if ch in "([{":
            depth += 1
        elif ch in ")]}":
            depth -= 1
        depths[i] = depth
        i += 1
    return depths


def _find_key(raw_text: str, path: Sequence[str]) -> re.Match[str] | None:
    """Locate the last key of `path`, each segment searched inside the previous one's value.

    A segment only matches at its own nesting depth, never inside a string
    literal or a sibling's nested object.
    """
    depths = _nesting_depths(raw_text)
    match = None
    pos, end = 0, len(raw_text)
    for depth, name in enumerate(path, start=_TOP_LEVEL_KEY_DEPTH):
        match = next(
            (m for m in _key_pattern(name).finditer(raw_text, pos, end) if depths[m.start()] == depth),
            None,
        )
        if match is None:
            return None
        pos = match.end()
        end = find_value_end(raw_text, pos)
    return match


def span_within(call: ParsedCall, rel_start: int, rel_end: int) -> Span:
    """Span for `raw_text[rel_start:rel_end]`, with line/column across newlines."""
    newlines = call.raw_text.count("\n", 0, rel_start)
    if newlines:
        line = call.span.line + newlines
        column = rel_start - call.raw_text.rfind("\n", 0, rel_start)
    else:
        line = call.span.line
        column = call.span.column + rel_start
    return Span(
        start=call.span.start + rel_start,
        end=call.span.start + rel_end,
        line=line,
        column=column,
    )


def key_span(call: ParsedCall, path: Sequence[str]) -> Span:
    """Span of the property name at the end of `path`, or the whole call."""
    if not path:
        return call.span
    match = _find_key(call.raw_text, path)
    if match is None:
        return call.span
    return span_within(call, match.start("name"), match.end("name"))


def value_span(call: ParsedCall, path: Sequence[str]) -> Span:
    """Span of the value of the property at the end of `path`, or the whole call."""
    if not path:
        return call.span
    match = _find_key(call.raw_text, path)
    if match is None:
        return call.span

    raw = call.raw_text
    start = match.end()
    while start < len(raw) and raw[start].isspace():
        start += 1
    end = find_value_end(raw, start)
    while end > start and raw[end - 1].isspace():
        end -= 1
    if end <= start:
        return call.span
    return span_within(call, start, end)
