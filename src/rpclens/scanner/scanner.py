"""Call-site scanner.

Finds `<client>.<path>.query(...)` / `<client>.<path>.mutate(...)` call sites in
free-form text and parses their arguments. Every match is handled on its own:
a malformed call site becomes a ScanError and scanning carries on.

Known limitation: a call nested in another call's arguments is matched again
as an independent call site, so nested cases can report overlapping spans.
"""

from __future__ import annotations

import re
from functools import lru_cache

import structlog

from rpclens.config.constants import DEFAULT_CLIENT_NAME, SCAN_FAULT_SPAN_WIDTH
from rpclens.scanner.literals import find_closing_paren, parse_value
from rpclens.scanner.models import (
    CallKind,
    ParsedCall,
    ScanError,
    ScanErrorCode,
    ScanResult,
    Span,
)

log = structlog.get_logger(__name__)

UNBALANCED_MESSAGE = "Unbalanced parentheses in call"


@lru_cache(maxsize=16)
def call_pattern(client_name: str | None) -> re.Pattern[str]:
    """Compile the call-site pattern for a client root identifier.

    Group 1 is the dotted procedure path, group 2 the verb. The match ends just
    past the opening parenthesis.
    """
    chain = r"(\w+(?:\.\w+)*)\.(query|mutate)\s*\("
    if client_name:
        return re.compile(rf"(?<![\w$]){re.escape(client_name)}\.{chain}", re.ASCII)
    return re.compile(rf"(?<![\w$.]){chain}", re.ASCII)


def position_at(text: str, offset: int) -> tuple[int, int]:
    """Return the 1-based (line, column) of `offset` in `text`."""
    line = text.count("\n", 0, offset) + 1
    line_start = text.rfind("\n", 0, offset) + 1
    return line, offset - line_start + 1


def make_span(text: str, start: int, end: int) -> Span:
    line, column = position_at(text, start)
    return Span(start=start, end=end, line=line, column=column)


def scan(source_text: str, *, client_name: str | None = DEFAULT_CLIENT_NAME) -> ScanResult:
    """Scan `source_text` for call sites.

    Args:
        source_text: Full document text.
        client_name: Root identifier call chains start from. None treats the
            whole identifier chain as the procedure path.

    Returns:
        ScanResult with calls in discovery order and one ScanError per
        malformed call site.
    """
    result = ScanResult()
    text_length = len(source_text)

    for match in call_pattern(client_name).finditer(source_text):
        start = match.start()
        open_paren = match.end() - 1
        end = find_closing_paren(source_text, open_paren)

        if end is None:
            result.errors.append(
                ScanError(
                    message=UNBALANCED_MESSAGE,
                    span=make_span(source_text, start, text_length),
                )
            )
            log.debug("unbalanced_call_site", start=start, procedure=match.group(1))
            continue

        argument_text = source_text[open_paren + 1 : end - 1]
        try:
            argument = parse_value(argument_text)
        except RecursionError as e:
            result.errors.append(
                ScanError(
                    message=f"Failed to parse call: {e}",
                    span=make_span(
                        source_text, start, min(start + SCAN_FAULT_SPAN_WIDTH, text_length)
                    ),
                    code=ScanErrorCode.PARSE_FAILURE,
                )
            )
            log.warning("call_argument_parse_failed", start=start, error=str(e))
            continue

        result.calls.append(
            ParsedCall(
                procedure_path=tuple(match.group(1).split(".")),
                kind=CallKind.from_verb(match.group(2)),
                argument=argument,
                span=make_span(source_text, start, end),
                raw_text=source_text[start:end],
                argument_text=argument_text,
            )
        )

    return result
