"""Best-effort literal parsing for call arguments.

Not an expression parser: a small state machine that tracks bracket depth and
quoted strings, enough to split an object literal into properties and to
classify each value. Anything that is not a literal comes back as an
UnparsedExpression carrying its raw text.
"""

from __future__ import annotations

import re

from rpclens.scanner.models import UNDEFINED, ArrayLiteral, UnparsedExpression, Value

_QUOTES = ("'", '"')
_OPENERS = "({["
_CLOSERS = ")}]"
_PAIRS = {")": "(", "}": "{", "]": "["}

_KEYWORDS: dict[str, Value] = {
    "true": True,
    "false": False,
    "null": None,
    "undefined": UNDEFINED,
}

_DECIMAL = re.compile(r"[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?", re.ASCII)
_PREFIXED = re.compile(r"0([xXoObB])([0-9a-fA-F]+)")
_PREFIX_BASES = {"x": 16, "o": 8, "b": 2}
_INFINITY = {"Infinity": float("inf"), "+Infinity": float("inf"), "-Infinity": float("-inf")}

# Property key followed by ':' - identifier, numeric, or quoted.
_KEY = re.compile(
    r"""\s*(?:([\w$]+)|("(?:[^"\\]|\\.)*"|'(?:[^'\\]|\\.)*'))\s*:""",
    re.ASCII | re.DOTALL,
)

_ESCAPE = re.compile(r"\\(x[0-9a-fA-F]{2}|u[0-9a-fA-F]{4}|.)", re.DOTALL)
_SIMPLE_ESCAPES = {"n": "\n", "t": "\t", "r": "\r", "b": "\b", "f": "\f", "v": "\v", "0": "\0"}


def skip_string(text: str, pos: int) -> int:
    """Return the index just past the quoted string opening at `pos`.

    A backslash escapes the next character. An unterminated string runs to the
    end of the text.
    """
    quote = text[pos]
    i = pos + 1
    while i < len(text):
        ch = text[i]
        if ch == "\\":
            i += 2
            continue
        if ch == quote:
            return i + 1
        i += 1
    return len(text)


def find_closing_paren(text: str, open_pos: int) -> int | None:
    """Return the index just past the ')' matching the '(' at `open_pos`.

    All three bracket kinds must nest properly; brackets inside string literals
    are ignored. Returns None when the text ends before the call closes or a
    closer does not match the innermost open bracket.
    """
    stack: list[str] = []
    i = open_pos
    while i < len(text):
        ch = text[i]
        if ch in _QUOTES:
            i = skip_string(text, i)
            continue
        if ch in _OPENERS:
            stack.append(ch)
        elif ch in _CLOSERS:
            if not stack or stack.pop() != _PAIRS[ch]:
                return None
            if not stack:
                return i + 1
        i += 1
    return None


def find_value_end(text: str, pos: int) -> int:
    """Return where the value starting at `pos` ends.

    That is the first comma at depth zero, or the first closer without a
    matching opener (the end of the enclosing object), or the end of the text.
    """
    depth = 0
    i = pos
    while i < len(text):
        ch = text[i]
        if ch in _QUOTES:
            i = skip_string(text, i)
            continue
        if ch in _OPENERS:
            depth += 1
        elif ch in _CLOSERS:
            if depth == 0:
                return i
            depth -= 1
        elif ch == "," and depth == 0:
            return i
        i += 1
    return len(text)


def _spans_whole(text: str) -> bool:
    """True when the bracket or string opening at index 0 closes at the very end."""
    if text[0] in _QUOTES:
        return skip_string(text, 0) == len(text)
    depth = 0
    i = 0
    while i < len(text):
        ch = text[i]
        if ch in _QUOTES:
            i = skip_string(text, i)
            continue
        if ch in _OPENERS:
            depth += 1
        elif ch in _CLOSERS:
            depth -= 1
            if depth == 0:
                return i == len(text) - 1
        i += 1
    return False


def _decode_escape(match: re.Match[str]) -> str:
    seq = match.group(1)
    if len(seq) > 1:
        return chr(int(seq[1:], 16))
    return _SIMPLE_ESCAPES.get(seq, seq)


def unquote(text: str) -> str:
    """Strip the surrounding quotes of a string literal and decode escapes."""
    return _ESCAPE.sub(_decode_escape, text[1:-1])


def parse_number(text: str) -> int | float | None:
    """Parse a numeric literal, or return None if `text` is not one."""
    if text in _INFINITY:
        return _INFINITY[text]
    if _DECIMAL.fullmatch(text):
        if any(c in text for c in ".eE"):
            return float(text)
        try:
            return int(text)
        except ValueError:
            # beyond int-from-str digit limit
            return float(text)
    prefixed = _PREFIXED.fullmatch(text)
    if prefixed:
        try:
            return int(prefixed.group(2), _PREFIX_BASES[prefixed.group(1).lower()])
        except ValueError:
            return None
    return None


def parse_value(text: str) -> Value:
    """Classify an argument or property value.

    Empty text is undefined. Object literals are decomposed, string, keyword
    and numeric literals are converted, array literals keep their raw text,
    and everything else is an UnparsedExpression.
    """
    stripped = text.strip()
    if not stripped:
        return UNDEFINED
    first = stripped[0]
    if first == "{" and stripped.endswith("}") and _spans_whole(stripped):
        return parse_object(stripped)
    if first in _QUOTES and _spans_whole(stripped) and len(stripped) > 1:
        return unquote(stripped)
    if stripped in _KEYWORDS:
        return _KEYWORDS[stripped]
    number = parse_number(stripped)
    if number is not None:
        return number
    if first == "[" and _spans_whole(stripped):
        return ArrayLiteral(stripped)
    return UnparsedExpression(stripped)


def parse_object(text: str) -> dict[str, Value]:
    """Parse `{key: value, ...}` into a dict.

    Commas split properties only at depth zero. Parsing stops at the first
    entry that does not start with `key:` (spread, shorthand), keeping the
    properties read so far.
    """
    content = text[1:-1]
    result: dict[str, Value] = {}
    pos = 0
    while pos < len(content):
        match = _KEY.match(content, pos)
        if match is None:
            break
        ident, quoted = match.groups()
        key = ident if ident is not None else unquote(quoted)
        value_end = find_value_end(content, match.end())
        result[key] = parse_value(content[match.end() : value_end])
        pos = value_end + 1
    return result
